# noxfile.py
from nox_poetry import Session, session

PY_VERSIONS = ["3.11", "3.12"]
LOCATIONS = ("src", "tests", "noxfile.py")


@session(python=PY_VERSIONS[0])
def format(session: Session) -> None:
    """Auto-format code."""
    session.install("black", "isort")
    session.run("isort", *LOCATIONS)
    session.run("black", *LOCATIONS)


@session(python=PY_VERSIONS[0])
def typecheck_mypy(session: Session) -> None:
    session.install("mypy", "pandas-stubs~=2.2", "types-requests")
    session.install(".")
    session.run("mypy", "--config-file", "pyproject.toml")


@session(python=PY_VERSIONS[0])
def lint(session: Session) -> None:
    session.install("ruff", "black", "isort")
    session.run("ruff", "check", *LOCATIONS)
    session.run("isort", "--check-only", *LOCATIONS)
    session.run("black", "--check", *LOCATIONS)


@session(python=PY_VERSIONS)
def tests(session: Session) -> None:
    """Unit tests; pass e.g. `-- -k holidays` to narrow the run."""
    session.install(".[test]")
    session.run("pytest", "-q", *session.posargs)


@session(python=PY_VERSIONS[0])
def cli(session: Session) -> None:
    """The console script installs and parses its flags."""
    session.install(".")
    session.run("pager-hours", "--help")
