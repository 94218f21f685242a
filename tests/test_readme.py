"""Checks that the README documents the report users actually get."""

from pathlib import Path

from pager_hours.reporting import CSV_HEADERS


def test_readme_exists(project_root: Path) -> None:
    readme = project_root / "README.md"
    assert readme.exists(), "README.md should exist at the project root"


def test_readme_lists_every_csv_column(project_root: Path) -> None:
    text = " ".join((project_root / "README.md").read_text(encoding="utf-8").split())
    for column in CSV_HEADERS:
        assert column in text, f"README is missing CSV column {column!r}"


def test_readme_mentions_cli_flags(project_root: Path) -> None:
    text = (project_root / "README.md").read_text(encoding="utf-8")
    for flag in ("--pd.token", "--policy", "--from", "--to"):
        assert flag in text
