from __future__ import annotations

import sys


def log(msg: str) -> None:
    """Progress message for the operator; stdout is reserved for the CSV."""
    print(msg, file=sys.stderr, flush=True)
