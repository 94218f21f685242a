from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Protocol, TextIO, Union

from pager_hours.gdrive import DriveClient
from pager_hours.progress import log


class ReportSink(Protocol):
    def write(self, payload: bytes, name: str) -> str:
        """Store the finished report; returns where it ended up."""
        ...


def _names_directory(raw: str) -> bool:
    return raw.endswith(("/", os.sep)) or Path(raw).is_dir()


class LocalSink:
    """
    Writes to a file, else to stdout. A path ending in a separator (or an
    existing directory) receives the report under ``name``, created if missing.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        stream: Optional[TextIO] = None,
    ):
        # kept as given; Path() would drop a trailing separator
        self.raw_path = os.fspath(path) if path is not None else None
        self.stream = stream

    def write(self, payload: bytes, name: str) -> str:
        if self.raw_path is None:
            out = self.stream or sys.stdout
            out.write(payload.decode("utf-8"))
            out.flush()
            return "<stdout>"

        if _names_directory(self.raw_path):
            target = Path(self.raw_path) / name
        else:
            target = Path(self.raw_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
        return str(target)


class DriveSink:
    """Uploads under ``<root directory>/<policy name>/`` on Google Drive."""

    def __init__(self, client: DriveClient, root_directory: str, policy_name: str):
        self.client = client
        self.root_directory = root_directory
        self.policy_name = policy_name

    def write(self, payload: bytes, name: str) -> str:
        root = self.client.get_or_create_directory(self.root_directory, "root")
        log(f"- Root Directory {root.title}({root.id})")
        parent = self.client.get_or_create_directory(self.policy_name, root.id)
        log(f"- Policy Directory {root.title}/{parent.title}")
        self.client.upload(payload, parent.id, name)
        return f"{root.title}/{parent.title}/{name}"
