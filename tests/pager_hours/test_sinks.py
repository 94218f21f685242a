from __future__ import annotations

import io
import os

from pager_hours.gdrive import DriveFile
from pager_hours.sinks import DriveSink, LocalSink

PAYLOAD = b"Date,User\n2024-03-04,a@example.com\n"


def test_local_sink_stream() -> None:
    out = io.StringIO()
    assert LocalSink(stream=out).write(PAYLOAD, "report.csv") == "<stdout>"
    assert out.getvalue() == PAYLOAD.decode("utf-8")


def test_local_sink_stdout(capsys) -> None:
    LocalSink().write(PAYLOAD, "report.csv")
    assert capsys.readouterr().out == PAYLOAD.decode("utf-8")


def test_local_sink_file(tmp_path) -> None:
    target = tmp_path / "out" / "hours.csv"
    assert LocalSink(target).write(PAYLOAD, "ignored.csv") == str(target)
    assert target.read_bytes() == PAYLOAD


def test_local_sink_directory(tmp_path) -> None:
    dest = LocalSink(tmp_path).write(PAYLOAD, "2024-03-01 - 2024-04-01.csv")
    assert dest == str(tmp_path / "2024-03-01 - 2024-04-01.csv")
    assert (tmp_path / "2024-03-01 - 2024-04-01.csv").read_bytes() == PAYLOAD


def test_local_sink_new_directory_with_trailing_separator(tmp_path) -> None:
    reports = tmp_path / "reports"
    sink = LocalSink(f"{reports}{os.sep}")

    dest = sink.write(PAYLOAD, "2024-03-01 - 2024-04-01.csv")

    assert reports.is_dir()
    assert dest == str(reports / "2024-03-01 - 2024-04-01.csv")
    assert (reports / "2024-03-01 - 2024-04-01.csv").read_bytes() == PAYLOAD
    # a chart can go next to it afterwards
    (reports / "hours.png").parent.mkdir(parents=True, exist_ok=True)


def test_local_sink_path_without_separator_is_a_file(tmp_path) -> None:
    target = tmp_path / "reports"
    LocalSink(str(target)).write(PAYLOAD, "ignored.csv")
    assert target.is_file()


class FakeDrive:
    def __init__(self):
        self.calls = []

    def get_or_create_directory(self, name, parent):
        self.calls.append(("dir", name, parent))
        return DriveFile(id=f"id-{name}", title=name)

    def upload(self, payload, parent, title):
        self.calls.append(("upload", parent, title, payload))
        return DriveFile(id="F1", title=title)


def test_drive_sink_nests_policy_directory(capsys) -> None:
    drive = FakeDrive()
    sink = DriveSink(drive, "On-Call Hours", "Ops")  # type: ignore[arg-type]

    dest = sink.write(PAYLOAD, "2024-03-01 - 2024-04-01.csv")

    assert dest == "On-Call Hours/Ops/2024-03-01 - 2024-04-01.csv"
    assert drive.calls == [
        ("dir", "On-Call Hours", "root"),
        ("dir", "Ops", "id-On-Call Hours"),
        ("upload", "id-Ops", "2024-03-01 - 2024-04-01.csv", PAYLOAD),
    ]
    err = capsys.readouterr().err
    assert "Root Directory On-Call Hours" in err
