"""Shared pytest fixtures for the chatlog test suite."""

from __future__ import annotations

import pytest

from builders import make_auto_translate, make_name, make_record, to_hex_line

# 2023-11-14 22:13:20 UTC
BASE_TS = 1_700_000_000


@pytest.fixture()
def say_record() -> bytes:
    """A plain 'say' record from a plain-text sender."""
    return make_record(timestamp=BASE_TS, entry_type=0x0A, sender=b"alice", message=b"hello there")


@pytest.fixture()
def rich_record() -> bytes:
    """A record with a name-reference sender and a mixed message body."""
    message = (
        b"Ask "
        + make_name(b"Bob Smith", b"Bobby")
        + b" about "
        + make_auto_translate(5, b"\x7b")
        + b"!"
    )
    return make_record(
        timestamp=BASE_TS + 3600,
        entry_type=0x0C,
        sender=make_name(b"Carol Jones", b"Carol"),
        message=message,
    )


@pytest.fixture()
def hex_log_file(tmp_path, say_record, rich_record):
    """A hex-per-line file with a comment, a blank line and one undecodable record."""
    path = tmp_path / "chat.hexlog"
    path.write_text(
        "# exported chat records\n"
        + to_hex_line(say_record)
        + "\n"
        + to_hex_line(b"\x00\x01\x02")
        + to_hex_line(rich_record)
        + to_hex_line(make_record(timestamp=BASE_TS + 60, entry_type=0x39, message=b"System notice")),
        encoding="utf-8",
    )
    return str(path)
