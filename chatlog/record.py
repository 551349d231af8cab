"""Record framing and entry assembly."""

import logging
from dataclasses import dataclass

from chatlog.protocol import (
    DELIMITER,
    ENTRY_TYPE_OFFSET,
    HEADER_SIZE,
    SENDER_OFFSET,
    read_timestamp,
)
from chatlog.scanner import parse_message
from chatlog.segments import Message, Name
from chatlog.structures import parse_name_field

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordParts:
    header: bytes
    sender: bytes
    message: bytes


@dataclass(frozen=True)
class Entry:
    entry_type: int
    timestamp: int
    sender: Name | None
    message: Message


def get_header(raw: bytes) -> bytes | None:
    """Return the fixed-size header, or None if the record is too short."""
    if len(raw) < HEADER_SIZE:
        return None
    return bytes(raw[:HEADER_SIZE])


def _find_delimiter(raw: bytes) -> int:
    """Absolute index of the first ':' at or after the sender offset, or -1."""
    if len(raw) <= SENDER_OFFSET:
        return -1
    return raw.find(bytes([DELIMITER]), SENDER_OFFSET)


def split_record(raw: bytes) -> RecordParts | None:
    """Split a raw record into header, sender and message byte ranges."""
    header = get_header(raw)
    if header is None:
        logger.debug("Record too short for header (%d bytes)", len(raw))
        return None
    colon = _find_delimiter(raw)
    if colon == -1:
        logger.debug("No sender delimiter in %d-byte record", len(raw))
        return None
    return RecordParts(
        header=header,
        sender=bytes(raw[SENDER_OFFSET:colon]),
        message=bytes(raw[colon + 1:]),
    )


def _resolve_sender(sender: bytes) -> Name | None:
    if not sender:
        return None
    name = parse_name_field(sender)
    if name is not None:
        return name
    try:
        return Name.from_text(sender.decode("utf-8"))
    except UnicodeDecodeError:
        return None


def assemble_entry(parts: RecordParts) -> Entry:
    """Interpret header, sender and message. Never fails."""
    return Entry(
        entry_type=parts.header[ENTRY_TYPE_OFFSET],
        timestamp=read_timestamp(parts.header),
        sender=_resolve_sender(parts.sender),
        message=Message(tuple(parse_message(parts.message))),
    )


def decode_record(raw: bytes) -> Entry | None:
    """Decode one raw record. Returns None if it cannot be framed."""
    parts = split_record(raw)
    if parts is None:
        return None
    return assemble_entry(parts)


def record_text(raw: bytes) -> str | None:
    """Lossy text of everything after the delimiter, with CR mapped to LF.

    Ignores embedded sub-structures; useful for a quick look at a record.
    """
    if get_header(raw) is None:
        return None
    colon = _find_delimiter(raw)
    if colon == -1:
        return None
    return raw[colon + 1:].decode("utf-8", errors="replace").replace("\r", "\n")
