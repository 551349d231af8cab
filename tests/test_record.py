"""Tests for chatlog/record.py — framing, entry assembly, raw text."""

import dataclasses
import struct

import pytest

from builders import make_header, make_name, make_record
from chatlog.protocol import HEADER_SIZE, SENDER_OFFSET
from chatlog.record import (
    Entry,
    RecordParts,
    assemble_entry,
    decode_record,
    get_header,
    record_text,
    split_record,
)
from chatlog.segments import AutoTranslate, Message, Name, PlainText


# ── Header extraction ─────────────────────────────────────────────


class TestGetHeader:
    @pytest.mark.parametrize("size", range(0, HEADER_SIZE))
    def test_short_buffers_have_no_header(self, size):
        assert get_header(bytes(size)) is None

    def test_exact_header_size(self):
        assert get_header(bytes(range(HEADER_SIZE))) == bytes(range(HEADER_SIZE))

    def test_takes_first_eight_bytes(self):
        assert get_header(bytes(range(20))) == bytes(range(8))


# ── Sender / message split ────────────────────────────────────────


class TestSplitRecord:
    @pytest.mark.parametrize("size", range(0, SENDER_OFFSET + 1))
    def test_too_short_to_frame(self, size):
        assert split_record(b":" * size) is None

    def test_header_only_fails(self):
        assert split_record(make_header()) is None

    def test_no_delimiter_fails(self):
        assert split_record(make_header() + b"\x1fno colon here") is None

    def test_minimum_frameable_record(self):
        parts = split_record(make_header() + b"\x1f:")
        assert parts == RecordParts(header=make_header(), sender=b"", message=b"")

    def test_sender_and_message(self):
        parts = split_record(make_record(sender=b"alice", message=b"hi: there"))
        assert parts.sender == b"alice"
        assert parts.message == b"hi: there"

    def test_byte_eight_is_not_validated(self):
        parts = split_record(make_header() + b":bob:hi")
        assert parts.sender == b"bob"
        assert parts.message == b"hi"

    def test_colon_inside_header_is_ignored(self):
        header = struct.pack("<I", 0x3A3A3A3A) + b"\x3a\x00\x00\x00"
        parts = split_record(header + b"\x1fbob:hi")
        assert parts.header == header
        assert parts.sender == b"bob"

    def test_parts_are_bytes_copies(self):
        raw = bytearray(make_record(sender=b"alice", message=b"hi"))
        parts = split_record(raw)
        raw[SENDER_OFFSET] = ord("X")
        assert parts.sender == b"alice"
        assert isinstance(parts.message, bytes)


# ── Entry assembly ────────────────────────────────────────────────


class TestAssembleEntry:
    def test_timestamp_is_little_endian(self):
        entry = decode_record(b"\x01\x02\x03\x04\x0a\x00\x00\x00\x1f:")
        assert entry.timestamp == 0x04030201

    def test_entry_type_from_byte_four(self):
        entry = decode_record(make_record(timestamp=123, entry_type=0x39))
        assert entry.entry_type == 0x39
        assert entry.timestamp == 123

    def test_max_timestamp(self):
        entry = decode_record(make_record(timestamp=0xFFFFFFFF))
        assert entry.timestamp == 0xFFFFFFFF

    def test_empty_sender_is_absent(self):
        assert decode_record(make_record(sender=b"", message=b"x")).sender is None

    def test_plain_sender(self):
        entry = decode_record(make_record(sender=b"alice"))
        assert entry.sender == Name(real_name="alice", display_name="alice")

    def test_name_reference_sender(self):
        entry = decode_record(make_record(sender=make_name(b"Carol Jones", b"Carol")))
        assert entry.sender == Name("Carol Jones", "Carol")

    def test_invalid_utf8_sender_is_absent(self):
        assert decode_record(make_record(sender=b"\xff\xfe")).sender is None

    def test_message_segments(self):
        entry = decode_record(make_record(message=b"\x02\x2e\x02\x05\x7b\x03hi"))
        assert entry.message == Message((AutoTranslate(5, 123), PlainText("hi")))

    def test_assemble_from_parts(self):
        parts = RecordParts(header=make_header(7, 0x0B), sender=b"", message=b"ok")
        assert assemble_entry(parts) == Entry(
            entry_type=0x0B,
            timestamp=7,
            sender=None,
            message=Message((PlainText("ok"),)),
        )

    def test_entry_is_frozen(self):
        entry = decode_record(make_record(sender=b"alice"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.entry_type = 1


# ── decode_record ─────────────────────────────────────────────────


class TestDecodeRecord:
    def test_undecodable_is_none(self):
        assert decode_record(b"\x00\x01\x02") is None

    def test_decoding_twice_is_equal(self, rich_record):
        assert decode_record(rich_record) == decode_record(rich_record)

    def test_rich_record(self, rich_record):
        entry = decode_record(rich_record)
        assert entry.sender == Name("Carol Jones", "Carol")
        assert entry.message.display_text == "Ask Bobby about <AT: 5, 123>!"

    def test_say_record(self, say_record):
        entry = decode_record(say_record)
        assert entry.entry_type == 0x0A
        assert entry.message.parts == (PlainText("hello there"),)


# ── record_text ───────────────────────────────────────────────────


class TestRecordText:
    def test_carriage_returns_become_newlines(self):
        assert record_text(make_record(message=b"one\rtwo\r")) == "one\ntwo\n"

    def test_ignores_structures(self):
        text = record_text(make_record(message=b"\x02\x2e\x02\x05\x7b\x03hi"))
        assert text == "\x02.\x02\x05{\x03hi"

    def test_unframeable_is_none(self):
        assert record_text(make_header() + b"\x1fnope") is None
        assert record_text(b"short") is None
