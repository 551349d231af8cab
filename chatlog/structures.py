"""Decoders for the two sub-structures embedded in sender and message bytes.

Each decoder follows the same three steps:
  1. verify  — minimum size and marker bytes on the buffer it is handed
  2. length  — how many bytes the sub-structure occupies (0 = unknown)
  3. parse   — decode the payload from the buffer trimmed to that length
               (names re-check their minimum size on the trimmed buffer)

A failure at any step returns None; callers fall back to literal bytes.
"""

from typing import Callable, Optional

from chatlog.protocol import (
    AUTO_TRANSLATE_CATEGORY_OFFSET,
    AUTO_TRANSLATE_ID_OFFSET,
    AUTO_TRANSLATE_LENGTH_BIAS,
    AUTO_TRANSLATE_LENGTH_OFFSET,
    AUTO_TRANSLATE_MARKER,
    AUTO_TRANSLATE_MIN_SIZE,
    NAME_LENGTH_BIAS,
    NAME_LENGTH_OFFSET,
    NAME_MARKER,
    NAME_MIN_SIZE,
    NAME_TEXT_OFFSET,
    STRUCTURE_START,
    TERMINATOR,
    marker_bytes,
)
from chatlog.segments import AutoTranslate, Name, Segment

DecodeResult = Optional[tuple[int, Segment]]

_NAME_MARKER_BYTES = marker_bytes(NAME_MARKER)
_TERMINATOR_BYTES = bytes([TERMINATOR])
_START_BYTES = bytes([STRUCTURE_START])


def _has_marker(data: bytes, marker: tuple[int, int]) -> bool:
    return len(data) >= 2 and data[0] == marker[0] and data[1] == marker[1]


# ---------------------------------------------------------------------------
# Name references: 0x02 0x27 [len] <6 reserved> real 0x?? display 0x02 0x27 ... 0x03
# ---------------------------------------------------------------------------


def verify_name(data: bytes) -> bool:
    return len(data) >= NAME_MIN_SIZE and _has_marker(data, NAME_MARKER)


def name_length(data: bytes) -> int:
    """Length up to (not including) the 0x03 after the closing marker.

    Returns 0 when the closing marker or the terminator is missing.
    """
    close = data.find(_NAME_MARKER_BYTES, 2)
    if close == -1:
        return 0
    terminator = data.find(_TERMINATOR_BYTES, close)
    if terminator == -1:
        return 0
    end_pos = close - 2
    last_three = terminator - close
    return 2 + end_pos + last_three


def parse_name(data: bytes) -> Name | None:
    """Decode real and display names from a verified name buffer.

    Both names must be valid UTF-8; there is no lossy fallback here.
    """
    if len(data) <= NAME_LENGTH_OFFSET:
        return None
    real_name_end = data[NAME_LENGTH_OFFSET] + NAME_LENGTH_BIAS
    if real_name_end < NAME_TEXT_OFFSET or real_name_end >= len(data):
        return None
    display_end = data.find(_START_BYTES, real_name_end)
    if display_end <= real_name_end:
        return None
    try:
        real_name = data[NAME_TEXT_OFFSET:real_name_end].decode("utf-8")
        display_name = data[real_name_end + 1:display_end].decode("utf-8")
    except UnicodeDecodeError:
        return None
    return Name(real_name=real_name, display_name=display_name)


def parse_name_field(data: bytes) -> Name | None:
    """Decode a self-contained name buffer, such as a whole sender field."""
    if not verify_name(data):
        return None
    return parse_name(data)


def decode_name(data: bytes) -> DecodeResult:
    """Decode a name reference at the start of a message slice."""
    if not verify_name(data):
        return None
    length = name_length(data)
    if length == 0:
        return None
    # the minimum size applies again to the trimmed slice
    name = parse_name_field(data[:length])
    if name is None:
        return None
    return length, name


# ---------------------------------------------------------------------------
# Auto-translate references: 0x02 0x2E [len] [category] [id, big-endian]
# ---------------------------------------------------------------------------


def be_bytes_to_int(data: bytes) -> int | None:
    """Big-endian unsigned integer from *data*; None for an empty slice."""
    if not data:
        return None
    return int.from_bytes(data, "big")


def verify_auto_translate(data: bytes) -> bool:
    return len(data) >= AUTO_TRANSLATE_MIN_SIZE and _has_marker(data, AUTO_TRANSLATE_MARKER)


def auto_translate_length(data: bytes) -> int:
    if len(data) <= AUTO_TRANSLATE_LENGTH_OFFSET:
        return 0
    return data[AUTO_TRANSLATE_LENGTH_OFFSET] + AUTO_TRANSLATE_LENGTH_BIAS


def parse_auto_translate(data: bytes) -> AutoTranslate | None:
    if len(data) <= AUTO_TRANSLATE_CATEGORY_OFFSET:
        return None
    id_end = data[AUTO_TRANSLATE_LENGTH_OFFSET] + AUTO_TRANSLATE_LENGTH_BIAS
    if id_end > len(data):
        return None
    ident = be_bytes_to_int(data[AUTO_TRANSLATE_ID_OFFSET:id_end])
    if ident is None:
        return None
    return AutoTranslate(category=data[AUTO_TRANSLATE_CATEGORY_OFFSET], id=ident)


def decode_auto_translate(data: bytes) -> DecodeResult:
    """Decode an auto-translate reference at the start of a message slice."""
    if not verify_auto_translate(data):
        return None
    length = auto_translate_length(data)
    if length == 0 or length > len(data):
        return None
    part = parse_auto_translate(data[:length])
    if part is None:
        return None
    return length, part


# Discriminator (byte after 0x02) → decoder
DECODERS: dict[int, Callable[[bytes], DecodeResult]] = {
    NAME_MARKER[1]: decode_name,
    AUTO_TRANSLATE_MARKER[1]: decode_auto_translate,
}
