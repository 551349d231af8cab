"""Byte layout of a chat-log record and its embedded sub-structures.

Record layout:
  [8-byte header][1 byte, unchecked][sender bytes][0x3A][message bytes]

Header layout:
  Bytes 0-3: timestamp, uint32 little-endian
  Byte  4:   entry type code
  Bytes 5-7: unused

Embedded sub-structures start with 0x02 followed by a discriminator byte:
  0x02 0x27 ... 0x02 0x27 ... 0x03   name reference
  0x02 0x2E [len] [category] [id]    auto-translate reference
"""

import struct

HEADER_SIZE = 8
HEADER_FORMAT = "<I"  # timestamp only; entry type is read by index
ENTRY_TYPE_OFFSET = 4

# Byte 8 sits between header and sender. It is never validated so that
# records with an unexpected byte there still decode.
SENDER_OFFSET = 9
DELIMITER = 0x3A  # ':'

STRUCTURE_START = 0x02
TERMINATOR = 0x03

NAME_MARKER = (0x02, 0x27)
NAME_MIN_SIZE = 22
# Offset of the length-derived byte; real name ends at buffer[2] + 2.
NAME_LENGTH_OFFSET = 2
NAME_LENGTH_BIAS = 2
# Bytes 3-8 are opaque reserved bytes; the real name starts after them.
NAME_TEXT_OFFSET = 9

AUTO_TRANSLATE_MARKER = (0x02, 0x2E)
AUTO_TRANSLATE_MIN_SIZE = 6
AUTO_TRANSLATE_LENGTH_OFFSET = 2
# Two marker bytes plus the length byte itself.
AUTO_TRANSLATE_LENGTH_BIAS = 3
AUTO_TRANSLATE_CATEGORY_OFFSET = 3
AUTO_TRANSLATE_ID_OFFSET = 4


def marker_bytes(marker: tuple[int, int]) -> bytes:
    """Return a marker pair as a searchable bytes object."""
    return bytes(marker)


def read_timestamp(header: bytes) -> int:
    """Decode the little-endian uint32 timestamp from header bytes 0-3."""
    (timestamp,) = struct.unpack_from(HEADER_FORMAT, header, 0)
    return timestamp
