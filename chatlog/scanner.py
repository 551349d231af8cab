"""Message scanner — splits a message body into typed segments.

Walks the buffer left to right. A 0x02 byte starts a sub-structure only
if the matching decoder accepts it; otherwise it is kept as literal text.
The scanner itself never fails.
"""

from chatlog.protocol import STRUCTURE_START
from chatlog.segments import PlainText, Segment
from chatlog.structures import DECODERS, DecodeResult


def _plain_text(buf: bytearray) -> PlainText:
    return PlainText(buf.decode("utf-8", errors="replace"))


def parse_structure(message: bytes) -> DecodeResult:
    """Try to decode a sub-structure at the start of *message*.

    Returns (length, segment), or None when the discriminator is unknown
    or the decoder rejects the bytes.
    """
    if len(message) < 2:
        return None
    decoder = DECODERS.get(message[1])
    if decoder is None:
        return None
    return decoder(message)


def parse_message(message: bytes) -> list[Segment]:
    """Decode a message body into an ordered list of segments."""
    parts: list[Segment] = []
    buf = bytearray()
    i = 0
    while i < len(message):
        byte = message[i]
        if byte == STRUCTURE_START:
            result = parse_structure(message[i:])
            if result is not None:
                length, part = result
                if buf:
                    parts.append(_plain_text(buf))
                    buf.clear()
                parts.append(part)
                # +1 skips the terminator that follows every sub-structure
                i += length + 1
                continue
        buf.append(byte)
        i += 1
    if buf:
        parts.append(_plain_text(buf))
    return parts
