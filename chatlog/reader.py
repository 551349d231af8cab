"""Generator-based record sources — hex-per-line and length-prefixed files.

Framed file layout, repeated until EOF:
  [4-byte uint32 little-endian length][record bytes]
"""

import glob
import logging
import os
import struct
from typing import BinaryIO, Generator

logger = logging.getLogger(__name__)

FRAME_HEADER_FORMAT = "<I"
FRAME_HEADER_SIZE = struct.calcsize(FRAME_HEADER_FORMAT)

INPUT_FORMATS = ("hex", "framed")

RecordItem = tuple[bytes, str, int]


def read_hex_records(filepath: str) -> Generator[RecordItem, None, None]:
    """Yield (record, filepath, line_number) for each hex line in a file.

    Blank lines and '#' comments are skipped. Lines that are not valid hex,
    including binary data read in the wrong format, are logged and skipped.
    """
    with open(filepath, "rb") as f:
        for line_number, line in enumerate(f, start=1):
            stripped = line.decode("utf-8", errors="replace").strip()
            if not stripped or stripped.startswith("#"):
                continue
            try:
                record = bytes.fromhex(stripped)
            except ValueError:
                logger.warning("Skipping invalid hex at %s:%d", filepath, line_number)
                continue
            yield record, filepath, line_number


def read_exact(f: BinaryIO, n: int) -> bytes:
    """Read exactly n bytes from a binary file.

    Raises:
        EOFError: If the file ends before n bytes are read.
    """
    data = b""
    while len(data) < n:
        chunk = f.read(n - len(data))
        if not chunk:
            raise EOFError(f"Expected {n} bytes, got {len(data)}")
        data += chunk
    return data


def read_framed_records(filepath: str) -> Generator[RecordItem, None, None]:
    """Yield (record, filepath, index) from a length-prefixed binary file."""
    with open(filepath, "rb") as f:
        index = 0
        while True:
            prefix = f.read(FRAME_HEADER_SIZE)
            if not prefix:
                return
            try:
                if len(prefix) < FRAME_HEADER_SIZE:
                    prefix += read_exact(f, FRAME_HEADER_SIZE - len(prefix))
                (length,) = struct.unpack(FRAME_HEADER_FORMAT, prefix)
                record = read_exact(f, length)
            except EOFError as e:
                logger.warning("Truncated frame %d in %s: %s", index, filepath, e)
                return
            yield record, filepath, index
            index += 1


def read_records(paths: list[str], input_format: str = "hex") -> Generator[RecordItem, None, None]:
    """Yield records from multiple files, sequentially."""
    if input_format not in INPUT_FORMATS:
        raise ValueError(f"Unknown input format: {input_format}")
    read_one = read_hex_records if input_format == "hex" else read_framed_records
    for path in paths:
        yield from read_one(path)


def expand_paths(raw_paths: list[str]) -> list[str]:
    """Expand globs, deduplicate, and validate that files exist.

    Raises FileNotFoundError if a non-glob path doesn't exist.
    Raises FileNotFoundError if expansion produces zero files.
    """
    expanded = []
    seen = set()

    for raw in raw_paths:
        if any(c in raw for c in ("*", "?", "[")):
            candidates = sorted(glob.glob(raw))
        else:
            if not os.path.isfile(raw):
                raise FileNotFoundError(f"File not found: {raw}")
            candidates = [raw]
        for path in candidates:
            if path not in seen:
                seen.add(path)
                expanded.append(path)

    if not expanded:
        raise FileNotFoundError("No record files found matching the given paths")

    return expanded
