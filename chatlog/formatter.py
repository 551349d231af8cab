"""Output formatters — text, JSON (NDJSON), colorized (ANSI)."""

import json
from typing import Callable

from chatlog.filters import entry_datetime
from chatlog.record import Entry
from chatlog.segments import AutoTranslate, Name, display_text, segment_to_dict

# ANSI color codes
COLORS = {
    "name": "\033[36m",            # cyan
    "auto_translate": "\033[33m",  # yellow
    "entry_type": "\033[35m",      # magenta
}
RESET = "\033[0m"

OUTPUT_FORMATS = ("text", "json")

Formatter = Callable[[Entry, str], str]


def _timestamp_text(entry: Entry) -> str:
    return entry_datetime(entry).strftime("%Y-%m-%d %H:%M:%S")


def format_text(entry: Entry, source_file: str = "") -> str:
    """Return '[timestamp] [0xTT] sender: text'; sender part omitted when absent."""
    prefix = f"[{_timestamp_text(entry)}] [0x{entry.entry_type:02X}]"
    if entry.sender is None:
        return f"{prefix} {entry.message.display_text}"
    return f"{prefix} {entry.sender.display_name}: {entry.message.display_text}"


def format_json(entry: Entry, source_file: str = "") -> str:
    """Return NDJSON — one JSON object per line, compatible with jq."""
    sender = None
    if entry.sender is not None:
        sender = {
            "real_name": entry.sender.real_name,
            "display_name": entry.sender.display_name,
        }
    return json.dumps({
        "timestamp": entry_datetime(entry).isoformat(),
        "epoch": entry.timestamp,
        "entry_type": entry.entry_type,
        "sender": sender,
        "text": entry.message.display_text,
        "segments": [segment_to_dict(part) for part in entry.message.parts],
        "source_file": source_file,
    }, ensure_ascii=False)


def format_color(entry: Entry, source_file: str = "") -> str:
    """Return the text line with names and auto-translate codes highlighted."""
    pieces = []
    for part in entry.message.parts:
        if isinstance(part, Name):
            pieces.append(f"{COLORS['name']}{display_text(part)}{RESET}")
        elif isinstance(part, AutoTranslate):
            pieces.append(f"{COLORS['auto_translate']}{display_text(part)}{RESET}")
        else:
            pieces.append(display_text(part))
    text = "".join(pieces)

    prefix = (
        f"[{_timestamp_text(entry)}] "
        f"[{COLORS['entry_type']}0x{entry.entry_type:02X}{RESET}]"
    )
    if entry.sender is None:
        return f"{prefix} {text}"
    return f"{prefix} {COLORS['name']}{entry.sender.display_name}{RESET}: {text}"


def get_formatter(output_format: str = "text", color: bool = False) -> Formatter:
    """Factory that returns the right formatter based on args."""
    if output_format == "json":
        return format_json
    if color:
        return format_color
    return format_text
