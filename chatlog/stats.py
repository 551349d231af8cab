"""Statistics — entry type, sender and segment counts, entries per hour."""

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable

from chatlog.filters import entry_datetime
from chatlog.record import Entry
from chatlog.segments import segment_kind


@dataclass
class ChatStats:
    total_records: int = 0
    decoded_entries: int = 0
    undecodable_records: int = 0
    entry_type_counts: dict[str, int] = field(default_factory=dict)
    sender_counts: dict[str, int] = field(default_factory=dict)
    segment_counts: dict[str, int] = field(default_factory=dict)
    entries_per_hour: dict[str, int] = field(default_factory=dict)


def compute_stats(entries: Iterable[Entry | None]) -> ChatStats:
    """Consume a stream of decode results (None = undecodable) and aggregate."""
    type_counter = Counter()
    sender_counter = Counter()
    segment_counter = Counter()
    hour_counter = Counter()
    total = 0
    undecodable = 0

    for entry in entries:
        total += 1
        if entry is None:
            undecodable += 1
            continue
        type_counter[f"0x{entry.entry_type:02X}"] += 1
        if entry.sender is not None:
            sender_counter[entry.sender.display_name] += 1
        for part in entry.message.parts:
            segment_counter[segment_kind(part)] += 1
        hour_key = entry_datetime(entry).strftime("%Y-%m-%d %H:00")
        hour_counter[hour_key] += 1

    return ChatStats(
        total_records=total,
        decoded_entries=total - undecodable,
        undecodable_records=undecodable,
        entry_type_counts=dict(type_counter.most_common()),
        sender_counts=dict(sender_counter.most_common()),
        segment_counts=dict(segment_counter.most_common()),
        entries_per_hour=dict(sorted(hour_counter.items())),
    )


def format_stats_text(stats: ChatStats) -> str:
    """Human-readable stats summary."""
    lines = []
    lines.append(f"Total records: {stats.total_records}")
    lines.append(f"Decoded entries: {stats.decoded_entries}")
    lines.append(f"Undecodable records: {stats.undecodable_records}")
    lines.append("")

    lines.append("Entry types:")
    for entry_type, count in stats.entry_type_counts.items():
        lines.append(f"  {entry_type}  {count}")
    lines.append("")

    if stats.sender_counts:
        lines.append("Senders:")
        for sender, count in stats.sender_counts.items():
            lines.append(f"  {sender:20s} {count}")
    else:
        lines.append("No senders.")
    lines.append("")

    lines.append("Segments:")
    for kind, count in stats.segment_counts.items():
        lines.append(f"  {kind:15s} {count}")
    lines.append("")

    lines.append("Entries per hour:")
    for hour, count in stats.entries_per_hour.items():
        lines.append(f"  {hour}  {count}")

    return "\n".join(lines)


def format_stats_json(stats: ChatStats) -> str:
    """JSON stats output."""
    return json.dumps({
        "total_records": stats.total_records,
        "decoded_entries": stats.decoded_entries,
        "undecodable_records": stats.undecodable_records,
        "entry_type_counts": stats.entry_type_counts,
        "sender_counts": stats.sender_counts,
        "segment_counts": stats.segment_counts,
        "entries_per_hour": stats.entries_per_hour,
    }, indent=2, ensure_ascii=False)
