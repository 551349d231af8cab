"""Filter predicates for decoded entries — type, sender, search, date, time-range."""

from datetime import datetime, time, timezone
from typing import Callable

from chatlog.record import Entry


def entry_datetime(entry: Entry) -> datetime:
    """Entry timestamp as an aware UTC datetime."""
    return datetime.fromtimestamp(entry.timestamp, tz=timezone.utc)


def parse_entry_type(value: str) -> int:
    """Accept '0x0A' style hex or plain decimal.

    Raises ValueError for anything else or a value outside one byte.
    """
    text = value.strip().lower()
    code = int(text, 16) if text.startswith("0x") else int(text)
    if not 0 <= code <= 0xFF:
        raise ValueError(f"Entry type out of range: {value}")
    return code


def filter_by_entry_type(entry: Entry, entry_type: int) -> bool:
    return entry.entry_type == entry_type


def filter_by_sender(entry: Entry, name: str) -> bool:
    """True if name appears in the sender's real or display name (case-insensitive)."""
    if entry.sender is None:
        return False
    needle = name.lower()
    return (
        needle in entry.sender.real_name.lower()
        or needle in entry.sender.display_name.lower()
    )


def filter_by_search(entry: Entry, keyword: str) -> bool:
    """True if keyword appears in the message display text (case-insensitive)."""
    return keyword.lower() in entry.message.display_text.lower()


def filter_by_date(entry: Entry, date_str: str) -> bool:
    """True if entry's UTC date matches YYYY-MM-DD string."""
    target = datetime.strptime(date_str, "%Y-%m-%d").date()
    return entry_datetime(entry).date() == target


def _parse_time_range(time_range_str: str) -> tuple[time, time]:
    """Split HH:MM-HH:MM into two times. Raises ValueError if malformed."""
    start_str, end_str = time_range_str.split("-")
    return time.fromisoformat(start_str.strip()), time.fromisoformat(end_str.strip())


def filter_by_time_range(entry: Entry, time_range_str: str) -> bool:
    """True if entry's UTC time falls within HH:MM-HH:MM (inclusive).

    Handles cross-midnight ranges (e.g. 23:00-01:00).
    """
    start, end = _parse_time_range(time_range_str)
    entry_time = entry_datetime(entry).time().replace(tzinfo=None)

    if start <= end:
        return start <= entry_time <= end
    else:
        return entry_time >= start or entry_time <= end


def build_filter_chain(args) -> Callable[[Entry], bool]:
    """Combine all active filters from parsed args into a single callable."""
    predicates = []

    if getattr(args, "entry_type", None):
        code = parse_entry_type(args.entry_type)
        predicates.append(lambda entry, c=code: filter_by_entry_type(entry, c))

    if getattr(args, "sender", None):
        name = args.sender
        predicates.append(lambda entry, n=name: filter_by_sender(entry, n))

    if getattr(args, "search", None):
        keyword = args.search
        predicates.append(lambda entry, k=keyword: filter_by_search(entry, k))

    if getattr(args, "date", None):
        date_str = args.date
        datetime.strptime(date_str, "%Y-%m-%d")  # validate up front
        predicates.append(lambda entry, d=date_str: filter_by_date(entry, d))

    if getattr(args, "time_range", None):
        time_range_str = args.time_range
        _parse_time_range(time_range_str)
        predicates.append(lambda entry, t=time_range_str: filter_by_time_range(entry, t))

    if not predicates:
        return lambda entry: True

    def combined(entry: Entry) -> bool:
        return all(p(entry) for p in predicates)

    return combined
