"""Tests for chatlog/stats.py"""

import json

from chatlog.record import Entry
from chatlog.segments import AutoTranslate, Message, Name, PlainText
from chatlog.stats import ChatStats, compute_stats, format_stats_json, format_stats_text

BASE_TS = 1_700_000_000


def _entry(entry_type=0x0A, sender=None, parts=(PlainText("x"),), timestamp=BASE_TS):
    return Entry(entry_type=entry_type, timestamp=timestamp, sender=sender, message=Message(parts))


def _sample():
    return [
        _entry(sender=Name("alice", "alice")),
        None,
        _entry(sender=Name("Carol Jones", "Carol"), parts=(PlainText("a"), AutoTranslate(1, 2))),
        _entry(entry_type=0x39, timestamp=BASE_TS + 3600),
        _entry(sender=Name("alice", "alice"), parts=(Name("Bob", "Bobby"),)),
    ]


class TestComputeStats:
    def test_empty(self):
        stats = compute_stats([])
        assert stats == ChatStats()

    def test_record_counts(self):
        stats = compute_stats(_sample())
        assert stats.total_records == 5
        assert stats.decoded_entries == 4
        assert stats.undecodable_records == 1

    def test_entry_type_counts(self):
        stats = compute_stats(_sample())
        assert stats.entry_type_counts == {"0x0A": 3, "0x39": 1}

    def test_sender_counts_by_display_name(self):
        stats = compute_stats(_sample())
        assert stats.sender_counts == {"alice": 2, "Carol": 1}

    def test_segment_counts(self):
        stats = compute_stats(_sample())
        assert stats.segment_counts == {"plain_text": 3, "auto_translate": 1, "name": 1}

    def test_entries_per_hour(self):
        stats = compute_stats(_sample())
        assert stats.entries_per_hour == {"2023-11-14 22:00": 3, "2023-11-14 23:00": 1}


class TestFormatStats:
    def test_text_summary(self):
        text = format_stats_text(compute_stats(_sample()))
        assert "Total records: 5" in text
        assert "Undecodable records: 1" in text
        assert "0x39  1" in text

    def test_text_without_senders(self):
        text = format_stats_text(compute_stats([_entry()]))
        assert "No senders." in text

    def test_json_round_trips(self):
        parsed = json.loads(format_stats_json(compute_stats(_sample())))
        assert parsed["decoded_entries"] == 4
        assert parsed["sender_counts"]["alice"] == 2
