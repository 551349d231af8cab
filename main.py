"""chatlog-decode — decode binary chat-log records into readable entries."""

import logging
import sys
from argparse import ArgumentParser
from itertools import islice

from chatlog.config import LOG_LEVELS, load_config, load_yaml_config
from chatlog.filters import build_filter_chain
from chatlog.formatter import OUTPUT_FORMATS, get_formatter
from chatlog.reader import INPUT_FORMATS, expand_paths, read_records
from chatlog.record import decode_record, record_text

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="chatlog-decode",
        description="Decode binary chat-log records into readable entries.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        help="Record file path(s) or glob pattern(s)",
    )
    parser.add_argument(
        "--format",
        dest="input_format",
        choices=list(INPUT_FORMATS),
        default=None,
        help="Input format: hex lines or length-prefixed binary (default: hex)",
    )
    parser.add_argument(
        "--entry-type",
        help="Filter by entry type code (e.g. 0x0A or 10)",
    )
    parser.add_argument(
        "--sender",
        help="Filter by sender name (case-insensitive substring)",
    )
    parser.add_argument(
        "--search",
        help="Filter by keyword in message text (case-insensitive)",
    )
    parser.add_argument(
        "--date",
        help="Filter by UTC date (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--time-range",
        help="Filter by UTC time range (HH:MM-HH:MM, inclusive)",
    )
    parser.add_argument(
        "--lines",
        type=int,
        help="Limit output to N entries",
    )
    parser.add_argument(
        "--output",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        default=None,
        help="Highlight names and auto-translate codes (ANSI)",
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Print the undecoded message text of each matching record",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show statistics instead of entries",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--log-level",
        choices=list(LOG_LEVELS),
        default=None,
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    return parser


def run_pipeline(args):
    """Assemble and execute the generator pipeline."""
    if args.raw and args.stats:
        print("Error: --raw and --stats cannot be used together", file=sys.stderr)
        sys.exit(1)

    try:
        yaml_data = load_yaml_config(args.config)
        config = load_config(args, yaml_data)
        filter_fn = build_filter_chain(args)
        paths = expand_paths(args.files)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)
    logger.info("Reading %d file(s) as %s", len(paths), config.input_format)

    if args.raw and config.output_format == "json":
        print("Error: --raw cannot be combined with JSON output", file=sys.stderr)
        sys.exit(1)

    formatter = get_formatter(output_format=config.output_format, color=config.color)

    # Decode
    records = read_records(paths, config.input_format)
    decoded = ((decode_record(record), record, path) for record, path, _ in records)

    # Stats mode: undecodable records are counted, not dropped
    if args.stats:
        from chatlog.stats import compute_stats, format_stats_json, format_stats_text
        stats = compute_stats(
            entry for entry, _, _ in decoded if entry is None or filter_fn(entry)
        )
        if config.output_format == "json":
            print(format_stats_json(stats))
        else:
            print(format_stats_text(stats))
        return

    # Skip undecodable, then filter
    matches = (item for item in decoded if item[0] is not None and filter_fn(item[0]))

    # Limit
    if config.lines:
        matches = islice(matches, config.lines)

    # Output
    for entry, record, path in matches:
        if args.raw:
            print(record_text(record))
        else:
            print(formatter(entry, path))


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args()
    run_pipeline(args)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
