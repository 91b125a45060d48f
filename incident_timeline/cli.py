"""
Incident Timeline CLI
=====================

Local tool for inspecting layout passes over a JSON record file.

COMMANDS:
- layout:    Print the full layout (axis, ticks, positions, stack levels) as JSON
- dashboard: Print category totals and weekly density
- countdown: Print time left until the countdown target

USAGE:
    python -m incident_timeline.cli [COMMAND] [ARGS]
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import LayoutConfig
from .contracts.base import InvalidConfiguration, LayoutError, parse_datetime
from .dashboard import build_dashboard
from .engine import TimelineLayoutEngine
from .ingestion.loader import load_records_file
from .temporal.clock import LogicalClock
from .temporal.countdown import compute_countdown

EXIT_OK = 0
EXIT_SOURCE_ERROR = 1
EXIT_INVALID_CONFIG = 2


def _config_from_args(args) -> LayoutConfig:
    config = LayoutConfig.from_env()
    overrides = {}
    if getattr(args, 'threshold', None) is not None:
        overrides['proximity_threshold'] = args.threshold
    if getattr(args, 'max_level', None) is not None:
        overrides['max_stack_level'] = args.max_level
    if getattr(args, 'target', None) is not None:
        overrides['countdown_target'] = parse_datetime(args.target)
    return config.replace(**overrides) if overrides else config


def _clock_from_args(args) -> LogicalClock:
    if args.now:
        return LogicalClock.fixed(parse_datetime(args.now))
    return LogicalClock.live(record_ticks=False)


def _layout_from_args(args):
    config = _config_from_args(args)
    report = load_records_file(args.records)
    for item in report.malformed_items:
        print(f"[!] Skipped malformed record #{item.index} ({item.item_id})", file=sys.stderr)
    for error in report.errors:
        print(f"[!] {error.message}", file=sys.stderr)

    engine = TimelineLayoutEngine(config=config, clock=_clock_from_args(args))
    return engine.layout(report.records), config


def cmd_layout(args) -> int:
    layout, _ = _layout_from_args(args)
    print(json.dumps(layout.to_dict(), indent=2, ensure_ascii=False))
    return EXIT_OK


def cmd_dashboard(args) -> int:
    layout, config = _layout_from_args(args)
    summary = build_dashboard(layout, config)

    axis = layout.axis
    print(f"INCIDENT DASHBOARD  {axis.start.date()} .. {axis.end.date()} ({axis.total_days} days)")
    print("-" * 60)
    print(f"TOTAL EVENTS: {summary.total}")
    for category, count in summary.category_counts:
        print(f"  {category.name:<12} {count}")
    print()
    print("WEEK       | COUNT")
    for bucket in summary.buckets:
        print(f"{bucket.start:%b %d}     | {'#' * bucket.count} {bucket.count}")
    if layout.excluded_ids:
        print(f"\n[INFO] {len(layout.excluded_ids)} record(s) outside the axis window")
    return EXIT_OK


def cmd_countdown(args) -> int:
    config = _config_from_args(args)
    now = _clock_from_args(args).now()
    countdown = compute_countdown(config.countdown_target, now)
    print(f"{countdown.format()}  ({countdown.total_seconds:,} seconds)")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="incident-timeline", description="Incident timeline layout tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, handler, help_text in (
        ("layout", cmd_layout, "Print layout JSON"),
        ("dashboard", cmd_dashboard, "Print dashboard summary"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        p.add_argument("records", help="Path to a JSON array of records")
        p.add_argument("--now", help="ISO timestamp to use as the current moment")
        p.add_argument("--threshold", type=float, help="Proximity threshold (percent of axis)")
        p.add_argument("--max-level", dest="max_level", type=int, help="Maximum stack level")
        p.set_defaults(func=handler)

    p = subparsers.add_parser("countdown", help="Print countdown to the target")
    p.add_argument("--now", help="ISO timestamp to use as the current moment")
    p.add_argument("--target", help="ISO timestamp of the countdown target")
    p.set_defaults(func=cmd_countdown)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except InvalidConfiguration as e:
        print(f"[FAIL] Invalid configuration ({e.code.name}): {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG
    except LayoutError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return EXIT_SOURCE_ERROR
    except ValueError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return EXIT_INVALID_CONFIG


if __name__ == "__main__":
    sys.exit(main())
