"""
Do.This Capture — Entry Point.

Command-line front end for the capture parser and recurrence resolver.

Usage examples:
  python main.py parse "Call mom tomorrow at 3pm #family urgent"
  python main.py next --pattern monthly --day-of-month 31 --from 2024-01-31
  python main.py next --pattern custom --interval 3 --time 09:30
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date

from pydantic import ValidationError

from src.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from src.core.parser import parse
from src.core.recurrence import RecurrenceConfig, RecurrencePattern, describe, next_occurrence

logger = logging.getLogger(__name__)


def _days_arg(value: str) -> list[int]:
    try:
        return [int(d) for d in value.split(",") if d.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated day numbers, got {value!r}")


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Parse tasks and resolve recurrences")
    sub = ap.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="Parse a line of free text into task fields")
    p_parse.add_argument("text", nargs="+", help="The task text")

    p_next = sub.add_parser("next", help="Compute the next occurrence of a schedule")
    p_next.add_argument("--pattern", required=True, choices=[p.value for p in RecurrencePattern])
    p_next.add_argument("--interval", type=int)
    p_next.add_argument("--days", type=_days_arg, help="Days of week, 0=Sunday, e.g. 1,3,5")
    p_next.add_argument("--day-of-month", type=int)
    p_next.add_argument("--end-date", type=date.fromisoformat)
    p_next.add_argument("--occurrences", type=int)
    p_next.add_argument("--time", help="HH:MM, 24h")
    p_next.add_argument("--from", dest="from_", type=date.fromisoformat, help="Reference date (default today)")
    return ap


def _run_parse(args: argparse.Namespace) -> int:
    result = parse(" ".join(args.text))
    print(result.model_dump_json(indent=2))
    return 0 if result.success else 1


def _run_next(args: argparse.Namespace) -> int:
    try:
        config = RecurrenceConfig(
            pattern=args.pattern,
            interval=args.interval,
            days_of_week=args.days,
            day_of_month=args.day_of_month,
            end_date=args.end_date,
            occurrences=args.occurrences,
            time=args.time,
        )
    except ValidationError as exc:
        logger.error("Invalid recurrence: %s", exc)
        print(f"ERROR: invalid recurrence:\n{exc}", file=sys.stderr)
        return 2

    nxt = next_occurrence(config, args.from_)
    print(json.dumps({
        "description": describe(config),
        "next": nxt.isoformat() if nxt else None,
    }, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    if args.command == "parse":
        return _run_parse(args)
    return _run_next(args)


if __name__ == "__main__":
    sys.exit(main())
