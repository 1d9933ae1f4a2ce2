"""
Command-line entry point for CalBot.
Turns one message into an .ics file and prints the chat reply.
"""

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from dateutil import parser as dateutil_parser

from src.calendar_connector import google_calendar_url
from src.errors import CalBotError, user_message
from src.event_pipeline import extract_calendar, parse_message
from src.event_summary import calendar_message
from src.ics_generator import write_ics
from src.llm_client import get_llm_client
from src.logging_helper import Log
from src.settings_manager import get_output_dir


def _reference_date(value: str) -> date:
    try:
        return dateutil_parser.parse(value).date()
    except (ValueError, OverflowError) as e:
        raise argparse.ArgumentTypeError(f"invalid date: {value!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="calbot", description="Extract a calendar event from a message.")
    parser.add_argument("message", nargs="?", help="Message text (read from stdin when omitted)")
    parser.add_argument("--date", type=_reference_date, default=None,
                        help="Reference date the message was sent (default: today)")
    parser.add_argument("--reply", type=Path, default=None,
                        help="Use a saved LLM reply instead of calling the service")
    parser.add_argument("--output-dir", type=Path, default=None,
                        help="Directory for the generated .ics file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the app."""
    args = build_parser().parse_args(argv)
    reference = args.date or date.today()

    Log.section("CalBot")
    Log.info(f"Log file: {Log.get_log_path()}")

    try:
        if args.reply is not None:
            calendar = extract_calendar(args.reply.read_text(encoding="utf-8"), reference)
        else:
            message = args.message if args.message is not None else sys.stdin.read()
            calendar = parse_message(get_llm_client(), message, reference)
    except CalBotError as e:
        Log.error(f"{type(e).__name__}: {e}")
        print(user_message(e), file=sys.stderr)
        return 1
    except OSError as e:
        Log.error(f"Failed to read reply file: {e}")
        print(f"Could not read {args.reply}: {e.strerror or e}", file=sys.stderr)
        return 1

    try:
        ics_path = write_ics(calendar, args.output_dir or get_output_dir())
    except OSError as e:
        Log.error(f"ICS generation failed: {e}")
        Log.kv({"stage": "ics", "result": "failed", "error": str(e)})
        print(f"Could not write the .ics file: {e.strerror or e}", file=sys.stderr)
        return 1

    print(calendar_message(calendar))
    print(f"Add to Google Calendar: {google_calendar_url(calendar.event)}")
    print(f"Add to iCal: {ics_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
