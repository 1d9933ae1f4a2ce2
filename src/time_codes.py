"""
Time-of-day decoder for compact 24-hour HHMM codes ("0930", "1700").
Times are floating local wall-clock times; no timezone is attached.
"""

import re
from datetime import time

from src.errors import ParseFailure

_TIME_CODE_RE = re.compile(r"[0-9]{4}")


def decode_time(code: str) -> time:
    """
    Decode an HHMM code into a time.

    Raises:
        ParseFailure: wrong length, non-digits, hour > 23 or minute > 59
    """
    if not isinstance(code, str) or not _TIME_CODE_RE.fullmatch(code):
        raise ParseFailure(f"Time code must be four digits HHMM: {code!r}")

    hour, minute = int(code[:2]), int(code[2:])
    if hour > 23 or minute > 59:
        raise ParseFailure(f"Time code out of range: {code!r}")
    return time(hour, minute)
