"""
Relative-date resolver.

The LLM is told to emit one of three compact date codes:

    x1031   absolute month/day (MMDD), year taken from the reference date
    +04     whole days after the reference date
    _mon    next occurrence of a weekday, strictly after the reference date

parse_date_code() turns the text into a DateCode, resolve() anchors it to
the reference date. Both raise ParseFailure on bad input.

Known limitation: an absolute code always uses the reference year, so
"x0105" sent on December 30th resolves to January 5th of the same year
(already past). This mirrors what the bot has always done.
"""

import re
from datetime import date, timedelta

from src.errors import ParseFailure
from src.event_models import (
    WEEKDAY_TOKENS,
    AbsoluteMonthDay,
    DateCode,
    NextWeekday,
    OffsetDays,
)
from src.logging_helper import Log

ABSOLUTE_MARKER = "x"
OFFSET_MARKER = "+"
WEEKDAY_MARKER = "_"

_MONTH_DAY_RE = re.compile(r"[0-9]{4}")
# timedelta tops out at 999999999 days
_OFFSET_RE = re.compile(r"[0-9]{1,9}")


def parse_date_code(text: str) -> DateCode:
    """
    Decode a compact date code.

    Args:
        text: Code as emitted by the LLM, e.g. "x1031", "+04" or "_mon"

    Returns:
        AbsoluteMonthDay, OffsetDays or NextWeekday

    Raises:
        ParseFailure: unknown marker or malformed payload
    """
    if not isinstance(text, str):
        raise ParseFailure(f"Date code must be text, got {type(text).__name__}")

    code = text.strip()
    if not code:
        raise ParseFailure("Empty date code")

    marker, payload = code[0], code[1:]

    if marker == ABSOLUTE_MARKER:
        if not _MONTH_DAY_RE.fullmatch(payload):
            raise ParseFailure(f"Malformed month/day code: {code!r}")
        return AbsoluteMonthDay(month=int(payload[:2]), day=int(payload[2:]))

    if marker == OFFSET_MARKER:
        if not _OFFSET_RE.fullmatch(payload):
            raise ParseFailure(f"Malformed day offset: {code!r}")
        return OffsetDays(days=int(payload))

    if marker == WEEKDAY_MARKER:
        token = payload.lower()
        if token not in WEEKDAY_TOKENS:
            raise ParseFailure(f"Unknown weekday token: {code!r}")
        return NextWeekday(weekday=WEEKDAY_TOKENS.index(token))

    raise ParseFailure(f"Unknown date code marker: {code!r}")


def weekday_delta(reference_weekday: int, target_weekday: int) -> int:
    """
    Days from the reference weekday to the next target weekday.
    A target equal to the reference weekday is a full week away, never 0.
    """
    if reference_weekday < target_weekday:
        return target_weekday - reference_weekday
    return 7 - reference_weekday + target_weekday


def resolve(code: DateCode, reference: date) -> date:
    """
    Anchor a DateCode to the reference date.

    Args:
        code: Decoded date code
        reference: Date the originating message was sent or last edited

    Returns:
        Absolute calendar date

    Raises:
        ParseFailure: the code does not name a real date
    """
    if isinstance(code, AbsoluteMonthDay):
        try:
            resolved = date(reference.year, code.month, code.day)
        except ValueError as e:
            raise ParseFailure(
                f"No such date: {reference.year}-{code.month:02d}-{code.day:02d}"
            ) from e

    elif isinstance(code, OffsetDays):
        try:
            resolved = reference + timedelta(days=code.days)
        except OverflowError as e:
            raise ParseFailure(f"Day offset {code.days} overflows the date range") from e

    elif isinstance(code, NextWeekday):
        delta = weekday_delta(reference.weekday(), code.weekday)
        try:
            resolved = reference + timedelta(days=delta)
        except OverflowError as e:
            raise ParseFailure(f"Next {code.token} overflows the date range") from e

    else:
        raise ParseFailure(f"Unsupported date code: {code!r}")

    Log.kv({
        "stage": "resolve",
        "code": code,
        "reference": reference.isoformat(),
        "resolved": resolved.isoformat(),
    })
    return resolved
