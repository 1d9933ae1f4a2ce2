"""
Event normalizer for converting EventRecord to CalendarEvent.
Normalizes the title, decodes both time codes and combines them with the
resolved date into floating local datetime objects.
"""

from datetime import date, datetime

from src.date_codes import resolve
from src.errors import ParseFailure
from src.event_models import Calendar, CalendarEvent, EventRecord
from src.logging_helper import Log
from src.time_codes import decode_time


def normalize_title(title: str) -> str:
    """
    Capitalize the first letter of every word and collapse whitespace.
    The rest of each word is left as-is, so "iPhone FAQ" stays "IPhone FAQ".
    """
    words = title.split()
    if not words:
        raise ValueError("Title must not be empty")
    return " ".join(word[0].upper() + word[1:] for word in words)


def assemble_event(record: EventRecord, resolved_date: date) -> CalendarEvent:
    """
    Build a CalendarEvent from a decoded record and its resolved date.

    Args:
        record: EventRecord from the reply decoder
        resolved_date: Date the record's date code resolved to

    Returns:
        CalendarEvent with start and end on resolved_date

    Raises:
        ParseFailure: either time code is invalid or the title is empty
    """
    Log.section("Event Normalizer")
    Log.info(f"Normalizing event: {record.title}")

    try:
        title = normalize_title(record.title)
    except ValueError as e:
        Log.kv({"stage": "assemble", "result": "failed", "reason": "empty_title"})
        raise ParseFailure(str(e)) from e

    try:
        start_time = decode_time(record.start)
        end_time = decode_time(record.end)
    except ParseFailure as e:
        Log.warn(f"Failed to decode time: {e}")
        Log.kv({"stage": "assemble", "result": "failed", "reason": "time_code"})
        raise

    event = CalendarEvent(
        title=title,
        start=datetime.combine(resolved_date, start_time),
        end=datetime.combine(resolved_date, end_time),
        location=record.location,
        description=record.description or "",
    )

    Log.info(f"Normalized event: {event.title} at {event.start}")
    Log.kv({
        "stage": "assemble",
        "result": "success",
        "start": event.start.isoformat(),
        "end": event.end.isoformat(),
        "duration_min": event.duration_minutes(),
    })
    return event


def build_calendar(record: EventRecord, reference: date) -> Calendar:
    """Resolve the record's date against reference and wrap the event in a Calendar."""
    resolved_date = resolve(record.date, reference)
    return Calendar(events=[assemble_event(record, resolved_date)])
