"""
ICS Generator for creating iCalendar (.ics) files.
Generates RFC5545-compliant calendars with floating local times and reads
them back into Calendar objects.
"""

import re
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

import icalendar
from dateutil import tz as dateutil_tz

from src.errors import ParseFailure
from src.event_models import Calendar, CalendarEvent
from src.logging_helper import Log

PRODID = "-//CalBot//CalBot//EN"
MAX_LINE_OCTETS = 75


def _escape_ical_text(text: Optional[str]) -> str:
    """
    Escape text for iCalendar format (RFC5545).
    Escapes commas, semicolons, backslashes, and newlines.

    Args:
        text: Text to escape

    Returns:
        Escaped text safe for iCalendar
    """
    if text is None:
        return ""

    # Replace backslashes first (before other replacements)
    text = text.replace('\\', '\\\\')
    text = text.replace(';', '\\;')
    text = text.replace(',', '\\,')
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = text.replace('\n', '\\n')
    return text


def _fold_line(line: str) -> str:
    """
    Fold a content line so no physical line exceeds 75 octets.
    Continuation lines start with a single space.
    """
    lines = []
    current_line = ""

    for char in line:
        test_line = current_line + char
        if len(test_line.encode('utf-8')) <= MAX_LINE_OCTETS:
            current_line = test_line
        else:
            lines.append(current_line)
            current_line = " " + char

    lines.append(current_line)
    return '\r\n'.join(lines)


def _format_floating_datetime(dt: datetime) -> str:
    """
    Format a naive datetime as an iCalendar floating time (no trailing Z).

    Args:
        dt: Naive local datetime

    Returns:
        Formatted datetime string (YYYYMMDDTHHMMSS)
    """
    return dt.strftime('%Y%m%dT%H%M%S')


def _format_utc_datetime(dt: datetime) -> str:
    """Format an aware datetime in UTC (YYYYMMDDTHHMMSSZ)."""
    return dt.astimezone(dateutil_tz.tzutc()).strftime('%Y%m%dT%H%M%SZ')


def _event_lines(event: CalendarEvent, stamp: datetime) -> List[str]:
    lines = [
        "BEGIN:VEVENT",
        f"UID:{event.uid}",
        f"DTSTAMP:{_format_utc_datetime(stamp)}",
        f"DTSTART:{_format_floating_datetime(event.start)}",
        f"DTEND:{_format_floating_datetime(event.end)}",
        f"SUMMARY:{_escape_ical_text(event.title)}",
    ]
    if event.location:
        lines.append(f"LOCATION:{_escape_ical_text(event.location)}")
    if event.description:
        lines.append(f"DESCRIPTION:{_escape_ical_text(event.description)}")
    lines.append("END:VEVENT")
    return lines


def calendar_to_ics(calendar: Calendar, stamp: Optional[datetime] = None) -> str:
    """
    Serialize a Calendar to iCalendar text.

    Args:
        calendar: Calendar to serialize
        stamp: DTSTAMP value (defaults to now, UTC)

    Returns:
        ICS content with CRLF line endings
    """
    if stamp is None:
        stamp = datetime.now(dateutil_tz.tzutc())

    ics_lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
    ]
    for event in calendar.events:
        ics_lines.extend(_event_lines(event, stamp))
    ics_lines.append("END:VCALENDAR")

    return '\r\n'.join(_fold_line(line) for line in ics_lines) + '\r\n'


def write_ics(calendar: Calendar, directory: Path) -> Path:
    """
    Write the calendar to a uniquely named .ics file.

    Args:
        calendar: Calendar to write
        directory: Target directory (created if missing)

    Returns:
        Path to generated ICS file
    """
    Log.section("ICS Generator")
    event = calendar.event
    Log.info(f"Generating ICS file for: {event.title}")

    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    safe_title = re.sub(r'[^\w\s-]', '', event.title)[:50]
    safe_title = re.sub(r'[-\s]+', '_', safe_title)
    ics_path = directory / f"CalBot_{safe_title}_{timestamp}.ics"

    ics_path.write_text(calendar_to_ics(calendar), encoding='utf-8', newline='')

    Log.info(f"ICS file generated: {ics_path}")
    Log.kv({
        "stage": "ics",
        "result": "success",
        "ics_path": str(ics_path),
        "event_title": event.title
    })
    return ics_path


def _decoded_datetime(component, name: str) -> datetime:
    value = component.decoded(name)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    raise ParseFailure(f"{name} is not a date or datetime: {value!r}")


def calendar_from_ics(ics_content: str) -> Calendar:
    """
    Read iCalendar text back into a Calendar.

    Raises:
        ParseFailure: the text is not a calendar or an event lacks DTSTART/DTEND
    """
    if "BEGIN:VCALENDAR" not in ics_content or "END:VCALENDAR" not in ics_content:
        raise ParseFailure("Missing VCALENDAR markers")

    try:
        parsed = icalendar.Calendar.from_ical(ics_content)
    except (ValueError, IndexError, KeyError) as e:
        raise ParseFailure(f"Invalid iCalendar content: {e}") from e

    events = []
    for component in parsed.walk("VEVENT"):
        try:
            start = _decoded_datetime(component, "DTSTART")
            end = _decoded_datetime(component, "DTEND")
        except KeyError as e:
            raise ParseFailure(f"Event is missing {e}") from e

        event = CalendarEvent(
            title=str(component.get("SUMMARY", "")),
            start=start,
            end=end,
            location=str(component.get("LOCATION", "")),
            description=str(component.get("DESCRIPTION", "")),
        )
        if component.get("UID"):
            event.uid = str(component.get("UID"))
        events.append(event)

    return Calendar(events=events)
