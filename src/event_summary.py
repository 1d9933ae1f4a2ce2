"""
Human-readable summary of a resolved calendar, used as the chat reply.
"""

from datetime import datetime

from src.event_models import Calendar, CalendarEvent


def _format_clock(dt: datetime) -> str:
    # 5:00 PM, no leading zero on the hour
    return dt.strftime('%I:%M %p').lstrip('0')


def event_message(event: CalendarEvent) -> str:
    lines = [
        f"**{event.title}**",
        f"{event.start.strftime('%A, %B')} {event.start.day}, {event.start.year}",
        f"{_format_clock(event.start)} - {_format_clock(event.end)}",
    ]
    if event.location:
        lines.append(f"Location: {event.location}")
    if event.description:
        lines.append(event.description)
    return "\n".join(lines)


def calendar_message(calendar: Calendar) -> str:
    """Render every event in the calendar, separated by blank lines."""
    return "\n\n".join(event_message(event) for event in calendar.events)
