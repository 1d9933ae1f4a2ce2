"""
Calendar Connector for handing a resolved event to calendar apps.
Apple Calendar and other iCalendar clients take the .ics file; Google
Calendar takes a pre-filled event-edit URL.
"""

from urllib.parse import quote

from src.event_models import CalendarEvent
from src.logging_helper import Log

GOOGLE_CALENDAR_EDIT_URL = "https://calendar.google.com/calendar/r/eventedit"


def _format_google_calendar_datetime(dt) -> str:
    """
    Format a floating datetime for Google Calendar URLs.
    Without a trailing Z Google reads the time in the viewer's own zone.

    Returns:
        Formatted datetime string (YYYYMMDDTHHMMSS)
    """
    return dt.strftime('%Y%m%dT%H%M%S')


def google_calendar_url(event: CalendarEvent) -> str:
    """
    Generate a Google Calendar URL with pre-filled event details.

    Args:
        event: Resolved CalendarEvent

    Returns:
        Google Calendar URL string
    """
    start_str = _format_google_calendar_datetime(event.start)
    end_str = _format_google_calendar_datetime(event.end)

    # Format: .../eventedit?action=TEMPLATE&dates=START%2FEND&text=TITLE&details=DESC&location=LOC
    url = (
        f"{GOOGLE_CALENDAR_EDIT_URL}?action=TEMPLATE"
        f"&dates={start_str}%2F{end_str}&text={quote(event.title, safe='')}"
    )

    if event.description:
        url += f"&details={quote(event.description, safe='')}"

    if event.location:
        url += f"&location={quote(event.location, safe='')}"

    Log.kv({"stage": "calendar", "action": "google_calendar_url", "url": url[:200]})
    return url
