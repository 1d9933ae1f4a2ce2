"""
Prompt template sent to the completion service.
"""

from datetime import date

PROMPT_INSTRUCTIONS = """\
You read a chat message and extract exactly one calendar event from it.
Reply with a single JSON object and nothing else, using these fields:
- title: short event title
- date: the event date in ONE of these codes:
    x followed by MMDD for a specific date (x1031 is October 31)
    + followed by a number of days after the current date (+0 is today, +04 is in four days)
    _ followed by a weekday mon, tue, wed, thu, fri, sat or sun for the next such weekday (_mon)
- starttime: start time as four digits HHMM in 24-hour time (1700)
- endtime: end time as four digits HHMM in 24-hour time; one hour after starttime if unknown
- location: where the event happens, or an empty string
- description: one short sentence of extra detail, or null
If the message does not describe an event, reply with the single word failed."""

RECORD_FORMAT = """\
{"title": "acm club meeting", "date": "_mon", "starttime": "1700", "endtime": "1800", "location": "OCNL 239", "description": null}"""


def build_prompt(message: str, reference: date) -> str:
    """Join the instructions, record format, reference date and message with CRLF."""
    current_date = f"If dates are relative, assume the current date is {reference.strftime('%Y-%m-%d')}"
    return "\r\n".join([PROMPT_INSTRUCTIONS, RECORD_FORMAT, current_date, message])
