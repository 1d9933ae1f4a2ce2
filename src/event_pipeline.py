"""
Message → calendar pipeline.

extract_calendar() is the pure core: reply text in, one-event Calendar out.
parse_message() adds the prompt and the completion client around it.
"""

from datetime import date
from typing import Optional

from src.errors import ParseFailure
from src.event_models import Calendar
from src.event_normalizer import build_calendar
from src.llm_client import LLMClient
from src.logging_helper import Log
from src.prompts import build_prompt
from src.reply_decoder import decode_reply


def extract_calendar(reply: Optional[str], reference: date) -> Calendar:
    """
    Turn the service reply into a Calendar holding exactly one event.

    Args:
        reply: Reply text, or None when no candidate was returned
        reference: Date the originating message was sent or last edited

    Raises:
        NoResponse: reply is None
        ParseFailure: anything about the reply is malformed
    """
    record = decode_reply(reply)
    try:
        calendar = build_calendar(record, reference)
    except ParseFailure as e:
        Log.kv({"stage": "pipeline", "result": "failed", "error": str(e)})
        raise
    Log.kv({"stage": "pipeline", "result": "success", "event_title": calendar.event.title})
    return calendar


def parse_message(client: LLMClient, message: str, reference: date) -> Calendar:
    """
    Ask the completion service about message and resolve its reply.

    TransportError from the client propagates unchanged.
    """
    Log.section("CalBot Pipeline")
    Log.info(f"Parsing message with reference date {reference.isoformat()}")
    reply = client.generate(build_prompt(message, reference))
    return extract_calendar(reply, reference)
