"""
Structured-record decoder for the LLM reply.

The model is instructed to answer with a single JSON object:

    {"title": "...", "date": "_mon", "starttime": "1700",
     "endtime": "1800", "location": "...", "description": null}

or with the word "failed" when it cannot find an event.
"""

import json
from typing import Any, Optional

from src.date_codes import parse_date_code
from src.errors import NoResponse, ParseFailure
from src.event_models import EventRecord
from src.logging_helper import Log

REFUSAL_TOKEN = "failed"


def _strip_code_fence(content: str) -> str:
    """Remove a surrounding Markdown code block if the model added one."""
    content = content.strip()
    if content.startswith('```'):
        lines = content.split('\n')
        content = '\n'.join(lines[1:-1]) if len(lines) > 2 else content
    return content


def _find_embedded_object(content: str) -> dict:
    decoder = json.JSONDecoder()
    start = content.find('{')
    while start != -1:
        try:
            data, _ = decoder.raw_decode(content, start)
        except json.JSONDecodeError:
            start = content.find('{', start + 1)
            continue
        if isinstance(data, dict):
            return data
        start = content.find('{', start + 1)
    raise ParseFailure(f"Could not parse JSON from reply: {content[:100]}")


def _load_object(content: str) -> dict:
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # If not JSON, decode the first object embedded in the text
        data = _find_embedded_object(content)

    if not isinstance(data, dict):
        raise ParseFailure(f"Reply is not a JSON object: {type(data).__name__}")
    return data


def _text_field(data: dict, name: str, strip: bool = True) -> str:
    value: Any = data.get(name)
    if isinstance(value, int) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ParseFailure(f"Missing or empty field '{name}'")
    return value.strip() if strip else value


def _optional_text_field(data: dict, name: str) -> Optional[str]:
    value = data.get(name)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseFailure(f"Field '{name}' must be text")
    return value


def decode_reply(reply: Optional[str]) -> EventRecord:
    """
    Decode the raw reply text into an EventRecord.

    Args:
        reply: Reply text, or None when the service returned no candidate

    Returns:
        EventRecord with a decoded DateCode and raw time codes

    Raises:
        NoResponse: reply is None
        ParseFailure: empty reply, refusal token, or malformed record
    """
    Log.section("Reply Decoder")

    if reply is None:
        Log.warn("No candidate reply from LLM")
        Log.kv({"stage": "decode", "result": "failed", "reason": "no_response"})
        raise NoResponse("The LLM returned no candidate reply")

    if not reply.strip():
        Log.warn("Empty reply from LLM")
        Log.kv({"stage": "decode", "result": "failed", "reason": "empty_reply"})
        raise ParseFailure("Empty reply")

    if REFUSAL_TOKEN in reply.lower():
        Log.info("LLM could not find an event in the message")
        Log.kv({"stage": "decode", "result": "failed", "reason": "refused"})
        raise ParseFailure("The LLM could not determine an event")

    try:
        data = _load_object(_strip_code_fence(reply))
        record = EventRecord(
            title=_text_field(data, "title"),
            date=parse_date_code(_text_field(data, "date")),
            start=_text_field(data, "starttime", strip=False),
            end=_text_field(data, "endtime", strip=False),
            location=_optional_text_field(data, "location") or "",
            description=(_optional_text_field(data, "description") or "").strip() or None,
        )
    except ParseFailure as e:
        Log.warn(f"Malformed reply: {e}")
        Log.kv({"stage": "decode", "result": "failed", "reason": "malformed"})
        raise

    Log.info(
        f"Record decoded: title={record.title}, date={record.date}, "
        f"start={record.start}, end={record.end}, location={record.location}"
    )
    Log.kv({"stage": "decode", "result": "success", "event_title": record.title})
    return record
