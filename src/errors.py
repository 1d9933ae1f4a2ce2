"""
Failure kinds raised while turning a service reply into a calendar.
"""


class CalBotError(Exception):
    """Base class for all CalBot failures."""


class ParseFailure(CalBotError):
    """The reply, a date code, a time code or a produced date is malformed."""


class NoResponse(CalBotError):
    """The text-generation service returned no candidate reply at all."""


class TransportError(CalBotError):
    """The request to the text-generation service failed in transit."""


PARSE_FAILURE_MESSAGE = "Sorry! I couldn't parse that message."
NO_RESPONSE_MESSAGE = "Sorry! The LLM didn't respond. Try again later."
TRANSPORT_ERROR_MESSAGE = "Sorry! I couldn't reach the LLM. Try again later."


def user_message(error: CalBotError) -> str:
    """Map a failure kind to the reply shown to the chat user."""
    if isinstance(error, NoResponse):
        return NO_RESPONSE_MESSAGE
    if isinstance(error, TransportError):
        return TRANSPORT_ERROR_MESSAGE
    return PARSE_FAILURE_MESSAGE
