"""
LLM Client interface for turning a chat message into a structured reply.
Supports StubLLMClient (offline) and GroqLLMClient (real provider).
"""

import os
from abc import ABC, abstractmethod
from typing import Optional

import requests

from src.errors import TransportError
from src.logging_helper import Log
from src.settings_manager import DEFAULT_SETTINGS, get_max_completion_tokens, load_settings

GROQ_ENDPOINT = "https://api.groq.com/openai/v1/chat/completions"

STUB_REPLY = (
    '{"title": "acm club meeting", "date": "_mon", "starttime": "1700", '
    '"endtime": "1800", "location": "OCNL 239", "description": null}'
)


class LLMClient(ABC):
    """Abstract base class for completion clients."""

    @abstractmethod
    def generate(self, prompt: str) -> Optional[str]:
        """
        Send the prompt and return the first candidate reply.

        Args:
            prompt: Full prompt text

        Returns:
            Reply text, or None when the service returned no candidate

        Raises:
            TransportError: the request could not be completed
        """


class StubLLMClient(LLMClient):
    """
    Stub LLM client for offline testing.
    Returns a canned reply (None simulates "no candidate returned").
    """

    def __init__(self, reply: Optional[str] = STUB_REPLY):
        self.reply = reply
        self.prompts = []

    def generate(self, prompt: str) -> Optional[str]:
        Log.section("Stub LLM Client")
        Log.info("Using stub LLM client (offline mode)")
        self.prompts.append(prompt)
        Log.kv({
            "stage": "llm",
            "provider": "stub",
            "result": "no_candidate" if self.reply is None else "success",
        })
        return self.reply


class GroqLLMClient(LLMClient):
    """
    Groq chat-completions client (OpenAI-compatible API).
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_SETTINGS["model"],
        max_completion_tokens: int = DEFAULT_SETTINGS["max_completion_tokens"],
        timeout: float = DEFAULT_SETTINGS["request_timeout"],
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Groq client.

        Args:
            api_key: Groq API key from environment
            model: Chat model name
            max_completion_tokens: Upper bound on reply length
            timeout: Request timeout in seconds
            session: Optional requests session (shared connection pool)
        """
        self.api_key = api_key
        self.api_url = GROQ_ENDPOINT
        self.model = model
        self.max_completion_tokens = max_completion_tokens
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> Optional[str]:
        Log.section("Groq LLM Client")
        Log.info(f"Using Groq API ({self.model})")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "model": self.model,
            "max_completion_tokens": self.max_completion_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": prompt
                }
            ]
        }

        Log.kv({"stage": "llm", "provider": "groq", "model": self.model, "status": "requesting"})

        try:
            response = self.session.post(
                self.api_url,
                headers=headers,
                json=payload,
                timeout=self.timeout
            )
            Log.info(f"API response status: {response.status_code}")
            if response.status_code != 200:
                Log.error(f"Groq API error: {response.text[:500]}")
            response.raise_for_status()
            result = response.json()
        except requests.exceptions.RequestException as e:
            Log.error(f"Groq API request failed: {e}")
            Log.kv({"stage": "llm", "provider": "groq", "result": "failed", "reason": "api_error", "error": str(e)})
            raise TransportError(f"Groq API request failed: {e}") from e
        except ValueError as e:
            Log.error(f"Groq API returned a non-JSON body: {e}")
            Log.kv({"stage": "llm", "provider": "groq", "result": "failed", "reason": "bad_body"})
            raise TransportError(f"Groq API returned a non-JSON body: {e}") from e

        choices = result.get('choices') if isinstance(result, dict) else None
        if not choices:
            Log.warn("Groq returned no choices")
            Log.kv({"stage": "llm", "provider": "groq", "result": "no_candidate"})
            return None

        try:
            content = choices[0]['message']['content']
        except (KeyError, IndexError, TypeError) as e:
            Log.error(f"Unexpected Groq response shape: {e}")
            raise TransportError(f"Unexpected Groq response shape: {e}") from e

        Log.kv({"stage": "llm", "provider": "groq", "result": "success", "reply_length": len(content or "")})
        return content or ""


def get_llm_client() -> LLMClient:
    """
    Factory function to get the appropriate LLM client.
    Uses GroqLLMClient when GROQ_API_KEY is set, StubLLMClient otherwise.

    Can be forced to use stub by setting USE_STUB environment variable.

    Returns:
        LLMClient instance
    """
    if os.getenv("USE_STUB"):
        Log.info("USE_STUB flag set - using stub client")
        return StubLLMClient()

    api_key = os.getenv("GROQ_API_KEY")
    if not api_key:
        Log.info("No API key - using stub client")
        return StubLLMClient()

    settings = load_settings()
    Log.info("API key found - using Groq client")
    return GroqLLMClient(
        api_key,
        model=settings.get("model", DEFAULT_SETTINGS["model"]),
        max_completion_tokens=get_max_completion_tokens(),
        timeout=settings.get("request_timeout", DEFAULT_SETTINGS["request_timeout"]),
    )
