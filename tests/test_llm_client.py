from unittest.mock import MagicMock

import pytest
import requests

from src.errors import TransportError
from src.llm_client import (
    GROQ_ENDPOINT,
    GroqLLMClient,
    StubLLMClient,
    get_llm_client,
)


def _response(status=200, body=None):
    response = MagicMock()
    response.status_code = status
    response.json.return_value = body
    response.text = str(body)
    if status >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status} error")
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def test_groq_request_shape(session):
    session.post.return_value = _response(body={"choices": [{"message": {"content": "failed"}}]})
    client = GroqLLMClient("secret", max_completion_tokens=123, session=session)

    assert client.generate("the prompt") == "failed"

    args, kwargs = session.post.call_args
    assert args[0] == GROQ_ENDPOINT
    assert kwargs["headers"]["Authorization"] == "Bearer secret"
    assert kwargs["json"]["model"] == "llama-3.3-70b-versatile"
    assert kwargs["json"]["max_completion_tokens"] == 123
    assert kwargs["json"]["messages"] == [{"role": "user", "content": "the prompt"}]


def test_groq_no_choices_is_none(session):
    session.post.return_value = _response(body={"choices": []})
    assert GroqLLMClient("secret", session=session).generate("p") is None


def test_groq_null_content_is_empty_text(session):
    session.post.return_value = _response(body={"choices": [{"message": {"content": None}}]})
    assert GroqLLMClient("secret", session=session).generate("p") == ""


def test_groq_http_error(session):
    session.post.return_value = _response(status=503, body={"error": "overloaded"})
    with pytest.raises(TransportError):
        GroqLLMClient("secret", session=session).generate("p")


def test_groq_connection_error(session):
    session.post.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(TransportError):
        GroqLLMClient("secret", session=session).generate("p")


def test_groq_malformed_choice(session):
    session.post.return_value = _response(body={"choices": [{"text": "hi"}]})
    with pytest.raises(TransportError):
        GroqLLMClient("secret", session=session).generate("p")


def test_stub_records_prompts():
    client = StubLLMClient(reply="failed")
    assert client.generate("one") == "failed"
    assert client.prompts == ["one"]


def test_factory_uses_stub_without_key(monkeypatch):
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("USE_STUB", raising=False)
    assert isinstance(get_llm_client(), StubLLMClient)


def test_factory_use_stub_flag_wins(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "secret")
    monkeypatch.setenv("USE_STUB", "1")
    assert isinstance(get_llm_client(), StubLLMClient)


def test_factory_builds_groq_client_from_settings(monkeypatch, tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text('{"model": "llama-3.1-8b-instant", "max_completion_tokens": 200}')
    monkeypatch.setenv("CALBOT_SETTINGS_FILE", str(settings))
    monkeypatch.setenv("GROQ_API_KEY", "secret")
    monkeypatch.delenv("USE_STUB", raising=False)

    client = get_llm_client()
    assert isinstance(client, GroqLLMClient)
    assert client.model == "llama-3.1-8b-instant"
    assert client.max_completion_tokens == 200
    assert client.api_key == "secret"
