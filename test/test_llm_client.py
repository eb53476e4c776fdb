from types import SimpleNamespace

import anthropic
import httpx
import pytest

from meal_planner.core.errors import UpstreamError
from meal_planner.infrastructure.llm_client import AnthropicTextGenerator

_REQ = httpx.Request("POST", "http://llm.local/v1/messages")


def _message(*blocks):
    return SimpleNamespace(
        content=list(blocks),
        model="test-model",
        stop_reason="end_turn",
        usage=SimpleNamespace(input_tokens=12, output_tokens=34),
    )


def _text(text):
    return SimpleNamespace(type="text", text=text)


class _Messages:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.reply


class _Client:
    def __init__(self, reply=None, error=None):
        self.messages = _Messages(reply, error)


def _gen(client, api_key="sk-test"):
    return AnthropicTextGenerator(api_key=api_key, model="test-model", timeout_s=5, client=client)


def test_generate_returns_first_text_block():
    client = _Client(_message(SimpleNamespace(type="thinking", thinking="..."), _text('{"recipes": []}')))
    assert _gen(client).generate("Bonjour", max_tokens=100) == '{"recipes": []}'

    assert client.messages.calls == [
        {"model": "test-model", "max_tokens": 100, "messages": [{"role": "user", "content": "Bonjour"}]},
    ]


@pytest.mark.parametrize(
    "client",
    [
        _Client(error=anthropic.APITimeoutError(request=_REQ)),
        _Client(error=anthropic.APIConnectionError(request=_REQ)),
        _Client(error=anthropic.APIStatusError(
            "overloaded", response=httpx.Response(529, request=_REQ), body=None)),
        _Client(_message()),
        _Client(_message(_text(""))),
    ],
)
def test_failures_raise_upstream_error_once(client):
    with pytest.raises(UpstreamError):
        _gen(client).generate("Bonjour", max_tokens=100)
    assert len(client.messages.calls) == 1


def test_missing_api_key():
    client = _Client(_message(_text("{}")))
    with pytest.raises(UpstreamError):
        _gen(client, api_key="").generate("Bonjour", max_tokens=100)
    assert client.messages.calls == []


def test_default_client_never_retries():
    gen = AnthropicTextGenerator(api_key="sk-test", timeout_s=5)
    assert gen.client.max_retries == 0
