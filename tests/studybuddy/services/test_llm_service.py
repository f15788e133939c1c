from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from studybuddy.core.exceptions import UpstreamMalformedError, UpstreamUnreachableError
from studybuddy.core.settings import Settings
from studybuddy.services.llm_service import LLMService


def _svc(handler, **cfg) -> LLMService:  # noqa: ANN001
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://ollama.test/api"
    )
    return LLMService(client=client, cfg=Settings(_env_file=None, **cfg))


def test_chat_posts_to_chat_endpoint_and_returns_content():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "[1, 2]"}})

    svc = _svc(handler, STUDYBUDDY_OLLAMA_CHAT_MODEL="llama3.2")
    out = asyncio.run(svc.chat([{"role": "user", "content": "hi"}], format="json", num_predict=64))

    assert out == "[1, 2]"
    assert seen[0].url.path == "/api/chat"
    body = json.loads(seen[0].content)
    assert body == {
        "model": "llama3.2",
        "messages": [{"role": "user", "content": "hi"}],
        "stream": False,
        "format": "json",
        "options": {"temperature": 0.7, "top_p": 0.9, "num_predict": 64},
    }


def test_empty_content_is_returned_as_is():
    svc = _svc(lambda _r: httpx.Response(200, json={"message": {"content": ""}}))

    assert asyncio.run(svc.chat([{"role": "user", "content": "hi"}])) == ""


def test_transport_failure_is_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    with pytest.raises(UpstreamUnreachableError) as info:
        asyncio.run(_svc(handler).chat([{"role": "user", "content": "hi"}]))

    assert info.value.details == "Connection refused"
    assert info.value.status_code == 500


def test_timeout_without_message_still_has_details():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("", request=request)

    with pytest.raises(UpstreamUnreachableError) as info:
        asyncio.run(_svc(handler).chat([{"role": "user", "content": "hi"}]))

    assert info.value.details == "ReadTimeout"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"done": True}),
        httpx.Response(200, json={"message": "not an object"}),
        httpx.Response(200, json={"message": {"content": None}}),
        httpx.Response(200, text="<html>proxy</html>"),
        httpx.Response(200, json=["unexpected"]),
    ],
)
def test_missing_envelope_is_malformed(response):
    with pytest.raises(UpstreamMalformedError) as info:
        asyncio.run(_svc(lambda _r: response).chat([{"role": "user", "content": "hi"}]))

    assert info.value.details


def test_error_status_keeps_upstream_payload():
    svc = _svc(lambda _r: httpx.Response(500, json={"error": "out of memory"}))

    with pytest.raises(UpstreamUnreachableError) as info:
        asyncio.run(svc.chat([{"role": "user", "content": "hi"}]))

    assert info.value.response == {"error": "out of memory"}
    assert "500" in info.value.details
