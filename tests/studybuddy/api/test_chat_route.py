from __future__ import annotations

import json

import httpx
from fastapi import FastAPI
from fastapi.testclient import TestClient
from studybuddy.api.chat import routes as chat_routes
from studybuddy.core.dependencies import get_chat_relay_service
from studybuddy.core.exceptions import register_exception_handlers
from studybuddy.services.chat_service import ChatRelayService
from studybuddy.services.llm_service import LLMService


def _client(handler) -> TestClient:  # noqa: ANN001
    llm = LLMService(
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="http://ollama.test/api"
        )
    )
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(chat_routes.router)
    app.dependency_overrides[get_chat_relay_service] = lambda: ChatRelayService(llm=llm)
    return TestClient(app)


def test_chat_forwards_turns_verbatim_with_output_cap():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "Recursion is..."}})

    turns = [
        {"role": "system", "content": "You are a tutor."},
        {"role": "user", "content": "What is recursion?"},
        {"role": "assistant", "content": "A function calling itself."},
        {"role": "user", "content": "Example?"},
    ]
    resp = _client(handler).post("/api/chat", json={"messages": turns, "course": "CS1"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Recursion is..."}
    payload = seen[0]
    assert payload["messages"] == turns
    assert payload["stream"] is False
    assert "format" not in payload
    assert payload["options"] == {"temperature": 0.7, "top_p": 0.9, "num_predict": 512}


def test_chat_rejects_unknown_roles_and_non_arrays():
    def handler(_request: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        raise AssertionError("runtime must not be called")

    client = _client(handler)
    bad_role = client.post("/api/chat", json={"messages": [{"role": "tool", "content": "x"}]})
    not_array = client.post("/api/chat", json={"messages": "hello"})

    assert bad_role.status_code == 422
    assert not_array.status_code == 422
    assert not_array.json()["code"] == "validation_error"


def test_chat_upstream_failure_is_a_500_with_details():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    resp = _client(handler).post(
        "/api/chat", json={"messages": [{"role": "user", "content": "hi"}]}
    )

    assert resp.status_code == 500
    data = resp.json()
    assert data["error"] == "Failed to process chat message"
    assert data["details"] == "Connection refused"
