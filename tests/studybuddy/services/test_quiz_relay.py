from __future__ import annotations

import asyncio

import pytest
from studybuddy.core.exceptions import InvalidRequestError
from studybuddy.schemas.quiz import QuizGenerateRequest
from studybuddy.services.quiz_relay import QuizRelayService, build_quiz_messages


class _FakeLLM:
    def __init__(self, reply: str = "[]") -> None:
        self.reply = reply
        self.calls: list[dict] = []

    async def chat(self, messages, *, format=None, num_predict=None):  # noqa: ANN001, A002
        self.calls.append({"messages": messages, "format": format, "num_predict": num_predict})
        return self.reply


def test_build_quiz_messages_mandates_output_contract():
    system, user = build_quiz_messages("Binary trees", "hard", 3)

    assert system["role"] == "system"
    assert "exactly 3 questions" in system["content"]
    assert "exactly 4 options" in system["content"]
    assert "0-based index" in system["content"]
    assert "Do not include any additional text" in system["content"]
    assert user["role"] == "user"
    assert "hard level quiz about Binary trees with 3 questions" in user["content"]


def test_build_quiz_messages_normalizes_inputs():
    system, user = build_quiz_messages("Heaps", "unknown", 99)

    assert "exactly 20 questions" in system["content"]
    assert "medium level quiz" in user["content"]


def test_topic_with_braces_is_not_treated_as_template():
    _, user = build_quiz_messages("Sets {a, b}", "easy", 1)

    assert "Sets {a, b}" in user["content"]


def test_relay_returns_raw_reply_and_forwards_json_hint():
    llm = _FakeLLM(reply="not json at all")
    svc = QuizRelayService(llm=llm, json_format=True)

    out = asyncio.run(svc.generate_quiz(QuizGenerateRequest(topic="Stacks")))

    assert out == "not json at all"
    assert llm.calls[0]["format"] == "json"
    assert llm.calls[0]["num_predict"] is None


def test_relay_can_skip_json_hint():
    llm = _FakeLLM()
    svc = QuizRelayService(llm=llm, json_format=False)

    asyncio.run(svc.generate_quiz(QuizGenerateRequest(topic="Stacks")))

    assert llm.calls[0]["format"] is None


def test_relay_rejects_blank_topic_before_calling_llm():
    llm = _FakeLLM()
    svc = QuizRelayService(llm=llm)

    with pytest.raises(InvalidRequestError):
        asyncio.run(svc.generate_quiz(QuizGenerateRequest(topic="  ")))
    assert llm.calls == []
