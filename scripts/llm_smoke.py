"""Quick end-to-end check against a running Ollama runtime.

Builds the quiz prompt, calls the runtime in-process (no relay server needed),
validates the raw output and prints the resulting set or the sample fallback.
"""

from __future__ import annotations

import argparse
import asyncio
import json

from _bootstrap import bootstrap

bootstrap()

from studybuddy.core.logging import setup_logging  # noqa: E402
from studybuddy.schemas.quiz import Difficulty, QuizGenerateRequest  # noqa: E402
from studybuddy.services.llm_service import LLMService  # noqa: E402
from studybuddy.services.quiz_relay import QuizRelayService  # noqa: E402
from studybuddy.services.quiz_validator import resolve_quiz, validate_text  # noqa: E402


async def _run(topic: str, difficulty: str, count: int) -> None:
    relay = QuizRelayService(llm=LLMService())
    request = QuizGenerateRequest(topic=topic, difficulty=difficulty, numberOfQuestions=count)
    raw = await relay.generate_quiz(request)
    print("--- raw ---")
    print(raw)

    quiz = resolve_quiz(validate_text(raw), title=f"Quiz: {topic}", label=topic)
    print("--- validated ---" if not quiz.is_sample else "--- sample fallback ---")
    print(json.dumps([q.to_wire() for q in quiz.questions], indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Quick quiz generation smoke check")
    parser.add_argument("topic", nargs="?", default="Python loops")
    parser.add_argument("--difficulty", default="medium", choices=[d.value for d in Difficulty])
    parser.add_argument("--count", type=int, default=3)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(args.log_level)
    asyncio.run(_run(args.topic, args.difficulty, args.count))


if __name__ == "__main__":
    main()
