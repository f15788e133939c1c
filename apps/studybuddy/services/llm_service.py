from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from studybuddy.core.exceptions import (
    UpstreamMalformedError,
    UpstreamUnreachableError,
)
from studybuddy.core.settings import Settings, settings

logger = logging.getLogger(__name__)


def _payload_of(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


class LLMService:
    """
    Thin async client for the local Ollama runtime.
    - One non-streaming ``/chat`` call per invocation, no retries.
    - Sampling parameters come from settings; callers only pick format and output cap.
    """

    def __init__(
        self,
        *,
        client: Optional[httpx.AsyncClient] = None,
        cfg: Optional[Settings] = None,
    ) -> None:
        self.cfg = cfg or settings
        self._client = client

    @property
    def model(self) -> str:
        return self.cfg.ollama_chat_model

    def build_payload(
        self,
        messages: list[dict[str, str]],
        *,
        format: Optional[str] = None,
        num_predict: Optional[int] = None,
    ) -> dict[str, Any]:
        options: dict[str, Any] = {
            "temperature": self.cfg.llm_temperature,
            "top_p": self.cfg.llm_top_p,
        }
        if num_predict is not None:
            options["num_predict"] = num_predict
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "stream": False,
            "options": options,
        }
        if format:
            payload["format"] = format
        return payload

    async def _post_chat(self, payload: dict[str, Any]) -> httpx.Response:
        if self._client is not None:
            return await self._client.post("/chat", json=payload)
        async with httpx.AsyncClient(
            base_url=self.cfg.ollama_base_url, timeout=self.cfg.llm_timeout_seconds
        ) as client:
            return await client.post("/chat", json=payload)

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        format: Optional[str] = None,
        num_predict: Optional[int] = None,
    ) -> str:
        """Send the turns to the runtime and return the raw assistant content.

        Raises ``UpstreamUnreachableError`` on transport failures and error
        statuses, ``UpstreamMalformedError`` when a 2xx reply has no message.
        """
        payload = self.build_payload(messages, format=format, num_predict=num_predict)
        logger.info(
            "LLM chat request model=%s messages=%d format=%s",
            payload["model"],
            len(payload["messages"]),
            format or "-",
        )
        try:
            response = await self._post_chat(payload)
        except httpx.HTTPError as exc:
            logger.warning("LLM runtime unreachable: %r", exc)
            raise UpstreamUnreachableError(
                "LLM runtime is unreachable",
                details=str(exc) or exc.__class__.__name__,
            ) from exc

        if response.is_error:
            body = _payload_of(response)
            logger.warning("LLM runtime returned %s: %s", response.status_code, body)
            raise UpstreamUnreachableError(
                "LLM runtime request failed",
                details=f"Request failed with status code {response.status_code}",
                response=body,
            )

        body = _payload_of(response)
        message = body.get("message") if isinstance(body, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            logger.error("LLM runtime reply missing message envelope: %s", body)
            raise UpstreamMalformedError(
                "Invalid response format from LLM runtime",
                details="Invalid response format from LLM runtime",
                response=body,
            )
        logger.debug("LLM chat response content=%s", content)
        return content


__all__ = ["LLMService"]
