from __future__ import annotations

import logging
import os
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from app.ai.types import ChatMessage
from app.services.errors import MissingCredential, UpstreamError

logger = logging.getLogger(__name__)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


class OpenAIProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_s: float = 30.0,
        max_retries: int = 2,
        temperature: float = 0.2,
        json_response_format: bool = False,
    ):
        self._model = model
        self._temperature = temperature
        self._json_response_format = json_response_format
        key = (api_key or os.getenv("OPENAI_API_KEY") or "").strip()
        if not key or _looks_like_placeholder(key):
            raise MissingCredential("OPENAI_API_KEY is missing")

        self._client = AsyncOpenAI(
            api_key=key,
            base_url=(base_url or os.getenv("OPENAI_BASE_URL") or None),
            timeout=timeout_s,
            max_retries=max_retries,
        )

    @property
    def model(self) -> str:
        return self._model

    async def send(self, prompt: str) -> str:
        messages = [ChatMessage(role="user", content=prompt)]
        create_kwargs = {
            "model": self._model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": self._temperature,
        }
        if self._json_response_format:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except OpenAIError as exc:
            logger.warning("openai_request_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise UpstreamError(f"OpenAI request failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        return content or ""
