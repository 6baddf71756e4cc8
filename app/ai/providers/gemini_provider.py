from __future__ import annotations

import logging
import os
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
import httpx

from app.services.errors import MissingCredential, UpstreamError

logger = logging.getLogger(__name__)


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        timeout_s: float = 30.0,
        temperature: float = 0.2,
        json_response_format: bool = False,
    ):
        self._model = model
        self._temperature = temperature
        self._json_response_format = json_response_format
        # Prefer GEMINI_API_KEY, fall back to GOOGLE_API_KEY.
        key = (api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or "").strip()
        if not key:
            raise MissingCredential("GEMINI_API_KEY (or GOOGLE_API_KEY) is missing")

        self._client = genai.Client(
            api_key=key,
            http_options=genai_types.HttpOptions(timeout=int(timeout_s * 1000)),
        )

    @property
    def model(self) -> str:
        return self._model

    async def send(self, prompt: str) -> str:
        config = genai_types.GenerateContentConfig(
            temperature=self._temperature,
            response_mime_type="application/json" if self._json_response_format else None,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=config,
            )
        except (genai_errors.APIError, httpx.HTTPError) as exc:
            logger.warning("gemini_request_failed model=%s prompt_len=%s: %s", self._model, len(prompt), exc)
            raise UpstreamError(f"Gemini request failed: {exc}") from exc

        return response.text or ""
