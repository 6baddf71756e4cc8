from functools import lru_cache

from app.ai.config import load_ai_config
from app.ai.types import LLMGateway
from app.services.errors import UnsupportedProvider

from app.ai.providers.openai_provider import OpenAIProvider
from app.ai.providers.gemini_provider import GeminiProvider


@lru_cache(maxsize=1)
def get_ai_client() -> LLMGateway:
    """Process-wide gateway, built on first use.

    Construction validates the credential, so a missing key surfaces here
    (at startup or on the first request) instead of halfway through a pipeline.
    Failed constructions are not cached.
    """
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            max_retries=cfg.max_retries,
            temperature=cfg.temperature,
            json_response_format=cfg.json_response_format,
        )

    if cfg.provider == "gemini":
        return GeminiProvider(
            model=cfg.model,
            timeout_s=cfg.timeout_s,
            temperature=cfg.temperature,
            json_response_format=cfg.json_response_format,
        )

    raise UnsupportedProvider(f"Unsupported AI_PROVIDER='{cfg.provider}'")


def reset_ai_client() -> None:
    get_ai_client.cache_clear()
