import os
from dataclasses import dataclass

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-2.5-flash",
}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    timeout_s: float = 30.0
    max_retries: int = 2
    temperature: float = 0.2
    json_response_format: bool = False


def load_ai_config() -> AIConfig:
    provider = (os.getenv("AI_PROVIDER") or "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or DEFAULT_MODELS.get(provider, "")).strip()
    return AIConfig(
        provider=provider,
        model=model,
        timeout_s=_env_float("AI_TIMEOUT_S", 30.0),
        max_retries=int(_env_float("AI_MAX_RETRIES", 2)),
        temperature=_env_float("AI_TEMPERATURE", 0.2),
        json_response_format=(os.getenv("AI_RESPONSE_FORMAT") or "").strip().lower() == "json",
    )
