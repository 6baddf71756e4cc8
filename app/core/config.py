from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


DEFAULT_TARGET_ROLE = "Software Developer(Fresher)"


@dataclass(frozen=True)
class Settings:
    port: int
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    default_target_role: str
    min_resume_chars: int
    max_upload_bytes: int
    ocr_language: str
    ocr_dpi: int
    ocr_max_pages: int
    analysis_strict_schema: bool


settings = Settings(
    port=_get_env_int("PORT", 1000),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    default_target_role=(_get_env("DEFAULT_TARGET_ROLE", DEFAULT_TARGET_ROLE) or DEFAULT_TARGET_ROLE).strip(),
    min_resume_chars=_get_env_int("MIN_RESUME_CHARS", 50),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    ocr_language=_get_env("OCR_LANGUAGE", "eng") or "eng",
    ocr_dpi=_get_env_int("OCR_DPI", 200),
    ocr_max_pages=_get_env_int("OCR_MAX_PAGES", 5),
    analysis_strict_schema=_get_env_bool("ANALYSIS_STRICT_SCHEMA", True),
)

if settings.min_resume_chars < 1:
    raise RuntimeError("MIN_RESUME_CHARS must be a positive integer.")

if settings.ocr_dpi < 72:
    raise RuntimeError("OCR_DPI must be at least 72.")
