from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from app.core.config import settings
from app.services.errors import ExtractionEmpty, TextTooShort

GateReason = Literal["empty", "too_short"]


@dataclass(frozen=True)
class GateDecision:
    passed: bool
    length: int
    minimum: int
    reason: GateReason | None = None


def check_resume_text(text: str, *, minimum: int | None = None) -> GateDecision:
    threshold = settings.min_resume_chars if minimum is None else minimum
    cleaned = (text or "").strip()
    if not cleaned:
        return GateDecision(passed=False, length=0, minimum=threshold, reason="empty")
    if len(cleaned) < threshold:
        return GateDecision(passed=False, length=len(cleaned), minimum=threshold, reason="too_short")
    return GateDecision(passed=True, length=len(cleaned), minimum=threshold)


def enforce_resume_text(text: str, *, minimum: int | None = None) -> str:
    decision = check_resume_text(text, minimum=minimum)
    if decision.reason == "empty":
        raise ExtractionEmpty(
            "No text could be extracted from the resume. It may be an image-based PDF with an unreadable scan, "
            "a corrupted file, or an empty document. Please upload a text-based PDF or a clearer scan."
        )
    if decision.reason == "too_short":
        raise TextTooShort(
            f"Insufficient text extracted from the resume ({decision.length} characters, at least "
            f"{decision.minimum} required). Please upload a complete resume; scanned or image-based PDFs "
            "often lose most of their text.",
            length=decision.length,
            minimum=decision.minimum,
        )
    return text.strip()
