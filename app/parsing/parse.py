from __future__ import annotations

import logging
import time
from typing import Protocol, Sequence

from app.core.config import settings

from .models import Document, ExtractionResult, ExtractionSource
from .ocr import OcrExtractor
from .structured import StructuredExtractor

logger = logging.getLogger(__name__)


class ExtractionStrategy(Protocol):
    name: ExtractionSource

    def supports(self, document: Document) -> bool: ...

    def extract(self, document: Document) -> str: ...


def default_strategies() -> tuple[ExtractionStrategy, ...]:
    """Fast text-layer read first, OCR only as the fallback."""
    return (
        StructuredExtractor(),
        OcrExtractor(
            language=settings.ocr_language,
            dpi=settings.ocr_dpi,
            max_pages=settings.ocr_max_pages,
        ),
    )


def parse_document(
    document: Document,
    strategies: Sequence[ExtractionStrategy] | None = None,
) -> ExtractionResult:
    """Run strategies in order and stop at the first one that yields text.

    An empty result is returned (not raised) when every strategy comes back
    empty; strategies that cannot fall back any further raise on their own.
    """
    chain = default_strategies() if strategies is None else strategies
    warnings: list[str] = []

    for strategy in chain:
        if not strategy.supports(document):
            continue
        started = time.perf_counter()
        text = (strategy.extract(document) or "").strip()
        logger.info(
            "resume_extraction_strategy name=%s file=%s chars=%s latency_ms=%s",
            strategy.name,
            document.filename,
            len(text),
            int((time.perf_counter() - started) * 1000),
        )
        if text:
            return ExtractionResult(text=text, source=strategy.name, warnings=warnings)
        warnings.append(f"{strategy.name} extraction produced no text.")

    return ExtractionResult(text="", source=None, warnings=warnings)
