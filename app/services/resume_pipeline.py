"""Request-scoped resume analysis pipeline.

    StructuredExtraction -> [empty?] -> OcrExtraction -> QualityGate
        -> PromptBuild -> LlmCall -> JsonCoercion -> SchemaDecode -> Done

Expected failures never escape ``run``; they come back as an
``AnalysisFailure`` whose ``kind`` the caller branches on. Client-fault kinds
end in the ``rejected_input`` state, provider and server faults in
``upstream_failure``. Nothing is retried.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
import time
from typing import Any, Literal, Sequence, Union

from app.ai.types import LLMGateway
from app.core.config import settings
from app.parsing.models import Document, ExtractionResult
from app.parsing.parse import ExtractionStrategy, default_strategies, parse_document
from app.schemas.resume import AnalysisRequest
from app.services.errors import FailureKind, FailureState, ResumeAnalysisError
from app.services.json_coercion import coerce_json, decode_analysis
from app.services.quality_gate import enforce_resume_text
from app.services.resume_prompt import build_analysis_prompt

logger = logging.getLogger(__name__)

# Caller-facing text for server and provider faults.
UPSTREAM_MESSAGES: dict[FailureKind, str] = {
    "upstream_error": "Resume analysis failed: the AI service is currently unavailable. Please try again later.",
    "malformed_analysis": "Resume analysis failed: the AI service returned an unreadable response. Please try again.",
    "ocr_unavailable": "Resume analysis failed: text recognition is not available on the server.",
    "missing_credential": "Resume analysis failed: the AI service is not configured on the server.",
    "unsupported_provider": "Resume analysis failed: the AI service is not configured on the server.",
}


@dataclass(frozen=True)
class AnalysisSuccess:
    target_role: str
    file_name: str
    extraction: ExtractionResult
    analysis: dict[str, Any]
    timings_ms: dict[str, int] = field(default_factory=dict)
    ok: Literal[True] = True

    @property
    def extracted_chars(self) -> int:
        return len(self.extraction.text)


@dataclass(frozen=True)
class AnalysisFailure:
    kind: FailureKind
    state: FailureState
    status_code: int
    message: str
    code: str
    ok: Literal[False] = False


AnalysisOutcome = Union[AnalysisSuccess, AnalysisFailure]


def failure_from_error(exc: ResumeAnalysisError) -> AnalysisFailure:
    if exc.state == "rejected_input":
        message = str(exc)
    else:
        message = UPSTREAM_MESSAGES.get(exc.kind, UPSTREAM_MESSAGES["upstream_error"])
    return AnalysisFailure(
        kind=exc.kind,
        state=exc.state,
        status_code=exc.status_code,
        message=message,
        code=exc.code,
    )


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class ResumeAnalysisPipeline:
    def __init__(
        self,
        gateway: LLMGateway,
        *,
        strategies: Sequence[ExtractionStrategy] | None = None,
        min_chars: int | None = None,
        strict_schema: bool | None = None,
    ):
        self._gateway = gateway
        self._strategies = tuple(default_strategies() if strategies is None else strategies)
        self._min_chars = settings.min_resume_chars if min_chars is None else min_chars
        self._strict_schema = settings.analysis_strict_schema if strict_schema is None else strict_schema

    async def run(self, document: Document, target_role: str | None = None) -> AnalysisOutcome:
        timings: dict[str, int] = {}
        try:
            started = time.perf_counter()
            # OCR is CPU-bound; extraction runs in a worker thread.
            extraction = await asyncio.to_thread(parse_document, document, self._strategies)
            timings["extraction"] = _elapsed_ms(started)

            resume_text = enforce_resume_text(extraction.text, minimum=self._min_chars)
            request = AnalysisRequest(target_role=target_role, resume_text=resume_text)
            prompt = build_analysis_prompt(request.target_role, request.resume_text)

            started = time.perf_counter()
            raw = await self._gateway.send(prompt)
            timings["llm"] = _elapsed_ms(started)

            analysis = decode_analysis(coerce_json(raw), strict=self._strict_schema)
        except ResumeAnalysisError as exc:
            failure = failure_from_error(exc)
            logger.warning(
                "resume_analysis_failed file=%s kind=%s code=%s state=%s: %s",
                document.filename,
                failure.kind,
                failure.code,
                failure.state,
                exc,
            )
            return failure

        logger.info(
            "resume_analysis_completed file=%s source=%s chars=%s extraction_ms=%s llm_ms=%s",
            document.filename,
            extraction.source,
            len(extraction.text),
            timings.get("extraction"),
            timings.get("llm"),
        )
        return AnalysisSuccess(
            target_role=request.target_role,
            file_name=document.filename,
            extraction=extraction,
            analysis=analysis,
            timings_ms=timings,
        )
