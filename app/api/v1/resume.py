from __future__ import annotations

import logging
from typing import Sequence

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import JSONResponse

from app.ai.factory import get_ai_client
from app.ai.types import LLMGateway
from app.core.config import settings
from app.parsing.models import Document
from app.parsing.parse import ExtractionStrategy, default_strategies
from app.schemas.resume import ErrorResponse, ResumeUploadResponse
from app.services.resume_pipeline import AnalysisFailure, ResumeAnalysisPipeline
from app.services.upload_guard import UploadRejected, safe_upload_filename, validate_upload_signature

logger = logging.getLogger(__name__)

router = APIRouter()

READ_CHUNK_BYTES = 1024 * 64


def get_llm_gateway() -> LLMGateway:
    return get_ai_client()


def get_extraction_strategies() -> Sequence[ExtractionStrategy]:
    return default_strategies()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _read_upload(upload: UploadFile, max_bytes: int) -> bytes | None:
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post(
    "/resume/upload",
    response_model=ResumeUploadResponse,
    responses={
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_resume(
    resume: UploadFile | None = File(default=None),
    target_role: str | None = Form(default=None, alias="targetRole"),
    gateway: LLMGateway = Depends(get_llm_gateway),
    strategies: Sequence[ExtractionStrategy] = Depends(get_extraction_strategies),
):
    if resume is None or not resume.filename:
        return _error(status.HTTP_400_BAD_REQUEST, "No resume file uploaded. Attach a file in the 'resume' field.")

    filename = safe_upload_filename(resume.filename)
    content = await _read_upload(resume, settings.max_upload_bytes)
    if content is None:
        return _error(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            f"File too large. Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
        )

    try:
        validate_upload_signature(filename=filename, content=content)
    except UploadRejected as exc:
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    document = Document(content=content, filename=filename, content_type=resume.content_type)
    pipeline = ResumeAnalysisPipeline(gateway, strategies=strategies)
    outcome = await pipeline.run(document, target_role=target_role)

    if isinstance(outcome, AnalysisFailure):
        return _error(outcome.status_code, outcome.message)

    return ResumeUploadResponse(
        target_role=outcome.target_role,
        file_name=outcome.file_name,
        extracted_chars=outcome.extracted_chars,
        analysis=outcome.analysis,
    )
