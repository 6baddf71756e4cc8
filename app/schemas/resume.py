from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings

MAX_TARGET_ROLE_CHARS = 120


def normalize_target_role(value: str | None) -> str:
    role = " ".join((value or "").split())
    if not role:
        return settings.default_target_role
    return role[:MAX_TARGET_ROLE_CHARS]


class AnalysisRequest(BaseModel):
    target_role: str = Field(default_factory=lambda: settings.default_target_role)
    resume_text: str = Field(min_length=1)

    @field_validator("target_role", mode="before")
    @classmethod
    def _normalize_target_role(cls, value: Any) -> str:
        return normalize_target_role(value if isinstance(value, str) else None)


class AnalysisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ats_score: int = Field(alias="atsScore", ge=0, le=100)
    strengths: list[str]
    weak_areas: list[str] = Field(alias="weakAreas")
    missing_skills: list[str] = Field(alias="missingSkills")
    project_gaps: list[str] = Field(alias="projectGaps")
    quick_fixes: list[str] = Field(alias="quickFixes")
    one_line_verdict: str = Field(alias="oneLineVerdict")


class ResumeUploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    target_role: str = Field(alias="targetRole")
    file_name: str = Field(alias="fileName")
    extracted_chars: int = Field(alias="extractedChars", ge=0)
    analysis: dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
