from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ExtractionSource = Literal["structured", "ocr"]

PDF_EXTENSIONS = frozenset({"pdf"})
WORD_EXTENSIONS = frozenset({"docx"})
TEXT_EXTENSIONS = frozenset({"txt", "md"})
IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "webp", "bmp", "gif", "tif", "tiff"})


class Document(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: bytes = Field(repr=False)
    filename: str = Field(default="resume", max_length=255)
    content_type: str | None = None

    @field_validator("filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        return value.strip() or "resume"

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].strip().lower()

    @property
    def is_pdf(self) -> bool:
        return self.extension in PDF_EXTENSIONS

    @property
    def is_image(self) -> bool:
        return self.extension in IMAGE_EXTENSIONS


class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    source: ExtractionSource | None = None
    warnings: list[str] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def _trim_text(cls, value: str) -> str:
        return value.strip()

    @property
    def is_empty(self) -> bool:
        return not self.text
