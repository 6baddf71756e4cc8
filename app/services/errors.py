from __future__ import annotations

from typing import Literal

FailureState = Literal["rejected_input", "upstream_failure"]
FailureKind = Literal[
    "extraction_empty",
    "text_too_short",
    "ocr_failed",
    "ocr_unavailable",
    "upstream_error",
    "malformed_analysis",
    "missing_credential",
    "unsupported_provider",
]


class ResumeAnalysisError(RuntimeError):
    kind: FailureKind = "upstream_error"
    state: FailureState = "upstream_failure"
    status_code = 500

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.kind


class ExtractionEmpty(ResumeAnalysisError):
    kind: FailureKind = "extraction_empty"
    state: FailureState = "rejected_input"
    status_code = 400


class TextTooShort(ResumeAnalysisError):
    kind: FailureKind = "text_too_short"
    state: FailureState = "rejected_input"
    status_code = 400

    def __init__(self, message: str, *, length: int, minimum: int):
        super().__init__(message)
        self.length = length
        self.minimum = minimum


class OcrFailure(ResumeAnalysisError):
    kind: FailureKind = "ocr_failed"
    state: FailureState = "rejected_input"
    status_code = 400


class OcrUnavailable(ResumeAnalysisError):
    kind: FailureKind = "ocr_unavailable"


class UpstreamError(ResumeAnalysisError):
    kind: FailureKind = "upstream_error"


class MalformedAnalysis(ResumeAnalysisError):
    kind: FailureKind = "malformed_analysis"


class GatewayMisconfigured(ResumeAnalysisError):
    """The LLM gateway cannot be built from the current environment."""


class MissingCredential(GatewayMisconfigured):
    kind: FailureKind = "missing_credential"


class UnsupportedProvider(GatewayMisconfigured):
    kind: FailureKind = "unsupported_provider"
