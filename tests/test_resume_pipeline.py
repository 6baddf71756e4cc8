import json
import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import settings  # noqa: E402
from app.parsing.models import Document  # noqa: E402
from app.services.errors import OcrFailure, OcrUnavailable, UpstreamError  # noqa: E402
from app.services.resume_pipeline import AnalysisFailure, AnalysisSuccess, ResumeAnalysisPipeline  # noqa: E402

VALID_ANALYSIS = {
    "atsScore": 64,
    "strengths": ["Relevant internship"],
    "weakAreas": ["No deployed projects"],
    "missingSkills": ["Git"],
    "projectGaps": ["No live links"],
    "quickFixes": ["Add a GitHub profile link"],
    "oneLineVerdict": "Good start, needs visible project work.",
}

TEXT_LAYER_RESUME = (
    "Jane Doe\nComputer Science graduate\nSkills: Python, Django, SQL\n"
    "Internship: built internal dashboards for a logistics startup."
)


class FakeStrategy:
    def __init__(self, name, text="", error=None):
        self.name = name
        self._text = text
        self._error = error
        self.calls = 0

    def supports(self, document):
        return True

    def extract(self, document):
        self.calls += 1
        if self._error is not None:
            raise self._error
        return self._text


class FakeGateway:
    def __init__(self, reply=None, error=None):
        self._reply = json.dumps(VALID_ANALYSIS) if reply is None else reply
        self._error = error
        self.prompts = []

    async def send(self, prompt):
        self.prompts.append(prompt)
        if self._error is not None:
            raise self._error
        return self._reply


class ResumePipelineTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.document = Document(content=b"%PDF-1.4", filename="jane.pdf")

    def _pipeline(self, gateway, structured_text="", ocr_text="", ocr_error=None, **kwargs):
        self.structured = FakeStrategy("structured", structured_text)
        self.ocr = FakeStrategy("ocr", ocr_text, error=ocr_error)
        return ResumeAnalysisPipeline(gateway, strategies=[self.structured, self.ocr], min_chars=50, **kwargs)

    async def test_text_layer_resume_never_invokes_ocr(self):
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document)

        self.assertIsInstance(outcome, AnalysisSuccess)
        self.assertEqual(self.ocr.calls, 0)
        self.assertEqual(outcome.extraction.source, "structured")
        self.assertEqual(outcome.extracted_chars, len(TEXT_LAYER_RESUME))
        self.assertEqual(outcome.analysis, VALID_ANALYSIS)
        self.assertEqual(len(gateway.prompts), 1)

    async def test_image_only_resume_uses_ocr_text_verbatim(self):
        ocr_text = "Scanned resume of John Roe. Skills: Java, Spring Boot. Projects: chat app, weather app."
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway, ocr_text=ocr_text).run(self.document)

        self.assertIsInstance(outcome, AnalysisSuccess)
        self.assertEqual(outcome.extraction.text, ocr_text)
        self.assertEqual(outcome.extraction.source, "ocr")
        self.assertIn(ocr_text, gateway.prompts[0])

    async def test_short_text_is_rejected_without_llm_call(self):
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway, structured_text="Jane Doe.").run(self.document)

        self.assertIsInstance(outcome, AnalysisFailure)
        self.assertEqual(outcome.kind, "text_too_short")
        self.assertEqual(outcome.state, "rejected_input")
        self.assertEqual(outcome.status_code, 400)
        self.assertEqual(gateway.prompts, [])

    async def test_empty_after_both_extractors_is_rejected_without_llm_call(self):
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway).run(self.document)

        self.assertEqual(outcome.kind, "extraction_empty")
        self.assertEqual(outcome.state, "rejected_input")
        self.assertEqual(self.structured.calls, 1)
        self.assertEqual(self.ocr.calls, 1)
        self.assertEqual(gateway.prompts, [])

    async def test_ocr_failure_is_rejected_input(self):
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway, ocr_error=OcrFailure("scan unreadable")).run(self.document)

        self.assertEqual(outcome.kind, "ocr_failed")
        self.assertEqual(outcome.state, "rejected_input")
        self.assertEqual(outcome.message, "scan unreadable")
        self.assertEqual(gateway.prompts, [])

    async def test_missing_ocr_engine_is_a_server_fault(self):
        outcome = await self._pipeline(FakeGateway(), ocr_error=OcrUnavailable("no tesseract")).run(self.document)

        self.assertEqual(outcome.kind, "ocr_unavailable")
        self.assertEqual(outcome.state, "upstream_failure")
        self.assertEqual(outcome.status_code, 500)
        self.assertNotIn("tesseract", outcome.message.lower())

    async def test_gateway_error_is_upstream_failure(self):
        gateway = FakeGateway(error=UpstreamError("connection reset by peer"))
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document)

        self.assertEqual(outcome.kind, "upstream_error")
        self.assertEqual(outcome.state, "upstream_failure")
        self.assertEqual(outcome.status_code, 500)
        self.assertIn("analysis failed", outcome.message.lower())
        self.assertNotIn("connection reset", outcome.message)

    async def test_unrecoverable_reply_is_malformed_analysis(self):
        gateway = FakeGateway(reply="Sorry, I can't help with that.")
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document)

        self.assertEqual(outcome.kind, "malformed_analysis")
        self.assertEqual(outcome.code, "no_json_object")
        self.assertEqual(outcome.state, "upstream_failure")

    async def test_schema_mismatch_is_malformed_analysis(self):
        gateway = FakeGateway(reply=json.dumps({"atsScore": 50}))
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document)

        self.assertEqual(outcome.kind, "malformed_analysis")
        self.assertEqual(outcome.code, "schema_mismatch")

    async def test_lenient_schema_returns_coerced_object(self):
        gateway = FakeGateway(reply='Here:\n```json\n{"atsScore": 50}\n```')
        pipeline = self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME, strict_schema=False)
        outcome = await pipeline.run(self.document)

        self.assertIsInstance(outcome, AnalysisSuccess)
        self.assertEqual(outcome.analysis, {"atsScore": 50})

    async def test_fenced_reply_is_repaired(self):
        gateway = FakeGateway(reply="Here you go:\n```json\n" + json.dumps(VALID_ANALYSIS) + "\n```")
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document)

        self.assertIsInstance(outcome, AnalysisSuccess)
        self.assertEqual(outcome.analysis["atsScore"], 64)

    async def test_target_role_defaults_and_reaches_prompt(self):
        gateway = FakeGateway()
        outcome = await self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME).run(self.document, "  ")

        self.assertEqual(outcome.target_role, settings.default_target_role)
        self.assertIn(f"TARGET ROLE: {settings.default_target_role}", gateway.prompts[0])

    async def test_custom_target_role_is_used(self):
        gateway = FakeGateway()
        pipeline = self._pipeline(gateway, structured_text=TEXT_LAYER_RESUME)
        outcome = await pipeline.run(self.document, "Frontend  Developer")

        self.assertEqual(outcome.target_role, "Frontend Developer")
        self.assertIn("TARGET ROLE: Frontend Developer", gateway.prompts[0])


if __name__ == "__main__":
    unittest.main()
