import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.services.errors import ExtractionEmpty, TextTooShort  # noqa: E402
from app.services.quality_gate import check_resume_text, enforce_resume_text  # noqa: E402


class QualityGateTests(unittest.TestCase):
    def test_empty_and_whitespace_text_fail_as_empty(self):
        for text in ("", "   \n\t "):
            decision = check_resume_text(text, minimum=50)
            self.assertFalse(decision.passed)
            self.assertEqual(decision.reason, "empty")
            self.assertEqual(decision.length, 0)

    def test_short_text_fails_with_length(self):
        decision = check_resume_text("0123456789", minimum=50)
        self.assertFalse(decision.passed)
        self.assertEqual(decision.reason, "too_short")
        self.assertEqual(decision.length, 10)
        self.assertEqual(decision.minimum, 50)

    def test_threshold_is_inclusive(self):
        self.assertTrue(check_resume_text("x" * 50, minimum=50).passed)
        self.assertFalse(check_resume_text("x" * 49, minimum=50).passed)

    def test_default_minimum_comes_from_settings(self):
        decision = check_resume_text("short")
        self.assertEqual(decision.minimum, 50)

    def test_enforce_raises_extraction_empty(self):
        with self.assertRaises(ExtractionEmpty) as ctx:
            enforce_resume_text("")
        self.assertIn("image-based PDF", str(ctx.exception))
        self.assertEqual(ctx.exception.state, "rejected_input")

    def test_enforce_raises_text_too_short(self):
        with self.assertRaises(TextTooShort) as ctx:
            enforce_resume_text("Jane Doe", minimum=50)
        self.assertIn("Insufficient text", str(ctx.exception))
        self.assertEqual(ctx.exception.length, 8)
        self.assertEqual(ctx.exception.status_code, 400)

    def test_enforce_returns_trimmed_text(self):
        text = "  " + "Python developer with Django and React projects. " * 2 + "\n"
        self.assertEqual(enforce_resume_text(text, minimum=50), text.strip())


if __name__ == "__main__":
    unittest.main()
