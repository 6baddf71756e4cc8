from __future__ import annotations

from io import BytesIO
import logging

import fitz  # PyMuPDF
import pytesseract
from PIL import Image, ImageOps

from app.services.errors import OcrFailure, OcrUnavailable

from .models import Document
from .text import normalize_extracted_text

logger = logging.getLogger(__name__)

PDF_POINTS_PER_INCH = 72.0


def _render_pdf_pages(content: bytes, *, dpi: int, max_pages: int) -> list[Image.Image]:
    zoom = dpi / PDF_POINTS_PER_INCH
    matrix = fitz.Matrix(zoom, zoom)
    images: list[Image.Image] = []
    with fitz.open(stream=content, filetype="pdf") as pdf_document:
        for page_index, page in enumerate(pdf_document):
            if page_index >= max_pages:
                logger.info("ocr_page_limit_reached pages=%s limit=%s", pdf_document.page_count, max_pages)
                break
            pix = page.get_pixmap(matrix=matrix, alpha=False)
            images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
    return images


def _load_image(content: bytes) -> Image.Image:
    with Image.open(BytesIO(content)) as image:
        # Camera photos carry their rotation in EXIF.
        oriented = ImageOps.exif_transpose(image)
        return oriented.convert("RGB")


def ocr_engine_available() -> bool:
    try:
        pytesseract.get_tesseract_version()
    except pytesseract.TesseractNotFoundError:
        return False
    return True


class OcrExtractor:
    """Recognizes text from rendered PDF pages or uploaded images.

    This is the slow path (seconds per page, CPU-bound) and the last one, so
    recognition errors are raised instead of being reported as empty text.
    """

    name = "ocr"

    def __init__(self, *, language: str = "eng", dpi: int = 200, max_pages: int = 5):
        self._language = language
        self._dpi = dpi
        self._max_pages = max_pages

    def supports(self, document: Document) -> bool:
        return document.is_pdf or document.is_image

    def _images(self, document: Document) -> list[Image.Image]:
        if document.is_pdf:
            return _render_pdf_pages(document.content, dpi=self._dpi, max_pages=self._max_pages)
        return [_load_image(document.content)]

    def extract(self, document: Document) -> str:
        logger.info("ocr_extraction_started file=%s lang=%s dpi=%s", document.filename, self._language, self._dpi)
        try:
            images = self._images(document)
            page_texts: list[str] = []
            try:
                for image in images:
                    page_text = pytesseract.image_to_string(image, lang=self._language)
                    if page_text.strip():
                        page_texts.append(page_text)
            finally:
                for image in images:
                    image.close()
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrUnavailable("Tesseract OCR engine is not installed or not on PATH.") from exc
        except Exception as exc:  # noqa: BLE001 - re-raised as a typed extraction failure
            logger.warning("ocr_extraction_failed file=%s: %s", document.filename, exc)
            raise OcrFailure(
                "We could not read this resume. The file may be corrupted or the scan unreadable. "
                "Please upload a text-based PDF or a clearer scan."
            ) from exc
        return normalize_extracted_text("\n\n".join(page_texts))
