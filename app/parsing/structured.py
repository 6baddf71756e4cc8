from __future__ import annotations

from io import BytesIO
import logging
from zipfile import ZipFile

import defusedxml.ElementTree as ET
from docx import Document as DocxDocument
from pypdf import PdfReader

from .models import PDF_EXTENSIONS, TEXT_EXTENSIONS, WORD_EXTENSIONS, Document
from .text import normalize_extracted_text

logger = logging.getLogger(__name__)

TEXT_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def _extract_pdf_text(content: bytes) -> str:
    with BytesIO(content) as stream:
        reader = PdfReader(stream)
        if reader.is_encrypted:
            # Owner-password-only PDFs open with an empty user password.
            reader.decrypt("")
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
    return "\n\n".join(page_chunks)


def _extract_docx_text_fallback(content: bytes) -> str:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        texts = [
            node.text.strip()
            for node in paragraph.iter()
            if node.tag.endswith("}t") and node.text and node.text.strip()
        ]
        if texts:
            paragraphs.append(" ".join(texts))
    return "\n".join(paragraphs)


def _extract_docx_text(content: bytes) -> str:
    try:
        with BytesIO(content) as stream:
            doc = DocxDocument(stream)
            paragraphs = [paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip()]
            for table in doc.tables:
                for row in table.rows:
                    cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                    if cells:
                        paragraphs.append(" | ".join(cells))
        return "\n".join(paragraphs)
    except Exception as exc:  # noqa: BLE001 - fall back to raw document.xml
        logger.info("docx_parser_fallback reason=%s", exc)
        return _extract_docx_text_fallback(content)


def _decode_text(content: bytes) -> str:
    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return ""


class StructuredExtractor:
    """Reads the document's own text layer.

    Parser errors are reported and downgraded to empty text, leaving the
    decision to fall back to OCR with the caller.
    """

    name = "structured"

    def supports(self, document: Document) -> bool:
        return document.extension in PDF_EXTENSIONS | WORD_EXTENSIONS | TEXT_EXTENSIONS

    def extract(self, document: Document) -> str:
        ext = document.extension
        try:
            if ext in PDF_EXTENSIONS:
                text = _extract_pdf_text(document.content)
            elif ext in WORD_EXTENSIONS:
                text = _extract_docx_text(document.content)
            elif ext in TEXT_EXTENSIONS:
                text = _decode_text(document.content)
            else:
                return ""
        except Exception as exc:  # noqa: BLE001 - OCR may still recover the document
            logger.warning("structured_extraction_failed file=%s ext=%s: %s", document.filename, ext, exc)
            return ""
        return normalize_extracted_text(text)
