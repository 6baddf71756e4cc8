from __future__ import annotations

from io import BytesIO
import re
from typing import Any
from zipfile import BadZipFile, ZipFile

from app.parsing.models import IMAGE_EXTENSIONS, PDF_EXTENSIONS, TEXT_EXTENSIONS, WORD_EXTENSIONS

ALLOWED_RESUME_EXTENSIONS = frozenset(PDF_EXTENSIONS | WORD_EXTENSIONS | TEXT_EXTENSIONS | IMAGE_EXTENSIONS)

PDF_MAGIC = b"%PDF-"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
JPEG_MAGIC = b"\xff\xd8\xff"
GIF_MAGICS = (b"GIF87a", b"GIF89a")
BMP_MAGIC = b"BM"
TIFF_MAGICS = (b"II*\x00", b"MM\x00*")
WEBP_RIFF_MAGIC = b"RIFF"
WEBP_WEBP_MAGIC = b"WEBP"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

# PDF readers accept a few bytes of junk before the header.
PDF_HEADER_SEARCH_BYTES = 1024


class UploadRejected(ValueError):
    pass


def _safe_str(value: Any, max_len: int = 255) -> str:
    if value is None:
        return ""
    text = str(value).strip()
    if not text:
        return ""
    return text[:max_len]


def safe_upload_filename(filename: str | None) -> str:
    # Browsers on Windows may send the full client path.
    name = re.split(r"[\\/]", _safe_str(filename))[-1]
    name = re.sub(r"[\x00-\x1f]", "", name).strip()
    return name or "resume"


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return _safe_str(filename.rsplit(".", 1)[-1], 20).lower()


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126 or byte >= 128:
            printable += 1
    return (printable / len(sample)) >= 0.75


def validate_upload_signature(*, filename: str, content: bytes) -> None:
    ext = extension_from_filename(filename)
    if ext == "doc":
        raise UploadRejected("Legacy .doc is not supported. Convert to .docx or PDF.")

    if ext not in ALLOWED_RESUME_EXTENSIONS:
        allowed = ", ".join(sorted(ALLOWED_RESUME_EXTENSIONS))
        raise UploadRejected(f"Unsupported file type '.{ext}'. Allowed: {allowed}.")

    if not content:
        raise UploadRejected("The uploaded resume file is empty.")

    if ext == "pdf":
        if PDF_MAGIC not in content[:PDF_HEADER_SEARCH_BYTES]:
            raise UploadRejected("File signature does not match .pdf content. The file may be corrupted.")
        return

    if ext == "docx":
        if not _is_zip_payload(content) or not _zip_has_paths(content, ("word/",)):
            raise UploadRejected("File signature does not match .docx content. The file may be corrupted.")
        return

    if ext in TEXT_EXTENSIONS:
        if not _is_probably_text_payload(content):
            raise UploadRejected(f"File signature does not match .{ext} text content.")
        return

    if ext == "png":
        valid = content.startswith(PNG_MAGIC)
    elif ext in {"jpg", "jpeg"}:
        valid = content.startswith(JPEG_MAGIC)
    elif ext == "gif":
        valid = any(content.startswith(magic) for magic in GIF_MAGICS)
    elif ext == "bmp":
        valid = content.startswith(BMP_MAGIC)
    elif ext in {"tif", "tiff"}:
        valid = any(content.startswith(magic) for magic in TIFF_MAGICS)
    elif ext == "webp":
        valid = len(content) >= 12 and content.startswith(WEBP_RIFF_MAGIC) and content[8:12] == WEBP_WEBP_MAGIC
    else:
        valid = True
    if not valid:
        raise UploadRejected(f"File signature does not match .{ext} content. The file may be corrupted.")
