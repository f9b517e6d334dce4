"""File-to-text helpers for uploaded medical reports.

Unlike a strict parser, extraction never fails the request: anything that
cannot be read becomes a bracketed placeholder the classifier simply won't
match on.
"""
from __future__ import annotations

import io
import logging

from pypdf import PdfReader

logger = logging.getLogger("symptom_intake")

MAX_SNIFFED_TEXT_CHARS = 100_000


def _pdf_text(data: bytes, name: str) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
        text = "\n".join(pages).strip()
    except Exception:
        logger.warning("PDF extraction failed", exc_info=True)
        return "[PDF extraction failed. Please type your medical values from the PDF.]"

    logger.info({"function": "extract_text", "source": "pdf", "pages": len(pages), "chars": len(text)})
    if not text:
        return f"[PDF file: {name} - No text could be extracted. Please type your medical values.]"
    return text


def extract_text(data: bytes, filename: str, content_type: str) -> str:
    """Return the text content of an upload, or a descriptive placeholder."""
    name = filename or "upload"
    mt = (content_type or "").lower()
    try:
        if mt == "application/pdf":
            return _pdf_text(data, name)

        if mt.startswith("text/"):
            return data.decode("utf-8", errors="replace")

        if mt == "application/octet-stream":
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                return f"[Binary file: {name}]"

        if mt.startswith("image/"):
            return f"[Image file uploaded: {name}. Image analysis will be added soon.]"

        try:
            text = data.decode("utf-8")
            if 0 < len(text) < MAX_SNIFFED_TEXT_CHARS:
                return text
        except UnicodeDecodeError:
            pass
        return f"[File uploaded: {name} - Type: {mt}]"
    except Exception:
        logger.exception("Error extracting text from file")
        return f"[Could not extract text from {name}]"


__all__ = ["extract_text"]
