"""PDF link detection and text decoding."""

from __future__ import annotations

from io import BytesIO
import logging
import re
from typing import Optional
from urllib.parse import urlparse

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from utils.exceptions import ExtractionError


logger = logging.getLogger(__name__)

_GITHUB_BLOB = re.compile(r"^https?://(?:www\.)?github\.com/([^/]+)/([^/]+)/blob/(.+)$")


def rewrite_code_host_url(url: str) -> str:
    """Point a GitHub ``blob`` page at its raw file; other URLs pass through."""
    match = _GITHUB_BLOB.match(url)
    if not match:
        return url
    owner, repo, rest = match.groups()
    rest = rest.split("#", 1)[0].split("?", 1)[0]
    return f"https://raw.githubusercontent.com/{owner}/{repo}/{rest}"


def pdf_source_url(url: Optional[str]) -> Optional[str]:
    """
    Return the URL to download when the story links a PDF, else None.

    Recognizes direct ``.pdf`` links and GitHub blob pages of PDF files.
    """
    if not url:
        return None
    candidate = rewrite_code_host_url(url)
    path = urlparse(candidate).path
    if path.lower().endswith(".pdf"):
        return candidate
    return None


def extract_pdf_text(pdf_bytes: bytes) -> str:
    """Decode the text of every page."""
    if not pdf_bytes:
        raise ExtractionError("Empty PDF payload")

    try:
        reader = PdfReader(BytesIO(pdf_bytes))
    except (PdfReadError, ValueError, OSError) as e:
        raise ExtractionError(f"Could not read PDF: {e}") from e

    pages = []
    for index, page in enumerate(reader.pages):
        try:
            text = page.extract_text() or ""
        except (PdfReadError, ValueError, KeyError) as e:
            logger.debug(f"[PDF] Skipping page {index}: {e}")
            continue
        if text.strip():
            pages.append(text.strip())

    return "\n\n".join(pages)
