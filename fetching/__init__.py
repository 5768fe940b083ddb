"""
Fetching Module
Bounded HTTP fetcher and PDF decoding
"""
from .http import BoundedFetcher, RETRYABLE_ERRORS
from .pdf import extract_pdf_text, pdf_source_url, rewrite_code_host_url

__all__ = [
    "BoundedFetcher",
    "RETRYABLE_ERRORS",
    "extract_pdf_text",
    "pdf_source_url",
    "rewrite_code_host_url",
]
