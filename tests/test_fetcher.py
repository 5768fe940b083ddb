from __future__ import annotations

import asyncio

import httpx
import pytest

from fetching import extract_pdf_text, pdf_source_url, rewrite_code_host_url
from utils.exceptions import ExtractionError, FetchError

from conftest import make_fetcher, pdf_document


@pytest.mark.asyncio
async def test_http_error_status_is_returned_without_retry() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        return httpx.Response(403, text="<html>Access denied</html>")

    response = await make_fetcher(handler).fetch("https://example.com/")
    assert response.status_code == 403
    assert "Access denied" in response.text
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_transport_errors_are_retried_until_success() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        if len(calls) < 3:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, text="ok")

    text = await make_fetcher(handler, max_attempts=3).fetch_text("https://example.com/")
    assert text == "ok"
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_exhausted_attempts_raise_fetch_error_with_cause() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(FetchError) as exc_info:
        await make_fetcher(handler, max_attempts=3).fetch("https://down.example/")

    assert len(calls) == 3
    assert exc_info.value.attempts == 3
    assert exc_info.value.url == "https://down.example/"
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_hanging_origin_times_out_per_attempt() -> None:
    calls = []

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        await asyncio.sleep(5)
        return httpx.Response(200, text="too late")

    with pytest.raises(FetchError):
        await make_fetcher(handler, max_attempts=2, timeout=0.05).fetch("https://slow.example/")
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_fetch_json_raises_on_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"error": "not found"})

    with pytest.raises(httpx.HTTPStatusError):
        await make_fetcher(handler).fetch_json("https://api.example/items/1")


def test_code_host_blob_urls_are_rewritten_to_raw() -> None:
    url = "https://github.com/owner/repo/blob/main/docs/paper.pdf"
    assert rewrite_code_host_url(url) == "https://raw.githubusercontent.com/owner/repo/main/docs/paper.pdf"
    assert pdf_source_url(url) == "https://raw.githubusercontent.com/owner/repo/main/docs/paper.pdf"


def test_pdf_detection_uses_path_only() -> None:
    assert pdf_source_url("https://example.com/paper.pdf?download=1") == "https://example.com/paper.pdf?download=1"
    assert pdf_source_url("https://example.com/article") is None
    assert pdf_source_url("https://example.com/?file=paper.pdf") is None


@pytest.mark.asyncio
async def test_redirect_loops_end_in_fetch_error() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url)
        raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

    with pytest.raises(FetchError) as exc_info:
        await make_fetcher(handler, max_attempts=2).fetch("https://loop.example/")

    assert len(calls) == 2
    assert isinstance(exc_info.value.__cause__, httpx.TooManyRedirects)


@pytest.mark.asyncio
async def test_undecodable_body_ends_in_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.DecodingError("bad gzip stream", request=request)

    with pytest.raises(FetchError):
        await make_fetcher(handler, max_attempts=1).fetch_text("https://broken.example/")


def test_pdf_text_layer_is_decoded() -> None:
    text = extract_pdf_text(pdf_document("Work stealing without a central queue"))
    assert "Work stealing without a central queue" in text


def test_pdf_without_text_layer_decodes_to_empty_string() -> None:
    assert extract_pdf_text(pdf_document()) == ""


def test_unreadable_pdf_raises_extraction_error() -> None:
    with pytest.raises(ExtractionError):
        extract_pdf_text(b"")
