from __future__ import annotations

from contextlib import asynccontextmanager
import io
from pathlib import Path
import sys
from typing import Callable, List, Optional

import httpx
import pytest
from PIL import Image
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from browser import BrowserConfig, BrowserRenderer
from browser.config import BODY_TEXT_SCRIPT
from fetching import BoundedFetcher
from storage import CacheStore


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color=(0, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()


PNG_BYTES = _png_bytes()

ARTICLE_PARAGRAPHS = [
    "The new scheduler keeps every worker busy, even when jobs arrive in bursts, "
    "and it does so without a central queue, which removes the lock that used to dominate profiles.",
    "Benchmarks on a 64-core machine show throughput rising by a third, while tail latency, "
    "measured at the 99th percentile, dropped from 40 milliseconds to under 12.",
    "The authors note that the design borrows from work-stealing runtimes, but adds a small, "
    "per-core admission buffer, so that short tasks are never starved by long ones.",
]


def article_html(
    title: str = "A faster scheduler",
    site_name: Optional[str] = "Systems Weekly",
    author: Optional[str] = "Jane Doe",
    paragraphs: Optional[List[str]] = None,
) -> str:
    metas = [f'<meta property="og:title" content="{title}">']
    if site_name:
        metas.append(f'<meta property="og:site_name" content="{site_name}">')
    if author:
        metas.append(f'<meta name="author" content="{author}">')
    body = "\n".join(f"<p>{p}</p>" for p in (paragraphs or ARTICLE_PARAGRAPHS))
    return f"""<html>
  <head><title>{title}</title>{''.join(metas)}</head>
  <body>
    <nav><a href="/">Home</a></nav>
    <article><h1>{title}</h1>{body}</article>
    <footer>Copyright</footer>
  </body>
</html>"""


def pdf_document(text: Optional[str] = None) -> bytes:
    """Single-page PDF with a Helvetica text layer, or a blank page when ``text`` is None."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1") if text else b""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode("ascii") + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    document = b"%PDF-1.4\n"
    offsets = []
    for number, body in enumerate(objects, 1):
        offsets.append(len(document))
        document += f"{number} 0 obj\n".encode("ascii") + body + b"\nendobj\n"
    xref_at = len(document)
    document += f"xref\n0 {len(objects) + 1}\n".encode("ascii")
    document += b"0000000000 65535 f \n"
    document += b"".join(f"{offset:010d} 00000 n \n".encode("ascii") for offset in offsets)
    document += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode("ascii")
    )
    return document


class FakePage:
    """Stands in for a Playwright page inside a fake session factory."""

    def __init__(
        self,
        html: str = "",
        body_text: Optional[str] = None,
        goto_errors: Optional[List[Exception]] = None,
        has_article: bool = False,
    ):
        self.html = html
        self.body_text = body_text if body_text is not None else " ".join(ARTICLE_PARAGRAPHS)
        self.goto_calls: List[tuple] = []
        self.styles: List[str] = []
        self.evaluated: List[str] = []
        self.screenshots: List[str] = []
        self._goto_errors = list(goto_errors or [])
        self._has_article = has_article

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append((url, wait_until, timeout))
        if self._goto_errors:
            raise self._goto_errors.pop(0)

    async def content(self) -> str:
        return self.html

    async def evaluate(self, script):
        self.evaluated.append(script)
        if script == BODY_TEXT_SCRIPT:
            return self.body_text
        return None

    async def wait_for_selector(self, selector, timeout=None):
        if not self._has_article:
            raise PlaywrightTimeoutError(f"Timeout waiting for {selector}")

    async def add_style_tag(self, content=None):
        self.styles.append(content)

    async def set_content(self, html, wait_until=None, timeout=None):
        self.html = html

    async def screenshot(self, path=None, type="png"):
        Path(path).write_bytes(PNG_BYTES)
        self.screenshots.append(path)


def fake_session_factory(page: FakePage, sessions: Optional[list] = None) -> Callable:
    @asynccontextmanager
    async def _factory(config):
        if sessions is not None:
            sessions.append(config)
        yield page

    return _factory


@asynccontextmanager
async def broken_session_factory(config):
    raise PlaywrightError("Executable doesn't exist")
    yield  # pragma: no cover


def quick_browser_config() -> BrowserConfig:
    return BrowserConfig(settle_delay_ms=0, article_wait_ms=10, min_text_length=200)


def make_renderer(page: Optional[FakePage] = None, sessions: Optional[list] = None) -> BrowserRenderer:
    factory = fake_session_factory(page, sessions) if page is not None else broken_session_factory
    return BrowserRenderer(quick_browser_config(), session_factory=factory)


def make_fetcher(handler, max_attempts: int = 3, timeout: float = 1.0) -> BoundedFetcher:
    return BoundedFetcher(transport=httpx.MockTransport(handler), max_attempts=max_attempts, timeout=timeout)


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network unreachable", request=request)


@pytest.fixture
def cache(tmp_path) -> CacheStore:
    return CacheStore(tmp_path / "cache")
