from __future__ import annotations

import pytest

from extraction import (
    escalation_reason,
    extract,
    find_marker,
    html_to_text,
    looks_like_challenge,
    needs_escalation,
    prefers_browser,
    readable_hostname,
)
from models import ExtractedContent

from conftest import ARTICLE_PARAGRAPHS, article_html


PLAIN_HTML = "<html><body><article><p>plain page</p></article></body></html>"


def test_extract_reads_article_and_metadata() -> None:
    extracted = extract(article_html())

    assert extracted is not None
    assert "work-stealing runtimes" in extracted.text
    assert "Copyright" not in extracted.text
    assert extracted.title == "A faster scheduler"
    assert extracted.site_name == "Systems Weekly"
    assert extracted.byline == "Jane Doe"
    assert extracted.excerpt


def test_extract_rejects_author_urls_as_byline() -> None:
    extracted = extract(article_html(author="https://example.com/staff/jane"))
    assert extracted is not None
    assert extracted.byline is None


def test_extract_empty_document_returns_none() -> None:
    assert extract("") is None
    assert extract("   ") is None


def test_empty_app_shell_needs_escalation() -> None:
    html = '<html><head><title>App</title></head><body>\n  <div id="app"></div>\n<script src="/main.js"></script></body></html>'
    assert find_marker(html) == '<div id="app"></div>'
    assert needs_escalation(html, extract(html))


def test_long_article_with_no_marker_is_accepted() -> None:
    html = article_html()
    assert escalation_reason(html, extract(html)) is None


def test_challenge_marker_forces_escalation_even_with_text() -> None:
    html = article_html(paragraphs=ARTICLE_PARAGRAPHS + ["Checking your browser before accessing this site."])
    assert "checking your browser" in escalation_reason(html, extract(html))


@pytest.mark.parametrize("notice", ["Verifying...", "Please wait while your request is being verified"])
def test_interstitial_notices_force_escalation(notice: str) -> None:
    html = article_html(paragraphs=ARTICLE_PARAGRAPHS + [notice])
    assert escalation_reason(html, extract(html)) is not None


def test_escalation_is_monotonic_in_text_length() -> None:
    decisions = [
        needs_escalation(PLAIN_HTML, ExtractedContent(text="x" * length))
        for length in range(0, 401, 10)
    ]
    # Once a length is good enough, every longer text is too
    first_accepted = decisions.index(False)
    assert all(decisions[:first_accepted])
    assert not any(decisions[first_accepted:])
    assert first_accepted * 10 == 200


def test_missing_extraction_always_escalates() -> None:
    assert needs_escalation(article_html(), None)


@pytest.mark.parametrize(
    "body_text, blocked",
    [
        ("", True),
        ("short", True),
        ("Just a moment... " + "x" * 300, True),
        ("Verifying... " + "x" * 300, True),
        ("Please wait while we check your connection. " + "x" * 300, True),
        (" ".join(ARTICLE_PARAGRAPHS), False),
    ],
)
def test_looks_like_challenge(body_text: str, blocked: bool) -> None:
    assert looks_like_challenge(body_text) is blocked


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://www.nytimes.com/2026/01/01/tech/story.html", True),
        ("https://x.com/someone/status/1", True),
        ("https://mastodon.example.org/@me/1", True),
        ("https://fosstodon.social/@me/1", True),
        ("https://example.com/post", False),
        (None, False),
    ],
)
def test_prefers_browser(url, expected: bool) -> None:
    assert prefers_browser(url) is expected


def test_readable_hostname_strips_www() -> None:
    assert readable_hostname("https://www.example.com/a") == "example.com"
    assert readable_hostname("https://blog.example.com/a") == "blog.example.com"


def test_html_to_text_keeps_first_paragraph() -> None:
    text = html_to_text("First line &amp; more<p>Second <i>para</i><p>Third")
    assert text == "First line & more\n\nSecond para\n\nThird"
