"""
Static Extractor
Readability-style reading view of an HTML document (no network, no side effects).
"""
from __future__ import annotations

import html as html_lib
import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

from models import ExtractedContent


logger = logging.getLogger(__name__)

_EXCERPT_MAX_CHARS = 300


def _clean_text(value: str) -> str:
    text = html_lib.unescape(str(value or ""))
    text = text.replace("\r\n", "\n").replace("\r", "\n").replace("\u00a0", " ")
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def _first(values: Iterable[Optional[str]]) -> Optional[str]:
    for value in values:
        text = _clean_text(value or "")
        if text:
            return text
    return None


def _meta(soup: BeautifulSoup, *names: str) -> List[Optional[str]]:
    """Content of the first matching meta tag for each name/property, in order."""
    found: List[Optional[str]] = []
    for name in names:
        tag = soup.find("meta", attrs={"property": name}) or soup.find("meta", attrs={"name": name})
        found.append(tag.get("content") if tag else None)
    return found


def _summary_text(summary_html: str) -> str:
    soup = BeautifulSoup(summary_html, "lxml")
    for node in soup(["script", "style", "noscript", "template"]):
        node.decompose()

    blocks: List[str] = []
    for node in soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6", "p", "li", "pre", "blockquote", "td"]):
        # Only leaf-level blocks, nested ones are covered by their parent
        if node.find_parent(["p", "li", "pre", "blockquote", "td"]):
            continue
        text = node.get_text(" ", strip=True)
        if text:
            blocks.append(text)

    if blocks:
        return _clean_text("\n\n".join(blocks))
    return _clean_text(soup.get_text("\n", strip=True))


def html_to_text(fragment: str) -> str:
    """Plain text of an HTML fragment such as a post body or comment."""
    if not fragment or not fragment.strip():
        return ""
    soup = BeautifulSoup(fragment, "lxml")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    # HN separates paragraphs with bare <p> tags, the first one has none
    for paragraph in soup.find_all("p"):
        paragraph.insert_before("\n\n")
    return _clean_text(soup.get_text())


def _byline(soup: BeautifulSoup) -> Optional[str]:
    candidates = _meta(soup, "author", "article:author", "twitter:creator", "dc.creator")
    rel_author = soup.find(attrs={"rel": "author"})
    if rel_author is not None:
        candidates.append(rel_author.get_text(" ", strip=True))
    byline_node = soup.find(class_=re.compile(r"\bbyline\b", re.IGNORECASE))
    if byline_node is not None:
        candidates.append(byline_node.get_text(" ", strip=True))
    byline = _first(candidates)
    # Author metas sometimes carry a profile URL rather than a name
    if byline and byline.startswith("http"):
        return None
    return byline


def extract(html: str) -> Optional[ExtractedContent]:
    """
    Parse HTML into a reading view.

    Returns:
        ExtractedContent, or None when no main-content region is found
    """
    if not html or not html.strip():
        return None

    try:
        document = Document(html)
        summary_html = document.summary(html_partial=True)
        short_title = document.short_title()
    except (Unparseable, ParserError, ValueError) as e:
        logger.debug(f"[Extract] Readability could not parse document: {e}")
        return None

    text = _summary_text(summary_html)
    if not text:
        return None

    soup = BeautifulSoup(html, "lxml")
    og_title, twitter_title = _meta(soup, "og:title", "twitter:title")
    site_name = _first(_meta(soup, "og:site_name", "application-name"))
    excerpt = _first(_meta(soup, "og:description", "description", "twitter:description"))
    if not excerpt:
        first_paragraph = text.split("\n\n", 1)[0]
        excerpt = first_paragraph[:_EXCERPT_MAX_CHARS].strip() or None

    return ExtractedContent(
        text=text,
        title=_first([og_title, twitter_title, short_title]),
        byline=_byline(soup),
        excerpt=excerpt,
        site_name=site_name,
    )
