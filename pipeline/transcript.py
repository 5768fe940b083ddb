"""Flattening of recursive comment trees into a tab-indented transcript."""

from __future__ import annotations

from typing import Iterable, List

from extraction.static import html_to_text
from models import Comment


def _render(comment: Comment, depth: int, lines: List[str]) -> None:
    text = html_to_text(comment.text or "")
    if text:
        indent = "\t" * depth
        # Multi-line comments stay on one transcript line
        flat = " ".join(text.split())
        lines.append(f"{indent}{comment.author or '[deleted]'}: {flat}\n")
    for child in comment.children:
        _render(child, depth + 1, lines)


def render_comment_tree(comments: Iterable[Comment]) -> str:
    """
    Depth-first ``author: text`` lines, each reply level indented one tab.

    Deleted or empty comments are skipped but their replies are kept.
    """
    lines: List[str] = []
    for comment in comments:
        _render(comment, 0, lines)
    return "".join(lines)
