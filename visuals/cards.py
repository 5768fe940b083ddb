"""
Synthetic HTML cards rendered through the browser capture pipeline.

Each builder returns a self-contained document sized to the capture viewport.
"""
from __future__ import annotations

import html
from typing import Optional


CARD_WIDTH = 1920
CARD_HEIGHT = 1080

X_LOGO_SVG = """
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 48 48" width="48" height="48">
  <path fill="#fff" d="M36.65 3.81h6.77L28.73 20.4 46 44.19H32.21L21.53 30.47 9.37 44.19H2.6l15.68-17.91L2 3.81h14.14l9.66 12.78L36.65 3.81zM34.3 39.96h3.75L13.86 7.64H9.83L34.3 39.96z"/>
</svg>
"""

GITHUB_LOGO_SVG = """
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 48 48" width="48" height="48">
  <path fill="#fff" d="M24 4C12.95 4 4 12.95 4 24c0 8.84 5.73 16.33 13.67 18.98.99.18 1.36-.43 1.36-.96 0-.47-.02-1.72-.03-3.38-5.56 1.21-6.73-2.68-6.73-2.68-.91-2.31-2.22-2.92-2.22-2.92-1.81-1.24.14-1.21.14-1.21 2 .14 3.06 2.06 3.06 2.06 1.78 3.05 4.67 2.17 5.81 1.66.18-1.29.7-2.17 1.27-2.67-4.44-.5-9.11-2.22-9.11-9.87 0-2.18.78-3.96 2.05-5.36-.2-.5-.89-2.53.2-5.28 0 0 1.67-.54 5.48 2.05 1.59-.44 3.3-.66 5-.67 1.7.01 3.41.23 5 .67 3.8-2.59 5.47-2.05 5.47-2.05 1.09 2.75.4 4.78.2 5.28 1.28 1.4 2.05 3.18 2.05 5.36 0 7.67-4.68 9.36-9.14 9.85.72.62 1.36 1.84 1.36 3.71 0 2.68-.02 4.84-.02 5.5 0 .53.36 1.15 1.38.96C38.28 40.32 44 32.84 44 24 44 12.95 35.05 4 24 4z"/>
</svg>
"""

# Neutral globe, used when a site icon cannot be fetched
PLACEHOLDER_ICON_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 128 128" width="128" height="128">
<rect width="128" height="128" rx="16" fill="#333"/>
<circle cx="64" cy="64" r="36" fill="none" stroke="#888" stroke-width="6"/>
<ellipse cx="64" cy="64" rx="16" ry="36" fill="none" stroke="#888" stroke-width="6"/>
<line x1="28" y1="64" x2="100" y2="64" stroke="#888" stroke-width="6"/>
</svg>"""

FONT_STACK = "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif"


def escape_html(text: Optional[str]) -> str:
    return html.escape(text or "", quote=True)


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _page(background: str, body_css: str, styles: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<style>
  body {{
    margin: 0;
    width: {CARD_WIDTH}px;
    height: {CARD_HEIGHT}px;
    background: {background};
    box-sizing: border-box;
    position: relative;
    font-family: {FONT_STACK};
    {body_css}
  }}
  .logo {{
    position: absolute;
    bottom: 40px;
    left: 40px;
  }}
{styles}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def tweet_card(full_name: str, username: str, text: str, avatar_url: Optional[str], *, max_chars: int = 400) -> str:
    """Social post: avatar, names, post text, brand mark."""
    avatar = (
        f'<img class="avatar" src="{escape_html(avatar_url)}" alt="" />'
        if avatar_url
        else f'<div class="avatar initial">{escape_html((full_name or username or "?")[:1].upper())}</div>'
    )
    styles = """
  .header { display: flex; align-items: center; margin-bottom: 40px; }
  .avatar { width: 80px; height: 80px; border-radius: 50%; margin-right: 24px; }
  .initial { background: #333; color: white; font-size: 40px; display: flex; align-items: center; justify-content: center; }
  .names { display: flex; flex-direction: column; }
  .display-name { color: white; font-size: 32px; font-weight: bold; }
  .username { color: #71767b; font-size: 24px; margin-top: 4px; }
  .tweet-text { color: white; font-size: 42px; line-height: 1.4; max-width: 1600px; white-space: pre-wrap; }
"""
    body = f"""<div class="header">
  {avatar}
  <div class="names">
    <div class="display-name">{escape_html(full_name)}</div>
    <div class="username">{escape_html(username)}</div>
  </div>
</div>
<div class="tweet-text">{escape_html(truncate_text(text, max_chars))}</div>
<div class="logo">{X_LOGO_SVG}</div>"""
    return _page(
        "#000000",
        "display: flex; flex-direction: column; justify-content: center; padding: 80px 120px;",
        styles,
        body,
    )


def preview_image_card(image_url: str) -> str:
    """Code host: the repository's social preview image on a dark canvas."""
    styles = """
  .og-image { max-width: 1800px; max-height: 1000px; object-fit: contain; }
"""
    body = f"""<img class="og-image" src="{escape_html(image_url)}" alt="" />
<div class="logo">{GITHUB_LOGO_SVG}</div>"""
    return _page("#0d1117", "display: flex; align-items: center; justify-content: center;", styles, body)


def thumbnail_card(thumbnail_url: str, title: Optional[str] = None) -> str:
    """Video platform: the video thumbnail, optionally captioned with its title."""
    styles = """
  .thumbnail { max-width: 100%; max-height: 100%; object-fit: contain; }
  .caption {
    position: absolute; left: 0; right: 0; bottom: 0;
    padding: 32px 60px; color: white; font-size: 40px; font-weight: bold;
    background: rgba(0, 0, 0, 0.6);
  }
"""
    caption = f'<div class="caption">{escape_html(title)}</div>' if title else ""
    body = f"""<img class="thumbnail" src="{escape_html(thumbnail_url)}" alt="" />
{caption}"""
    return _page("#0f0f0f", "display: flex; align-items: center; justify-content: center;", styles, body)


def fallback_card(title: str, source: str, icon_src: str) -> str:
    """Last resort: site icon, story title, source line."""
    styles = """
  .icon { width: 128px; height: 128px; margin-bottom: 32px; border-radius: 16px; }
  .title { color: white; font-size: 48px; font-weight: bold; text-align: center; max-width: 1600px; line-height: 1.3; }
  .source { color: #888; font-size: 32px; margin-top: 24px; }
"""
    body = f"""<img class="icon" src="{escape_html(icon_src)}" alt="" />
<div class="title">{escape_html(title)}</div>
<div class="source">{escape_html(source)}</div>"""
    return _page(
        "#1a1a1a",
        "display: flex; flex-direction: column; align-items: center; justify-content: center;",
        styles,
        body,
    )
