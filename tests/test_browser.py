from __future__ import annotations

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
import pytest

from browser import BrowserConfig, HIDE_ELEMENTS_CSS
from browser.config import CLEANUP_SCRIPT
from utils.exceptions import BotProtectionError, RenderError

from conftest import FakePage, article_html, make_renderer


@pytest.mark.asyncio
async def test_render_waits_for_network_idle_and_returns_html() -> None:
    page = FakePage(html=article_html())
    html = await make_renderer(page).render("https://example.com/post")

    assert "work-stealing" in html
    assert page.goto_calls == [("https://example.com/post", "networkidle", 15000)]


@pytest.mark.asyncio
async def test_render_retries_with_dom_ready_only_after_timeout() -> None:
    page = FakePage(html=article_html(), goto_errors=[PlaywrightTimeoutError("idle timeout")])
    await make_renderer(page).render("https://example.com/post")

    assert [call[1] for call in page.goto_calls] == ["networkidle", "domcontentloaded"]
    assert page.goto_calls[1][2] == 30000


@pytest.mark.asyncio
async def test_render_detects_bot_protection() -> None:
    page = FakePage(html="<html>challenge</html>", body_text="Just a moment... Checking your browser")
    with pytest.raises(BotProtectionError):
        await make_renderer(page).render("https://protected.example/")


@pytest.mark.asyncio
async def test_render_wraps_launch_failures() -> None:
    with pytest.raises(RenderError):
        await make_renderer(None).render("https://example.com/")


@pytest.mark.asyncio
async def test_each_call_uses_a_fresh_session() -> None:
    sessions = []
    renderer = make_renderer(FakePage(html=article_html()), sessions)
    await renderer.render("https://example.com/a")
    await renderer.render("https://example.com/b")

    assert len(sessions) == 2
    assert all(isinstance(config, BrowserConfig) for config in sessions)


@pytest.mark.asyncio
async def test_capture_hides_overlays_and_writes_png(tmp_path) -> None:
    page = FakePage(html=article_html())
    target = tmp_path / "shots" / "screenshot-1.png"

    path = await make_renderer(page).capture("https://example.com/post", target)

    assert path == target
    assert path.read_bytes().startswith(b"\x89PNG")
    assert page.styles == [HIDE_ELEMENTS_CSS]
    assert CLEANUP_SCRIPT in page.evaluated


@pytest.mark.asyncio
async def test_capture_refuses_challenge_pages(tmp_path) -> None:
    page = FakePage(body_text="Access denied")
    with pytest.raises(BotProtectionError):
        await make_renderer(page).capture("https://protected.example/", tmp_path / "shot.png")
    assert page.screenshots == []


@pytest.mark.asyncio
async def test_capture_html_renders_card(tmp_path) -> None:
    page = FakePage()
    path = await make_renderer(page).capture_html("<html><body>card</body></html>", tmp_path / "card.png")

    assert path.exists()
    assert page.html == "<html><body>card</body></html>"
    assert page.goto_calls == []


def test_config_blocks_tracker_subdomains() -> None:
    config = BrowserConfig()
    assert config.is_blocked_host("securepubads.g.doubleclick.net")
    assert config.is_blocked_host("cdn.cookielaw.org")
    assert not config.is_blocked_host("example.com")
    assert "--disable-blink-features=AutomationControlled" in config.launch_args
