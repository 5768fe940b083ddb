from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import httpx
import pytest

from models import CoveredStory
from scrapers import HackerNewsScraper
from storage import COVERED_STORIES_KEY, CoveredStoryLedger, covered_ids
from utils.exceptions import InsufficientStoriesError, ScraperError

from conftest import make_fetcher, unreachable


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _hit(story_id: int, title: str = None, url: str = None, text: str = None) -> dict:
    return {
        "objectID": str(story_id),
        "story_id": story_id,
        "title": title or f"Story {story_id}",
        "url": url if url is not None else f"https://example.com/{story_id}",
        "story_text": text,
        "points": 100 + story_id,
    }


def _index(hits):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        assert request.url.path == "/api/v1/search"
        assert request.url.params["tags"] == "front_page"
        return httpx.Response(200, json={"hits": hits})

    return handler, requests


@pytest.fixture
def no_rate_limit(monkeypatch):
    async def _no_wait(self):
        return None

    monkeypatch.setattr(HackerNewsScraper, "_wait_for_rate_limit", _no_wait)


@pytest.mark.asyncio
async def test_discover_returns_exact_count_and_overfetches(cache, no_rate_limit) -> None:
    handler, requests = _index([_hit(i) for i in range(1, 21)])
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    stories = await scraper.discover(5, now=NOW)

    assert [story.story_id for story in stories] == [1, 2, 3, 4, 5]
    assert requests[0].url.params["hitsPerPage"] == "15"
    assert stories[0].discussion_url == "https://news.ycombinator.com/item?id=1"


@pytest.mark.asyncio
async def test_discover_zero_stories_queries_nothing(cache, no_rate_limit) -> None:
    handler, requests = _index([_hit(i) for i in range(1, 21)])
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    assert await scraper.discover(0, now=NOW) == []
    assert requests == []


@pytest.mark.asyncio
async def test_discover_skips_covered_and_noise(cache, no_rate_limit) -> None:
    CoveredStoryLedger(cache).save(
        [
            CoveredStory(id=1, covered_at=NOW - timedelta(hours=1)),
            CoveredStory(id=2, covered_at=NOW - timedelta(hours=36)),
            CoveredStory(id=3, covered_at=NOW - timedelta(hours=36, seconds=1)),
        ]
    )
    hits = [_hit(1), _hit(2), _hit(3), _hit(4, title="Ask HN: Who is hiring? (March 2026)"), _hit(5), _hit(5)]
    handler, _ = _index(hits)
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    stories = await scraper.discover(2, now=NOW)

    # 1 and 2 are still covered, 3 expired, 4 is noise, 5 is listed twice
    assert [story.story_id for story in stories] == [3, 5]


@pytest.mark.asyncio
async def test_discover_raises_when_too_few_remain(cache, no_rate_limit) -> None:
    handler, _ = _index([_hit(1), _hit(2, title="Who is hiring?")])
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    with pytest.raises(InsufficientStoriesError) as exc_info:
        await scraper.discover(3, now=NOW)

    assert exc_info.value.found == 1
    assert exc_info.value.expected == 3
    assert "Not enough stories to cover. Found 1, expected 3" in str(exc_info.value)


@pytest.mark.asyncio
async def test_discover_persists_covered_set_only_in_ci(cache, no_rate_limit, monkeypatch) -> None:
    handler, _ = _index([_hit(i) for i in range(1, 6)])
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    monkeypatch.setattr(scraper.settings.runtime, "ci", False)
    await scraper.discover(2, now=NOW)
    assert not cache.exists(COVERED_STORIES_KEY)

    monkeypatch.setattr(scraper.settings.runtime, "ci", True)
    await scraper.discover(2, now=NOW)
    stored = json.loads(cache.read(COVERED_STORIES_KEY))
    assert {entry["id"] for entry in stored} == {1, 2}

    # The next CI run moves past the covered stories
    stories = await scraper.discover(2, now=NOW + timedelta(hours=1))
    assert [story.story_id for story in stories] == [3, 4]
    assert covered_ids(CoveredStoryLedger(cache).load(now=NOW + timedelta(hours=1))) == {1, 2, 3, 4}


@pytest.mark.asyncio
async def test_discover_propagates_index_failure(cache, no_rate_limit) -> None:
    scraper = HackerNewsScraper(make_fetcher(unreachable, max_attempts=1), cache)
    with pytest.raises(ScraperError):
        await scraper.discover(1, now=NOW)


@pytest.mark.asyncio
async def test_self_text_posts_keep_raw_text(cache, no_rate_limit) -> None:
    handler, _ = _index([{"objectID": "9", "title": "Ask HN: Favorite tools?", "url": None, "story_text": "<p>Go</p>"}])
    scraper = HackerNewsScraper(make_fetcher(handler), cache)

    [story] = await scraper.discover(1, now=NOW)
    assert story.story_id == 9
    assert story.url is None
    assert story.raw_text == "<p>Go</p>"
    assert story.points == 0


@pytest.mark.asyncio
async def test_fetch_comments_builds_recursive_tree(cache, no_rate_limit) -> None:
    item = {
        "id": 1,
        "type": "story",
        "title": "Story",
        "children": [
            {
                "id": 2,
                "author": "alice",
                "text": "<p>Top</p>",
                "children": [{"id": 3, "author": "bob", "text": "Reply", "children": []}],
            },
            {"id": 4, "author": "carol", "text": "Second", "children": []},
        ],
    }

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/items/1"
        return httpx.Response(200, json=item)

    comments = await HackerNewsScraper(make_fetcher(handler), cache).fetch_comments(1)

    assert [comment.author for comment in comments] == ["alice", "carol"]
    assert comments[0].children[0].author == "bob"
    assert comments[0].children[0].children == []


@pytest.mark.asyncio
async def test_get_details(cache, no_rate_limit) -> None:
    items = {
        "/api/v1/items/1": {"id": 1, "type": "story", "title": "A story", "url": "https://example.com", "points": 7},
        "/api/v1/items/2": {"id": 2, "type": "comment", "text": "not a story"},
    }

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=items[request.url.path])

    scraper = HackerNewsScraper(make_fetcher(handler), cache)
    story = await scraper.get_details(1)
    assert story.title == "A story"
    assert story.points == 7
    assert await scraper.get_details(2) is None
