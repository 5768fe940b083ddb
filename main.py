"""CLI entrypoint: acquire today's stories and print a preview."""

from __future__ import annotations

import argparse
import asyncio
import logging

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from pipeline import AcquisitionPipeline, render_comment_tree
from utils.exceptions import RecapError
from utils.logger import setup_logger


logger = logging.getLogger(__name__)

# Preview goes to stdout, logs to stderr
output = Console()


def _preview(results) -> Table:
    table = Table(title="Acquired stories", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("HN link")
    table.add_column("Link")
    table.add_column("Points", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Source")
    table.add_column("Text")
    table.add_column("Image")
    for index, acquired in enumerate(results, 1):
        story = acquired.story
        table.add_row(
            str(index),
            escape(story.title),
            story.discussion_url,
            story.url or "-",
            str(story.points),
            str(len(acquired.comments)),
            escape(acquired.content.source),
            f"{acquired.content.method.value} ({len(acquired.text)} chars)",
            f"{acquired.capture.origin.value}: {acquired.capture.path}" if acquired.capture else "-",
        )
    return table


async def _run(count: int, story_id: int = None, show_comments: bool = False) -> int:
    pipeline = AcquisitionPipeline.from_settings()
    if story_id:
        story = await pipeline.scraper.get_details(story_id)
        if story is None:
            logger.error(f"Item {story_id} is not a story")
            return 1
        results = [await pipeline.acquire_story(story)]
    else:
        results = await pipeline.run(count)

    output.print(_preview(results))
    if show_comments:
        for acquired in results:
            output.rule(acquired.story.title)
            output.print(render_comment_tree(acquired.comments) or "(no comments)", markup=False)
    return 0


def main() -> None:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Hacker News recap content acquisition")
    parser.add_argument("--count", type=int, default=settings.hackernews.story_count, help="stories to acquire")
    parser.add_argument("--story-id", type=int, default=None, help="acquire a single story by id")
    parser.add_argument("--comments", action="store_true", help="print comment transcripts")
    args = parser.parse_args()

    setup_logger(debug=settings.runtime.debug)
    try:
        code = asyncio.run(_run(args.count, args.story_id, args.comments))
    except RecapError as e:
        logger.error(str(e))
        code = 1
    raise SystemExit(code)


if __name__ == "__main__":
    main()
