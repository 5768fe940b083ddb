"""Covered-story ledger: which story ids went out recently."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json
import logging
from typing import Any, Iterable, List, Optional, Set

from models import CoveredStory

from .cache import CacheStore
from .keys import COVERED_STORIES_KEY


logger = logging.getLogger(__name__)

DEFAULT_RETENTION = timedelta(hours=36)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_datetime(value: Any) -> Optional[datetime]:
    text = str(value or "").strip()
    if not text:
        return None
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def is_expired(record: CoveredStory, *, now: datetime, retention: timedelta = DEFAULT_RETENTION) -> bool:
    """A record exactly ``retention`` old is still live; anything older is expired."""
    return now - record.covered_at > retention


def prune_expired(
    records: Iterable[CoveredStory],
    *,
    now: datetime,
    retention: timedelta = DEFAULT_RETENTION,
) -> List[CoveredStory]:
    kept: List[CoveredStory] = []
    for record in records:
        if is_expired(record, now=now, retention=retention):
            logger.info(
                f"[Covered] Story {record.id} was covered more than "
                f"{retention.total_seconds() / 3600:g} hours ago. Removing from covered story cache."
            )
            continue
        kept.append(record)
    return kept


def covered_ids(records: Iterable[CoveredStory]) -> Set[int]:
    return {record.id for record in records}


class CoveredStoryLedger:
    """Reads and writes the ``covered-stories`` cache entry."""

    def __init__(self, cache: CacheStore, *, retention: timedelta = DEFAULT_RETENTION):
        self.cache = cache
        self.retention = retention

    def load(self, *, now: Optional[datetime] = None) -> List[CoveredStory]:
        """Return the non-expired covered stories."""
        raw = self.cache.read(COVERED_STORIES_KEY)
        if not raw:
            return []

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"[Covered] Ignoring unreadable covered-story cache: {e}")
            return []

        records: List[CoveredStory] = []
        for entry in payload if isinstance(payload, list) else []:
            if not isinstance(entry, dict) or entry.get("id") is None:
                continue
            covered_at = _parse_datetime(entry.get("coveredAt") or entry.get("covered_at"))
            if covered_at is None:
                continue
            try:
                story_id = int(entry["id"])
            except (TypeError, ValueError):
                continue
            records.append(CoveredStory(id=story_id, covered_at=covered_at))

        return prune_expired(records, now=now or _utcnow(), retention=self.retention)

    def save(self, records: Iterable[CoveredStory]) -> None:
        payload = [
            {"id": record.id, "coveredAt": record.covered_at.astimezone(timezone.utc).isoformat()}
            for record in records
        ]
        self.cache.write(COVERED_STORIES_KEY, json.dumps(payload))
