"""
Cache
File-per-key persistence shared by every acquisition stage
"""
from pathlib import Path
from typing import Optional, Union
import logging
import shutil

from utils.exceptions import CacheError


logger = logging.getLogger(__name__)

Payload = Union[str, bytes]


class CacheStore:
    """
    Flat directory cache, one file per key.

    Presence of a key is authoritative: there is no TTL and no invalidation
    other than ``clear()``. Keys that can change meaning must embed a hash of
    their inputs (see ``storage.keys``).
    """

    def __init__(self, cache_dir: Union[str, Path] = "./cache", debug: bool = False):
        """
        Args:
            cache_dir: Cache directory, created if absent
            debug: Log every read/write
        """
        self.cache_dir = Path(cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.debug = debug
        logger.debug(f"[Cache] Using cache directory: {self.cache_dir}")

    def path(self, key: str) -> Path:
        """Absolute file path for a key (the file may not exist yet)"""
        self._validate_key(key)
        return (self.cache_dir / key).resolve()

    def exists(self, key: str) -> bool:
        return self.path(key).is_file()

    def read(self, key: str) -> Optional[str]:
        """Read a text payload, None on miss"""
        path = self.path(key)
        if not path.is_file():
            return None
        if self.debug:
            logger.debug(f"[Cache] Reading from cache: {key}")
        return path.read_text(encoding="utf-8")

    def read_bytes(self, key: str) -> Optional[bytes]:
        """Read a payload byte-for-byte, None on miss"""
        path = self.path(key)
        if not path.is_file():
            return None
        if self.debug:
            logger.debug(f"[Cache] Reading from cache: {key}")
        return path.read_bytes()

    def write(self, key: str, payload: Payload) -> Path:
        """Write a text or bytes payload and return its path"""
        path = self.path(key)
        if self.debug:
            logger.debug(f"[Cache] Writing to cache: {key}")
        try:
            if isinstance(payload, bytes):
                path.write_bytes(payload)
            else:
                path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise CacheError(f"Failed to write cache entry {key}", {"path": str(path)}) from e
        return path

    def delete(self, key: str) -> None:
        path = self.path(key)
        if path.exists():
            path.unlink()

    def clear(self) -> None:
        """Remove every entry"""
        shutil.rmtree(self.cache_dir)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def size(self) -> int:
        return sum(1 for p in self.cache_dir.iterdir() if p.is_file())

    @staticmethod
    def _validate_key(key: str) -> None:
        if not key or key in {".", ".."} or "/" in key or "\\" in key:
            raise CacheError(f"Invalid cache key: {key!r}")


_default_cache: Optional[CacheStore] = None


def get_cache(cache_dir: Optional[str] = None) -> CacheStore:
    """
    Get the process-wide cache store.

    Args:
        cache_dir: Cache directory, defaults to ``STORAGE_CACHE_PATH``
    """
    global _default_cache

    if _default_cache is None or (cache_dir and Path(cache_dir) != _default_cache.cache_dir):
        from config import get_settings

        settings = get_settings()
        _default_cache = CacheStore(
            cache_dir=cache_dir or settings.storage.cache_path,
            debug=settings.runtime.debug,
        )
    return _default_cache
