from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Union
import json
import logging
import time

from src.cache.json_encoder import CacheEncoder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    age: float  # seconds since the value was stored


class FileCache:
    """
    Key-value cache with one JSON file per key.

    Entries never expire on their own; callers compare ``CacheEntry.age``
    against their own TTL.
    """

    def __init__(self, directory: Union[str, Path], clock: Callable[[], float] = time.time):
        self.directory = Path(directory)
        self.clock = clock

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the stored value and its age, or None on a miss"""
        path = self._path(key)
        if not path.exists():
            return None

        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
            stored_at = float(payload["stored_at"])
            value = payload["value"]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable cache entry {path}: {str(e)}")
            return None

        return CacheEntry(value=value, age=max(0.0, self.clock() - stored_at))

    def put(self, key: str, value: Any):
        """Store ``value`` under ``key``, replacing any previous entry"""
        self.directory.mkdir(parents=True, exist_ok=True)
        payload = {"stored_at": self.clock(), "value": value}
        self._path(key).write_text(json.dumps(payload, cls=CacheEncoder, ensure_ascii=False), encoding="utf-8")
        logger.debug(f"Cached {key} in {self.directory}")
