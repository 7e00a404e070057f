"""Digest-keyed cache of keyword validator instances."""

from __future__ import annotations

import logging
import threading
from typing import Any

from core.keywords.base import KeywordValidator, ValidatorFactory

logger = logging.getLogger("schemaops.validation")

CacheKey = tuple[str, str]


class ValidatorCache:
    """Thread-safe ``(keyword, digest)`` -> validator mapping.

    Validators are built outside the lock: two threads missing on the same
    key may both construct one, and the first stored instance wins. Entries
    are never evicted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._validators: dict[CacheKey, KeywordValidator] = {}
        self._hits = 0
        self._misses = 0

    def get_or_create(
        self,
        keyword: str,
        digest_key: str,
        digest: Any,
        factory: ValidatorFactory,
    ) -> KeywordValidator:
        key = (keyword, digest_key)
        with self._lock:
            cached = self._validators.get(key)
            if cached is not None:
                self._hits += 1
                return cached
            self._misses += 1

        logger.debug("validator cache miss keyword=%s digest=%s", keyword, digest_key)
        created = factory(digest)
        with self._lock:
            return self._validators.setdefault(key, created)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"size": len(self._validators), "hits": self._hits, "misses": self._misses}

    def __len__(self) -> int:
        with self._lock:
            return len(self._validators)
