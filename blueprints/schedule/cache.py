# blueprints/schedule/cache.py
from __future__ import annotations
import enum
import logging
import threading
from typing import Any, Callable, Dict, Mapping

log = logging.getLogger(__name__)

_MISSING = object()


class CacheType(str, enum.Enum):
    SCHEDULES = "schedules"
    ROOMS = "rooms"
    FACULTY = "faculty"
    PREFERENCES = "preferences"


class SnapshotCache:
    """
    "Fetch once, reuse until invalidated" для снимка семестра и справочников.

    У каждого вида свой lock: промах блокирует вызывающего до конца загрузки,
    параллельные вызовы ждут одну и ту же загрузку. Если загрузчик упал,
    в кэш ничего не пишется и следующий get() пробует снова.
    """

    def __init__(self, loaders: Mapping[CacheType, Callable[[], Any]]):
        self._loaders: Dict[CacheType, Callable[[], Any]] = dict(loaders)
        self._values: Dict[CacheType, Any] = {}
        self._locks: Dict[CacheType, threading.Lock] = {k: threading.Lock() for k in CacheType}

    def get(self, kind: CacheType, force_refresh: bool = False) -> Any:
        kind = CacheType(kind)
        if not force_refresh:
            value = self._values.get(kind, _MISSING)
            if value is not _MISSING:
                return value
        with self._locks[kind]:
            if not force_refresh:
                value = self._values.get(kind, _MISSING)
                if value is not _MISSING:
                    return value
            loader = self._loaders.get(kind)
            if loader is None:
                raise KeyError(f"no loader registered for {kind.value}")
            value = loader()
            self._values[kind] = value
            log.debug("cache filled", extra={"event": "cache_fill", "cache": kind.value})
            return value

    def invalidate(self, *kinds: CacheType) -> None:
        for kind in kinds:
            kind = CacheType(kind)
            with self._locks[kind]:
                self._values.pop(kind, None)
            log.info("cache invalidated", extra={"event": "cache_invalidate", "cache": kind.value})

    def invalidate_all(self) -> None:
        self.invalidate(*CacheType)

    def is_cached(self, kind: CacheType) -> bool:
        return CacheType(kind) in self._values
