"""Keyed cache of rendered read views with explicit invalidation.

Each cached entry belongs to one ``View``. Successful mutations report the views they
made stale (``ActionResult.revalidate``) and the API layer drops those entries, so a
cached view is only ever replaced after the database confirmed the write. Each view
keeps at most ``max_entries`` keys; the oldest entry goes first.
"""

import threading
from collections.abc import Callable, Hashable, Iterable
from typing import TypeVar

from mmanager.core.models import ActionResult, View
from mmanager.core.utils import get_logger

T = TypeVar("T")
logger = get_logger("mmanager.cache")


class ViewCache:
    """Thread-safe ``(view, key) -> value`` cache."""

    def __init__(self, enabled: bool = True, max_entries: int = 128) -> None:  # noqa: FBT001, FBT002
        """Create an empty cache; a disabled cache always calls the loader."""
        self.enabled = enabled
        self.max_entries = max_entries
        self._entries: dict[View, dict[Hashable, object]] = {}
        self._generations: dict[View, int] = {}
        self._lock = threading.Lock()

    def get_or_load(self, view: View, key: Hashable, loader: Callable[[], T]) -> T:
        """Return the cached value for ``(view, key)``, loading and storing it on a miss."""
        if not self.enabled:
            return loader()
        with self._lock:
            bucket = self._entries.get(view, {})
            if key in bucket:
                return bucket[key]
            generation = self._generations.get(view, 0)
        value = loader()
        with self._lock:
            # invalidated while loading: the value may already be stale
            if self._generations.get(view, 0) == generation:
                bucket = self._entries.setdefault(view, {})
                while bucket and len(bucket) >= self.max_entries:
                    bucket.pop(next(iter(bucket)))
                bucket[key] = value
        return value

    def invalidate(self, views: Iterable[View]) -> None:
        """Drop every entry of the given views."""
        views = list(views)
        with self._lock:
            for view in views:
                self._entries.pop(view, None)
                self._generations[view] = self._generations.get(view, 0) + 1
        if views:
            logger.debug(f"Invalidated views: {', '.join(views)}")

    def __contains__(self, item: tuple[View, Hashable]) -> bool:
        """Return whether ``(view, key)`` is currently cached."""
        view, key = item
        with self._lock:
            return key in self._entries.get(view, {})

    def confirm(self, result: ActionResult) -> ActionResult:
        """Invalidate the views a confirmed mutation made stale and pass its result through."""
        self.invalidate(result.revalidate)
        return result
