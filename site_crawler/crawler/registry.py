# site_crawler/crawler/registry.py
"""
Visited registry: the single source of truth for "already seen" URLs.
"""
from __future__ import annotations

import threading
from typing import Iterable, List, Set


class VisitedRegistry:
    """Insert-only set of normalized URLs with an atomic admission gate."""

    def __init__(self, urls: Iterable[str] = ()) -> None:
        self._lock = threading.Lock()
        self._urls: Set[str] = set(urls)

    def add_if_absent(self, url: str) -> bool:
        """Insert *url*; return True only for the first caller that inserts it."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def contains(self, url: str) -> bool:
        """Best-effort membership test; may be stale under concurrent inserts."""
        return url in self._urls

    __contains__ = contains

    def sorted_snapshot(self) -> List[str]:
        """Return every URL in ascending lexicographic order."""
        with self._lock:
            return sorted(self._urls)

    def __len__(self) -> int:
        return len(self._urls)

    def __repr__(self) -> str:
        return f"VisitedRegistry(size={len(self)})"
