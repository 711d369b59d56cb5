# site_crawler/crawler/models.py
"""
Data models for the SiteCrawler crawler.
"""
from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class UnitState(str, Enum):
    """Lifecycle of one normalized URL inside a crawl."""

    UNSEEN = "unseen"
    ADMITTED = "admitted"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"
    FAILED = "failed"
    DROPPED = "dropped"


@dataclass(slots=True)
class CrawlStats:
    """Counters collected by the coordinator while the crawl runs."""

    admitted: int = 0
    dispatched: int = 0
    completed: int = 0
    failed: int = 0
    dropped: int = 0
    duplicates: int = 0
    started_at: float = field(default_factory=time.monotonic)
    finished_at: Optional[float] = None

    @property
    def duration(self) -> float:
        end = self.finished_at if self.finished_at is not None else time.monotonic()
        return end - self.started_at

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("started_at")
        data.pop("finished_at")
        data["duration"] = round(self.duration, 3)
        return data


@dataclass(slots=True)
class CrawlResult:
    """Sorted visited URLs of a finished crawl plus its statistics."""

    seed: str
    urls: List[str]
    stats: CrawlStats
    drained: bool = True
