"""SourceFetcher ABC — one fetch strategy per source protocol."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

import requests

from ..config import USER_AGENT
from ..log import get_logger
from ..models import HeadlineRecord, SourceDescriptor

MAX_ITEMS = 30  # per-call cap for every protocol
MIN_TITLE_LENGTH = 11
DESCRIPTION_LENGTH = 200


class SourceFetcher(ABC):
    """Fetches recent headlines for one SourceDescriptor.

    Subclasses implement ``_fetch``; ``fetch`` wraps it so that a network
    error or a malformed payload costs only this source's contribution.
    """

    protocol: str = "unknown"

    def __init__(self, source: SourceDescriptor, timeout: float = 10.0):
        self.source = source
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def is_available(self) -> bool:
        """Check if this fetcher can run in the current environment."""
        return True

    def fetch(self, limit: int = MAX_ITEMS) -> list[HeadlineRecord]:
        limit = min(limit, MAX_ITEMS)
        try:
            return self._fetch(limit)[:limit]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            get_logger().warning("%s: fetch failed — %s", self.name, e)
            return []

    @abstractmethod
    def _fetch(self, limit: int) -> list[HeadlineRecord]:
        ...

    def _get(self, url: str, accept: str = "application/json", **kwargs) -> requests.Response:
        headers = {"User-Agent": USER_AGENT, "Accept": accept}
        headers.update(kwargs.pop("headers", {}))
        r = requests.get(url, headers=headers, timeout=self.timeout, **kwargs)
        r.raise_for_status()
        return r

    def _headline(self, title: str, url: str = "", published_at: datetime | None = None,
                  description: str | None = None, engagement: float | None = None,
                  source_name: str | None = None,
                  min_length: int = MIN_TITLE_LENGTH) -> HeadlineRecord | None:
        """Normalize one item; returns None for titles too short to use."""
        title = (title or "").strip()
        if len(title) < min_length:
            return None
        if description:
            description = description.strip()[:DESCRIPTION_LENGTH] or None
        return HeadlineRecord(
            title=title,
            url=(url or "").strip(),
            source_name=source_name or self.source.name,
            source_tier=self.source.tier,
            published_at=published_at or datetime.now(timezone.utc),
            description=description,
            engagement_score=engagement,
        )


def from_timestamp(ts) -> datetime | None:
    """Unix seconds -> aware UTC datetime."""
    if ts in (None, ""):
        return None
    return datetime.fromtimestamp(float(ts), tz=timezone.utc)


def from_iso(value: str | None) -> datetime | None:
    """ISO 8601 (with optional trailing Z) -> aware UTC datetime."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
