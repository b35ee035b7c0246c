"""RSS/Atom feed fetcher."""

import calendar
import re
from datetime import datetime, timezone

import feedparser

from .base import SourceFetcher

_TAGS = re.compile(r"<[^>]+>")


class RSSFetcher(SourceFetcher):
    protocol = "rss"

    def _fetch(self, limit: int):
        r = self._get(self.source.endpoint, accept="application/rss+xml, application/xml, text/xml")
        feed = feedparser.parse(r.content)
        if feed.bozo and not feed.entries:
            raise ValueError(f"unparseable feed: {feed.get('bozo_exception')}")

        headlines = []
        for entry in feed.entries:
            title = _TAGS.sub("", entry.get("title", ""))
            summary = _TAGS.sub("", entry.get("summary", "")) or None
            h = self._headline(
                title,
                url=entry.get("link", ""),
                published_at=_entry_date(entry),
                description=summary,
            )
            if h:
                headlines.append(h)
            if len(headlines) >= limit:
                break
        return headlines


def _entry_date(entry) -> datetime | None:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    # feedparser normalizes to UTC struct_time
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
