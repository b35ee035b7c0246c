"""GDELT DOC 2.0 article search, the optional source of sentiment and velocity data.

Free API, no auth. Every failure mode (timeout, HTTP error, bad JSON, no
articles) comes back as an empty list; callers score with a fallback.
"""

import json
import time
from datetime import datetime, timedelta, timezone

import requests

from .cache import TTLCache
from .config import USER_AGENT
from .log import get_logger, log
from .models import EnrichmentArticle, VelocityWindow, utcnow
from .text import extract_entities

GDELT_DOC_API = "https://api.gdeltproject.org/api/v2/doc/doc"
CACHE_TTL = 30 * 60
REQUEST_TIMEOUT = 10
MAX_RECORDS = 100
CHUNK_SIZE = 16 * 1024
DEFAULT_TIMESPAN_HOURS = 24
SEEN_DATE_FORMATS = ("%Y%m%dT%H%M%SZ", "%Y%m%d%H%M%S")


def build_query(keywords: list[str]) -> str:
    """OR-join keywords, quoting phrases."""
    terms = []
    for k in keywords:
        cleaned = k.strip().replace('"', "")
        if not cleaned:
            continue
        terms.append(f'"{cleaned}"' if " " in cleaned else cleaned)
    if len(terms) > 1:
        return "(" + " OR ".join(terms) + ")"
    return terms[0] if terms else ""


def parse_tone(raw) -> float:
    """GDELT tone is a number or "avg,pos,neg,polarity,..."; keep the average."""
    if raw in (None, ""):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(str(raw).split(",")[0])
    except ValueError:
        return 0.0


def parse_seen_date(value: str) -> datetime | None:
    for fmt in SEEN_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).replace(tzinfo=timezone.utc)
        except (TypeError, ValueError):
            continue
    return None


class EnrichmentClient:
    """Article search with an in-process TTL cache keyed by (keywords, timespan)."""

    def __init__(self, cache=None, timeout: float = REQUEST_TIMEOUT, url: str = GDELT_DOC_API,
                 clock=time.monotonic):
        self.cache = cache if cache is not None else TTLCache(CACHE_TTL)
        self.timeout = timeout
        self.url = url
        self.clock = clock

    def search(self, keywords: list[str], timespan_hours: int = DEFAULT_TIMESPAN_HOURS) -> list[EnrichmentArticle]:
        query = build_query(keywords)
        if not query:
            return []

        cache_key = (tuple(sorted(keywords)), timespan_hours)
        cached = self.cache.get(cache_key)
        if cached is not None:
            get_logger().debug("Enrichment cache hit: %s", ", ".join(keywords))
            return cached

        params = {
            "query": query,
            "mode": "artlist",
            "maxrecords": str(MAX_RECORDS),
            "format": "json",
            "timespan": f"{timespan_hours}h",
            "sort": "datedesc",
        }
        try:
            data = json.loads(self._download(params))
        except requests.Timeout:
            get_logger().warning("Enrichment timeout for: %s", ", ".join(keywords))
            return []
        except (requests.RequestException, ValueError) as e:
            get_logger().warning("Enrichment error for %s: %s", ", ".join(keywords), e)
            return []

        articles = [
            EnrichmentArticle(
                url=a.get("url", ""),
                title=a.get("title", ""),
                seen_date=a.get("seendate", ""),
                domain=a.get("domain", ""),
                language=a.get("language") or "en",
                country_code=a.get("sourcecountry") or "unknown",
                tone=parse_tone(a.get("tone")),
            )
            for a in (data.get("articles") or [])
        ]
        if not articles:
            log(f"Enrichment: no articles for {', '.join(keywords)}")
            return []

        self.cache.set(cache_key, articles)
        return articles

    def _download(self, params: dict) -> bytes:
        """GET the article list, giving up once ``timeout`` seconds have passed in total.

        ``requests`` applies its timeout per connect/read step, so a response
        that trickles in is cut off here between chunks.
        """
        deadline = self.clock() + self.timeout
        r = requests.get(
            self.url,
            params=params,
            headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            timeout=self.timeout,
            stream=True,
        )
        try:
            r.raise_for_status()
            chunks = []
            for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                if self.clock() > deadline:
                    raise requests.Timeout(f"no complete response within {self.timeout}s")
                chunks.append(chunk)
            return b"".join(chunks)
        finally:
            r.close()

    def velocity(self, keywords: list[str], now: datetime | None = None) -> VelocityWindow:
        """Article counts in the last 12h vs the 12h before, from the 24h list."""
        now = now or utcnow()
        boundary = now - timedelta(hours=12)
        recent = previous = 0
        for article in self.search(keywords, 24):
            seen = parse_seen_date(article.seen_date)
            if seen is None:
                continue
            if seen > boundary:
                recent += 1
            else:
                previous += 1
        return VelocityWindow(recent_12h=recent, previous_12h=previous)

    def clear_cache(self):
        self.cache.clear()


def entities_from_articles(articles: list[EnrichmentArticle]) -> list[str]:
    """Unique entities across all article titles, case-insensitive."""
    seen = set()
    out = []
    for article in articles:
        for entity in extract_entities(article.title):
            if entity not in seen:
                seen.add(entity)
                out.append(entity)
    return out
