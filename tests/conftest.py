"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from deeptopics.history import StaticHistory
from deeptopics.models import HeadlineRecord, SourceDescriptor


@pytest.fixture
def now():
    """A fixed 'current time' so recency math is deterministic."""
    return datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Monotonic-style clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.value = start

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float):
        self.value += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_headline(now):
    """Factory for HeadlineRecords relative to the fixed ``now``."""
    def _make(title, source="Foreign Affairs", tier=0, hours_ago=1.0,
              engagement=None, description=None):
        return HeadlineRecord(
            title=title,
            url=f"https://example.com/{source.lower().replace(' ', '-')}/{abs(hash(title)) % 10_000}",
            source_name=source,
            source_tier=tier,
            published_at=now - timedelta(hours=hours_ago),
            description=description,
            engagement_score=engagement,
        )
    return _make


@pytest.fixture
def ceasefire_headlines(make_headline):
    """Five headlines, three tier-0 sources, same two entities, within 6 hours."""
    return [
        make_headline("Iran and Israel agree to ceasefire talks in Oman", "Foreign Affairs", hours_ago=1),
        make_headline("Israel says Iran ceasefire talks will resume", "Foreign Policy", hours_ago=2),
        make_headline("Iran warns Israel over ceasefire violations", "The Diplomat", hours_ago=3),
        make_headline("Israel and Iran ceasefire talks stall", "Foreign Affairs", hours_ago=4),
        make_headline("Oman hosts Iran and Israel ceasefire talks", "Foreign Policy", hours_ago=5),
    ]


@pytest.fixture
def rss_source():
    return SourceDescriptor("Test Feed", 1, "rss", "https://example.com/feed.xml", ("Geopolitics",))


@pytest.fixture
def empty_history():
    return StaticHistory([])
