"""Recently used topics, and the filter that keeps them from repeating."""

import json
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from pathlib import Path

from .config import HISTORY_FILE
from .log import get_logger
from .models import utcnow
from .text import jaccard, significant_words

OVERLAP_THRESHOLD = 0.5


class HistoryProvider(ABC):
    """Read access to topics used in the last N days."""

    @abstractmethod
    def used_topics(self, days: int = 30) -> list[str]:
        ...


class StaticHistory(HistoryProvider):
    """Fixed in-memory list; ``days`` is ignored."""

    def __init__(self, topics=None):
        self.topics = list(topics or [])

    def used_topics(self, days: int = 30) -> list[str]:
        return list(self.topics)


class JsonHistory(HistoryProvider):
    """History kept as a JSON list of ``{"topic": ..., "used_at": iso8601}``."""

    def __init__(self, path: Path = HISTORY_FILE, clock=utcnow):
        self.path = Path(path)
        self._clock = clock

    def _entries(self) -> list[dict]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text())
        return data if isinstance(data, list) else []

    def used_topics(self, days: int = 30) -> list[str]:
        cutoff = self._clock() - timedelta(days=days)
        topics = []
        for entry in self._entries():
            try:
                used_at = datetime.fromisoformat(entry["used_at"])
            except (KeyError, TypeError, ValueError):
                continue
            if used_at >= cutoff:
                topics.append(entry.get("topic", ""))
        return [t for t in topics if t]

    def record(self, topic: str):
        """Append a topic with the current time."""
        entries = self._entries()
        entries.append({"topic": topic, "used_at": self._clock().isoformat()})
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, indent=2, ensure_ascii=False))


def load_used_topics(provider: HistoryProvider | None, days: int = 30) -> list[str]:
    """Lowercased used topics; an unreadable history counts as empty."""
    if provider is None:
        return []
    try:
        return [t.lower() for t in provider.used_topics(days)]
    except (OSError, ValueError) as e:
        get_logger().warning("History unavailable, not filtering: %s", e)
        return []


def topic_overlap(topic: str, used: str) -> float:
    """Jaccard similarity of significant words (>3 chars, no stop words)."""
    return jaccard(significant_words(topic), significant_words(used))


def is_topic_used(topic: str, used_topics: list[str], threshold: float = OVERLAP_THRESHOLD) -> bool:
    normalized = topic.lower().strip()
    for used in used_topics:
        if normalized == used.lower().strip():
            return True
        if topic_overlap(normalized, used) > threshold:
            return True
    return False


def filter_used(items: list, used_topics: list[str], threshold: float = OVERLAP_THRESHOLD,
                label=lambda c: c.topic_label) -> list:
    """Drop items whose label overlaps a recently used topic."""
    if not used_topics:
        return list(items)
    return [i for i in items if not is_topic_used(label(i), used_topics, threshold)]
