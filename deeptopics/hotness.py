"""First-pass popularity score from cluster-internal signals only."""

from datetime import datetime

from .config import TIER_WEIGHTS
from .models import TopicCluster, hours_between, utcnow

WEIGHTS = {
    "diversity": 0.30,
    "quality": 0.25,
    "recency": 0.20,
    "velocity": 0.15,
    "engagement": 0.10,
}

# (max hours since last headline, score)
RECENCY_STEPS = [(6, 100), (12, 80), (24, 60), (48, 40)]
RECENCY_FLOOR = 20


def quality_points(cluster: TopicCluster) -> int:
    """Sum of per-headline tier weights (uncapped)."""
    return sum(TIER_WEIGHTS.get(h.source_tier, TIER_WEIGHTS[3]) for h in cluster.headlines)


def mentions_per_hour(cluster: TopicCluster) -> float:
    return len(cluster.headlines) / max(cluster.time_span_hours, 1)


def recency_points(hours_old: float) -> int:
    for limit, score in RECENCY_STEPS:
        if hours_old < limit:
            return score
    return RECENCY_FLOOR


def engagement_points(cluster: TopicCluster) -> float:
    """Engagement from HN/Reddit scores: each headline adds at most 10, total 50."""
    total = 0.0
    for h in cluster.headlines:
        if h.engagement_score:
            total += min(h.engagement_score / 100, 10)
    return min(total, 50)


def hotness_score(cluster: TopicCluster, now: datetime | None = None) -> int:
    """Weighted 0-100 sub-scores scaled to 0-1000."""
    now = now or utcnow()
    parts = {
        "diversity": min(cluster.source_count * 15, 100),
        "quality": min(quality_points(cluster), 100),
        "recency": recency_points(hours_between(cluster.last_seen_at, now)),
        "velocity": min(mentions_per_hour(cluster) * 20, 100),
        "engagement": engagement_points(cluster),
    }
    total = sum(parts[k] * w for k, w in WEIGHTS.items())
    return round(total * 10)


def rank_by_hotness(clusters: list[TopicCluster], now: datetime | None = None) -> list[TopicCluster]:
    """Attach hotness, quality and velocity; sort hottest first."""
    now = now or utcnow()
    scored = [
        c.with_scores(
            hotness_score=hotness_score(c, now),
            quality_score=quality_points(c),
            velocity=mentions_per_hour(c),
        )
        for c in clusters
    ]
    scored.sort(key=lambda c: c.hotness_score, reverse=True)
    return scored
