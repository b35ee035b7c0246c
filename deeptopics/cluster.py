"""Greedy single-pass headline clustering by keyword overlap."""

from collections import Counter
from datetime import datetime, timedelta

from .config import DEFAULT_PROFILE, CategoryProfile
from .log import get_logger
from .models import HeadlineRecord, TopicCluster, utcnow
from .text import extract_keywords, jaccard

MIN_KEYWORDS = 2
LABEL_KEYWORDS = 3
LABEL_MAX_KEYWORD_CHARS = 30
LABEL_MAX_TITLE_CHARS = 50
LABEL_TITLE_WORDS = 8


def seed_order(headlines: list[HeadlineRecord], window_hours: int = 72,
               now: datetime | None = None) -> list[HeadlineRecord]:
    """Headlines inside the recency window, best tier first, newest first."""
    now = now or utcnow()
    cutoff = now - timedelta(hours=window_hours)
    recent = [h for h in headlines if h.published_at > cutoff]
    recent.sort(key=lambda h: h.published_at, reverse=True)
    recent.sort(key=lambda h: h.source_tier)
    return recent


def find_matching_cluster(keywords: list, clusters: list[TopicCluster],
                          threshold: float) -> TopicCluster | None:
    """Most similar cluster at or above threshold; the earliest cluster wins ties."""
    best, best_score = None, 0.0
    for cluster in clusters:
        score = jaccard(keywords, cluster.keywords)
        if score >= threshold and score > best_score:
            best, best_score = cluster, score
    return best


def cluster_headlines(headlines: list[HeadlineRecord],
                      profile: CategoryProfile = DEFAULT_PROFILE,
                      now: datetime | None = None) -> list[TopicCluster]:
    """Group headlines into topic clusters.

    O(headlines x clusters). Clusters with fewer distinct sources than
    ``profile.min_sources`` are dropped; survivors get a readable label.
    """
    clusters = []
    skipped = 0
    for headline in seed_order(headlines, profile.recency_window_hours, now):
        keywords = extract_keywords(headline.title)
        if len(keywords) < MIN_KEYWORDS:
            skipped += 1
            continue

        match = find_matching_cluster(keywords, clusters, profile.similarity_threshold)
        if match is not None:
            match.merge(headline, keywords)
        else:
            clusters.append(TopicCluster.seed(headline, keywords))

    significant = [c for c in clusters if c.source_count >= profile.min_sources]
    for cluster in significant:
        cluster.topic_label = topic_label(cluster)

    get_logger().debug(
        "Clustering: %d clusters, %d kept (min %d sources), %d headlines skipped",
        len(clusters), len(significant), profile.min_sources, skipped,
    )
    return significant


def topic_label(cluster: TopicCluster) -> str:
    """Readable name: top keywords when there are enough, else the lead title."""
    counts = Counter()
    for title in cluster.titles:
        counts.update(extract_keywords(title))
    top = [word for word, _ in counts.most_common(LABEL_KEYWORDS)]

    if len(top) >= 2:
        label = " ".join(_capitalize(w) for w in top)
        return label[:LABEL_MAX_KEYWORD_CHARS] + "..." if len(label) > LABEL_MAX_KEYWORD_CHARS else label

    earliest = min(cluster.headlines, key=lambda h: h.published_at)
    words = [w for w in earliest.title.split() if len(w) > 2][:LABEL_TITLE_WORDS]
    label = " ".join(words)
    return label[:LABEL_MAX_TITLE_CHARS] + "..." if len(label) > LABEL_MAX_TITLE_CHARS else label


def _capitalize(phrase: str) -> str:
    return " ".join(p[:1].upper() + p[1:] for p in phrase.split())
