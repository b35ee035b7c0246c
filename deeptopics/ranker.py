"""Final ranking: SemanticMeat + depth, penalties, time decay, confidence.

    base   = 0.4 * SemanticMeat + 0.6 * Depth       (x up to 1.10 with Meat-Score)
    score  = base * (1 - shallow) * (1 - negative)
    score *= decay(hours since last headline)       (never below 0.5)
    final  = 1000 * WilsonLowerBound(score / 1000, n)

n = source count + headline count / 3, plus a virtual-sample bonus for a very
fresh top-tier report (see VirtualSeedPolicy).
"""

import math
import re
from datetime import datetime

from scipy import stats

from .config import DEFAULT_PROFILE, CategoryProfile, VirtualSeedPolicy
from .depth import cluster_depth, negative_penalty
from .log import get_logger
from .models import ScoreBreakdown, TopicCluster, hours_between, utcnow
from .rules import find_tech_terms

SEMANTIC_WEIGHT = 0.4
DEPTH_WEIGHT = 0.6
MEAT_BOOST = 0.10
DECAY_FLOOR = 0.5
CONFIDENCE = 0.80

_PROPER_AFTER_LOWER = re.compile(r"\b[a-z]+\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b")
_CAPITALIZED_RUN = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)+)\b")


def semantic_meat(text: str) -> int:
    """(proper-noun phrases + tech terms) / tokens, x5, capped, scaled to 0-1000."""
    tokens = text.split()
    if not tokens:
        return 0
    proper = {m.group(1) for m in _PROPER_AFTER_LOWER.finditer(text)}
    proper.update(m.group(1) for m in _CAPITALIZED_RUN.finditer(text))
    ratio = (len(proper) + len(find_tech_terms(text))) / len(tokens)
    return round(min(ratio * 5, 1.0) * 1000)


def cluster_semantic_meat(cluster: TopicCluster) -> int:
    """Best single headline, so one dense title is not diluted by the rest."""
    return max((semantic_meat(t) for t in cluster.titles), default=0)


def time_decay(hours_old: float, gravity: float, floor: float = DECAY_FLOOR) -> float:
    """Half-life decay (``gravity`` hours) that levels off at ``floor``."""
    hours_old = max(hours_old, 0.0)
    return floor + (1 - floor) * 0.5 ** (hours_old / max(gravity, 1e-6))


def wilson_lower_bound(p: float, n: float, confidence: float = CONFIDENCE) -> float:
    """Lower bound of the Wilson score interval for proportion p over n samples."""
    if n <= 0:
        return 0.0
    p = min(max(p, 0.0), 1.0)
    z = stats.norm.ppf(1 - (1 - confidence) / 2)
    return (p + z * z / (2 * n) - z * math.sqrt((p * (1 - p) + z * z / (4 * n)) / n)) / (1 + z * z / n)


def sample_size(cluster: TopicCluster) -> float:
    return cluster.source_count + len(cluster.headlines) / 3


def virtual_samples(cluster: TopicCluster, policy: VirtualSeedPolicy, now: datetime) -> float:
    """Bonus samples when a top-tier source reported within the policy window."""
    if not policy.enabled:
        return 0.0
    for h in cluster.headlines:
        if h.source_tier <= policy.max_tier and hours_between(h.published_at, now) <= policy.max_age_hours:
            return policy.bonus_samples
    return 0.0


def score_breakdown(semantic: int, depth: int, shallow: float, negative: float,
                    hours_old: float, samples: float, gravity: float = DEFAULT_PROFILE.decay_gravity,
                    meat: int | None = None, confidence: float = CONFIDENCE) -> ScoreBreakdown:
    b = ScoreBreakdown(semantic_meat=semantic)
    b.base = SEMANTIC_WEIGHT * semantic + DEPTH_WEIGHT * depth
    if meat is not None:
        b.base *= 1 + MEAT_BOOST * min(max(meat, 0), 1000) / 1000
        b.notes.append(f"meat boost {meat}")
    b.after_penalties = b.base * (1 - shallow) * (1 - negative)
    b.decay = time_decay(hours_old, gravity)
    decayed = min(b.after_penalties * b.decay, 1000)
    bound = wilson_lower_bound(decayed / 1000, samples, confidence)
    b.confidence = bound / (decayed / 1000) if decayed > 0 else 0.0
    b.final = round(bound * 1000)
    return b


def calculate_combined_score(semantic: int, depth: int, shallow: float, negative: float,
                             hours_old: float, samples: float, gravity: float = DEFAULT_PROFILE.decay_gravity,
                             meat: int | None = None, confidence: float = CONFIDENCE) -> int:
    """Final 0-1000 ranking score; non-increasing in both penalties."""
    return score_breakdown(semantic, depth, shallow, negative, hours_old, samples,
                           gravity, meat, confidence).final


def rank_clusters(clusters: list[TopicCluster], profile: CategoryProfile = DEFAULT_PROFILE,
                  seed_policy: VirtualSeedPolicy | None = None,
                  now: datetime | None = None) -> list[TopicCluster]:
    """Attach depth, penalties and final score; sort best first, hotness breaks ties.

    Only clusters whose Meat-Score came from the enrichment service earn the
    Meat-Score boost.
    """
    now = now or utcnow()
    seed_policy = seed_policy or VirtualSeedPolicy()
    logger = get_logger()

    ranked = []
    for cluster in clusters:
        depth = cluster_depth(cluster)
        negative = negative_penalty([cluster.topic_label, *cluster.titles])
        semantic = cluster_semantic_meat(cluster)
        meat = cluster.meat.meat_score if cluster.meat and cluster.enriched else None
        b = score_breakdown(
            semantic, depth.depth_score, depth.shallow_penalty, negative,
            hours_between(cluster.last_seen_at, now),
            sample_size(cluster) + virtual_samples(cluster, seed_policy, now),
            profile.decay_gravity, meat,
        )
        logger.debug(
            "[%s] semantic=%d depth=%d shallow=%.2f negative=%.2f decay=%.2f final=%d %s",
            cluster.topic_label[:30], semantic, depth.depth_score, depth.shallow_penalty,
            negative, b.decay, b.final, "; ".join(b.notes),
        )
        ranked.append(cluster.with_scores(
            depth=depth,
            negative_penalty=negative,
            semantic_meat=semantic,
            final_score=b.final,
        ))

    ranked.sort(key=lambda c: (c.final_score, c.hotness_score), reverse=True)
    return ranked
