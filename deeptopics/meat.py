"""Meat-Score: entity complexity, mention velocity, sentiment spread, linkage.

    M = alpha * (E x Vv) + beta * (Svar x L), scaled to 0-1000

E  entity density   unique entities / article count
Vv velocity         change in mention volume, last 12h vs previous 12h
Svar sentiment      std dev of article tone
L  linkage          unique referring domains
"""

import math

from .enrichment import entities_from_articles
from .models import EnrichmentArticle, MeatScoreComponents, TopicCluster, VelocityWindow

ALPHA = 0.6
BETA = 0.4

NORMALIZATION = {
    "entity_density": 10,       # unique entities per article
    "velocity": 5,              # growth multiplier
    "sentiment_variance": 50,   # tone std dev
    "linkage": 20,              # unique domains
    "fallback_keywords": 5,
}


def _clamp(value: float) -> float:
    return max(0.0, min(value, 1.0))


def std_dev(values: list[float]) -> float:
    if len(values) < 2:
        return 0.0
    mean = sum(values) / len(values)
    return math.sqrt(sum((v - mean) ** 2 for v in values) / len(values))


def entity_density(articles: list[EnrichmentArticle], cluster_keywords: list) -> float:
    if not articles:
        return _clamp(len(cluster_keywords) / NORMALIZATION["fallback_keywords"])
    density = len(entities_from_articles(articles)) / len(articles)
    return _clamp(density / NORMALIZATION["entity_density"])


def velocity(window: VelocityWindow) -> float:
    """Raw growth in [-1, inf) mapped onto [0, 1]; flat volume gives ~0.17."""
    raw = (window.recent_12h - window.previous_12h) / max(window.previous_12h, 1)
    return _clamp((raw + 1) / (NORMALIZATION["velocity"] + 1))


def sentiment_variance(articles: list[EnrichmentArticle]) -> float:
    if len(articles) < 2:
        return 0.0
    return _clamp(std_dev([a.tone for a in articles]) / NORMALIZATION["sentiment_variance"])


def linkage(articles: list[EnrichmentArticle], cluster_sources: list) -> float:
    domains = {a.domain.lower() for a in articles if a.domain}
    domains.update(s.lower() for s in cluster_sources)
    return _clamp(len(domains) / NORMALIZATION["linkage"])


def _combine(e, vv, svar, link, alpha, beta) -> MeatScoreComponents:
    raw = alpha * (e * vv) + beta * (svar * link)
    return MeatScoreComponents(
        entity_density=round(e, 2),
        velocity=round(vv, 2),
        sentiment_variance=round(svar, 2),
        linkage=round(link, 2),
        meat_score=max(0, min(round(raw * 1000), 1000)),
    )


def meat_score(cluster: TopicCluster, articles: list[EnrichmentArticle], window: VelocityWindow,
               alpha: float = ALPHA, beta: float = BETA) -> MeatScoreComponents:
    """Meat-Score from enrichment data."""
    return _combine(
        entity_density(articles, cluster.keywords),
        velocity(window),
        sentiment_variance(articles),
        linkage(articles, cluster.source_names),
        alpha, beta,
    )


def meat_score_fallback(cluster: TopicCluster, alpha: float = ALPHA, beta: float = BETA) -> MeatScoreComponents:
    """Estimate from the cluster alone when enrichment is unavailable."""
    return _combine(
        _clamp(len(cluster.keywords) / NORMALIZATION["fallback_keywords"]),
        _clamp(cluster.velocity / NORMALIZATION["velocity"]),
        0.0,
        _clamp(cluster.source_count / NORMALIZATION["linkage"]),
        alpha, beta,
    )


def meat_score_label(score: int) -> str:
    if score >= 400:
        return "Prime Cut"
    if score >= 250:
        return "Choice"
    if score >= 150:
        return "Select"
    return "Standard"
