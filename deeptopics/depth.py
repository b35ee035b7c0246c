"""Depth score: investigation-worthiness vs shallow popularity.

Rewards systemic impact, controversy and emerging patterns; penalizes
product updates, patches and releases. Pure text heuristics, no I/O.
"""

import re

from .models import DepthScoreComponents, TopicCluster
from .rules import NEGATIVE_RULES, SHALLOW_RULES, SYSTEMIC_EXCLUSIONS

SYSTEMIC_IMPACT_KEYWORDS = {
    "policy": [
        "policy", "law", "regulation", "legislation", "reform", "sanctions",
        "treaty", "agreement", "bill", "mandate", "ruling", "verdict",
        "court", "supreme", "constitutional", "ban", "restrict", "legalize",
    ],
    "economic": [
        "economy", "gdp", "inflation", "recession", "trade", "tariff",
        "central bank", "interest rate", "debt", "deficit", "stimulus",
        "unemployment", "labor", "wage", "market", "crash", "crisis",
        "federal reserve", "treasury", "budget", "fiscal", "monetary",
    ],
    "geopolitical": [
        "war", "conflict", "alliance", "diplomatic", "summit",
        "united nations", "nato", "invasion", "occupation",
        "ceasefire", "peace", "negotiate", "tension", "escalation",
        "military", "troops", "weapons", "nuclear", "missile",
    ],
    "social": [
        "population", "demographic", "health", "education", "inequality",
        "rights", "civil", "protest", "movement", "justice",
        "immigration", "refugee", "housing", "poverty", "welfare",
        "healthcare", "pandemic", "epidemic", "public health",
    ],
}

CONTROVERSY_KEYWORDS = [
    "debate", "controversy", "controversial", "critics", "supporters",
    "opponents", "disagree", "dispute", "clash", "divided", "contested",
    "backlash", "opposition", "protest", "defend", "accuse", "blame",
    "outrage", "anger", "concern", "fear", "warn", "threat",
    "challenge", "question", "doubt", "skeptic",
]

EMERGING_PATTERN_KEYWORDS = [
    "trend", "rising", "growing", "shift", "transition", "transformation",
    "unprecedented", "historic", "first time", "record", "surge", "spike",
    "breakthrough", "landmark", "milestone", "turning point", "paradigm",
    "emerging", "new era", "reshape", "redefine", "revolution",
    "accelerate", "momentum", "wave",
]

WEIGHTS = {"systemic": 0.5, "controversy": 0.3, "emerging": 0.2}
SHALLOW_THRESHOLD = 0.3


def _keyword_regex(keywords: list) -> list:
    return [
        re.compile(r"\b" + re.escape(k) + r"(?:s|es|ed|ing|ion|ions)?\b", re.IGNORECASE)
        for k in keywords
    ]


_SYSTEMIC = [p for words in SYSTEMIC_IMPACT_KEYWORDS.values() for p in _keyword_regex(words)]
_CONTROVERSY = _keyword_regex(CONTROVERSY_KEYWORDS)
_EMERGING = _keyword_regex(EMERGING_PATTERN_KEYWORDS)


def _count(patterns: list, text: str) -> int:
    return sum(1 for p in patterns if p.search(text))


def systemic_impact(text: str) -> float:
    """Matched keywords across all systemic lists; saturates at 3 matches."""
    if SYSTEMIC_EXCLUSIONS.matches(text):
        return 0.0
    return min(_count(_SYSTEMIC, text) / 3, 1.0)


def controversy(text: str, sentiment_variance: float | None = None) -> float:
    """Max of debate-keyword density and normalized sentiment variance (0-1)."""
    keyword_score = min(_count(_CONTROVERSY, text) / 2, 1.0)
    variance_score = min(max(sentiment_variance or 0.0, 0.0), 1.0)
    return max(keyword_score, variance_score)


def emerging_pattern(text: str) -> float:
    return min(_count(_EMERGING, text) / 2, 1.0)


def shallow_penalty(text: str) -> float:
    """0 (not shallow) to 0.7 (a patch note)."""
    return SHALLOW_RULES.score(text)


def negative_penalty(texts: list) -> float:
    """Worst negative-signal penalty over individual titles, 0-0.4.

    Evaluated per title because several rules only fire on how a title begins.
    """
    return max((NEGATIVE_RULES.score(t.strip()) for t in texts), default=0.0)


def depth_score(topic: str, titles: list, sentiment_variance: float | None = None) -> DepthScoreComponents:
    """Depth components for a topic label plus its headline titles."""
    text = " ".join([topic, *titles])
    s = systemic_impact(text)
    c = controversy(text, sentiment_variance)
    e = emerging_pattern(text)
    penalty = shallow_penalty(text)

    base = s * WEIGHTS["systemic"] + c * WEIGHTS["controversy"] + e * WEIGHTS["emerging"]
    return DepthScoreComponents(
        systemic_impact=round(s, 2),
        controversy=round(c, 2),
        emerging_pattern=round(e, 2),
        shallow_penalty=round(penalty, 2),
        depth_score=round(base * (1 - penalty) * 1000),
    )


def cluster_depth(cluster: TopicCluster) -> DepthScoreComponents:
    variance = cluster.meat.sentiment_variance if cluster.meat else None
    return depth_score(cluster.topic_label, cluster.titles, variance)


def depth_label(score: int, penalty: float) -> str:
    if penalty >= 0.4:
        return "Shallow Update"
    if score >= 500:
        return "Deep Analysis"
    if score >= 300:
        return "Substantive"
    if score >= 150:
        return "Moderate Depth"
    return "Breaking News"


def is_shallow(depth: DepthScoreComponents) -> bool:
    return depth.shallow_penalty >= SHALLOW_THRESHOLD
