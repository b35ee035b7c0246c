"""Records passed between the aggregation, clustering and scoring stages."""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / 3600


@dataclass(frozen=True)
class SourceDescriptor:
    """Static description of one headline source."""
    name: str
    tier: int  # 0 = deep analysis ... 3 = general/social
    protocol: str  # "rss", "api", "hackernews", "reddit", "google_trends"
    endpoint: str
    categories: tuple = ()


@dataclass(frozen=True)
class HeadlineRecord:
    """A single fetched headline, normalized across protocols."""
    title: str
    url: str
    source_name: str
    source_tier: int
    published_at: datetime
    description: str | None = None
    engagement_score: float | None = None


@dataclass(frozen=True)
class EnrichmentArticle:
    """One article returned by the news-index search."""
    url: str
    title: str
    seen_date: str
    domain: str
    language: str = "en"
    country_code: str = "unknown"
    tone: float = 0.0


@dataclass(frozen=True)
class VelocityWindow:
    recent_12h: int = 0
    previous_12h: int = 0


@dataclass(frozen=True)
class MeatScoreComponents:
    entity_density: float
    velocity: float
    sentiment_variance: float
    linkage: float
    meat_score: int  # 0-1000


@dataclass(frozen=True)
class DepthScoreComponents:
    systemic_impact: float
    controversy: float
    emerging_pattern: float
    shallow_penalty: float  # 0-0.7
    depth_score: int  # 0-1000


@dataclass(frozen=True)
class DeepResearchPlan:
    """Entity-based research queries for a topic that scored very high."""
    final_score: int
    topic: str
    category: str
    primary_entities: tuple = ()
    secondary_entities: tuple = ()
    tech_terms: tuple = ()
    factual_queries: tuple = ()
    contextual_queries: tuple = ()
    analytical_queries: tuple = ()
    suggested_sources: tuple = ()
    created_at: str = ""


@dataclass
class TopicCluster:
    """Headlines judged to be about the same story.

    The clusterer grows a cluster in place while it is being built; every later
    stage attaches its scores through ``with_scores`` and gets a new record.
    """
    topic_label: str
    keywords: list
    headlines: list
    source_names: list
    first_seen_at: datetime
    last_seen_at: datetime
    hotness_score: int = 0
    quality_score: int = 0
    velocity: float = 0.0
    meat: MeatScoreComponents | None = None
    depth: DepthScoreComponents | None = None
    enriched: bool = False
    negative_penalty: float = 0.0
    semantic_meat: int = 0
    final_score: int = 0

    @classmethod
    def seed(cls, headline: HeadlineRecord, keywords: list) -> "TopicCluster":
        return cls(
            topic_label=headline.title,
            keywords=list(keywords),
            headlines=[headline],
            source_names=[headline.source_name],
            first_seen_at=headline.published_at,
            last_seen_at=headline.published_at,
        )

    def merge(self, headline: HeadlineRecord, keywords: list):
        """Absorb a headline: union keywords, extend sources and time span."""
        known = set(self.keywords)
        self.keywords.extend(k for k in keywords if k not in known)
        self.headlines.append(headline)
        if headline.source_name not in self.source_names:
            self.source_names.append(headline.source_name)
        if headline.published_at < self.first_seen_at:
            self.first_seen_at = headline.published_at
        if headline.published_at > self.last_seen_at:
            self.last_seen_at = headline.published_at

    @property
    def keyword_set(self) -> set:
        return set(self.keywords)

    @property
    def source_count(self) -> int:
        return len(self.source_names)

    @property
    def titles(self) -> list:
        return [h.title for h in self.headlines]

    @property
    def time_span_hours(self) -> float:
        return hours_between(self.first_seen_at, self.last_seen_at)

    def with_scores(self, **scores) -> "TopicCluster":
        """Copy of this cluster with score fields attached."""
        return replace(
            self,
            keywords=list(self.keywords),
            headlines=list(self.headlines),
            source_names=list(self.source_names),
            **scores,
        )


@dataclass(frozen=True)
class TrendingTopic:
    """The externally visible result of a selection."""
    topic: str
    hotness_score: int
    source_count: int
    sources: tuple
    first_seen_hours_ago: int
    sample_headlines: tuple
    category: str
    meat_score: int | None = None
    entity_density: float | None = None
    sentiment_variance: float | None = None
    depth_score: int | None = None
    is_shallow: bool | None = None
    final_score: int | None = None
    deep_research: DeepResearchPlan | None = None

    @classmethod
    def from_cluster(cls, cluster: TopicCluster, category: str,
                     now: datetime | None = None) -> "TrendingTopic":
        from .depth import is_shallow

        now = now or utcnow()
        meat = cluster.meat
        depth = cluster.depth
        return cls(
            topic=cluster.topic_label,
            hotness_score=cluster.hotness_score,
            source_count=cluster.source_count,
            sources=tuple(cluster.source_names),
            first_seen_hours_ago=round(hours_between(cluster.first_seen_at, now)),
            sample_headlines=tuple(cluster.titles[:3]),
            category=category,
            meat_score=meat.meat_score if meat else None,
            entity_density=meat.entity_density if meat else None,
            sentiment_variance=meat.sentiment_variance if meat else None,
            depth_score=depth.depth_score if depth else None,
            is_shallow=is_shallow(depth) if depth else None,
            final_score=cluster.final_score,
        )

    @classmethod
    def fallback(cls, topic: str, category: str) -> "TrendingTopic":
        return cls(
            topic=topic,
            hotness_score=0,
            source_count=0,
            sources=(),
            first_seen_hours_ago=0,
            sample_headlines=(),
            category=category,
        )

    @property
    def is_fallback(self) -> bool:
        return self.source_count == 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class AggregationResult:
    category: str
    fetched_at: datetime
    total_headlines: int
    clusters: tuple = ()
    selected_topic: TrendingTopic | None = None
    state: str = ""

    def to_dict(self) -> dict:
        d = asdict(self)
        d["fetched_at"] = self.fetched_at.isoformat()
        return d


@dataclass
class ScoreBreakdown:
    """Intermediate values of the combined score, kept for logging."""
    semantic_meat: int = 0
    base: float = 0.0
    after_penalties: float = 0.0
    decay: float = 1.0
    confidence: float = 1.0
    final: int = 0
    notes: list = field(default_factory=list)
