"""TopicSelector: pick one topic per category from freshly fetched headlines.

Each call runs one bounded pass through the selection stages (see
``state.STAGES``) and always ends in a usable topic: either the best
qualifying cluster or an evergreen fallback prompt for the category.
"""

import concurrent.futures
import random
from dataclasses import replace

from .cache import TTLCache
from .cluster import cluster_headlines
from .config import SelectorSettings, get_profile
from .enrichment import EnrichmentClient
from .history import HistoryProvider, filter_used, load_used_topics
from .hotness import rank_by_hotness
from .log import get_logger, log
from .meat import meat_score, meat_score_fallback
from .models import AggregationResult, TopicCluster, TrendingTopic, utcnow
from .ranker import rank_clusters
from .research import build_research_plan, needs_deep_research
from .sources import fetch_all_sources, get_sources_for_category
from .state import SelectionState

ENRICH_KEYWORDS = 3
ADMIN_LIST_LIMIT = 10

FALLBACK_TOPICS = {
    "Geopolitics": [
        "Current state of international diplomatic relations",
        "Global power dynamics and shifting alliances",
        "International security challenges and responses",
    ],
    "Economics": [
        "Global economic trends and market analysis",
        "Central bank policies and their global impact",
        "Trade dynamics and economic outlook",
    ],
    "Technology": [
        "Emerging technologies reshaping industries",
        "AI development and its societal implications",
        "Cybersecurity landscape and digital transformation",
    ],
    "Climate": [
        "Climate change impacts and adaptation strategies",
        "Renewable energy transition progress",
        "Environmental policy developments worldwide",
    ],
    "Society": [
        "Social trends shaping modern communities",
        "Demographic shifts and their implications",
        "Public health and social welfare developments",
    ],
    "Science": [
        "Recent scientific breakthroughs and discoveries",
        "Space exploration and astronomical findings",
        "Medical research advances and health innovations",
    ],
    "Conflict": [
        "Global conflict zones and peace efforts",
        "Security challenges and international responses",
        "Humanitarian situations in conflict areas",
    ],
}


def fallback_topics(category: str) -> list[str]:
    return FALLBACK_TOPICS.get(category, FALLBACK_TOPICS["Geopolitics"])


class TopicSelector:
    """Selects one topic per category, caching the whole pass per category.

    Every collaborator is injectable: ``fetch`` (headline aggregation),
    ``sources`` (category -> source list), ``enrichment`` (article search),
    ``cache`` (result cache), ``rng`` (fallback choice) and ``clock``.
    """

    def __init__(self, settings: SelectorSettings | None = None, cache=None,
                 enrichment: EnrichmentClient | None = None, fetch=fetch_all_sources,
                 sources=get_sources_for_category, rng=None, clock=utcnow):
        self.settings = settings or SelectorSettings.from_config()
        self.cache = cache if cache is not None else TTLCache(self.settings.cache_ttl_seconds)
        self.enrichment = enrichment or EnrichmentClient()
        self.fetch = fetch
        self.sources = sources
        self.rng = rng or random
        self.clock = clock

    # ── Pipeline ──────────────────────────────────────

    def aggregate(self, category: str, history: HistoryProvider | None = None) -> AggregationResult:
        """Run (or reuse) the full selection pass for a category."""
        cached = self.cache.get(category)
        if cached is not None:
            log(f"Using cached topics for {category}")
            return cached

        logger = get_logger()
        settings = self.settings
        profile = get_profile(category)
        state = SelectionState(category)
        now = self.clock()

        log(f"Aggregating topics for: {category}")
        sources = self.sources(category)
        headlines = self.fetch(
            sources, timeout=settings.fetch_timeout, max_workers=settings.max_workers,
        )
        log(f"Total headlines fetched: {len(headlines)} from {len(sources)} sources")
        state.complete_stage("aggregating", {"sources": len(sources), "headlines": len(headlines)})

        clusters = cluster_headlines(headlines, profile, now)
        log(f"Formed {len(clusters)} topic clusters")
        state.complete_stage("clustering", {"clusters": len(clusters)})

        clusters = rank_by_hotness(clusters, now)
        state.complete_stage("scoring")

        clusters = self._enrich(clusters, now)
        state.complete_stage("enriching", {"enriched": sum(1 for c in clusters if c.enriched)})

        clusters = rank_clusters(clusters, profile, settings.virtual_seed, now)
        state.complete_stage("ranking")

        used = load_used_topics(history, settings.history_days)
        available = filter_used(clusters, used)
        logger.debug("History filter: %d of %d clusters available (%d used topics)",
                     len(available), len(clusters), len(used))
        state.complete_stage("filtering", {"available": len(available)})

        best = available[0] if available else None
        if best is not None and self.meets_threshold(best):
            selected = self._to_topic(best, category, now)
            state.finish("selected")
            log(f"Selected: \"{selected.topic}\" (final {selected.final_score}, "
                f"meat {selected.meat_score}, hotness {selected.hotness_score})")
        else:
            reason = "no clusters" if best is None else "below threshold"
            selected = TrendingTopic.fallback(self.rng.choice(fallback_topics(category)), category)
            state.finish("fallback", reason)
            logger.warning("Fallback topic used for %s (%s): %s", category, reason, selected.topic)

        result = AggregationResult(
            category=category,
            fetched_at=now,
            total_headlines=len(headlines),
            clusters=tuple(
                TrendingTopic.from_cluster(c, category, now)
                for c in clusters[:settings.keep_top_n]
            ),
            selected_topic=selected,
            state=state.outcome,
        )
        self.cache.set(category, result)
        return result

    def meets_threshold(self, cluster: TopicCluster) -> bool:
        """A cluster qualifies on either Meat-Score or hotness."""
        meat = cluster.meat.meat_score if cluster.meat else 0
        return meat >= self.settings.min_meat_score or cluster.hotness_score >= self.settings.min_hotness

    def _enrich(self, clusters: list[TopicCluster], now) -> list[TopicCluster]:
        """Meat-Score for every cluster: enriched for the top K, estimated for the rest."""
        top = clusters[:self.settings.enrich_top_k]
        enriched = {}
        if top:
            with concurrent.futures.ThreadPoolExecutor(max_workers=len(top)) as pool:
                futures = {pool.submit(self._enrich_one, c, now): i for i, c in enumerate(top)}
                for future in concurrent.futures.as_completed(futures):
                    i = futures[future]
                    try:
                        enriched[i] = future.result()
                    except Exception as e:
                        get_logger().warning("[%s] enrichment failed: %s", top[i].topic_label[:30], e)

        out = []
        for i, cluster in enumerate(clusters):
            if i in enriched:
                out.append(enriched[i])
            else:
                out.append(cluster.with_scores(meat=meat_score_fallback(cluster), enriched=False))
        return out

    def _enrich_one(self, cluster: TopicCluster, now) -> TopicCluster:
        keywords = cluster.keywords[:ENRICH_KEYWORDS]
        label = cluster.topic_label[:30]
        if not keywords:
            get_logger().debug("[%s] no keywords, using fallback", label)
            return cluster.with_scores(meat=meat_score_fallback(cluster), enriched=False)

        articles = self.enrichment.search(keywords, 24)
        if not articles:
            get_logger().debug("[%s] no enrichment articles, using fallback", label)
            return cluster.with_scores(meat=meat_score_fallback(cluster), enriched=False)

        window = self.enrichment.velocity(keywords, now)
        meat = meat_score(cluster, articles, window)
        get_logger().debug("[%s] %d articles, meat=%d", label, len(articles), meat.meat_score)
        return cluster.with_scores(meat=meat, enriched=True)

    def _to_topic(self, cluster: TopicCluster, category: str, now) -> TrendingTopic:
        topic = TrendingTopic.from_cluster(cluster, category, now)
        if needs_deep_research(cluster.final_score):
            plan = build_research_plan(cluster, category)
            log(f"Deep research triggered (final {cluster.final_score}): "
                f"{len(plan.primary_entities)} primary entities")
            topic = replace(topic, deep_research=plan)
        return topic

    # ── Public API ────────────────────────────────────

    def select_topic(self, category: str, history: HistoryProvider | None = None) -> TrendingTopic:
        """Best topic for a category. Never raises; falls back on any failure."""
        try:
            result = self.aggregate(category, history)
        except Exception:
            get_logger().exception("Selection failed for %s; fallback topic used", category)
            return TrendingTopic.fallback(self.rng.choice(fallback_topics(category)), category)
        return result.selected_topic

    def list_trending_topics(self, category: str, history: HistoryProvider | None = None,
                             limit: int = ADMIN_LIST_LIMIT) -> list[TrendingTopic]:
        """Ranked candidates for manual review, minus recently used topics."""
        result = self.aggregate(category, history)
        used = load_used_topics(history, self.settings.history_days)
        return filter_used(list(result.clusters), used, label=lambda t: t.topic)[:limit]

    def clear_cache(self):
        self.cache.clear()
        self.enrichment.clear_cache()


_default = None


def default_selector() -> TopicSelector:
    global _default
    if _default is None:
        _default = TopicSelector()
    return _default


def select_topic(category: str, history: HistoryProvider | None = None) -> TrendingTopic:
    return default_selector().select_topic(category, history)


def auto_select_topic(category: str, history: HistoryProvider | None = None) -> str:
    """Just the topic string, for handing to a downstream writer."""
    return select_topic(category, history).topic


def list_trending_topics(category: str, history: HistoryProvider | None = None,
                         limit: int = ADMIN_LIST_LIMIT) -> list[TrendingTopic]:
    return default_selector().list_trending_topics(category, history, limit)
