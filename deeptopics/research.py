"""Deep-research plan for topics whose final score clears the research bar."""

from collections import Counter

from .models import DeepResearchPlan, TopicCluster, utcnow
from .rules import find_tech_terms
from .sources.registry import get_sources_for_category
from .text import extract_entities

RESEARCH_THRESHOLD = 850
MAX_PRIMARY = 5
MAX_SECONDARY = 8
MAX_TECH_TERMS = 5
MAX_SUGGESTED_SOURCES = 5


def needs_deep_research(final_score: int) -> bool:
    return final_score > RESEARCH_THRESHOLD


def rank_entities(cluster: TopicCluster) -> tuple[list[str], list[str]]:
    """Split cluster entities by how many headlines mention them.

    Entities named by two or more headlines (or in the label) are primary,
    the rest secondary.
    """
    counts = Counter()
    for title in cluster.titles:
        counts.update(extract_entities(title))
    for entity in extract_entities(cluster.topic_label):
        counts[entity] += 2

    ordered = [e for e, _ in counts.most_common()]
    primary = [e for e in ordered if counts[e] >= 2][:MAX_PRIMARY]
    if not primary:
        primary = ordered[:1]
    secondary = [e for e in ordered if e not in primary][:MAX_SECONDARY]
    return primary, secondary


def build_research_plan(cluster: TopicCluster, category: str) -> DeepResearchPlan:
    primary, secondary = rank_entities(cluster)
    text = " ".join([cluster.topic_label, *cluster.titles])
    tech_terms = list(dict.fromkeys(find_tech_terms(text)))[:MAX_TECH_TERMS]
    topic = cluster.topic_label
    lead = primary[0] if primary else topic

    factual = [f"What happened: {topic}", f"Timeline of events involving {lead}"]
    factual += [f"Who is {e} and what is their role in {topic}" for e in primary[1:3]]

    contextual = [
        f"Historical background of {topic}",
        f"Why {topic} matters for {category.lower()}",
    ]
    contextual += [f"How does {t} work" for t in tech_terms[:2]]

    analytical = [
        f"Implications of {topic} over the next year",
        f"Competing perspectives on {topic}",
    ]
    if len(primary) >= 2:
        analytical.append(f"Relationship between {primary[0]} and {primary[1]}")

    suggested = [s.name for s in get_sources_for_category(category) if s.tier <= 1]
    for name in cluster.source_names:
        if name not in suggested:
            suggested.append(name)

    return DeepResearchPlan(
        final_score=cluster.final_score,
        topic=topic,
        category=category,
        primary_entities=tuple(primary),
        secondary_entities=tuple(secondary),
        tech_terms=tuple(tech_terms),
        factual_queries=tuple(factual),
        contextual_queries=tuple(contextual),
        analytical_queries=tuple(analytical),
        suggested_sources=tuple(suggested[:MAX_SUGGESTED_SOURCES]),
        created_at=utcnow().isoformat(),
    )
