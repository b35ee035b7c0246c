"""Trending topic discovery: aggregate headlines, cluster, score, select."""

from .history import HistoryProvider, JsonHistory, StaticHistory
from .models import AggregationResult, TrendingTopic
from .selector import TopicSelector, auto_select_topic, list_trending_topics, select_topic

__all__ = [
    "AggregationResult",
    "HistoryProvider",
    "JsonHistory",
    "StaticHistory",
    "TopicSelector",
    "TrendingTopic",
    "auto_select_topic",
    "list_trending_topics",
    "select_topic",
]
