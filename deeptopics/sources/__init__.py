"""Headline sources: registry, per-protocol fetchers, and the aggregator."""

from .aggregator import fetch_all_sources
from .base import SourceFetcher
from .registry import CATEGORY_SOURCES, FALLBACK_SOURCES, get_fetcher, get_sources_for_category

__all__ = [
    "CATEGORY_SOURCES",
    "FALLBACK_SOURCES",
    "SourceFetcher",
    "fetch_all_sources",
    "get_fetcher",
    "get_sources_for_category",
]
