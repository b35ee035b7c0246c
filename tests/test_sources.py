"""Tests for deeptopics/sources/ — fetchers, registry, aggregator."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from deeptopics.cluster import cluster_headlines
from deeptopics.config import CategoryProfile
from deeptopics.models import SourceDescriptor
from deeptopics.sources import (
    CATEGORY_SOURCES, FALLBACK_SOURCES, SourceFetcher, fetch_all_sources,
    get_fetcher, get_sources_for_category,
)
from deeptopics.sources.base import MAX_ITEMS
from deeptopics.sources.google_trends import GoogleTrendsFetcher
from deeptopics.sources.hackernews import HackerNewsFetcher
from deeptopics.sources.newsapi import NewsAPIFetcher
from deeptopics.sources.reddit import RedditFetcher
from deeptopics.sources.rss import RSSFetcher

RSS_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel><title>Test</title>
<item>
  <title>Central banks weigh <b>coordinated</b> rate cuts</title>
  <link>https://example.com/a</link>
  <description>&lt;p&gt;Policy makers meet in Basel.&lt;/p&gt;</description>
  <pubDate>Sun, 01 Jun 2025 10:00:00 GMT</pubDate>
</item>
<item>
  <title>Short</title>
  <link>https://example.com/b</link>
</item>
</channel></rss>
"""


def _response(json_data=None, content=b""):
    r = MagicMock()
    r.status_code = 200
    r.json.return_value = json_data
    r.content = content
    r.raise_for_status = MagicMock()
    return r


class TestRSSFetcher:
    @patch("deeptopics.sources.base.requests.get")
    def test_parses_feed(self, mock_get, rss_source):
        mock_get.return_value = _response(content=RSS_FEED)
        headlines = RSSFetcher(rss_source).fetch()

        assert len(headlines) == 1  # "Short" dropped
        h = headlines[0]
        assert h.title == "Central banks weigh coordinated rate cuts"
        assert h.source_name == "Test Feed"
        assert h.source_tier == 1
        assert h.published_at.hour == 10
        assert "<p>" not in (h.description or "")

    @patch("deeptopics.sources.base.requests.get")
    def test_network_error_returns_empty(self, mock_get, rss_source):
        mock_get.side_effect = requests.ConnectionError("down")
        assert RSSFetcher(rss_source).fetch() == []

    @patch("deeptopics.sources.base.requests.get")
    def test_http_error_returns_empty(self, mock_get, rss_source):
        r = _response()
        r.raise_for_status.side_effect = requests.HTTPError("503")
        mock_get.return_value = r
        assert RSSFetcher(rss_source).fetch() == []

    @patch("deeptopics.sources.base.requests.get")
    def test_garbage_returns_empty(self, mock_get, rss_source):
        mock_get.return_value = _response(content=b"\x00not a feed<<<")
        assert RSSFetcher(rss_source).fetch() == []


class TestNewsAPIFetcher:
    @patch("deeptopics.sources.base.requests.get")
    def test_parses_articles(self, mock_get):
        mock_get.return_value = _response({
            "articles": [
                {
                    "title": "Oil prices jump as OPEC signals output cut",
                    "url": "https://example.com/oil",
                    "publishedAt": "2025-06-01T08:30:00Z",
                    "description": "x" * 500,
                    "source": {"name": "Reuters"},
                },
                {"title": None, "url": "https://example.com/none"},
            ]
        })
        src = SourceDescriptor("NewsAPI Business", 2, "api", "https://example.com/api.json")
        headlines = NewsAPIFetcher(src).fetch()

        assert len(headlines) == 1
        assert headlines[0].source_name == "Reuters"
        assert headlines[0].published_at.hour == 8
        assert len(headlines[0].description) == 200

    @patch("deeptopics.sources.base.requests.get")
    def test_bad_json_returns_empty(self, mock_get):
        r = _response()
        r.json.side_effect = ValueError("bad json")
        mock_get.return_value = r
        src = SourceDescriptor("NewsAPI", 2, "api", "https://example.com/api.json")
        assert NewsAPIFetcher(src).fetch() == []


class TestHackerNewsFetcher:
    @patch("deeptopics.sources.base.requests.get")
    def test_filters_low_scores(self, mock_get):
        items = {
            1: {"title": "Show HN: A new open source database engine", "score": 320, "time": 1748772000},
            2: {"title": "Ask HN: What are you reading this month?", "score": 12, "time": 1748772000},
            3: {"title": "Kernel maintainers adopt Rust for drivers", "score": 75,
                "url": "https://lwn.net/x", "time": 1748772000},
        }

        def fake_get(url, **kwargs):
            if url.endswith("topstories.json"):
                return _response([1, 2, 3])
            story_id = int(url.rsplit("/", 1)[1].split(".")[0])
            return _response(items[story_id])

        mock_get.side_effect = fake_get
        src = SourceDescriptor("HackerNews", 2, "hackernews",
                               "https://hacker-news.firebaseio.com/v0/topstories.json")
        headlines = HackerNewsFetcher(src).fetch()

        assert [h.engagement_score for h in headlines] == [320, 75]
        assert headlines[0].url == "https://news.ycombinator.com/item?id=1"
        assert headlines[1].url == "https://lwn.net/x"
        assert all(h.source_name == "HackerNews" for h in headlines)


class TestRedditFetcher:
    @patch("deeptopics.sources.base.requests.get")
    def test_skips_stickied_nsfw_and_low_score(self, mock_get):
        def post(title, score, **extra):
            return {"data": {"title": title, "score": score, "subreddit": "worldnews",
                             "permalink": "/r/worldnews/x", "created_utc": 1748772000, **extra}}

        mock_get.return_value = _response({"data": {"children": [
            post("Parliament passes sweeping housing reform bill", 5000),
            post("Daily discussion thread for world events", 9000, stickied=True),
            post("Graphic footage from the protest square", 4000, over_18=True),
            post("Minor local council election recount ordered", 40),
        ]}})
        src = SourceDescriptor("Reddit WorldNews", 3, "reddit", "https://reddit.com/r/worldnews/top.json")
        headlines = RedditFetcher(src).fetch()

        assert len(headlines) == 1
        assert headlines[0].source_name == "Reddit r/worldnews"
        assert headlines[0].engagement_score == 5000


class TestSourceFetcherABC:
    def test_cannot_instantiate_abc(self, rss_source):
        with pytest.raises(TypeError):
            SourceFetcher(rss_source)

    def test_fetch_caps_items(self, make_headline, rss_source):
        class ManyFetcher(SourceFetcher):
            protocol = "many"

            def _fetch(self, limit):
                return [make_headline(f"Headline number {i} about trade") for i in range(100)]

        assert len(ManyFetcher(rss_source).fetch(limit=500)) == MAX_ITEMS


class TestRegistry:
    def test_all_categories_have_sources(self):
        for category, sources in CATEGORY_SOURCES.items():
            assert sources, category
            assert all(0 <= s.tier <= 3 for s in sources)

    @patch("deeptopics.sources.registry.load_config", return_value={})
    def test_unknown_category_uses_fallback(self, _):
        assert get_sources_for_category("Sports") == FALLBACK_SOURCES

    @patch("deeptopics.sources.registry.load_config")
    def test_extra_sources_from_config(self, mock_config):
        mock_config.return_value = {"extra_sources": [
            {"name": "My Feed", "protocol": "rss", "endpoint": "https://x/feed", "tier": 1,
             "categories": ["Economics"]},
        ]}
        names = [s.name for s in get_sources_for_category("Economics")]
        assert "My Feed" in names
        assert "My Feed" not in [s.name for s in get_sources_for_category("Science")]

    def test_get_fetcher(self, rss_source):
        assert isinstance(get_fetcher(rss_source), RSSFetcher)

    def test_unknown_protocol(self):
        with pytest.raises(ValueError):
            get_fetcher(SourceDescriptor("X", 1, "gopher", "gopher://x"))


class TestFetchAllSources:
    def test_failing_source_does_not_block_others(self, make_headline):
        good = SourceDescriptor("Good", 0, "rss", "https://good")
        bad = SourceDescriptor("Bad", 1, "rss", "https://bad")
        good_fetcher = MagicMock(is_available=True)
        good_fetcher.name = "Good"
        good_fetcher.fetch.return_value = [make_headline("Good headline about tariffs", "Good")]
        bad_fetcher = MagicMock(is_available=True)
        bad_fetcher.name = "Bad"
        bad_fetcher.fetch.side_effect = RuntimeError("boom")

        fetchers = {"Good": good_fetcher, "Bad": bad_fetcher}
        with patch("deeptopics.sources.aggregator.get_fetcher",
                   side_effect=lambda src, timeout: fetchers[src.name]):
            headlines = fetch_all_sources([bad, good])

        assert [h.source_name for h in headlines] == ["Good"]

    def test_unknown_protocol_skipped(self):
        assert fetch_all_sources([SourceDescriptor("X", 1, "gopher", "gopher://x")]) == []

    @patch("deeptopics.sources.base.requests.get")
    def test_all_sources_down(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")
        sources = [
            SourceDescriptor("A", 0, "rss", "https://a"),
            SourceDescriptor("B", 2, "api", "https://b"),
        ]
        assert fetch_all_sources(sources, timeout=0.1) == []

    def test_results_in_source_order(self, make_headline):
        sources = [SourceDescriptor(n, 1, "rss", f"https://{n}") for n in ("A", "B", "C")]

        def fetcher_for(src, timeout):
            f = MagicMock(is_available=True)
            f.name = src.name
            f.fetch.return_value = [make_headline(f"Story from source {src.name} today", src.name)]
            return f

        with patch("deeptopics.sources.aggregator.get_fetcher", side_effect=fetcher_for):
            headlines = fetch_all_sources(sources)
        assert [h.source_name for h in headlines] == ["A", "B", "C"]


class TestGoogleTrendsFetcher:
    @patch("pytrends.request.TrendReq")
    def test_trends_become_headlines(self, mock_trendreq):
        trending = mock_trendreq.return_value.trending_searches.return_value
        trending.head.return_value.itertuples.return_value = [("solar eclipse",), ("rate cut",)]
        src = SourceDescriptor("Google Trends US", 3, "google_trends", "US")
        headlines = GoogleTrendsFetcher(src).fetch()

        mock_trendreq.return_value.trending_searches.assert_called_once_with(pn="united_states")
        assert [h.title for h in headlines] == ["solar eclipse", "rate cut"]
        assert headlines[0].engagement_score > headlines[1].engagement_score
        assert headlines[0].source_tier == 3

    @patch("pytrends.request.TrendReq")
    def test_rejected_request_returns_empty(self, mock_trendreq):
        from pytrends.exceptions import ResponseError

        mock_trendreq.return_value.trending_searches.side_effect = ResponseError("429", response=None)
        src = SourceDescriptor("Google Trends US", 3, "google_trends", "US")
        assert GoogleTrendsFetcher(src).fetch() == []

    def test_short_queries_kept(self):
        fetcher = GoogleTrendsFetcher(SourceDescriptor("Google Trends US", 3, "google_trends", "US"))
        assert fetcher._trend("Lakers", 0).title == "Lakers"
        assert fetcher._trend("AI", 1) is None

    def test_distinct_trends_stay_in_separate_clusters(self):
        fetcher = GoogleTrendsFetcher(SourceDescriptor("Google Trends US", 3, "google_trends", "US"))
        queries = ["Taylor Swift", "Super Bowl", "Bitcoin", "Hurricane Milton", "Lakers"]
        headlines = [fetcher._trend(q, rank) for rank, q in enumerate(queries)]

        clusters = cluster_headlines(headlines, CategoryProfile(min_sources=1))

        # One-word queries have too few keywords to cluster
        assert sorted(c.titles[0] for c in clusters) == ["Hurricane Milton", "Super Bowl", "Taylor Swift"]
        assert all(len(c.headlines) == 1 for c in clusters)
        assert not any("Google" in c.topic_label for c in clusters)
