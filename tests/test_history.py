"""Tests for deeptopics/history.py — providers and the used-topic filter."""

import json
from datetime import timedelta

from deeptopics.history import (
    HistoryProvider, JsonHistory, StaticHistory, filter_used, is_topic_used,
    load_used_topics, topic_overlap,
)
from deeptopics.models import TopicCluster


def _cluster(make_headline, label):
    c = TopicCluster.seed(make_headline(f"{label} headline text"), ["a", "b"])
    c.topic_label = label
    return c


class TestIsTopicUsed:
    def test_exact_match(self):
        assert is_topic_used("Iran Israel Ceasefire", ["iran israel ceasefire"])

    def test_high_overlap_excluded(self):
        # {iran, israel, ceasefire} vs {iran, israel, ceasefire, talks}: 3/4
        assert topic_overlap("Iran Israel Ceasefire", "iran israel ceasefire talks") == 0.75
        assert is_topic_used("Iran Israel Ceasefire", ["iran israel ceasefire talks"])

    def test_low_overlap_survives(self):
        # {iran, nuclear, talks} vs {iran, israel, ceasefire}: 1/5
        assert not is_topic_used("Iran Nuclear Talks", ["iran israel ceasefire"])

    def test_exactly_half_survives(self):
        # {china, tariffs, steel} vs {china, tariffs, solar}: 2/4
        assert topic_overlap("China Tariffs Steel", "china tariffs solar") == 0.5
        assert not is_topic_used("China Tariffs Steel", ["china tariffs solar"])

    def test_empty_history(self):
        assert not is_topic_used("Anything at all", [])


class TestFilterUsed:
    def test_best_candidate_excluded(self, make_headline):
        best = _cluster(make_headline, "Fed Rate Decision")
        second = _cluster(make_headline, "Drought Crop Failures")
        kept = filter_used([best, second], ["fed rate decision looms"])
        assert kept == [second]

    def test_custom_label(self):
        items = [{"t": "Solar Subsidy Cuts"}, {"t": "Mars Sample Return"}]
        kept = filter_used(items, ["solar subsidy cuts"], label=lambda i: i["t"])
        assert kept == [{"t": "Mars Sample Return"}]


class TestProviders:
    def test_static(self):
        assert StaticHistory(["A", "B"]).used_topics(7) == ["A", "B"]

    def test_json_history_window(self, tmp_path, now):
        path = tmp_path / "history.json"
        path.write_text(json.dumps([
            {"topic": "Recent topic", "used_at": (now - timedelta(days=2)).isoformat()},
            {"topic": "Old topic", "used_at": (now - timedelta(days=40)).isoformat()},
            {"topic": "Broken entry"},
        ]))
        history = JsonHistory(path, clock=lambda: now)
        assert history.used_topics(30) == ["Recent topic"]

    def test_json_history_missing_file(self, tmp_path):
        assert JsonHistory(tmp_path / "nope.json").used_topics() == []

    def test_record_appends(self, tmp_path, now):
        path = tmp_path / "sub" / "history.json"
        history = JsonHistory(path, clock=lambda: now)
        history.record("First")
        history.record("Second")
        assert history.used_topics() == ["First", "Second"]
        assert json.loads(path.read_text())[0]["used_at"] == now.isoformat()


class TestLoadUsedTopics:
    def test_lowercases(self):
        assert load_used_topics(StaticHistory(["Mixed Case"])) == ["mixed case"]

    def test_none_provider(self):
        assert load_used_topics(None) == []

    def test_failing_provider_is_empty(self):
        class Broken(HistoryProvider):
            def used_topics(self, days=30):
                raise OSError("database unreachable")

        assert load_used_topics(Broken()) == []

    def test_corrupt_json_is_empty(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("{not json")
        assert load_used_topics(JsonHistory(path)) == []
