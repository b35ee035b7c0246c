"""Tests for deeptopics/__main__.py — CLI commands."""

import json
from unittest.mock import patch

from deeptopics.__main__ import main
from deeptopics.models import TrendingTopic


class TestCLI:
    @patch("deeptopics.sources.registry.load_config", return_value={})
    def test_sources(self, _, capsys):
        main(["sources", "--category", "Technology"])
        out = capsys.readouterr().out
        assert "Sources for Technology" in out
        assert "hackernews" in out

    def test_record(self, tmp_path, capsys):
        path = tmp_path / "history.json"
        main(["--history", str(path), "record", "Ocean heat records"])
        entries = json.loads(path.read_text())
        assert entries[0]["topic"] == "Ocean heat records"
        assert "Recorded" in capsys.readouterr().out

    @patch("deeptopics.selector.TopicSelector.select_topic")
    def test_select_json(self, mock_select, tmp_path, capsys):
        mock_select.return_value = TrendingTopic.fallback("Trade dynamics and economic outlook", "Economics")
        main(["--history", str(tmp_path / "h.json"), "select", "--category", "Economics", "--json"])
        out = capsys.readouterr().out
        data = json.loads(out[out.index("{"):])
        assert data["topic"] == "Trade dynamics and economic outlook"
        assert data["source_count"] == 0

    @patch("deeptopics.selector.TopicSelector.list_trending_topics", return_value=[])
    def test_topics_empty(self, _, tmp_path, capsys):
        main(["--history", str(tmp_path / "h.json"), "topics", "--category", "Science"])
        assert "No trending topics" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage" in capsys.readouterr().out.lower()

    def test_config_set_and_show(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        with patch("deeptopics.config.CONFIG_FILE", path):
            main(["config", "category_profiles.Economics.min_sources", "3"])
            assert "Saved category_profiles.Economics.min_sources" in capsys.readouterr().out

            main(["config"])
            shown = json.loads(capsys.readouterr().out)

        assert shown == {"category_profiles": {"Economics": {"min_sources": 3}}}
