"""Tests for deeptopics/text.py and deeptopics/rules.py."""

import re

from deeptopics.rules import NEGATIVE_RULES, RuleTable, find_tech_terms, rule
from deeptopics.text import extract_entities, extract_keywords, jaccard, significant_words, tokenize


class TestTokenize:
    def test_lowercase_and_punctuation(self):
        assert tokenize("Fed's Rate-Hike: Markets REACT!") == ["fed", "s", "rate-hike", "markets", "react"]

    def test_significant_words_drop_stopwords_and_numbers(self):
        words = significant_words("The latest report says 2025 inflation is rising")
        assert "latest" not in words
        assert "report" not in words
        assert "2025" not in words
        assert words == ["inflation", "rising"]


class TestExtractEntities:
    def test_named_entities(self):
        entities = extract_entities("Putin meets Xi Jinping in Beijing")
        assert "putin" in entities
        assert "xi jinping" in entities
        assert "beijing" in entities

    def test_acronyms_are_case_sensitive(self):
        assert "us" in extract_entities("US imposes tariffs")
        assert "us" not in extract_entities("tell us about tariffs")
        assert "who" not in extract_entities("who decides tariffs")

    def test_titled_person(self):
        assert "macron" in extract_entities("President Macron visits Berlin")

    def test_capitalized_phrase_skips_leading_stopword(self):
        entities = extract_entities("The Senate Finance Committee votes")
        assert "the senate finance" not in entities
        assert "senate" in entities

    def test_deduplicated(self):
        entities = extract_entities("China and china and CHINA")
        assert entities.count("china") == 1


class TestExtractKeywords:
    def test_entities_first(self):
        keywords = extract_keywords("Tesla shares slump as Musk sells stock")
        assert keywords[:2] == ["tesla", "musk"]
        assert "shares" in keywords
        assert len(keywords) == len(set(keywords))


class TestJaccard:
    def test_identical(self):
        assert jaccard(["a", "b"], ["b", "a"]) == 1.0

    def test_partial(self):
        assert jaccard({"a", "b", "c"}, {"b", "c", "d"}) == 0.5

    def test_empty(self):
        assert jaccard([], ["a"]) == 0.0


class TestRuleTable:
    def test_sums_and_caps(self):
        table = RuleTable([rule(r"foo", 0.3, "x"), rule(r"bar", 0.3, "y")], cap=0.5)
        assert table.score("foo") == 0.3
        assert table.score("foo bar") == 0.5
        assert table.kinds("foo bar") == {"x", "y"}

    def test_add_rule(self):
        table = RuleTable([], cap=1.0)
        table.add(rule(r"\bbaz\b", 0.2, "z"))
        assert table.score("baz") == 0.2
        assert table.score("bazaar") == 0.0

    def test_rule_compiles_case_insensitive(self):
        r = rule(r"hello", 0.1, "greeting")
        assert r.pattern.flags & re.IGNORECASE

    def test_listicle_needs_leading_number(self):
        assert "listicle" in NEGATIVE_RULES.kinds("7 things you should know about tariffs")
        assert "listicle" not in NEGATIVE_RULES.kinds("Company raises $5 million in new round")


class TestTechTerms:
    def test_finds_terms(self):
        terms = find_tech_terms("New ransomware exploits a zero-day in Kubernetes")
        assert "ransomware" in terms
        assert "zero-day" in terms
        assert "kubernetes" in terms
