"""Pattern rule tables for shallow-topic and negative-signal detection.

A rule is ``(pattern, weight, kind)``. A table sums the weights of every rule
whose pattern matches the text and caps the total, so rules can be added or
retuned without touching the scorers that consume them.
"""

import re
from typing import NamedTuple


class Rule(NamedTuple):
    pattern: re.Pattern
    weight: float
    kind: str


def rule(pattern: str, weight: float, kind: str, flags: int = re.IGNORECASE) -> Rule:
    return Rule(re.compile(pattern, flags), weight, kind)


class RuleTable:
    """An ordered list of rules evaluated against one piece of text."""

    def __init__(self, rules: list, cap: float = 1.0):
        self.rules = list(rules)
        self.cap = cap

    def matches(self, text: str) -> list:
        return [r for r in self.rules if r.pattern.search(text)]

    def score(self, text: str) -> float:
        total = sum(r.weight for r in self.matches(text))
        return min(total, self.cap)

    def kinds(self, text: str) -> set:
        return {r.kind for r in self.matches(text)}

    def add(self, new_rule: Rule):
        self.rules.append(new_rule)


# ─────────────────────────────────────────────────────
# Shallow topics: product updates, patches, releases
# ─────────────────────────────────────────────────────
SHALLOW_RULES = RuleTable([
    rule(r"\b(patch|patches|patched|patching)\b", 0.25, "release"),
    rule(r"\b(update|updates|updated|updating)\s+(available|released|rolling|now)", 0.25, "release"),
    rule(r"\b(release|releases|released|releasing)\s+(new|version|v\d)", 0.25, "release"),
    rule(r"\b(version|v\d+\.\d+)", 0.25, "release"),
    rule(r"\b(bug\s*fix|bugfix|hotfix|fix\s+for)\b", 0.25, "release"),
    rule(r"\b(feature|features)\s+(added|new|coming)\b", 0.25, "release"),
    rule(r"\b(app|application)\s+(update|store)\b", 0.25, "release"),
    rule(r"\b(download|available\s+now|out\s+now)\b", 0.25, "release"),
    rule(r"\b(ios|android|macos|windows)\s+\d+(\.\d+)?\b", 0.25, "release"),
    rule(r"\b(beta|alpha|preview|rc\d*)\s+(available|released)", 0.25, "release"),
    rule(r"\b(changelog|release\s+notes)\b", 0.25, "release"),
    rule(r"\b(security\s+patch|firmware\s+update)\b", 0.25, "release"),
    rule(r"\b(upgrade|upgrading)\s+(to|from)\s+v?\d", 0.25, "release"),
    rule(r"\b(new\s+version|latest\s+version)\b", 0.25, "release"),
    # Tech company + launch verb
    rule(r"\b(apple|google|microsoft|meta|amazon|tesla|nvidia)\b.*\b(releases?|launches?|announces?|unveils?)\b",
         0.15, "tech_release"),
    rule(r"\b(iphone|ipad|mac|pixel|surface|galaxy)\b.*\b(update|new|release)", 0.15, "tech_release"),
    # Plain shallow terms
    rule(r"download", 0.1, "term"),
    rule(r"install", 0.1, "term"),
    rule(r"upgrade", 0.1, "term"),
    rule(r"changelog", 0.1, "term"),
    rule(r"patch notes", 0.1, "term"),
    rule(r"bug fixes", 0.1, "term"),
    rule(r"performance improvements", 0.1, "term"),
    rule(r"stability", 0.1, "term"),
], cap=0.7)


# ─────────────────────────────────────────────────────
# Negative signals: promotion, clickbait, pronoun gaps, listicles
# ─────────────────────────────────────────────────────
NEGATIVE_WEIGHTS = {
    "pronoun_gap": 0.40,
    "clickbait": 0.15,
    "promotional": 0.12,
    "listicle": 0.08,
}

NEGATIVE_RULES = RuleTable([
    rule(r"\b(buy now|limited time|discount|sale|promo|deal|offer)\b", NEGATIVE_WEIGHTS["promotional"], "promotional"),
    rule(r"\b(sponsored|advertisement|partner content)\b", NEGATIVE_WEIGHTS["promotional"], "promotional"),
    rule(r"\b(exclusive offer|special price|save \d+%)", NEGATIVE_WEIGHTS["promotional"], "promotional"),
    rule(r"\b(you won't believe|shocking|mind-blowing|jaw-dropping)\b", NEGATIVE_WEIGHTS["clickbait"], "clickbait"),
    rule(r"\b(this one weird trick|doctors hate|secret revealed)\b", NEGATIVE_WEIGHTS["clickbait"], "clickbait"),
    rule(r"\b(what happens next|will shock you|changed everything)\b", NEGATIVE_WEIGHTS["clickbait"], "clickbait"),
    rule(r"\b(finally revealed|exposed|the truth about)\b", NEGATIVE_WEIGHTS["clickbait"], "clickbait"),
    rule(r"^(this|that|these|those)\s+(one|thing|trick|hack|reason|secret)", NEGATIVE_WEIGHTS["pronoun_gap"], "pronoun_gap"),
    rule(r"^(what|why|how)\s+(they|he|she|it|we)\s+(did|found|discovered)", NEGATIVE_WEIGHTS["pronoun_gap"], "pronoun_gap"),
    rule(r"^here'?s?\s+(why|what|how)", NEGATIVE_WEIGHTS["pronoun_gap"], "pronoun_gap"),
    rule(r"^(the\s+)?reason\s+(why|that)\b", NEGATIVE_WEIGHTS["pronoun_gap"], "pronoun_gap"),
    # Only a leading number makes a listicle; "raises $5 million" is fine
    rule(r"^\d+\s+(things|ways|reasons|tips|tricks|hacks|secrets|steps|rules|signs|facts)\b",
         NEGATIVE_WEIGHTS["listicle"], "listicle"),
    rule(r"^top\s+\d+\b", NEGATIVE_WEIGHTS["listicle"], "listicle"),
    rule(r"^best\s+\d+\b", NEGATIVE_WEIGHTS["listicle"], "listicle"),
    rule(r"^the\s+\d+\s+(best|top|most|worst)", NEGATIVE_WEIGHTS["listicle"], "listicle"),
], cap=0.4)


# ─────────────────────────────────────────────────────
# Fictional universes whose names collide with systemic keywords
# ─────────────────────────────────────────────────────
SYSTEMIC_EXCLUSIONS = RuleTable([
    rule(r"star wars", 1.0, "geopolitical"),
    rule(r"game of thrones", 1.0, "geopolitical"),
    rule(r"call of duty", 1.0, "geopolitical"),
    rule(r"world of warcraft", 1.0, "geopolitical"),
    rule(r"\bwar(craft|frame|hammer)", 1.0, "geopolitical"),
    rule(r"avengers.*war", 1.0, "geopolitical"),
    rule(r"infinity war", 1.0, "geopolitical"),
    rule(r"civil war.*marvel", 1.0, "geopolitical"),
    rule(r"fantasy (football|league|basketball)", 1.0, "economic"),
    rule(r"market(place|ing)", 1.0, "economic"),
    rule(r"stock market game", 1.0, "economic"),
])


# ─────────────────────────────────────────────────────
# Recognized technical terminology (SemanticMeat)
# ─────────────────────────────────────────────────────
TECH_TERM_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"\b(artificial intelligence|machine learning|deep learning|neural network|llm|gpt|transformer|diffusion)\b",
        r"\b(reinforcement learning|natural language|computer vision|generative ai|foundation model)\b",
        r"\b(blockchain|cryptocurrency|bitcoin|ethereum|defi|nft|smart contract|web3)\b",
        r"\b(kubernetes|docker|microservices|serverless|cloud native|api|sdk|devops|ci/cd)\b",
        r"\b(cybersecurity|zero-day|ransomware|encryption|vulnerability|exploit|malware|phishing)\b",
        r"\b(crispr|mrna|gene therapy|biomarker|clinical trial|fda approval|drug discovery)\b",
        r"\b(quantum computing|fusion|satellite|spacecraft|telescope|particle accelerator|dark matter)\b",
        r"\b(gdp|inflation rate|interest rate|quantitative easing|fiscal policy|monetary policy)\b",
        r"\b(bond yield|credit default|derivative|hedge fund|private equity|venture capital)\b",
    )
]


def find_tech_terms(text: str) -> list[str]:
    """All technical-term matches, lowercased, in order (duplicates kept)."""
    found = []
    for pattern in TECH_TERM_PATTERNS:
        found.extend(m.group(0).lower() for m in pattern.finditer(text))
    return found
