"""Keyword and named-entity heuristics shared by clustering and scoring."""

import re

from .config import STOPWORDS

_NON_WORD = re.compile(r"[^a-z0-9\s-]")
_DIGITS = re.compile(r"^[\d-]+$")

# Names that are safe to match case-insensitively
_ENTITY_NAME_PATTERNS = [
    # Countries and regions
    re.compile(
        r"\b(United States|America|China|Russia|Ukraine|Israel|Palestine|Gaza|Iran|"
        r"North Korea|South Korea|Taiwan|India|Pakistan|Britain|France|Germany|Japan|"
        r"Brazil|Mexico|Canada|Australia|Saudi Arabia|Turkey|Egypt|Syria|Venezuela|"
        r"Argentina|European Union)\b",
        re.IGNORECASE,
    ),
    # Organizations and institutions
    re.compile(
        r"\b(NATO|World Bank|Federal Reserve|Congress|Senate|Pentagon|Supreme Court|"
        r"White House|Kremlin|Beijing|OPEC|BRICS)\b",
        re.IGNORECASE,
    ),
    # Companies
    re.compile(
        r"\b(OpenAI|Google|Microsoft|Apple|Amazon|Meta|Facebook|Tesla|Nvidia|SpaceX|"
        r"Twitter|TikTok|ByteDance|Samsung|Intel|AMD|Anthropic|DeepMind)\b",
        re.IGNORECASE,
    ),
    # People
    re.compile(
        r"\b(Trump|Biden|Putin|Xi Jinping|Zelensky|Netanyahu|Musk|Bezos|Zuckerberg|Altman)\b",
        re.IGNORECASE,
    ),
]

# Acronyms that collide with ordinary words ("us", "who") when case-folded
_ENTITY_ACRONYM_PATTERN = re.compile(
    r"\b(US|USA|UK|UN|EU|WHO|IMF|Fed|CIA|FBI|NSA|DOJ|WTO|G7|G20)\b"
)

# Titles followed by a name: "President Macron", "CEO Satya Nadella"
_TITLED_PERSON_PATTERN = re.compile(
    r"\b(?:President|Prime Minister|CEO|PM|Chancellor|Minister)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b"
)

# Generic capitalized run of two or three words
_CAPITALIZED_PHRASE_PATTERN = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+){1,2})\b")


def tokenize(text: str) -> list[str]:
    """Case-fold, strip punctuation, split on whitespace."""
    return [t.strip("-") for t in _NON_WORD.sub(" ", text.lower()).split() if t.strip("-")]


def significant_words(text: str, min_len: int = 4) -> list[str]:
    """Tokens that carry meaning: long enough, not stop words, not numbers."""
    return [
        t for t in tokenize(text)
        if len(t) >= min_len and t not in STOPWORDS and not _DIGITS.match(t)
    ]


def extract_entities(text: str) -> list[str]:
    """Named-entity-like substrings, case-folded, in order of first appearance."""
    found = []
    for pattern in _ENTITY_NAME_PATTERNS:
        found.extend(m.group(0) for m in pattern.finditer(text))
    found.extend(m.group(0) for m in _ENTITY_ACRONYM_PATTERN.finditer(text))
    found.extend(m.group(1) for m in _TITLED_PERSON_PATTERN.finditer(text))
    for m in _CAPITALIZED_PHRASE_PATTERN.finditer(text):
        phrase = m.group(1)
        # "The Senate" -> skip phrases that only start with a stop word
        if phrase.split()[0].lower() in STOPWORDS:
            continue
        found.append(phrase)
    return _dedupe(e.strip().lower() for e in found)


def extract_keywords(title: str) -> list[str]:
    """Entities first, then significant words, deduplicated."""
    return _dedupe(extract_entities(title) + significant_words(title))


def jaccard(a, b) -> float:
    a, b = set(a), set(b)
    if not a or not b:
        return 0.0
    union = len(a | b)
    return len(a & b) / union if union else 0.0


def _dedupe(items) -> list:
    seen = set()
    out = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            out.append(item)
    return out
