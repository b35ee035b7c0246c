"""Paths, constants, per-category tuning, and config.json resolution."""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path

# ─────────────────────────────────────────────────────
# Home directory: config, logs and topic history live here
# ─────────────────────────────────────────────────────
HOME_DIR = Path.home() / ".deeptopics"
LOGS_DIR = HOME_DIR / "logs"
CONFIG_FILE = HOME_DIR / "config.json"
HISTORY_FILE = HOME_DIR / "history.json"

USER_AGENT = "DeepTopics/1.0 (News Aggregator)"

# ─────────────────────────────────────────────────────
# Text constants
# ─────────────────────────────────────────────────────
STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "from", "as", "is", "was", "are", "were", "been", "be", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might", "must",
    "shall", "can", "need", "dare", "ought", "used", "it", "its", "this", "that",
    "these", "those", "i", "you", "he", "she", "we", "they", "what", "which", "who",
    "whom", "whose", "where", "when", "why", "how", "all", "each", "every", "both",
    "few", "more", "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "just", "also", "now", "new", "says", "said",
    "report", "reports", "after", "before", "over", "under", "again", "further", "then",
    "once", "here", "there", "about", "into", "through", "during", "above", "below",
    "between", "up", "down", "out", "off", "first", "last", "latest",
    "breaking", "live", "update", "updates", "news", "today", "yesterday", "week",
}

# Quality tier -> weight used by hotness and quality scoring
TIER_WEIGHTS = {
    0: 15,  # Deep analysis
    1: 10,  # Premium / authoritative
    2: 7,   # Quality mainstream
    3: 4,   # General / social
}

CATEGORIES = [
    "Geopolitics", "Economics", "Technology", "Climate", "Society", "Science", "Conflict",
]


# ─────────────────────────────────────────────────────
# Category tuning table
# ─────────────────────────────────────────────────────
@dataclass(frozen=True)
class CategoryProfile:
    """Tuning constants consulted by the clusterer and the ranker."""
    similarity_threshold: float = 0.25
    min_sources: int = 2
    decay_gravity: float = 24.0  # hours; larger decays slower
    recency_window_hours: int = 72


DEFAULT_PROFILE = CategoryProfile()

CATEGORY_PROFILES = {
    "Geopolitics": CategoryProfile(decay_gravity=12.0),
    "Conflict": CategoryProfile(decay_gravity=10.0),
    "Economics": CategoryProfile(decay_gravity=18.0),
    "Society": CategoryProfile(decay_gravity=24.0),
    "Technology": CategoryProfile(similarity_threshold=0.2, decay_gravity=18.0),
    "Science": CategoryProfile(similarity_threshold=0.15, min_sources=1, decay_gravity=48.0),
    "Climate": CategoryProfile(similarity_threshold=0.15, min_sources=1, decay_gravity=48.0),
}


def get_profile(category: str) -> CategoryProfile:
    """Profile for a category, with overrides from config.json applied."""
    profile = CATEGORY_PROFILES.get(category, DEFAULT_PROFILE)
    overrides = load_config().get("category_profiles", {}).get(category, {})
    known = {k: v for k, v in overrides.items() if k in CategoryProfile.__dataclass_fields__}
    return replace(profile, **known) if known else profile


# ─────────────────────────────────────────────────────
# Selector policy
# ─────────────────────────────────────────────────────
@dataclass
class VirtualSeedPolicy:
    """Extra confidence samples granted to a fresh top-tier report."""
    enabled: bool = True
    bonus_samples: float = 2.0
    max_age_hours: float = 3.0
    max_tier: int = 0


@dataclass
class SelectorSettings:
    min_meat_score: int = 100
    min_hotness: int = 150
    enrich_top_k: int = 5
    keep_top_n: int = 10
    history_days: int = 30
    cache_ttl_seconds: int = 30 * 60
    fetch_timeout: float = 10.0
    max_workers: int = 8
    virtual_seed: VirtualSeedPolicy = field(default_factory=VirtualSeedPolicy)

    @classmethod
    def from_config(cls) -> "SelectorSettings":
        """Build settings from env vars, then config.json, then defaults."""
        seed_cfg = load_config().get("virtual_seed", {})
        seed = VirtualSeedPolicy(**{
            k: v for k, v in seed_cfg.items() if k in VirtualSeedPolicy.__dataclass_fields__
        })
        return cls(
            min_meat_score=int(_get_setting("DEEPTOPICS_MIN_MEAT_SCORE", cls.min_meat_score)),
            min_hotness=int(_get_setting("DEEPTOPICS_MIN_HOTNESS", cls.min_hotness)),
            enrich_top_k=int(_get_setting("DEEPTOPICS_ENRICH_TOP_K", cls.enrich_top_k)),
            keep_top_n=int(_get_setting("DEEPTOPICS_KEEP_TOP_N", cls.keep_top_n)),
            history_days=int(_get_setting("DEEPTOPICS_HISTORY_DAYS", cls.history_days)),
            cache_ttl_seconds=int(_get_setting("DEEPTOPICS_CACHE_TTL", cls.cache_ttl_seconds)),
            fetch_timeout=float(_get_setting("DEEPTOPICS_FETCH_TIMEOUT", cls.fetch_timeout)),
            max_workers=int(_get_setting("DEEPTOPICS_MAX_WORKERS", cls.max_workers)),
            virtual_seed=seed,
        )


# ─────────────────────────────────────────────────────
# Utilities
# ─────────────────────────────────────────────────────
def write_secret_file(path: Path, content: str):
    """Write a file with 0600 permissions (owner read/write only)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(content)


def _get_setting(name: str, default=None):
    """Resolve a setting: environment variable first, then config.json."""
    val = os.environ.get(name)
    if val:
        return val
    val = load_config().get(name)
    if val not in (None, ""):
        return val
    return default


def load_config() -> dict:
    """Load the full config.json; missing or unreadable files give {}."""
    if CONFIG_FILE.exists():
        try:
            return json.loads(CONFIG_FILE.read_text())
        except (OSError, ValueError):
            pass
    return {}


def save_config(config: dict):
    """Save config.json with restricted permissions."""
    write_secret_file(CONFIG_FILE, json.dumps(config, indent=2))


def set_config_value(key: str, raw: str) -> dict:
    """Set one config.json value and save.

    Dotted keys reach into nested tables, e.g.
    ``category_profiles.Science.min_sources`` or ``virtual_seed.enabled``.
    Values are parsed as JSON when possible, else stored as strings.
    """
    try:
        value = json.loads(raw)
    except ValueError:
        value = raw

    config = load_config()
    *parents, leaf = key.split(".")
    node = config
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value
    save_config(config)
    return config
