"""
Rule tables for channel inclusion, category and quality.

Each table is an ordered tuple evaluated top to bottom; the first matching
rule wins. Rules look at the playlist ``group-title`` and the channel name.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Pattern


class Category(str, Enum):
    """Channel categories, in catalog order."""

    CRICKET = "Cricket"
    MOVIES = "Movies"
    NEWS = "News"
    MUSIC = "Music"
    KIDS = "Kids"
    DEVOTIONAL = "Devotional"
    ENTERTAINMENT = "Entertainment"


class Quality(str, Enum):
    """Quality tiers guessed from channel names."""

    SD = "SD"
    HD = "HD"
    FHD = "FHD"
    UHD_4K = "4K"


DEFAULT_CATEGORY = Category.ENTERTAINMENT
DEFAULT_QUALITY = Quality.SD


@dataclass(frozen=True)
class Rule:
    """
    A keyword rule over group label and channel name.

    The rule matches when either pattern matches. A missing pattern never
    matches on its own.
    """

    value: str
    group_pattern: Optional[Pattern[str]] = None
    name_pattern: Optional[Pattern[str]] = None

    def matches(self, name: str, group: str = "") -> bool:
        if self.group_pattern is not None and self.group_pattern.search(group):
            return True
        if self.name_pattern is not None and self.name_pattern.search(name):
            return True
        return False


# Entries outside the target bundle are dropped before classification.
INCLUSION_RULES: tuple[Rule, ...] = (
    Rule("tm-prefix", name_pattern=re.compile(r"^TM:")),
    Rule("tamil-prefix", name_pattern=re.compile(r"^tamil", re.IGNORECASE)),
    Rule("tamil-group", group_pattern=re.compile(r"^FREE LIV TV \|\| TAMIL")),
    Rule("cricket-group", group_pattern=re.compile(r"FREE LIV TV \|\| CRICKET")),
    Rule("24x7-prefix", name_pattern=re.compile(r"^24/7:")),
)

CATEGORY_RULES: tuple[Rule, ...] = (
    Rule(
        Category.CRICKET.value,
        group_pattern=re.compile(r"CRICKET"),
        name_pattern=re.compile(r"(?i:cricket)|^CRIC \|\|"),
    ),
    Rule(
        Category.MOVIES.value,
        group_pattern=re.compile(r"MOVIES"),
        name_pattern=re.compile(r"movie", re.IGNORECASE),
    ),
    Rule(
        Category.NEWS.value,
        group_pattern=re.compile(r"NEWS"),
        name_pattern=re.compile(r"news", re.IGNORECASE),
    ),
    Rule(
        Category.MUSIC.value,
        group_pattern=re.compile(r"MUSIC"),
        name_pattern=re.compile(r"music", re.IGNORECASE),
    ),
    Rule(
        Category.KIDS.value,
        group_pattern=re.compile(r"KIDS"),
        name_pattern=re.compile(r"kids|cartoon", re.IGNORECASE),
    ),
    Rule(
        Category.DEVOTIONAL.value,
        name_pattern=re.compile(r"devotional|religious|god", re.IGNORECASE),
    ),
)

# Small-caps glyphs are how the upstream playlist marks quality in names.
QUALITY_RULES: tuple[Rule, ...] = (
    Rule(Quality.UHD_4K.value, name_pattern=re.compile(r"4k|⁴ᵏ|uhd", re.IGNORECASE)),
    Rule(Quality.FHD.value, name_pattern=re.compile(r"fhd|ᶠᴴᴰ|1080", re.IGNORECASE)),
    Rule(Quality.HD.value, name_pattern=re.compile(r"hd|ᴴᴰ|720", re.IGNORECASE)),
)

CATEGORY_ICONS: dict[str, str] = {
    "Cricket": "🏏",
    "Sports": "⚽",
    "Movies": "🎬",
    "News": "📰",
    "Entertainment": "📺",
    "Music": "🎵",
    "Kids": "👶",
    "Devotional": "🙏",
    "Tamil": "🎭",
}

# (pattern, replacement) applied in order by clean_channel_name
_NAME_CLEANUPS: tuple[tuple[Pattern[str], str], ...] = (
    (re.compile(r"^TM:\s*", re.IGNORECASE), ""),
    (re.compile(r"^CRIC\s*\|\|\s*", re.IGNORECASE), "🏏 "),
    (re.compile(r"^Tamil:\s*", re.IGNORECASE), ""),
    (re.compile(r"ᶠᴴᴰ"), " FHD"),
    (re.compile(r"ᴴᴰ"), " HD"),
    (re.compile(r"⁴ᵏ"), " 4K"),
    (re.compile(r"\s{2,}"), " "),
)


def first_match(rules: tuple[Rule, ...], name: str, group: str = "") -> Optional[str]:
    """Value of the first rule that matches, or None."""
    for rule in rules:
        if rule.matches(name, group):
            return rule.value
    return None


def is_included(name: str, group: str = "") -> bool:
    """True when the entry belongs to the target content bundle."""
    return first_match(INCLUSION_RULES, name, group) is not None


def classify_category(name: str, group: str = "") -> Category:
    value = first_match(CATEGORY_RULES, name, group)
    return Category(value) if value else DEFAULT_CATEGORY


def classify_quality(name: str) -> Quality:
    value = first_match(QUALITY_RULES, name)
    return Quality(value) if value else DEFAULT_QUALITY


def clean_channel_name(name: str) -> str:
    """Strip playlist decorations from a channel name for display."""
    for pattern, replacement in _NAME_CLEANUPS:
        name = pattern.sub(replacement, name)
    return name.strip()


def get_category_icon(category: str) -> str:
    return CATEGORY_ICONS.get(category, "📺")
