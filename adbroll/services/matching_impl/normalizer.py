"""
Text canonicalization shared by every matching entry point.

Titles scraped from TikTok mix emojis, accented Spanish and arbitrary
punctuation. ``normalize_text`` folds all of that away so that only the words
themselves are compared. It is pure and idempotent:
``normalize_text(normalize_text(x)) == normalize_text(x)``.
"""

import re
import unicodedata
from functools import lru_cache
from typing import List, Optional

from .config import MatchingConfig

# Emoji blocks, dingbats, regional indicators, variation selectors and joiners.
_EMOJI_REGEX = re.compile(
    "["
    "\U0001f000-\U0001faff"
    "\U00002600-\U000027bf"
    "\U00002b00-\U00002bff"
    "\U0001f1e6-\U0001f1ff"
    "\U0000fe00-\U0000fe0f"
    "\U0000200d"
    "\U000020e3"
    "]+"
)
_NON_WORD_REGEX = re.compile(r"[^\w\s]|_")
_WHITESPACE_REGEX = re.compile(r"\s+")


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


@lru_cache(maxsize=8192)
def _normalize(text: str) -> str:
    # Accents are stripped on both sides of lower() since lowercasing can itself
    # produce combining marks (e.g. "İ").
    folded = _strip_accents(_strip_accents(text).lower())
    folded = _EMOJI_REGEX.sub(" ", folded)
    folded = _NON_WORD_REGEX.sub(" ", folded)
    return _WHITESPACE_REGEX.sub(" ", folded).strip()


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, accent/emoji/punctuation-free, single-spaced version of ``text``."""
    if not text:
        return ""
    return _normalize(text)


def tokenize(normalized_text: str, config: MatchingConfig) -> List[str]:
    """Significant words of an already normalized string, in order. Bare numbers are not words."""
    return [
        word
        for word in normalized_text.split(" ")
        if len(word) > config.min_token_length and word not in config.stop_words and not word.isdigit()
    ]
