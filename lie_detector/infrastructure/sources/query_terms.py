"""Search query extraction shared by the source adapters."""

import re
from typing import Iterable

# Hedging phrases that add nothing to a search query
COMMON_CLAIM_PHRASES = (
    "according to",
    "studies show",
    "research indicates",
    "experts say",
)


def phrase_pattern(phrases: Iterable[str]) -> re.Pattern:
    """Compile a case-insensitive pattern matching any phrase as whole words."""
    alternatives = "|".join(re.escape(phrase) for phrase in phrases)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def extract_search_terms(claim_text: str, pattern: re.Pattern, max_words: int) -> str:
    """Strip boilerplate phrases and keep the first ``max_words`` words.

    Args:
        claim_text: Raw claim text
        pattern: Compiled pattern of phrases to remove
        max_words: Maximum number of words in the query

    Returns:
        Search query
    """
    words = pattern.sub(" ", claim_text).split()
    return " ".join(words[:max_words])
