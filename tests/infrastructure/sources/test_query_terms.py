"""Tests for search query extraction."""

from lie_detector.infrastructure.sources.query_terms import (
    COMMON_CLAIM_PHRASES,
    extract_search_terms,
    phrase_pattern,
)


def test_strips_phrases_case_insensitively():
    """Test that hedging phrases are removed regardless of case."""
    pattern = phrase_pattern(COMMON_CLAIM_PHRASES)

    query = extract_search_terms("According to NASA the moon is hollow", pattern, 10)

    assert query == "NASA the moon is hollow"


def test_phrases_only_match_whole_words():
    """Test that a phrase inside a longer word is left alone."""
    pattern = phrase_pattern(("about",))

    query = extract_search_terms("The roundabout is about to close", pattern, 10)

    assert query == "The roundabout is to close"


def test_limits_word_count():
    """Test that the query keeps only the leading words."""
    pattern = phrase_pattern(COMMON_CLAIM_PHRASES)

    query = extract_search_terms("one two three four five six", pattern, 4)

    assert query == "one two three four"
