"""Tests for combining per-source verifications."""

from lie_detector.domain.models.verification import Evidence, Rating, Verification
from lie_detector.domain.services.combiner import (
    NO_FACT_CHECKS_CAVEATS,
    NO_FACT_CHECKS_SUMMARY,
    combine_verifications,
    create_unverified_result,
    merge_evidence,
)


def test_no_results_yields_canonical_unverified():
    """Test the fallback when no source produced anything."""
    result = combine_verifications("claim-9", [])

    assert result.claim_id == "claim-9"
    assert result.rating == Rating.UNVERIFIED
    assert result.confidence == 0.1
    assert result.evidence == []
    assert result.summary == NO_FACT_CHECKS_SUMMARY
    assert result.caveats == NO_FACT_CHECKS_CAVEATS


def test_create_unverified_result_returns_fresh_caveat_list():
    """Test that callers cannot mutate the shared caveat constants."""
    first = create_unverified_result("a")
    first.caveats.append("extra")
    assert create_unverified_result("b").caveats == NO_FACT_CHECKS_CAVEATS


def test_single_result_is_kept_as_is(make_verification):
    """Test that one result passes through without a source suffix."""
    only = make_verification(Rating.FALSE, 0.9, summary="Snopes says false.", evidence_urls=["https://a"])

    result = combine_verifications("claim-1", [only])

    assert result.rating == Rating.FALSE
    assert result.confidence == 0.9
    assert result.summary == "Snopes says false."
    assert [e.url for e in result.evidence] == ["https://a"]


def test_highest_confidence_wins(make_verification):
    """Test that the most confident result decides rating and confidence."""
    wikipedia = make_verification(Rating.UNVERIFIED, 0.4, summary="Wikipedia reference.")
    pubmed = make_verification(Rating.MOSTLY_TRUE, 0.65, summary="PubMed studies support this.")

    result = combine_verifications("claim-1", [wikipedia, pubmed])

    assert result.rating == Rating.MOSTLY_TRUE
    assert result.confidence == 0.65
    assert result.summary == "PubMed studies support this. (Verified against 2 sources)"


def test_confidence_tie_resolves_to_earliest_result(make_verification):
    """Test that equal confidence keeps the result from the earlier stage."""
    first = make_verification(Rating.MIXED, 0.5, summary="first")
    second = make_verification(Rating.MOSTLY_FALSE, 0.5, summary="second")

    result = combine_verifications("claim-1", [first, second])

    assert result.rating == Rating.MIXED
    assert result.summary.startswith("first")


def test_evidence_deduplicated_and_capped(make_verification):
    """Test that merged evidence has unique URLs and at most ten items."""
    results = [
        make_verification(Rating.FALSE, 0.9, evidence_urls=[f"https://a/{i}" for i in range(6)]),
        make_verification(Rating.UNVERIFIED, 0.4, evidence_urls=[f"https://a/{i}" for i in range(3, 9)]),
        make_verification(Rating.MIXED, 0.5, evidence_urls=[f"https://b/{i}" for i in range(6)]),
    ]

    result = combine_verifications("claim-1", results)
    urls = [e.url for e in result.evidence]

    assert len(urls) == 10
    assert len(set(urls)) == 10
    # Primary first, then the next most confident
    assert urls[:6] == [f"https://a/{i}" for i in range(6)]
    assert urls[6:] == [f"https://b/{i}" for i in range(4)]


def test_urlless_evidence_only_kept_from_primary():
    """Test that evidence without a URL is only taken from the primary result."""
    primary = Verification(
        claim_id="c", rating=Rating.FALSE, confidence=0.9, summary="p",
        evidence=[Evidence(url="", source_name="Primary note")],
    )
    secondary = Verification(
        claim_id="c", rating=Rating.UNVERIFIED, confidence=0.3, summary="s",
        evidence=[Evidence(url="", source_name="Secondary note"), Evidence(url="https://x", source_name="X")],
    )

    merged = merge_evidence([primary, secondary])

    assert [e.source_name for e in merged] == ["Primary note", "X"]


def test_primary_urlless_evidence_is_kept_whole():
    """Test that several URL-less items from the primary all survive."""
    primary = Verification(
        claim_id="c", rating=Rating.FALSE, confidence=0.9, summary="p",
        evidence=[Evidence(url="", source_name="PolitiFact"), Evidence(url="", source_name="Snopes")],
    )

    result = combine_verifications("c", [primary])

    assert [e.source_name for e in result.evidence] == ["PolitiFact", "Snopes"]


def test_caveats_union_capped(make_verification):
    """Test that caveats are merged without duplicates and truncated."""
    results = [
        make_verification(Rating.FALSE, 0.9, caveats=["a", "b", "c"]),
        make_verification(Rating.UNVERIFIED, 0.4, caveats=["b", "d", "e", "f"]),
    ]

    result = combine_verifications("claim-1", results)

    assert result.caveats == ["a", "b", "c", "d", "e"]


def test_combined_confidence_is_max_of_candidates(make_verification):
    """Test the combined confidence against several candidate sets."""
    for confidences in ([0.1], [0.3, 0.6], [0.95, 0.2, 0.5]):
        results = [make_verification(Rating.MIXED, c) for c in confidences]
        assert combine_verifications("claim-1", results).confidence == max(confidences)
