"""Combination of per-source verifications into one verdict."""

import logging
from datetime import datetime
from typing import List, Sequence

from ..models.verification import (
    MAX_CAVEATS,
    MAX_EVIDENCE,
    Evidence,
    Rating,
    Verification,
)

logger = logging.getLogger(__name__)

NO_FACT_CHECKS_SUMMARY = (
    "No fact-checks found for this claim. This doesn't mean it's false or true - "
    "it simply hasn't been verified by known fact-checkers."
)
NO_FACT_CHECKS_CAVEATS = [
    "No existing fact-checks found",
    "Consider verifying with primary sources",
]


def create_unverified_result(claim_id: str) -> Verification:
    """Create the canonical result for a claim no source could judge.

    Args:
        claim_id: Identifier of the claim

    Returns:
        Unverified verification with minimal confidence
    """
    return Verification(
        claim_id=claim_id,
        rating=Rating.UNVERIFIED,
        confidence=0.1,
        summary=NO_FACT_CHECKS_SUMMARY,
        evidence=[],
        caveats=list(NO_FACT_CHECKS_CAVEATS),
    )


def merge_evidence(ranked: Sequence[Verification]) -> List[Evidence]:
    """Merge evidence lists, primary first, skipping URLs already seen.

    The primary result's evidence is kept whole. Secondary items without a
    URL, or with a URL already merged, are skipped.
    """
    primary, secondary = ranked[0], ranked[1:]
    merged: List[Evidence] = list(primary.evidence[:MAX_EVIDENCE])
    seen = {item.url for item in merged if item.url}
    for result in secondary:
        for item in result.evidence:
            if len(merged) >= MAX_EVIDENCE:
                return merged
            if not item.url or item.url in seen:
                continue
            seen.add(item.url)
            merged.append(item)
    return merged


def merge_caveats(ranked: Sequence[Verification]) -> List[str]:
    """Union of all caveats in ranked order, truncated."""
    caveats = dict.fromkeys(
        caveat for result in ranked for caveat in result.caveats
    )
    return list(caveats)[:MAX_CAVEATS]


def combine_verifications(claim_id: str, results: Sequence[Verification]) -> Verification:
    """Combine verifications from multiple sources.

    The highest-confidence result is the primary: its rating and confidence
    become the final ones. ``sorted`` is stable, so on equal confidence the
    result from the earlier stage wins.

    Args:
        claim_id: Identifier of the claim being verified
        results: Per-source verifications in call order

    Returns:
        Combined verification
    """
    if not results:
        return create_unverified_result(claim_id)

    ranked = sorted(results, key=lambda result: result.confidence, reverse=True)
    primary = ranked[0]

    summary = primary.summary
    if len(ranked) > 1:
        summary += f" (Verified against {len(ranked)} sources)"

    logger.debug(
        f"🔄 Combined {len(ranked)} results: rating={primary.rating.value}, "
        f"confidence={primary.confidence:.2f}"
    )

    return Verification(
        claim_id=claim_id,
        rating=primary.rating,
        confidence=primary.confidence,
        summary=summary,
        evidence=merge_evidence(ranked),
        checked_at=datetime.utcnow(),
        caveats=merge_caveats(ranked),
    )
