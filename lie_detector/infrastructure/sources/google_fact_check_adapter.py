"""Google Fact Check Tools implementation of the source adapter interface.

Documentation: https://developers.google.com/fact-check/tools/api
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.models.claim import Claim
from ...domain.models.verification import MAX_EVIDENCE, Evidence, Rating, Verification
from ...domain.ports.source_adapter import SourceAdapter
from ..http.retry import RetryConfig, RetryPolicy

logger = logging.getLogger(__name__)


class GoogleFactCheckConfig(BaseModel):
    """Configuration for Google Fact Check adapter."""

    api_key: str = Field(..., description="Google Fact Check Tools API key")
    base_url: str = Field(
        default="https://factchecktools.googleapis.com/v1alpha1",
        description="Fact Check Tools API base URL",
    )
    language_code: str = Field(default="en", description="Language of fact-checks to search")
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry settings for 429/503")


class GooglePublisher(BaseModel):
    """Publisher of a claim review."""

    name: str = "Unknown"
    site: Optional[str] = None


class GoogleClaimReview(BaseModel):
    """A single fact-checker's review of a claim."""

    model_config = ConfigDict(populate_by_name=True)

    publisher: GooglePublisher = Field(default_factory=GooglePublisher)
    url: str = ""
    title: str = ""
    review_date: Optional[str] = Field(None, alias="reviewDate")
    textual_rating: str = Field("", alias="textualRating")
    language_code: Optional[str] = Field(None, alias="languageCode")


class GoogleFactCheckClaim(BaseModel):
    """A claim matched by the fact-check index."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    claimant: Optional[str] = None
    claim_date: Optional[str] = Field(None, alias="claimDate")
    claim_review: List[GoogleClaimReview] = Field(default_factory=list, alias="claimReview")


class GoogleFactCheckResponse(BaseModel):
    """Response of ``claims:search``."""

    model_config = ConfigDict(populate_by_name=True)

    claims: List[GoogleFactCheckClaim] = Field(default_factory=list)
    next_page_token: Optional[str] = Field(None, alias="nextPageToken")


def map_rating(textual_rating: str) -> Rating:
    """Map a fact-checker's free-text rating to a Rating.

    Rules are checked in order; qualified forms ("mostly true", "half true",
    "partly false") are matched before the bare words they contain.

    Args:
        textual_rating: Rating text as published, e.g. "Pants on Fire!"

    Returns:
        Mapped rating, unverified when nothing matches
    """
    rating = textual_rating.lower()

    if any(term in rating for term in ("mostly true", "mostly accurate", "largely true")):
        return Rating.MOSTLY_TRUE

    if any(term in rating for term in ("mostly false", "largely false", "mostly inaccurate")):
        return Rating.MOSTLY_FALSE

    if any(term in rating for term in ("mixed", "half", "partly", "partially", "misleading")):
        return Rating.MIXED

    if "true" in rating and "false" not in rating:
        return Rating.VERIFIED

    if any(term in rating for term in ("false", "pants on fire", "incorrect", "wrong", "fake", "hoax")):
        return Rating.FALSE

    if any(term in rating for term in ("opinion", "satire", "commentary")):
        return Rating.OPINION

    if any(term in rating for term in ("outdated", "no longer")):
        return Rating.OUTDATED

    return Rating.UNVERIFIED


def calculate_confidence(ratings: Sequence[Rating]) -> float:
    """Confidence from the number and agreement of reviews."""
    if not ratings:
        return 0.3
    if len(ratings) == 1:
        return 0.6

    base_confidence = min(0.9, 0.5 + len(ratings) * 0.1)
    consistency_bonus = 0.1 if len(set(ratings)) == 1 else 0.0
    return round(min(0.95, base_confidence + consistency_bonus), 4)


def aggregate_rating(ratings: Sequence[Rating]) -> Rating:
    """Most common rating; on a tie the one encountered first."""
    return Counter(ratings).most_common(1)[0][0]


class GoogleFactCheckAdapter(SourceAdapter):
    """Google Fact Check Tools implementation of the source adapter interface.

    The index aggregates reviews from fact-checking organisations such as
    PolitiFact, Snopes, AFP and Reuters, which makes it the most
    authoritative source available.
    """

    def __init__(
        self,
        config: Optional[GoogleFactCheckConfig] = None,
        provider_name: str = "Google Fact Check",
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """Initialize the adapter."""
        self._config = config or GoogleFactCheckConfig(api_key="")
        self._name = provider_name
        self._retry = retry_policy or RetryPolicy(self._config.retry, name=provider_name)
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize Google Fact Check provider: no API key configured")
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._config.base_url,
                timeout=self._config.timeout,
            )
        self._initialized = True

    async def _search(self, query: str) -> Dict[str, Any]:
        response = await self._client.get(
            "/claims:search",
            params={
                "key": self._config.api_key,
                "query": query,
                "languageCode": self._config.language_code,
            },
        )
        response.raise_for_status()
        return response.json()

    async def verify(self, claim: Claim) -> Optional[Verification]:
        """Search published fact-checks for the claim.

        Args:
            claim: Claim to verify

        Returns:
            Verification built from the reviews of the best match, or None
        """
        if not self._client:
            raise RuntimeError("Provider not initialized")

        logger.info(f"🔎 Searching fact-checks for: {claim.text[:100]}...")

        try:
            payload = await self._retry.call(self._search, claim.text)
            response = GoogleFactCheckResponse.model_validate(payload)
        except httpx.HTTPStatusError as e:
            logger.error(f"❌ Google Fact Check API error {e.response.status_code}: {e.response.text[:200]}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"❌ Google Fact Check request failed: {e}")
            return None
        except (ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Malformed Google Fact Check response: {e}")
            return None

        if not response.claims:
            logger.info("📭 No fact-checks found for this claim")
            return None

        # First result is the index's best match
        top_claim = response.claims[0]
        reviews = top_claim.claim_review
        if not reviews:
            logger.info("📭 No reviews found for matched claim")
            return None

        ratings = [map_rating(review.textual_rating) for review in reviews]
        rating = aggregate_rating(ratings)
        confidence = calculate_confidence(ratings)

        evidence = [
            Evidence(
                url=review.url,
                source_name=review.publisher.name,
                quote=review.title,
                date_published=review.review_date,
                peer_reviewed=False,
            )
            for review in reviews[:MAX_EVIDENCE]
        ]

        primary = reviews[0]
        summary = f'{primary.publisher.name} rated this claim as "{primary.textual_rating}".'
        if len(reviews) > 1:
            summary += f" {len(reviews)} fact-checkers have reviewed this claim."

        logger.info(f"✅ Google Fact Check: rating={rating.value}, confidence={confidence}")
        return Verification(
            claim_id=claim.id,
            rating=rating,
            confidence=confidence,
            summary=summary,
            evidence=evidence,
        )

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "fact_check_index": True,
            "rating_mapping": True,
            "retry_mechanism": True,
            "requires_api_key": True,
        }
