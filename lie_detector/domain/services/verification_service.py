"""Service for coordinating claim verification across evidence sources."""

import logging
from typing import List, Optional

from ..models.claim import Claim
from ..models.verification import Rating, Verification, VerifyOutcome
from ..ports.cache_store import CacheStore
from ..ports.source_adapter import SourceAdapter
from .cache_keys import cache_key
from .combiner import combine_verifications
from .health_claims import is_health_claim

logger = logging.getLogger(__name__)


class VerificationService:
    """Service for verifying single claims.

    Verification flow:
    1. Check cache
    2. Google Fact Check (authoritative fact-checkers)
    3. PubMed for health claims (scientific literature)
    4. Wikipedia (reference information, supplementary)
    5. LLM fallback when nothing better was found
    6. Combine, cache and return

    Stages run one after another. A stage whose adapter is not configured is
    skipped, and a stage that fails contributes nothing.
    """

    def __init__(
        self,
        cache: CacheStore,
        google: Optional[SourceAdapter] = None,
        pubmed: Optional[SourceAdapter] = None,
        wikipedia: Optional[SourceAdapter] = None,
        llm: Optional[SourceAdapter] = None,
    ):
        """Initialize the service.

        Args:
            cache: Cache store shared by every verification
            google: Fact-check index adapter, None when no API key is configured
            pubmed: Medical literature adapter
            wikipedia: Reference adapter
            llm: Last-resort LLM adapter, None when no API key is configured
        """
        self._cache = cache
        self._google = google
        self._pubmed = pubmed
        self._wikipedia = wikipedia
        self._llm = llm
        logger.info("🔧 VerificationService initialized")

    @property
    def cache(self) -> CacheStore:
        """Get the cache store."""
        return self._cache

    async def verify_one(self, claim: Claim) -> VerifyOutcome:
        """Verify a single claim using all available sources.

        Args:
            claim: Claim to verify

        Returns:
            Verification and whether it came from the cache
        """
        key = cache_key(claim.text)

        cached = self._cache.get(key)
        if cached is not None:
            logger.info(f"💾 Cache hit for: {claim.text[:50]}...")
            return VerifyOutcome(verification=cached.with_claim_id(claim.id), cached=True)

        logger.info(f"🔍 Verifying: {claim.text[:50]}...")
        results: List[Verification] = []

        google_result = await self._run_stage("Google Fact Check", self._google, claim)
        if google_result is not None and google_result.rating != Rating.UNVERIFIED:
            logger.info("✅ Found definitive fact-check from Google")
            results.append(google_result)

        if self._pubmed is not None and is_health_claim(claim.text):
            pubmed_result = await self._run_stage("PubMed", self._pubmed, claim)
            if pubmed_result is not None:
                logger.info("🧬 Found relevant PubMed research")
                results.append(pubmed_result)

        wikipedia_result = await self._run_stage("Wikipedia", self._wikipedia, claim)
        if wikipedia_result is not None and wikipedia_result.evidence:
            logger.info("📚 Found Wikipedia reference")
            results.append(wikipedia_result)

        if self._llm is not None and all(r.rating == Rating.UNVERIFIED for r in results):
            logger.info("🤖 No definitive source found, trying LLM verification...")
            llm_result = await self._run_stage("LLM", self._llm, claim)
            if llm_result is not None:
                results.append(llm_result)

        verification = combine_verifications(claim.id, results)
        self._cache.set(key, verification)

        logger.info(
            f"📊 Verified claim {claim.id}: rating={verification.rating.value}, "
            f"confidence={verification.confidence:.2f}, sources={len(results)}"
        )
        return VerifyOutcome(verification=verification, cached=False)

    async def _run_stage(
        self,
        stage: str,
        adapter: Optional[SourceAdapter],
        claim: Claim,
    ) -> Optional[Verification]:
        """Run one adapter, turning any failure into an empty result.

        Args:
            stage: Stage name for logging
            adapter: Adapter to call, None when not configured
            claim: Claim to verify

        Returns:
            Adapter result, or None when skipped, empty or failed
        """
        if adapter is None:
            logger.debug(f"⏭️ {stage} not configured, skipping")
            return None

        try:
            return await adapter.verify(claim)
        except Exception as e:
            logger.error(f"❌ {stage} error for claim {claim.id}: {e}", exc_info=True)
            return None
