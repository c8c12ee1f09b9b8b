"""Sequential, rate-limited verification of claim batches."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence

from ..models.claim import Claim
from ..models.verification import BatchOutcome, Rating, Verification
from .verification_service import VerificationService

logger = logging.getLogger(__name__)

DEFAULT_PAUSE_SECONDS = 0.5


class BatchScheduler:
    """Runs the verification service over a list of claims, one at a time.

    Claims are never verified concurrently. After every claim that had to go
    upstream (a cache miss), except the last one, the scheduler pauses so the
    fact-check APIs are not hit with bursts that end in 503s.
    """

    def __init__(
        self,
        service: VerificationService,
        pause_seconds: float = DEFAULT_PAUSE_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the scheduler.

        Args:
            service: Service verifying single claims
            pause_seconds: Delay after each uncached claim
            sleep: Awaitable sleep used for the delay
        """
        self._service = service
        self._pause_seconds = pause_seconds
        self._sleep = sleep

    async def verify_batch(self, claims: Sequence[Claim]) -> BatchOutcome:
        """Verify claims in order.

        Args:
            claims: Claims to verify

        Returns:
            Verifications index-aligned with ``claims`` plus counters
        """
        logger.info(f"📋 Verifying {len(claims)} claims...")

        verifications: List[Verification] = []
        cached_count = 0
        verified_count = 0
        last_index = len(claims) - 1

        for index, claim in enumerate(claims):
            outcome = await self._service.verify_one(claim)
            verifications.append(outcome.verification)

            if outcome.cached:
                cached_count += 1
                continue

            if outcome.verification.rating != Rating.UNVERIFIED:
                verified_count += 1

            if index < last_index:
                await self._sleep(self._pause_seconds)

        unverified_count = len(claims) - cached_count - verified_count
        logger.info(
            f"✅ Batch complete. {cached_count} cached, {verified_count} verified, "
            f"{unverified_count} unverified"
        )

        return BatchOutcome(
            verifications=verifications,
            cached_count=cached_count,
            verified_count=verified_count,
            unverified_count=unverified_count,
        )
