"""Tests for the batch scheduler."""

from unittest.mock import AsyncMock

import pytest

from lie_detector.domain.models.verification import Rating
from lie_detector.domain.services.batch_scheduler import BatchScheduler
from lie_detector.domain.services.verification_service import VerificationService


@pytest.fixture
def sleep():
    """Provide a sleep that returns immediately."""
    return AsyncMock()


@pytest.mark.asyncio
async def test_identical_texts_pause_once_and_hit_cache(memory_cache, make_claim, sleep):
    """Test a batch of the same text under two ids."""
    scheduler = BatchScheduler(VerificationService(memory_cache), pause_seconds=0.5, sleep=sleep)

    outcome = await scheduler.verify_batch([
        make_claim("Bats are blind", "first"),
        make_claim("Bats are blind", "second"),
    ])

    assert [v.claim_id for v in outcome.verifications] == ["first", "second"]
    assert outcome.cached_count == 1
    sleep.assert_awaited_once_with(0.5)


@pytest.mark.asyncio
async def test_no_pause_after_last_claim(memory_cache, make_claim, sleep):
    """Test that only gaps between fresh claims are paused."""
    scheduler = BatchScheduler(VerificationService(memory_cache), pause_seconds=0.25, sleep=sleep)

    await scheduler.verify_batch([make_claim(f"Claim number {i}", str(i)) for i in range(3)])

    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_counters(memory_cache, make_claim, make_verification, fake_adapter, sleep):
    """Test cached, verified and unverified counters."""
    google = fake_adapter("Google", make_verification(Rating.FALSE, 0.9))
    service = VerificationService(memory_cache, google=google)
    scheduler = BatchScheduler(service, sleep=sleep)

    await scheduler.verify_batch([make_claim("Already known claim", "warm")])
    google.result = None

    outcome = await scheduler.verify_batch([
        make_claim("already known claim", "a"),
        make_claim("Brand new claim", "b"),
    ])

    assert outcome.cached_count == 1
    assert outcome.verified_count == 0
    assert outcome.unverified_count == 1
    assert outcome.verifications[0].rating == Rating.FALSE
    assert outcome.verifications[1].rating == Rating.UNVERIFIED


@pytest.mark.asyncio
async def test_claims_verified_sequentially_in_order(memory_cache, make_claim, fake_adapter, sleep):
    """Test that claims reach the sources in input order."""
    google = fake_adapter("Google")
    scheduler = BatchScheduler(VerificationService(memory_cache, google=google), sleep=sleep)

    texts = ["Claim one", "Claim two", "Claim three"]
    outcome = await scheduler.verify_batch([make_claim(t, t) for t in texts])

    assert [c.text for c in google.calls] == texts
    assert [v.claim_id for v in outcome.verifications] == texts


@pytest.mark.asyncio
async def test_empty_batch(memory_cache, sleep):
    """Test that an empty batch does nothing."""
    scheduler = BatchScheduler(VerificationService(memory_cache), sleep=sleep)

    outcome = await scheduler.verify_batch([])

    assert outcome.verifications == []
    assert outcome.cached_count == 0
    assert outcome.unverified_count == 0
    sleep.assert_not_awaited()
