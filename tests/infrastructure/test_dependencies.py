"""Tests for the service container."""

import pytest

from lie_detector.domain.models.verification import Rating
from lie_detector.domain.services.cache_keys import cache_key
from lie_detector.infrastructure.config import Settings
from lie_detector.infrastructure.dependencies import ServiceContainer


@pytest.mark.asyncio
async def test_startup_without_credentials_builds_keyless_sources():
    """Test that only sources without API keys are created."""
    container = ServiceContainer(settings=Settings())

    await container.startup()
    try:
        assert container.active_sources == {"pubmed": True, "wikipedia": True}
        assert container.get_batch_scheduler() is not None
        assert container.get_verification_service().cache is container.get_cache()
    finally:
        await container.shutdown()

    assert container.active_sources == {}


@pytest.mark.asyncio
async def test_injected_adapters_are_wired(make_claim, make_verification, fake_adapter):
    """Test that pre-built adapters reach the verification service."""
    google = fake_adapter("Google", make_verification(Rating.FALSE, 0.9))
    container = ServiceContainer(settings=Settings(), adapters={"google": google})

    await container.startup()
    outcome = await container.get_verification_service().verify_one(make_claim("Injected claim"))

    assert outcome.verification.rating == Rating.FALSE
    assert len(google.calls) == 1


@pytest.mark.asyncio
async def test_shutdown_clears_cache_and_stops_adapters(make_claim, fake_adapter):
    """Test that shutdown releases adapters and cached verifications."""
    google = fake_adapter("Google")
    container = ServiceContainer(settings=Settings(), adapters={"google": google})
    await container.startup()
    await container.get_verification_service().verify_one(make_claim("Cached claim"))
    cache = container.get_cache()
    assert cache.get(cache_key("Cached claim")) is not None

    await container.shutdown()

    assert google.shut_down
    assert cache.get(cache_key("Cached claim")) is None
    with pytest.raises(KeyError):
        container.get_cache()


@pytest.mark.asyncio
async def test_containers_do_not_share_caches():
    """Test that each container owns its own cache."""
    first = ServiceContainer(settings=Settings(), adapters={})
    second = ServiceContainer(settings=Settings(), adapters={})
    await first.startup()
    await second.startup()

    assert first.get_cache() is not second.get_cache()


def test_unknown_service():
    """Test that unknown services raise KeyError."""
    container = ServiceContainer(settings=Settings(), adapters={})

    with pytest.raises(KeyError):
        container.get("missing")
