"""Test configuration and common fixtures."""

from typing import Callable, Dict, List, Optional, Sequence

import pytest

from lie_detector.domain.models.claim import Claim
from lie_detector.domain.models.verification import Evidence, Rating, Verification
from lie_detector.infrastructure.cache.memory_cache import MemoryCacheStore


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSourceAdapter:
    """In-memory source adapter recording every claim it is asked about."""

    def __init__(
        self,
        name: str = "Fake",
        result: Optional[Verification] = None,
        error: Optional[Exception] = None,
        call_log: Optional[List[str]] = None,
    ):
        self._name = name
        self.result = result
        self.error = error
        self.calls: List[Claim] = []
        self.call_log = call_log
        self.initialized = False
        self.shut_down = False

    async def initialize(self) -> None:
        self.initialized = True

    async def verify(self, claim: Claim) -> Optional[Verification]:
        self.calls.append(claim)
        if self.call_log is not None:
            self.call_log.append(self._name)
        if self.error is not None:
            raise self.error
        if self.result is None:
            return None
        return self.result.with_claim_id(claim.id)

    async def shutdown(self) -> None:
        self.shut_down = True

    @property
    def provider_name(self) -> str:
        return self._name

    @property
    def is_available(self) -> bool:
        return self.initialized and not self.shut_down

    @property
    def capabilities(self) -> Dict[str, bool]:
        return {"claim_verification": True}


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a clock starting at zero."""
    return FakeClock()


@pytest.fixture
def memory_cache(fake_clock: FakeClock) -> MemoryCacheStore:
    """Provide a cache driven by the fake clock."""
    return MemoryCacheStore(ttl=3600, maxsize=100, timer=fake_clock)


@pytest.fixture
def make_claim() -> Callable[..., Claim]:
    """Provide a claim builder."""

    def _make_claim(text: str, claim_id: str = "claim-1", **kwargs) -> Claim:
        return Claim(id=claim_id, text=text, **kwargs)

    return _make_claim


@pytest.fixture
def make_verification() -> Callable[..., Verification]:
    """Provide a verification builder."""

    def _make_verification(
        rating: Rating = Rating.UNVERIFIED,
        confidence: float = 0.5,
        summary: str = "Test summary",
        evidence_urls: Sequence[str] = (),
        caveats: Sequence[str] = (),
        claim_id: str = "claim-1",
        source_name: str = "Test Source",
    ) -> Verification:
        return Verification(
            claim_id=claim_id,
            rating=rating,
            confidence=confidence,
            summary=summary,
            evidence=[Evidence(url=url, source_name=source_name) for url in evidence_urls],
            caveats=list(caveats),
        )

    return _make_verification


@pytest.fixture
def fake_adapter() -> Callable[..., FakeSourceAdapter]:
    """Provide a fake source adapter builder."""
    return FakeSourceAdapter
