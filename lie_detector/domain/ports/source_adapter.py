"""Source adapter interface for evidence sources."""

from typing import Dict, Optional, Protocol

from ..models.claim import Claim
from ..models.verification import Verification


class SourceAdapter(Protocol):
    """Protocol for evidence sources that can judge a claim.

    ``verify`` returns ``None`` when the source found nothing relevant. It
    must not raise for ordinary "not found" conditions; only exceptional
    failures escape, and the caller treats those as ``None`` too.
    """

    async def initialize(self) -> None:
        """Initialize the adapter and its upstream client."""
        ...

    async def verify(self, claim: Claim) -> Optional[Verification]:
        """Verify a single claim against this source."""
        ...

    async def shutdown(self) -> None:
        """Shutdown the adapter and clean up resources."""
        ...

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if the adapter is initialized and ready."""
        ...

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the adapter's capabilities."""
        ...
