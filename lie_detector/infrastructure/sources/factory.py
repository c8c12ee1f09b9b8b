"""Factory for creating and managing source adapters."""

import logging
from typing import Any, Dict, Type

from ...domain.ports.source_adapter import SourceAdapter
from .google_fact_check_adapter import GoogleFactCheckAdapter
from .llm_adapter import LLMAdapter
from .pubmed_adapter import PubMedAdapter
from .wikipedia_adapter import WikipediaAdapter

logger = logging.getLogger(__name__)

ADAPTER_REGISTRY: Dict[str, Type[SourceAdapter]] = {
    "google": GoogleFactCheckAdapter,
    "pubmed": PubMedAdapter,
    "wikipedia": WikipediaAdapter,
    "llm": LLMAdapter,
}


class SourceAdapterFactory:
    """Creates source adapters by name and shuts down the ones it started."""

    def __init__(self):
        self._active_adapters: Dict[str, SourceAdapter] = {}

    async def create_adapter(self, name: str, **config: Any) -> SourceAdapter:
        """Create and initialize a new adapter instance.

        Args:
            name: Registry name of the adapter
            **config: Adapter-specific constructor arguments

        Returns:
            Initialized adapter instance

        Raises:
            ValueError: If adapter not registered
            RuntimeError: If initialization fails
        """
        if name not in ADAPTER_REGISTRY:
            raise ValueError(f"Adapter {name} not registered")

        adapter = ADAPTER_REGISTRY[name](**config)

        try:
            await adapter.initialize()
        except Exception as e:
            raise RuntimeError(f"Failed to initialize adapter {name}: {e}")

        self._active_adapters[name] = adapter
        logger.info(f"✅ {adapter.provider_name} adapter ready")
        return adapter

    async def shutdown_all(self) -> None:
        """Shutdown all active adapters."""
        for name, adapter in list(self._active_adapters.items()):
            await adapter.shutdown()
            del self._active_adapters[name]

    @property
    def active_adapters(self) -> Dict[str, SourceAdapter]:
        """Get the adapters started and not yet shut down."""
        return dict(self._active_adapters)
