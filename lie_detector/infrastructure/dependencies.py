"""Dependency injection configuration for hexagonal architecture."""

import logging
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from fastapi import Request

from ..domain.ports.source_adapter import SourceAdapter
from ..domain.services.batch_scheduler import BatchScheduler
from ..domain.services.verification_service import VerificationService
from .cache.memory_cache import MemoryCacheStore
from .config import Settings
from .sources.factory import SourceAdapterFactory
from .sources.google_fact_check_adapter import GoogleFactCheckConfig
from .sources.llm_adapter import LLMConfig
from .sources.pubmed_adapter import PubMedConfig

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Service container for dependency injection.

    Owns the verification cache, the source adapters allowed by the current
    credentials, and the services built on top of them. Nothing is shared
    through module globals: two containers never see each other's cache.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        adapters: Optional[Dict[str, SourceAdapter]] = None,
    ):
        """Initialize service container.

        Args:
            settings: Configuration, read from the environment when omitted
            adapters: Pre-built adapters by name; when given, no adapter is
                created from credentials
        """
        if settings is None:
            # Try to load .env from current directory or parent directories
            load_dotenv()
            settings = Settings.from_env()

        self._settings = settings
        self._factory = SourceAdapterFactory()
        self._adapters: Dict[str, SourceAdapter] = dict(adapters or {})
        self._use_factory = adapters is None
        self._services: Dict[str, Any] = {}
        self._started = False

    async def _create_adapter(self, name: str, **config: Any) -> None:
        try:
            self._adapters[name] = await self._factory.create_adapter(name, **config)
        except (ValueError, RuntimeError) as e:
            logger.warning(f"⚠️ Skipping {name} source: {e}")

    async def _setup_adapters(self) -> None:
        """Create every adapter the configuration allows."""
        settings = self._settings

        if settings.has_google_credentials:
            await self._create_adapter(
                "google",
                config=GoogleFactCheckConfig(api_key=settings.google_fact_check_api_key),
            )

        await self._create_adapter(
            "pubmed",
            config=PubMedConfig(api_key=settings.pubmed_api_key),
        )
        await self._create_adapter("wikipedia")

        if settings.has_llm_credentials:
            await self._create_adapter(
                "llm",
                config=LLMConfig(api_key=settings.openai_api_key, model=settings.openai_model),
            )

    async def startup(self) -> None:
        """Build the cache, the adapters and the services."""
        if self._started:
            return

        logger.info("🔧 Setting up service container...")

        cache = MemoryCacheStore(
            ttl=self._settings.cache_ttl,
            maxsize=self._settings.cache_maxsize,
        )

        if self._use_factory:
            await self._setup_adapters()
        else:
            for adapter in self._adapters.values():
                await adapter.initialize()

        verification_service = VerificationService(
            cache,
            google=self._adapters.get("google"),
            pubmed=self._adapters.get("pubmed"),
            wikipedia=self._adapters.get("wikipedia"),
            llm=self._adapters.get("llm"),
        )
        batch_scheduler = BatchScheduler(
            verification_service,
            pause_seconds=self._settings.batch_pause_seconds,
        )

        self._services = {
            "cache": cache,
            "verification_service": verification_service,
            "batch_scheduler": batch_scheduler,
        }
        self._started = True

        logger.info(f"✅ Service container ready with sources: {sorted(self._adapters)}")

    async def shutdown(self) -> None:
        """Shut every adapter down and drop cached verifications."""
        if not self._started:
            return

        if self._use_factory:
            await self._factory.shutdown_all()
            self._adapters.clear()
        else:
            for adapter in self._adapters.values():
                await adapter.shutdown()

        self.get_cache().clear()
        self._services = {}
        self._started = False
        logger.info("👋 Service container shut down")

    def get(self, service_name: str) -> Any:
        """Get a service by name.

        Args:
            service_name: Name of the service

        Returns:
            Service instance

        Raises:
            KeyError: If service not found or the container is not started
        """
        if service_name not in self._services:
            raise KeyError(f"Service '{service_name}' not found")
        return self._services[service_name]

    @property
    def settings(self) -> Settings:
        """Get the configuration."""
        return self._settings

    @property
    def active_sources(self) -> Dict[str, bool]:
        """Get which sources are available."""
        return {name: adapter.is_available for name, adapter in self._adapters.items()}

    def get_cache(self) -> MemoryCacheStore:
        """Get the verification cache."""
        return self.get("cache")

    def get_verification_service(self) -> VerificationService:
        """Get verification service."""
        return self.get("verification_service")

    def get_batch_scheduler(self) -> BatchScheduler:
        """Get batch scheduler."""
        return self.get("batch_scheduler")


# Convenience functions for FastAPI dependency injection
def get_service_container(request: Request) -> ServiceContainer:
    """FastAPI dependency for the container built by the app lifespan."""
    return request.app.state.container


def get_batch_scheduler(request: Request) -> BatchScheduler:
    """FastAPI dependency for batch scheduler."""
    return get_service_container(request).get_batch_scheduler()


def get_cache(request: Request) -> MemoryCacheStore:
    """FastAPI dependency for the verification cache."""
    return get_service_container(request).get_cache()
