"""Service configuration loaded from the environment."""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Values shipped in .env.example; treated as "not configured"
PLACEHOLDER_KEYS = frozenset({
    "your_google_api_key_here",
    "your_openai_api_key_here",
    "your_pubmed_api_key_here",
})


def _configured(value: Optional[str]) -> Optional[str]:
    if not value or value.strip() in PLACEHOLDER_KEYS:
        return None
    return value.strip()


class Settings(BaseModel):
    """Configuration for the verification service."""

    google_fact_check_api_key: Optional[str] = Field(None, description="Google Fact Check Tools API key")
    openai_api_key: Optional[str] = Field(None, description="OpenAI API key for the LLM fallback")
    openai_model: str = Field("gpt-4o-mini", description="OpenAI chat model")
    pubmed_api_key: Optional[str] = Field(None, description="Optional NCBI API key")
    cache_ttl: float = Field(3600.0, gt=0, description="Verification cache TTL in seconds")
    cache_maxsize: int = Field(10000, gt=0, description="Maximum cached verifications")
    batch_pause_seconds: float = Field(0.5, ge=0, description="Pause between uncached claims in a batch")
    max_batch_size: int = Field(50, gt=0, description="Maximum claims per verify request")
    log_level: str = Field("INFO", description="Root log level")

    @property
    def has_google_credentials(self) -> bool:
        """Check whether the fact-check index can be queried."""
        return _configured(self.google_fact_check_api_key) is not None

    @property
    def has_llm_credentials(self) -> bool:
        """Check whether the LLM fallback can be used."""
        return _configured(self.openai_api_key) is not None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create configuration from environment variables."""
        settings = cls(
            google_fact_check_api_key=_configured(os.getenv("GOOGLE_FACT_CHECK_API_KEY")),
            openai_api_key=_configured(os.getenv("OPENAI_API_KEY")),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
            pubmed_api_key=_configured(os.getenv("PUBMED_API_KEY")),
            cache_ttl=float(os.getenv("CACHE_TTL", "3600")),
            cache_maxsize=int(os.getenv("CACHE_MAXSIZE", "10000")),
            batch_pause_seconds=float(os.getenv("BATCH_PAUSE_SECONDS", "0.5")),
            max_batch_size=int(os.getenv("MAX_BATCH_SIZE", "50")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

        if settings.has_google_credentials:
            logger.info("✅ Google Fact Check API configured")
        else:
            logger.warning("⚠️ GOOGLE_FACT_CHECK_API_KEY not configured")

        if settings.has_llm_credentials:
            logger.info("✅ OpenAI API configured (LLM fallback enabled)")
        else:
            logger.warning("⚠️ OPENAI_API_KEY not configured - LLM fallback disabled")

        if not settings.has_google_credentials and not settings.has_llm_credentials:
            logger.warning("❌ No verification APIs configured - only PubMed and Wikipedia will be used")

        return settings
