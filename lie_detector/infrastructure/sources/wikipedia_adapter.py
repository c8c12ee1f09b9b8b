"""Wikipedia implementation of the source adapter interface."""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Set
from urllib.parse import quote

import httpx
import wikipediaapi
from cachetools import TTLCache
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.claim import Claim
from ...domain.models.verification import Evidence, Rating, Verification
from ...domain.ports.source_adapter import SourceAdapter
from ..http.retry import RetryConfig, RetryPolicy
from .query_terms import COMMON_CLAIM_PHRASES, extract_search_terms, phrase_pattern

logger = logging.getLogger(__name__)

REFERENCE_QUERY_PHRASES = phrase_pattern(
    COMMON_CLAIM_PHRASES
    + (
        "it is known that",
        "approximately", "about", "around", "nearly", "over",
        "more than", "less than",
    )
)
REFERENCE_QUERY_WORDS = 10

STOP_WORDS = frozenset({
    "that", "this", "with", "from", "have", "been", "were", "they", "their",
    "about", "which", "would", "could", "should", "there", "these", "those",
})

WIKIPEDIA_CAVEATS = [
    "Wikipedia is a reference source, not a fact-checker",
    "Information should be verified with primary sources",
    "Wikipedia content can be edited by anyone",
]

_NUMBER = re.compile(r"\d[\d,.]*")
_SIGNIFICANT_WORD = re.compile(r"\b\w{5,}\b")


class WikipediaConfig(BaseModel):
    """Configuration for Wikipedia adapter."""

    user_agent: str = Field(
        default="LieDetector/1.0 (https://github.com/LieDetector; fact-checking browser extension)",
        description="User agent for Wikipedia API, required by Wikimedia policy"
    )
    api_url: str = Field(
        default="https://{language}.wikipedia.org/w/api.php",
        description="MediaWiki API URL template"
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")
    cache_ttl: int = Field(default=3600, description="Page extract cache TTL in seconds")
    cache_maxsize: int = Field(default=1000, description="Maximum page extract cache size")
    search_limit: int = Field(default=5, description="Search results requested")
    max_pages: int = Field(default=3, description="Top search results checked for relevance")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry settings for search")
    supported_languages: Set[str] = Field(
        default={
            "en", "es", "fr", "de", "it", "pt", "nl", "pl", "ru", "ja",
            "zh", "ar", "ko", "hi", "tr", "id", "vi", "fa", "uk"
        },
        description="Supported language codes"
    )


class WikiSearchResult(BaseModel):
    """One hit of a MediaWiki full-text search."""

    pageid: int
    title: str
    snippet: str = ""
    timestamp: Optional[str] = None


class WikiSearchQuery(BaseModel):
    """The ``query`` block of a search response."""

    search: List[WikiSearchResult] = Field(default_factory=list)


class WikiSearchResponse(BaseModel):
    """Response of ``action=query&list=search``."""

    query: WikiSearchQuery = Field(default_factory=WikiSearchQuery)


class WikiPage(BaseModel):
    """Intro extract of a Wikipedia page."""

    pageid: int
    title: str
    extract: str = ""
    fullurl: Optional[str] = None


class WikipediaRelevance(BaseModel):
    """How well a page extract matches a claim."""

    is_relevant: bool
    match_score: float
    matched_terms: List[str] = Field(default_factory=list)


def extract_search_terms_for_reference(claim_text: str) -> str:
    """Build a short Wikipedia search query from a claim."""
    return extract_search_terms(claim_text, REFERENCE_QUERY_PHRASES, REFERENCE_QUERY_WORDS)


def numeric_tokens(text: str) -> List[str]:
    """Numbers as written, e.g. ``1,000`` or ``4.54``; sentence punctuation dropped."""
    return [token.rstrip(".,") for token in _NUMBER.findall(text)]


def analyze_relevance(claim_text: str, content: str) -> WikipediaRelevance:
    """Check how well a page extract covers a claim.

    Scores the fraction of significant claim words (5+ letters, not stop
    words) found in the extract, weighted 0.6, and the fraction of claim
    numbers found in the extract, weighted 0.4. A single matching number is
    enough to make the page relevant.
    """
    content_lower = content.lower()

    claim_numbers = numeric_tokens(claim_text)
    content_numbers = set(numeric_tokens(content))
    matched_numbers = [number for number in claim_numbers if number in content_numbers]

    significant_words = [
        word for word in _SIGNIFICANT_WORD.findall(claim_text.lower())
        if word not in STOP_WORDS
    ]
    matched_words = [word for word in significant_words if word in content_lower]

    word_ratio = len(matched_words) / len(significant_words) if significant_words else 0.0
    number_ratio = len(matched_numbers) / len(claim_numbers) if claim_numbers else 0.0
    score = word_ratio * 0.6 + number_ratio * 0.4

    return WikipediaRelevance(
        is_relevant=score > 0.3 or bool(matched_numbers),
        match_score=score,
        matched_terms=matched_words + matched_numbers,
    )


class WikipediaAdapter(SourceAdapter):
    """Wikipedia implementation of the source adapter interface.

    Wikipedia is reference material, not a fact-checker: results are always
    rated unverified and only contribute evidence next to stronger sources.
    Search goes through the MediaWiki API; page extracts come from the
    ``wikipediaapi`` client and are cached with a TTL.
    """

    def __init__(
        self,
        config: Optional[WikipediaConfig] = None,
        provider_name: str = "Wikipedia",
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """Initialize the adapter.

        Args:
            config: Adapter configuration
            provider_name: Name of the provider
            retry_policy: Retry policy for search requests
        """
        self._config = config or WikipediaConfig()
        self._name = provider_name
        self._retry = retry_policy or RetryPolicy(self._config.retry, name=provider_name)
        self._client: Optional[httpx.AsyncClient] = None
        self._wiki = None
        self._language = "en"
        self._initialized = False
        self._cache = TTLCache(
            maxsize=self._config.cache_maxsize,
            ttl=self._config.cache_ttl
        )

    async def initialize(self) -> None:
        """Initialize the Wikipedia API clients."""
        try:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    timeout=self._config.timeout,
                    headers={"User-Agent": self._config.user_agent},
                )
            self._wiki = wikipediaapi.Wikipedia(
                language=self._language,
                user_agent=self._config.user_agent,
            )
            self._initialized = True
        except Exception as e:
            self._initialized = False
            self._wiki = None
            raise ConnectionError(f"Failed to initialize Wikipedia provider: {e}")

    async def _get_json(self, params: Dict[str, Any]) -> Any:
        response = await self._client.get(
            self._config.api_url.format(language=self._language),
            params=params,
        )
        response.raise_for_status()
        return response.json()

    async def search(self, query: str) -> List[WikiSearchResult]:
        """Search Wikipedia articles.

        Args:
            query: Search query

        Returns:
            Search hits in upstream ranking order
        """
        payload = await self._retry.call(
            self._get_json,
            {
                "action": "query",
                "list": "search",
                "srsearch": query,
                "srlimit": self._config.search_limit,
                "format": "json",
            },
        )
        return WikiSearchResponse.model_validate(payload).query.search

    def _load_page(self, title: str) -> Optional[WikiPage]:
        page = self._wiki.page(title)
        if not page.exists():
            return None
        return WikiPage(
            pageid=page.pageid,
            title=page.title,
            extract=page.summary,
            fullurl=page.fullurl,
        )

    async def get_page_extract(self, title: str) -> Optional[WikiPage]:
        """Get the intro extract of an article.

        Args:
            title: Article title

        Returns:
            Page extract, or None when the page does not exist
        """
        cache_key = f"extract:{self._language}:{title}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        # wikipediaapi is blocking
        page = await asyncio.to_thread(self._load_page, title)
        self._cache[cache_key] = page
        return page

    def _page_url(self, page: WikiPage) -> str:
        return page.fullurl or f"https://{self._language}.wikipedia.org/wiki/{quote(page.title)}"

    async def verify(self, claim: Claim) -> Optional[Verification]:
        """Look for reference material covering the claim.

        Args:
            claim: Claim to verify

        Returns:
            Unverified verification carrying Wikipedia evidence, or None
        """
        if not self._client or not self._wiki:
            raise RuntimeError("Provider not initialized")

        logger.info(f"📚 Checking Wikipedia for: {claim.text[:60]}...")

        try:
            results = await self.search(extract_search_terms_for_reference(claim.text))
        except httpx.HTTPError as e:
            logger.error(f"❌ Wikipedia search failed: {e}")
            return None
        except (ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Malformed Wikipedia search response: {e}")
            return None

        if not results:
            logger.info("📭 No Wikipedia articles found")
            return None

        evidence: List[Evidence] = []
        best_page: Optional[WikiPage] = None
        best_relevance: Optional[WikipediaRelevance] = None

        for result in results[:self._config.max_pages]:
            try:
                page = await self.get_page_extract(result.title)
            except Exception as e:
                logger.warning(f"⚠️ Skipping Wikipedia page {result.title!r}: {e}")
                continue
            if page is None or not page.extract:
                continue

            relevance = analyze_relevance(claim.text, page.extract)
            if not relevance.is_relevant:
                continue

            quote_text = page.extract[:300] + ("..." if len(page.extract) > 300 else "")
            evidence.append(
                Evidence(
                    url=self._page_url(page),
                    source_name=f"Wikipedia: {page.title}",
                    quote=quote_text,
                    date_published=result.timestamp,
                )
            )

            if best_relevance is None or relevance.match_score > best_relevance.match_score:
                best_page, best_relevance = page, relevance

        if not evidence:
            logger.info("📭 No relevant Wikipedia content found")
            return None

        logger.info(f"✅ Found {len(evidence)} relevant Wikipedia source(s)")

        return Verification(
            claim_id=claim.id,
            rating=Rating.UNVERIFIED,
            confidence=min(0.5, best_relevance.match_score or 0.3),
            summary=(
                f'Found relevant information in Wikipedia article "{best_page.title}". '
                f"Key matching terms: {', '.join(best_relevance.matched_terms[:5])}. "
                "Note: Wikipedia provides reference information but may not "
                "definitively verify this specific claim."
            ),
            evidence=evidence,
            caveats=list(WIKIPEDIA_CAVEATS),
        )

    async def set_language(self, language_code: str) -> None:
        """Set the language for subsequent operations.

        Args:
            language_code: ISO language code

        Raises:
            ValueError: If language not supported
        """
        if language_code not in self._config.supported_languages:
            raise ValueError(
                f"Language {language_code} not supported. "
                f"Supported languages: {sorted(self._config.supported_languages)}"
            )

        self._language = language_code
        self._wiki = wikipediaapi.Wikipedia(
            language=language_code,
            user_agent=self._config.user_agent,
        )

    async def shutdown(self) -> None:
        """Shutdown the provider and clean up resources."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._wiki = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def language(self) -> str:
        """Get the current language code."""
        return self._language

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._wiki is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "reference_lookup": True,
            "multi_language": True,
            "number_matching": True,
            "caching": True,
            "retry_mechanism": True,
        }

    @property
    def supported_languages(self) -> Set[str]:
        """Get supported language codes."""
        return self._config.supported_languages.copy()
