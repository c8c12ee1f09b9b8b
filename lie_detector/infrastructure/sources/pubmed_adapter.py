"""PubMed implementation of the source adapter interface.

Uses NCBI E-utilities to search PubMed for research supporting or
contradicting health-related claims. An API key is optional and only raises
the upstream rate limit.

Documentation: https://www.ncbi.nlm.nih.gov/books/NBK25500/
"""

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import BaseModel, Field, ValidationError, field_validator

from ...domain.models.claim import Claim
from ...domain.models.verification import Evidence, Rating, Verification
from ...domain.ports.source_adapter import SourceAdapter
from ...domain.services.health_claims import is_health_claim
from ..http.retry import RetryConfig, RetryPolicy
from .query_terms import COMMON_CLAIM_PHRASES, extract_search_terms, phrase_pattern

logger = logging.getLogger(__name__)

MEDICAL_QUERY_PHRASES = phrase_pattern(
    COMMON_CLAIM_PHRASES
    + (
        "scientists found",
        "can help", "may help", "could help", "might help",
        "is linked to", "is associated with",
        "approximately", "about", "around", "percent",
    )
)
MEDICAL_QUERY_WORDS = 8

SUPPORT_TERMS = ("benefit", "improve", "reduce", "prevent", "protect", "effective", "positive")
CONTRADICT_TERMS = ("no effect", "ineffective", "harmful", "risk", "danger", "no benefit", "myth")

MIN_SHARED_TOKENS = 2
MIN_RELEVANT_FOR_VERDICT = 3
MAX_EVIDENCE_ARTICLES = 5

PUBMED_CAVEATS = [
    "Based on article title analysis only - full text review recommended",
    "Scientific consensus may evolve as new research emerges",
    "Individual studies may have limitations",
    "Consult healthcare professionals for medical advice",
]

_TOKEN = re.compile(r"\b\w{4,}\b")


class PubMedConfig(BaseModel):
    """Configuration for PubMed adapter."""

    api_key: Optional[str] = Field(default=None, description="Optional NCBI API key")
    search_url: str = Field(
        default="https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi",
        description="E-utilities search endpoint",
    )
    summary_url: str = Field(
        default="https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esummary.fcgi",
        description="E-utilities summary endpoint",
    )
    timeout: float = Field(default=15.0, description="Request timeout in seconds")
    max_results: int = Field(default=10, description="Maximum articles to fetch")
    request_pause: float = Field(default=0.35, description="Pause between search and summary requests")
    retry: RetryConfig = Field(default_factory=RetryConfig, description="Retry settings for 429/503")


class ESearchResult(BaseModel):
    """The ``esearchresult`` block of an esearch response."""

    idlist: List[str] = Field(default_factory=list)


class ESearchResponse(BaseModel):
    """Response of ``esearch.fcgi``."""

    esearchresult: ESearchResult = Field(default_factory=ESearchResult)


class ESummaryResponse(BaseModel):
    """Response of ``esummary.fcgi``; ``result`` maps uid to article data."""

    result: Dict[str, Any] = Field(default_factory=dict)


class PubMedArticle(BaseModel):
    """Summary of one PubMed article."""

    uid: str
    title: str = "Untitled"
    source: str = "Unknown Journal"
    pubdate: str = ""
    authors: List[str] = Field(default_factory=list)

    @field_validator("authors", mode="before")
    @classmethod
    def _author_names(cls, value: Any) -> List[str]:
        return [a["name"] if isinstance(a, dict) else str(a) for a in value or []]


class ArticleAnalysis(BaseModel):
    """Relevance and stance of a set of articles with respect to a claim."""

    supporting_count: int = 0
    contradicting_count: int = 0
    relevant_articles: List[PubMedArticle] = Field(default_factory=list)


def extract_medical_terms(claim_text: str) -> str:
    """Build a short, focused PubMed query from a claim."""
    return extract_search_terms(claim_text.replace("%", " "), MEDICAL_QUERY_PHRASES, MEDICAL_QUERY_WORDS)


def analyze_articles(claim_text: str, articles: List[PubMedArticle]) -> ArticleAnalysis:
    """Decide which articles are relevant and which way they lean.

    An article is relevant when its title shares at least two distinct
    4+ character words with the claim. Stance comes from the title alone and
    is exclusive: a title with both support and contradiction terms counts
    for neither side.
    """
    claim_tokens = set(_TOKEN.findall(claim_text.lower()))
    analysis = ArticleAnalysis()

    for article in articles:
        title = article.title.lower()
        shared = claim_tokens.intersection(_TOKEN.findall(title))
        if len(shared) < MIN_SHARED_TOKENS:
            continue

        analysis.relevant_articles.append(article)
        has_support = any(term in title for term in SUPPORT_TERMS)
        has_contradiction = any(term in title for term in CONTRADICT_TERMS)

        if has_support and not has_contradiction:
            analysis.supporting_count += 1
        elif has_contradiction and not has_support:
            analysis.contradicting_count += 1

    return analysis


def rate_analysis(analysis: ArticleAnalysis) -> Tuple[Rating, float, str]:
    """Turn an article analysis into rating, confidence and summary.

    Deliberately conservative: fewer than three relevant articles never
    produce a verdict.
    """
    relevant = len(analysis.relevant_articles)
    supporting = analysis.supporting_count
    contradicting = analysis.contradicting_count

    if relevant < MIN_RELEVANT_FOR_VERDICT:
        return (
            Rating.UNVERIFIED,
            0.4,
            f"Found {relevant} potentially relevant PubMed article(s). "
            "More research may be needed to verify this claim.",
        )

    if supporting > contradicting * 2:
        return (
            Rating.MOSTLY_TRUE,
            round(min(0.7, 0.5 + supporting * 0.05), 4),
            f"Found {relevant} relevant PubMed studies, with {supporting} appearing to support this claim.",
        )

    if contradicting > supporting * 2:
        return (
            Rating.MOSTLY_FALSE,
            round(min(0.7, 0.5 + contradicting * 0.05), 4),
            f"Found {relevant} relevant PubMed studies, with {contradicting} appearing to contradict this claim.",
        )

    return (
        Rating.MIXED,
        0.5,
        f"Found {relevant} relevant PubMed studies with mixed findings on this claim.",
    )


class PubMedAdapter(SourceAdapter):
    """PubMed implementation of the source adapter interface."""

    def __init__(
        self,
        config: Optional[PubMedConfig] = None,
        provider_name: str = "PubMed",
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """Initialize the adapter."""
        self._config = config or PubMedConfig()
        self._name = provider_name
        self._retry = retry_policy or RetryPolicy(self._config.retry, name=provider_name)
        self._client: Optional[httpx.AsyncClient] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
        self._initialized = True

    def _params(self, **params: str) -> Dict[str, str]:
        params["db"] = "pubmed"
        params["retmode"] = "json"
        if self._config.api_key:
            params["api_key"] = self._config.api_key
        return params

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        response = await self._client.get(url, params=params)
        response.raise_for_status()
        return response.json()

    async def search(self, query: str) -> List[str]:
        """Search PubMed and return article ids."""
        payload = await self._retry.call(
            self._get_json,
            self._config.search_url,
            self._params(term=query, retmax=str(self._config.max_results), sort="relevance"),
        )
        return ESearchResponse.model_validate(payload).esearchresult.idlist

    async def get_article_summaries(self, ids: List[str]) -> List[PubMedArticle]:
        """Fetch article summaries for the given ids, skipping malformed ones."""
        if not ids:
            return []

        payload = await self._retry.call(
            self._get_json,
            self._config.summary_url,
            self._params(id=",".join(ids)),
        )
        result = ESummaryResponse.model_validate(payload).result

        articles = []
        for uid in ids:
            raw = result.get(uid)
            if not isinstance(raw, dict):
                continue
            try:
                articles.append(
                    PubMedArticle(
                        uid=uid,
                        title=raw.get("title") or "Untitled",
                        source=raw.get("source") or raw.get("fulljournalname") or "Unknown Journal",
                        pubdate=raw.get("pubdate") or raw.get("epubdate") or "",
                        authors=raw.get("authors") or [],
                    )
                )
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping malformed PubMed summary {uid}: {e}")
        return articles

    async def verify(self, claim: Claim) -> Optional[Verification]:
        """Verify a health claim against PubMed article titles.

        Args:
            claim: Claim to verify

        Returns:
            Verification, or None for non-health claims and when nothing relevant is found
        """
        if not is_health_claim(claim.text):
            logger.debug("⏭️ Not a health claim, skipping PubMed")
            return None

        if not self._client:
            raise RuntimeError("Provider not initialized")

        logger.info(f"🧬 Checking health claim: {claim.text[:60]}...")

        try:
            article_ids = await self.search(extract_medical_terms(claim.text))
            if not article_ids:
                logger.info("📭 No PubMed articles found")
                return None

            await asyncio.sleep(self._config.request_pause)
            articles = await self.get_article_summaries(article_ids)
        except httpx.HTTPError as e:
            logger.error(f"❌ PubMed request failed: {e}")
            return None
        except ValueError as e:
            logger.warning(f"⚠️ Malformed PubMed response: {e}")
            return None

        if not articles:
            logger.info("📭 Could not fetch PubMed article details")
            return None

        analysis = analyze_articles(claim.text, articles)
        if not analysis.relevant_articles:
            logger.info("📭 No relevant PubMed articles found")
            return None

        logger.info(f"📄 Found {len(analysis.relevant_articles)} relevant PubMed articles")

        rating, confidence, summary = rate_analysis(analysis)
        evidence = [
            Evidence(
                url=f"https://pubmed.ncbi.nlm.nih.gov/{article.uid}/",
                source_name=f"PubMed: {article.source}",
                quote=article.title,
                date_published=article.pubdate,
            )
            for article in analysis.relevant_articles[:MAX_EVIDENCE_ARTICLES]
        ]

        return Verification(
            claim_id=claim.id,
            rating=rating,
            confidence=confidence,
            summary=summary,
            evidence=evidence,
            caveats=list(PUBMED_CAVEATS),
        )

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the provider name."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "health_claims_only": True,
            "literature_search": True,
            "stance_detection": True,
            "retry_mechanism": True,
        }
