"""OpenAI implementation of the source adapter interface, used as last resort."""

import json
import logging
from typing import Dict, List, Optional

import openai
from openai import AsyncOpenAI
from pydantic import BaseModel, Field, ValidationError

from ...domain.models.claim import Claim
from ...domain.models.verification import MAX_CAVEATS, Rating, Verification
from ...domain.ports.source_adapter import SourceAdapter

logger = logging.getLogger(__name__)

LLM_CAVEAT = "AI-generated assessment - verify with primary sources"

SYSTEM_PROMPT = """
You are a fact-checking assistant. Assess the factual claim using your own knowledge.
Respond with a JSON object:
{
    "rating": "verified/mostly_true/mixed/mostly_false/false/unverified/opinion/outdated",
    "confidence": number between 0 and 1,
    "summary": "Brief explanation (max 500 chars)",
    "caveats": ["Limitations of this assessment"]
}
Use "unverified" when you are not sure. Use "opinion" for statements of opinion or satire
and "outdated" for statements that used to be true but no longer are.
"""


class LLMConfig(BaseModel):
    """Configuration for LLM adapter."""

    api_key: str = Field(..., description="OpenAI API key")
    model: str = Field(default="gpt-4o-mini", description="Chat model to use")
    temperature: float = Field(default=0.1, description="Temperature for responses")
    max_tokens: int = Field(default=500, description="Maximum tokens per response")
    timeout: float = Field(default=30.0, description="API timeout in seconds")
    max_confidence: float = Field(default=0.6, description="Upper bound for LLM confidence")


class LLMVerdict(BaseModel):
    """Schema the model's JSON reply must follow."""

    rating: Rating
    confidence: float = Field(..., ge=0.0, le=1.0)
    summary: str = Field(..., min_length=1)
    caveats: List[str] = Field(default_factory=list)


class LLMAdapter(SourceAdapter):
    """OpenAI chat model as a last-resort judge.

    Only consulted when no other source produced a definitive rating. The
    model cannot cite evidence, so its confidence is capped and the result
    always carries an AI-generated caveat.
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        provider_name: str = "OpenAI",
    ):
        """Initialize the adapter."""
        self._config = config or LLMConfig(api_key="")
        self._name = provider_name
        self._client: Optional[AsyncOpenAI] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize the OpenAI client."""
        if not self._config.api_key:
            raise ConnectionError("Failed to initialize OpenAI provider: no API key configured")
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._config.api_key,
                timeout=self._config.timeout,
            )
        self._initialized = True

    async def verify(self, claim: Claim) -> Optional[Verification]:
        """Ask the model to rate the claim.

        Args:
            claim: Claim to verify

        Returns:
            Verification, or None when the API fails or the reply is malformed
        """
        if not self._client:
            raise RuntimeError("Provider not initialized")

        user_prompt = f"Claim: {claim.text}"
        if claim.context:
            user_prompt += f"\nContext: {claim.context}"

        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                response_format={"type": "json_object"},
                temperature=self._config.temperature,
                max_tokens=self._config.max_tokens,
            )
        except openai.OpenAIError as e:
            logger.error(f"❌ OpenAI request failed: {e}")
            return None

        try:
            content = response.choices[0].message.content or ""
            verdict = LLMVerdict.model_validate(json.loads(content))
        except (IndexError, ValueError, ValidationError) as e:
            logger.warning(f"⚠️ Malformed LLM verdict: {e}")
            return None

        caveats = list(dict.fromkeys([LLM_CAVEAT] + verdict.caveats))[:MAX_CAVEATS]
        confidence = min(self._config.max_confidence, verdict.confidence)

        logger.info(f"🤖 LLM verdict: rating={verdict.rating.value}, confidence={confidence:.2f}")
        return Verification(
            claim_id=claim.id,
            rating=verdict.rating,
            confidence=confidence,
            summary=verdict.summary[:500],
            evidence=[],
            caveats=caveats,
        )

    async def shutdown(self) -> None:
        """Clean up resources and shut down the provider."""
        if self._client:
            await self._client.close()
            self._client = None
        self._initialized = False

    @property
    def provider_name(self) -> str:
        """Get the name of the AI provider."""
        return self._name

    @property
    def is_available(self) -> bool:
        """Check if the provider is available and ready."""
        return self._initialized and self._client is not None

    @property
    def capabilities(self) -> Dict[str, bool]:
        """Get the provider's capabilities."""
        return {
            "claim_verification": True,
            "evidence_citation": False,
            "requires_api_key": True,
        }
