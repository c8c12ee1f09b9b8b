"""Domain models for verification results and related entities."""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

MAX_EVIDENCE = 10
MAX_CAVEATS = 5


class Rating(str, Enum):
    """Possible verification outcomes."""

    VERIFIED = "verified"  # Confirmed by fact-checkers
    MOSTLY_TRUE = "mostly_true"
    MIXED = "mixed"  # Some aspects are true, others false or misleading
    MOSTLY_FALSE = "mostly_false"
    FALSE = "false"
    UNVERIFIED = "unverified"  # No source could settle the claim
    OPINION = "opinion"  # Opinion or satire, not a factual statement
    OUTDATED = "outdated"  # Was true once, no longer is


class Evidence(BaseModel):
    """A single piece of evidence backing a verification."""

    url: str = Field(..., description="URL of the evidence")
    source_name: str = Field(..., description="Publisher or source label")
    quote: Optional[str] = Field(None, description="Relevant excerpt or title")
    date_published: Optional[str] = Field(None, description="Publication or review date")
    peer_reviewed: Optional[bool] = Field(None, description="Whether the source is peer reviewed")

    class Config:
        """Pydantic model configuration."""
        frozen = True
        alias_generator = to_camel
        populate_by_name = True


class Verification(BaseModel):
    """Represents the result of verifying one claim."""

    claim_id: str = Field(..., description="Identifier of the verified claim")
    rating: Rating = Field(..., description="Verification rating")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence in the rating (0-1)")
    summary: str = Field(..., description="Human-readable explanation of the rating")
    evidence: List[Evidence] = Field(
        default_factory=list,
        max_length=MAX_EVIDENCE,
        description="Evidence supporting the rating",
    )
    checked_at: datetime = Field(default_factory=datetime.utcnow, description="When verification was completed")
    caveats: List[str] = Field(
        default_factory=list,
        max_length=MAX_CAVEATS,
        description="Limitations the reader should keep in mind",
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "claimId": "claim-1",
                "rating": "false",
                "confidence": 0.9,
                "summary": "PolitiFact rated this claim as \"False\". 3 fact-checkers have reviewed this claim.",
                "evidence": [
                    {
                        "url": "https://www.politifact.com/factchecks/example",
                        "sourceName": "PolitiFact",
                        "quote": "No, the moon landing was not staged",
                        "datePublished": "2023-05-01T00:00:00Z",
                        "peerReviewed": False
                    }
                ],
                "caveats": []
            }
        }

    def with_claim_id(self, claim_id: str) -> "Verification":
        """Return a copy of this verification attributed to another claim."""
        return self.model_copy(update={"claim_id": claim_id})


class VerifyOutcome(BaseModel):
    """Result of verifying a single claim."""

    verification: Verification
    cached: bool = Field(False, description="Whether the result was served from cache")


class BatchOutcome(BaseModel):
    """Result of verifying a batch of claims."""

    verifications: List[Verification] = Field(default_factory=list, description="Results, index-aligned with the input")
    cached_count: int = Field(0, description="Claims served from cache")
    verified_count: int = Field(0, description="Fresh results with a rating other than unverified")
    unverified_count: int = Field(0, description="Remaining fresh results")
