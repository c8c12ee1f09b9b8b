"""Domain model for factual claims."""

from typing import Optional
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Claim(BaseModel):
    """Represents a factual statement to be verified."""

    id: str = Field(..., description="Caller-supplied identifier, unique per request")
    text: str = Field(..., min_length=1, description="The actual claim text to be verified")
    context: Optional[str] = Field(None, description="Surrounding text the claim was taken from")
    source_url: Optional[str] = Field(None, description="Page the claim was found on")

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        alias_generator = to_camel  # camelCase on the wire
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "claim-1",
                "text": "The Earth is approximately 4.54 billion years old.",
                "context": "Discussion about planetary formation",
                "sourceUrl": "https://example.com/article"
            }
        }
