"""
Pydantic models for completion requests and results.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .registry import ModelTier


class InvocationRequest(BaseModel):
    """A single stateless completion request."""

    model_config = ConfigDict(frozen=True)

    tier: ModelTier = Field(..., description="Model tier to call")
    user_prompt: str = Field(..., description="Content of the single user message")
    system_prompt: Optional[str] = Field(default=None, description="Top-level system prompt")
    max_output_tokens: int = Field(default=2000, gt=0, description="max_tokens sent to the provider")

    def with_tier(self, tier: ModelTier) -> "InvocationRequest":
        """Copy of this request targeting another tier."""
        return self.model_copy(update={"tier": ModelTier(tier)})


class InvocationResult(BaseModel):
    """Normalized result of one provider call."""

    model_config = ConfigDict(frozen=True)

    text: str
    tier: ModelTier
    provider_model_id: str = ""
    input_token_count: int = Field(default=0, ge=0)
    output_token_count: int = Field(default=0, ge=0)
    estimated_cost_usd: Decimal = Field(default=Decimal("0"), ge=0)


class FallbackResult(InvocationResult):
    """Invocation result plus whether the fallback tier produced it."""

    used_fallback: bool = False

    @classmethod
    def from_result(cls, result: InvocationResult, used_fallback: bool) -> "FallbackResult":
        return cls(**result.model_dump(), used_fallback=used_fallback)
