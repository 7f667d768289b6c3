"""
Model registry: logical tiers mapped to concrete Claude models and pricing.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from .errors import ConfigurationError


class ModelTier(str, Enum):
    """Logical quality/cost class of model."""

    FAST = "fast"  # Cheap, used for extraction and simple JSON
    CAPABLE = "capable"  # Nuanced reasoning, used for scoring


@dataclass(frozen=True)
class ModelSpec:
    """Concrete provider model and its per-million-token pricing (USD)."""

    provider_model_id: str
    price_per_million_input_tokens: Decimal
    price_per_million_output_tokens: Decimal


MODEL_SPECS: dict[ModelTier, ModelSpec] = {
    ModelTier.FAST: ModelSpec(
        provider_model_id="claude-haiku-4-5-20251001",
        price_per_million_input_tokens=Decimal("0.80"),
        price_per_million_output_tokens=Decimal("4.00"),
    ),
    ModelTier.CAPABLE: ModelSpec(
        provider_model_id="claude-sonnet-4-5-20250929",
        price_per_million_input_tokens=Decimal("3.00"),
        price_per_million_output_tokens=Decimal("15.00"),
    ),
}


def validate_registry() -> None:
    """Fail fast if any tier has no model spec."""
    missing = [tier.value for tier in ModelTier if tier not in MODEL_SPECS]
    if missing:
        raise ConfigurationError(f"No model spec for tier(s): {', '.join(missing)}")


def get_model_spec(tier: ModelTier) -> ModelSpec:
    """Resolve a tier to its model spec."""
    return MODEL_SPECS[ModelTier(tier)]


def estimate_cost(spec: ModelSpec, input_tokens: int, output_tokens: int) -> Decimal:
    """USD cost of a call from provider-reported token counts."""
    return (
        input_tokens * spec.price_per_million_input_tokens
        + output_tokens * spec.price_per_million_output_tokens
    ) / Decimal(1_000_000)


validate_registry()
