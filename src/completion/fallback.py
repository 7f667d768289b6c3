"""
Validate-then-retry wrapper around a single completion call.

The primary tier is called once. If it raises ProviderError, or its cleaned
text fails the validator, the request is sent once more to the fallback tier.
Errors from the fallback call propagate to the caller; there is no second
fallback level.
"""

import json
import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from loguru import logger

from .errors import ProviderError
from .models import FallbackResult, InvocationRequest
from .registry import ModelTier

if TYPE_CHECKING:
    from .client import ClaudeClient

JsonValidator = Callable[[str], bool]

_JSON_FENCE_OPEN = re.compile(r"```json\n?")
_FENCE = re.compile(r"```\n?")


def clean_json_response(text: str) -> str:
    """Strip markdown ```json / ``` fences and surrounding whitespace."""
    while True:
        cleaned = _FENCE.sub("", _JSON_FENCE_OPEN.sub("", text)).strip()
        # Removing one marker can join backticks into a new one
        if cleaned == text:
            return cleaned
        text = cleaned


def is_valid_json(text: str) -> bool:
    """True if text parses as JSON."""
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def parse_json_response(text: str) -> Any:
    """Parse model output as JSON after fence cleaning."""
    return json.loads(clean_json_response(text))


async def invoke_with_fallback(
    client: "ClaudeClient",
    request: InvocationRequest,
    fallback_tier: ModelTier,
    validate: Optional[JsonValidator] = None,
) -> FallbackResult:
    """
    Call the request's tier, falling back once to fallback_tier on failure.

    Args:
        client: Client used for both calls
        request: Primary request
        fallback_tier: Tier to retry on
        validate: Predicate over the cleaned response text (defaults to JSON check)

    Returns:
        FallbackResult with used_fallback=True if the fallback call produced it

    Raises:
        ConfigurationError: propagated untouched, never retried
        ProviderError: from the fallback call
    """
    validate = validate or is_valid_json
    tier = ModelTier(request.tier)

    try:
        result = await client.invoke(request)
    except ProviderError as e:
        reason = str(e)
    else:
        if validate(clean_json_response(result.text)):
            return FallbackResult.from_result(result, used_fallback=False)
        reason = "Response failed validation"

    fallback_tier = ModelTier(fallback_tier)
    logger.bind(tier=tier.value, fallback_tier=fallback_tier.value).warning(
        f"[Claude {tier.value.upper()}] Failed: {reason} - "
        f"Retrying with {fallback_tier.value}..."
    )

    fallback_result = await client.invoke(request.with_tier(fallback_tier))
    return FallbackResult.from_result(fallback_result, used_fallback=True)
