"""
Completion Service - resilient Claude invocation.

Resolves a model tier to a concrete Claude model, sends one request,
accounts for its cost, and optionally retries once on a fallback tier
when the output fails validation.
"""

from .client import ClaudeClient
from .errors import CompletionError, ConfigurationError, ProviderError
from .fallback import (
    clean_json_response,
    invoke_with_fallback,
    is_valid_json,
    parse_json_response,
)
from .models import FallbackResult, InvocationRequest, InvocationResult
from .registry import ModelSpec, ModelTier, estimate_cost, get_model_spec

__all__ = [
    "ClaudeClient",
    "CompletionError",
    "ConfigurationError",
    "ProviderError",
    "clean_json_response",
    "invoke_with_fallback",
    "is_valid_json",
    "parse_json_response",
    "FallbackResult",
    "InvocationRequest",
    "InvocationResult",
    "ModelSpec",
    "ModelTier",
    "estimate_cost",
    "get_model_spec",
]
