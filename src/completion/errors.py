"""
Errors raised by the completion layer.
"""

from typing import Optional


class CompletionError(Exception):
    """Base class for completion layer errors."""


class ConfigurationError(CompletionError):
    """Required configuration is missing. Raised before any network I/O."""


class ProviderError(CompletionError):
    """The provider call failed: transport error, non-2xx status or missing content."""

    def __init__(
        self,
        tier: str,
        message: str = "Unknown error",
        status_code: Optional[int] = None,
    ):
        self.tier = tier
        self.message = message
        self.status_code = status_code
        super().__init__(f"Claude API error ({tier}): {message}")
