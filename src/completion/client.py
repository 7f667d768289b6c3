"""
Anthropic Messages API client with per-call cost accounting.
"""

from typing import Any, Optional

import httpx
from loguru import logger

from shared.config import Settings, get_settings

from .errors import ConfigurationError, ProviderError
from .fallback import JsonValidator, invoke_with_fallback
from .models import FallbackResult, InvocationRequest, InvocationResult
from .registry import ModelSpec, ModelTier, estimate_cost, get_model_spec

MESSAGES_PATH = "/v1/messages"


class ClaudeClient:
    """Client for the Claude Messages API. One stateless request per call."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.anthropic_base_url.rstrip("/")
        self._client = http_client

    @property
    def headers(self) -> dict[str, str]:
        """Get request headers with API key."""
        api_key = self.settings.anthropic_api_key.get_secret_value()
        if not api_key:
            raise ConfigurationError("ANTHROPIC_API_KEY not configured")
        return {
            "Content-Type": "application/json",
            "anthropic-version": self.settings.anthropic_version,
            "x-api-key": api_key,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            # No timeout here; callers wrap the whole call in their own deadline
            self._client = httpx.AsyncClient(timeout=None)
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "ClaudeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @staticmethod
    def build_body(request: InvocationRequest, spec: ModelSpec) -> dict[str, Any]:
        """Build the provider request body."""
        body: dict[str, Any] = {
            "model": spec.provider_model_id,
            "max_tokens": request.max_output_tokens,
            "messages": [{"role": "user", "content": request.user_prompt}],
        }
        if request.system_prompt:
            body["system"] = request.system_prompt
        return body

    async def invoke(self, request: InvocationRequest) -> InvocationResult:
        """
        Send one request to the tier's model and return the normalized result.

        Raises:
            ConfigurationError: API key is not configured (no request is sent)
            ProviderError: transport failure, non-2xx status, missing content or malformed usage
        """
        tier = ModelTier(request.tier)
        spec = get_model_spec(tier)
        headers = self.headers
        body = self.build_body(request, spec)

        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.base_url}{MESSAGES_PATH}",
                headers=headers,
                json=body,
            )
        except httpx.HTTPError as e:
            raise ProviderError(tier.value, str(e) or type(e).__name__) from e

        data = _decode_json(response)
        content = data.get("content")
        if not response.is_success or not isinstance(content, list) or not content:
            raise ProviderError(tier.value, _error_message(data), response.status_code)

        first = content[0]
        text = first.get("text") if isinstance(first, dict) else None
        if not isinstance(text, str):
            raise ProviderError(tier.value, "Response content has no text", response.status_code)

        try:
            input_tokens, output_tokens = _token_counts(data.get("usage"))
        except (TypeError, ValueError, OverflowError) as e:
            raise ProviderError(tier.value, f"Malformed usage: {e}", response.status_code) from e
        cost = estimate_cost(spec, input_tokens, output_tokens)

        logger.bind(
            tier=tier.value,
            model=spec.provider_model_id,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            cost_usd=round(float(cost), 4),
        ).info(
            f"[Claude {tier.value.upper()}] Model: {spec.provider_model_id} | "
            f"Input: {input_tokens} tokens | Output: {output_tokens} tokens | "
            f"Cost: ${cost:.4f}"
        )

        return InvocationResult(
            text=text,
            tier=tier,
            provider_model_id=spec.provider_model_id,
            input_token_count=input_tokens,
            output_token_count=output_tokens,
            estimated_cost_usd=cost,
        )

    async def invoke_with_fallback(
        self,
        request: InvocationRequest,
        fallback_tier: ModelTier,
        validate: Optional[JsonValidator] = None,
    ) -> FallbackResult:
        """Invoke with one retry on the fallback tier. See fallback.invoke_with_fallback."""
        return await invoke_with_fallback(
            self, request, fallback_tier, validate
        )


def _decode_json(response: httpx.Response) -> dict[str, Any]:
    """Decode a response body, returning an empty dict when it is not a JSON object."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _error_message(data: dict[str, Any]) -> str:
    """Provider-reported error message, if any."""
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return "Unknown error"


def _token_counts(usage: Any) -> tuple[int, int]:
    """Input/output token counts; absent or null counts are 0."""
    if usage is None:
        return 0, 0
    if not isinstance(usage, dict):
        raise TypeError(f"usage is {type(usage).__name__}, expected object")
    return (
        max(0, int(usage.get("input_tokens") or 0)),
        max(0, int(usage.get("output_tokens") or 0)),
    )
