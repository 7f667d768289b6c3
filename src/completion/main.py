"""
Completion Service - Main entry point.
Sends a single prompt to Claude, optionally with a fallback tier.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
from loguru import logger

from shared.config import get_settings
from shared.logging import setup_logging

from completion.client import ClaudeClient
from completion.errors import CompletionError
from completion.fallback import clean_json_response
from completion.models import FallbackResult, InvocationRequest, InvocationResult
from completion.registry import ModelTier

TIER_CHOICES = [tier.value for tier in ModelTier]


async def run_prompt(
    prompt: str,
    tier: ModelTier,
    fallback: Optional[ModelTier] = None,
    system: Optional[str] = None,
    max_tokens: int = 2000,
) -> InvocationResult:
    """
    Send one prompt, retrying on the fallback tier if given.

    With a fallback tier the response must be valid JSON.
    """
    request = InvocationRequest(
        tier=tier,
        user_prompt=prompt,
        system_prompt=system,
        max_output_tokens=max_tokens,
    )

    async with ClaudeClient() as client:
        if fallback is None:
            return await client.invoke(request)
        return await client.invoke_with_fallback(request, fallback)


@click.command()
@click.argument("prompt", required=False)
@click.option(
    "--tier",
    "-t",
    type=click.Choice(TIER_CHOICES),
    default=ModelTier.FAST.value,
    help="Model tier to call",
)
@click.option(
    "--fallback",
    "-f",
    type=click.Choice(TIER_CHOICES),
    default=None,
    help="Retry once on this tier if the response is not valid JSON",
)
@click.option("--system", "-s", default=None, help="System prompt")
@click.option(
    "--max-tokens",
    "-m",
    type=int,
    default=None,
    help="Max output tokens (defaults to COMPLETION_MAX_TOKENS)",
)
@click.option(
    "--json",
    "clean_json",
    is_flag=True,
    help="Strip markdown code fences from the output",
)
def main(
    prompt: Optional[str],
    tier: str,
    fallback: Optional[str],
    system: Optional[str],
    max_tokens: Optional[int],
    clean_json: bool,
):
    """Completion - Send a prompt to Claude and report token usage and cost."""
    setup_logging()
    settings = get_settings()

    if prompt is None:
        prompt = sys.stdin.read()
    if not prompt.strip():
        raise click.UsageError("Prompt is empty")

    try:
        result = asyncio.run(
            run_prompt(
                prompt=prompt,
                tier=ModelTier(tier),
                fallback=ModelTier(fallback) if fallback else None,
                system=system,
                max_tokens=max_tokens or settings.completion_max_tokens,
            )
        )
    except CompletionError as e:
        logger.error(f"Completion failed: {e}")
        raise click.ClickException(str(e))

    text = clean_json_response(result.text) if clean_json else result.text
    click.echo(text)

    summary = (
        f"Tier: {result.tier.value} | "
        f"Tokens: {result.input_token_count} in / {result.output_token_count} out | "
        f"Cost: ${result.estimated_cost_usd:.4f}"
    )
    if isinstance(result, FallbackResult) and result.used_fallback:
        summary += " | Fallback used"
    click.echo(summary, err=True)


if __name__ == "__main__":
    main()
