"""
LLM-based job-CV scoring using Claude with a fallback tier.
"""

import json
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from shared.config import Settings, get_settings
from shared.models import Job, ParsedCV

from completion.client import ClaudeClient
from completion.fallback import parse_json_response
from completion.models import FallbackResult, InvocationRequest
from completion.registry import ModelTier

DESCRIPTION_PREVIEW_CHARS = 500


@dataclass
class JobScore:
    """Score for one job of the batch."""

    job_index: int  # 1-based, as listed in the prompt
    score: int  # 0-100
    justification: str = ""


@dataclass
class MatchRun:
    """Scores plus the invocation result, whose cost the caller records."""

    scores: list[JobScore] = field(default_factory=list)
    result: Optional[FallbackResult] = None


SYSTEM_PROMPT = """You are an expert CV-job matcher. You score how well a candidate fits each job from 0 to 100 and justify each score in one sentence.

IMPORTANT: Respond ONLY with a valid JSON array in the exact format specified. No other text."""


def is_json_array(text: str) -> bool:
    """True if text is a JSON array."""
    try:
        return isinstance(json.loads(text), list)
    except ValueError:
        return False


class JobMatcher:
    """Scores a batch of jobs against a parsed CV in a single request."""

    def __init__(
        self,
        client: Optional[ClaudeClient] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.client = client or ClaudeClient(self.settings)
        self.tier = ModelTier(self.settings.matcher_tier)
        self.fallback_tier = ModelTier(self.settings.matcher_fallback_tier)

    def build_prompt(self, cv: ParsedCV, jobs: list[Job]) -> str:
        """Build the scoring prompt for a batch of jobs."""
        jobs_list = "\n\n".join(
            f"Job {i}: {job.job_title} @ {job.company_name}\n"
            f"Location: {job.location}\n"
            f"Description: {job.description[:DESCRIPTION_PREVIEW_CHARS]}"
            for i, job in enumerate(jobs, start=1)
        )

        return f"""## Candidate CV:
- Target roles: {', '.join(cv.target_roles)}
- Skills: {', '.join(cv.skills)}
- Experience: {cv.experience_years} years
- Location: {cv.location}
- Seniority: {cv.seniority}

## Jobs to score:
{jobs_list}

## Task:
Score each job from 0 to 100 for this candidate.
Respond with a JSON array only, one entry per job:

[
  {{"job_index": 1, "score": 85, "justification": "..."}},
  {{"job_index": 2, "score": 78, "justification": "..."}}
]"""

    async def score_jobs(
        self,
        cv: ParsedCV,
        jobs: list[Job],
        limit: Optional[int] = None,
    ) -> MatchRun:
        """
        Score the first `limit` jobs against the CV.

        Returns:
            MatchRun with one JobScore per valid entry of the model's answer

        Raises:
            CompletionError: if the fallback call fails too
        """
        if limit is None:
            limit = self.settings.matcher_top_jobs
        batch = jobs[: max(0, limit)]
        if not batch:
            return MatchRun()

        request = InvocationRequest(
            tier=self.tier,
            system_prompt=SYSTEM_PROMPT,
            user_prompt=self.build_prompt(cv, batch),
            max_output_tokens=self.settings.completion_max_tokens,
        )
        result = await self.client.invoke_with_fallback(
            request, self.fallback_tier, validate=is_json_array
        )

        # Fallback output is not re-validated
        try:
            items = parse_json_response(result.text)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse job scores: {e}")
            return MatchRun(result=result)
        if not isinstance(items, list):
            logger.error(f"Job scores response is not a list: {type(items).__name__}")
            return MatchRun(result=result)

        scores = self._parse_scores(items, len(batch))
        logger.info(
            f"Scored {len(scores)}/{len(batch)} jobs "
            f"(tier: {result.tier.value}, fallback: {result.used_fallback}, "
            f"cost: ${result.estimated_cost_usd:.4f})"
        )
        return MatchRun(scores=scores, result=result)

    def _parse_scores(self, items: list, batch_size: int) -> list[JobScore]:
        """Convert raw entries, clamping scores and dropping invalid indexes."""
        scores: list[JobScore] = []
        for item in items:
            try:
                job_index = int(item["job_index"])
                score = int(item.get("score", 0))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping malformed score entry {item!r}: {e}")
                continue

            if not 1 <= job_index <= batch_size:
                logger.warning(f"Job index {job_index} out of range 1-{batch_size}, skipping")
                continue
            if not 0 <= score <= 100:
                logger.warning(f"Invalid score {score}, clamping to range 0-100")
                score = max(0, min(100, score))

            scores.append(
                JobScore(
                    job_index=job_index,
                    score=score,
                    justification=str(item.get("justification", "")),
                )
            )
        return scores
