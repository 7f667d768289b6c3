"""
Matcher Service - LLM-based job-CV scoring.

Scores a batch of jobs against a parsed CV with Claude, retrying once
on the fallback tier when the answer is not a JSON array.
"""

from .llm_matcher import JobMatcher, JobScore, MatchRun

__all__ = ["JobMatcher", "JobScore", "MatchRun"]
