"""
Pydantic models for jobs and parsed CVs passed to the matcher.
"""

from pydantic import BaseModel, Field


class Job(BaseModel):
    """Normalized job posting."""

    job_title: str = Field(..., description="Job title")
    company_name: str = Field(default="", description="Company name")
    location: str = Field(default="", description="Job location")
    description: str = Field(default="", description="Full job description")


class ParsedCV(BaseModel):
    """Candidate data extracted from a CV."""

    target_roles: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    experience_years: int = Field(default=0, ge=0)
    location: str = Field(default="")
    seniority: str = Field(default="")
