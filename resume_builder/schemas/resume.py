from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
_URL_RE = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


class PersonalInfo(BaseModel):
    full_name: str = Field(min_length=2, max_length=100)
    location: str = Field(min_length=2, max_length=100)
    email: str = Field(min_length=3, max_length=320)
    linkedin: str | None = None
    github: str | None = None

    @field_validator("email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        stripped = value.strip()
        if not _EMAIL_RE.match(stripped):
            raise ValueError("Invalid email address")
        return stripped

    @field_validator("linkedin", "github")
    @classmethod
    def _validate_profile_url(cls, value: str | None) -> str | None:
        if value is None or value.strip() == "":
            return value
        if not _URL_RE.match(value.strip()):
            raise ValueError("Invalid URL")
        return value.strip()


class WorkExperience(BaseModel):
    company: str = Field(min_length=1)
    role: str = Field(min_length=1)
    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)
    description: str = Field(min_length=10)
    technologies: list[str] = Field(default_factory=list)


class Education(BaseModel):
    institution: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    start_date: str = Field(min_length=1)
    end_date: str = Field(min_length=1)


class Skills(BaseModel):
    hard_skills: list[str] = Field(min_length=1)
    soft_skills: list[str] = Field(default_factory=list)


class ResumeRequest(BaseModel):
    personal_info: PersonalInfo
    summary: str = Field(min_length=20, max_length=2000)
    experience: list[WorkExperience] = Field(min_length=1)
    education: list[Education] = Field(min_length=1)
    skills: Skills
    job_description: str | None = None


class ResumeData(BaseModel):
    formatted_resume: str
    ats_score: int = Field(ge=0, le=100)
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)


class ResumeResponse(BaseModel):
    success: bool
    data: ResumeData | None = None
    error: str | None = None
