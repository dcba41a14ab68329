from .resume import (
    Education,
    PersonalInfo,
    ResumeData,
    ResumeRequest,
    ResumeResponse,
    Skills,
    WorkExperience,
)

__all__ = [
    "PersonalInfo",
    "WorkExperience",
    "Education",
    "Skills",
    "ResumeRequest",
    "ResumeData",
    "ResumeResponse",
]
