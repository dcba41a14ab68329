from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from resume_builder.ai.types import ChatMessage

SYSTEM_PROMPT = """You are a professional Harvard resume writer and ATS optimization specialist.

Rules:
- Do NOT invent experience.
- Do NOT fabricate achievements or metrics.
- Only restructure and enhance clarity.
- Use strong action verbs.
- Keep bullet points concise.
- Use quantified impact only if provided.
- Maintain Harvard resume structure.
- Avoid tables and graphics.
- Ensure ATS compatibility.
- Keep content within 1 page equivalent length."""

_OUTPUT_CONTRACT = """
Return output in the following structured format:

=== FORMATTED RESUME ===
[Full Harvard-structured resume text here - format with clear sections:]

[FULL NAME]
[Location] | [Email] | [LinkedIn] | [GitHub]

PROFESSIONAL SUMMARY
[Enhanced 2-3 sentence summary]

EXPERIENCE
[Company Name] - [Role]
[Start Date] - [End Date]
- [Achievement-focused bullet point with action verb]
- [Achievement-focused bullet point with action verb]

[Repeat for each experience]

EDUCATION
[Institution Name]
[Degree], [Start Date] - [End Date]

[Repeat for each education]

SKILLS
Technical Skills: [Comma-separated list]
Soft Skills: [Comma-separated list]

=== END FORMATTED RESUME ===

=== MATCHED KEYWORDS ===
[List of keywords from job description that appear in the resume, comma-separated]

=== IMPROVEMENT SUGGESTIONS ===
1. [Specific actionable suggestion]
2. [Specific actionable suggestion]
3. [Specific actionable suggestion]
"""

_RESUME_BLOCK_RE = re.compile(
    r"===\s*FORMATTED RESUME\s*===\s*(.*?)\s*===\s*END FORMATTED RESUME\s*===",
    re.IGNORECASE | re.DOTALL,
)
_SUGGESTIONS_BLOCK_RE = re.compile(
    r"===\s*IMPROVEMENT SUGGESTIONS\s*===\s*(.*?)(?:===|$)",
    re.IGNORECASE | re.DOTALL,
)
_NUMBERING_RE = re.compile(r"^\d+\.\s*")


@dataclass
class GeneratedResume:
    formatted_resume: str
    suggestions: list[str] = field(default_factory=list)


def build_user_prompt(candidate: dict[str, Any]) -> str:
    candidate_json = json.dumps(
        {
            "personal_info": candidate.get("personal_info"),
            "summary": candidate.get("summary"),
            "experience": candidate.get("experience"),
            "education": candidate.get("education"),
            "skills": candidate.get("skills"),
        },
        indent=2,
        ensure_ascii=False,
    )
    prompt = (
        "Generate a Harvard-style resume using the following candidate data.\n\n"
        f"Candidate JSON:\n{candidate_json}\n"
    )

    job_description = (candidate.get("job_description") or "").strip()
    if job_description:
        prompt += (
            f"\nJob Description:\n{job_description}\n\n"
            "Instructions:\n"
            "- Extract key technical and role-related keywords from the job description.\n"
            "- Naturally integrate them into the resume where appropriate.\n"
            "- Do not force irrelevant keywords.\n"
            "- Maintain authenticity.\n"
        )

    return prompt + _OUTPUT_CONTRACT


def build_resume_messages(candidate: dict[str, Any]) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_user_prompt(candidate)),
    ]


def parse_resume_output(text: str) -> GeneratedResume:
    """Split model output into the resume body and its suggestions.

    The model's own keyword list is not used. Without the resume markers the
    whole response is treated as the resume.
    """
    resume_match = _RESUME_BLOCK_RE.search(text)
    formatted_resume = resume_match.group(1).strip() if resume_match else text

    suggestions_match = _SUGGESTIONS_BLOCK_RE.search(text)
    suggestions_text = suggestions_match.group(1).strip() if suggestions_match else ""
    suggestions = [
        _NUMBERING_RE.sub("", line).strip()
        for line in suggestions_text.split("\n")
    ]

    return GeneratedResume(
        formatted_resume=formatted_resume,
        suggestions=[line for line in suggestions if line],
    )
