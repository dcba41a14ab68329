from __future__ import annotations

import asyncio
import logging
import time

from resume_builder.ai.factory import get_ai_client
from resume_builder.ai.types import AIClient
from resume_builder.core.config import settings
from resume_builder.features.ats_scoring import (
    calculate_ats_score,
    extract_keywords,
    generate_suggestions,
)
from resume_builder.schemas.resume import ResumeData, ResumeRequest
from resume_builder.services.resume_prompt import build_resume_messages, parse_resume_output
from resume_builder.services.sanitize import sanitize_payload

logger = logging.getLogger(__name__)


class ResumeGenerationError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


async def _generate_text(client: AIClient, candidate: dict) -> str:
    messages = build_resume_messages(candidate)
    try:
        return await asyncio.wait_for(
            client.complete(messages),
            timeout=settings.generation_timeout_s,
        )
    except asyncio.TimeoutError as exc:
        raise ResumeGenerationError("Request timeout", code="llm_timeout") from exc
    except Exception as exc:  # noqa: BLE001 - provider SDKs raise their own hierarchies
        logger.warning("resume_generation_failed: %s", exc)
        raise ResumeGenerationError(str(exc) or "Failed to generate resume") from exc


async def generate_resume(payload: ResumeRequest, *, client: AIClient | None = None) -> ResumeData:
    started = time.perf_counter()
    candidate = sanitize_payload(payload, settings.max_input_chars)

    job_keywords = extract_keywords(payload.job_description) if payload.job_description else []

    if client is None:
        try:
            client = get_ai_client()
        except (RuntimeError, ValueError) as exc:
            raise ResumeGenerationError(str(exc)) from exc

    raw_output = await _generate_text(client, candidate)
    generated = parse_resume_output(raw_output)
    if not generated.formatted_resume.strip():
        raise ResumeGenerationError("Failed to generate resume", code="empty_response")

    skills = [
        skill
        for skill in (*payload.skills.hard_skills, *payload.skills.soft_skills)
        if skill.strip()
    ]
    result = calculate_ats_score(job_keywords, generated.formatted_resume, skills)
    suggestions = generate_suggestions(result.score, result.missing, payload.experience)
    suggestions.extend(generated.suggestions)

    logger.info(
        "resume_generated score=%s matched=%s missing=%s latency_ms=%s",
        result.score,
        len(result.matched),
        len(result.missing),
        int((time.perf_counter() - started) * 1000),
    )

    return ResumeData(
        formatted_resume=generated.formatted_resume,
        ats_score=result.score,
        matched_keywords=result.matched,
        missing_keywords=result.missing,
        suggestions=suggestions[: settings.max_suggestions],
    )
