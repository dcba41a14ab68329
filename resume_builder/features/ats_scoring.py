"""Keyword extraction and ATS scoring.

Turns a job description into ranked keywords, matches them against a generated
resume and the candidate's declared skills, and derives improvement
suggestions. Word lists and messages live in config/ats_scoring.yaml.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from pydantic import BaseModel, Field

from resume_builder.core.config.scoring import get_scoring_value

_NON_WORD_RE = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ScoringRules:
    stopwords: frozenset[str]
    technical_terms: frozenset[str]
    phrases: tuple[str, ...]
    phrase_pattern: re.Pattern[str]
    extension_pattern: re.Pattern[str]
    neutral_score: int
    max_keywords: int
    min_token_length: int
    min_repeat_frequency: int
    low_threshold: int
    fair_threshold: int
    excellent_threshold: int
    max_missing_listed: int
    metric_pattern: re.Pattern[str]
    weak_opener_pattern: re.Pattern[str]
    messages: Mapping[str, str]


class ScoreResult(BaseModel):
    score: int = Field(ge=0, le=100)
    matched: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)


def _string_list(path: str) -> list[str]:
    values = get_scoring_value(path, [])
    if not isinstance(values, list):
        raise RuntimeError(f"Scoring config '{path}' must be a list.")
    return [str(value).strip().lower() for value in values if str(value).strip()]


@lru_cache(maxsize=1)
def load_scoring_rules() -> ScoringRules:
    phrases = tuple(_string_list("ats.technical_phrases"))
    extensions = _string_list("ats.technical_extensions")
    weak_openers = _string_list("suggestions.weak_openers")
    messages = get_scoring_value("suggestions.messages", {})
    if not isinstance(messages, dict):
        raise RuntimeError("Scoring config 'suggestions.messages' must be a mapping.")

    return ScoringRules(
        stopwords=frozenset(_string_list("ats.stopwords")),
        technical_terms=frozenset(_string_list("ats.technical_terms")),
        phrases=phrases,
        phrase_pattern=re.compile(
            r"\b(?:" + "|".join(phrases) + r")\b", re.IGNORECASE | re.ASCII
        ),
        extension_pattern=re.compile(
            r"^[a-z]+\.(?:" + "|".join(re.escape(ext) for ext in extensions) + r")$",
            re.IGNORECASE,
        ),
        neutral_score=int(get_scoring_value("ats.neutral_score", 75)),
        max_keywords=int(get_scoring_value("ats.max_keywords", 50)),
        min_token_length=int(get_scoring_value("ats.min_token_length", 3)),
        min_repeat_frequency=int(get_scoring_value("ats.min_repeat_frequency", 2)),
        low_threshold=int(get_scoring_value("suggestions.thresholds.low", 50)),
        fair_threshold=int(get_scoring_value("suggestions.thresholds.fair", 70)),
        excellent_threshold=int(get_scoring_value("suggestions.thresholds.excellent", 85)),
        max_missing_listed=int(get_scoring_value("suggestions.max_missing_listed", 5)),
        metric_pattern=re.compile(
            str(get_scoring_value("suggestions.metric_pattern", r"\d+%")), re.IGNORECASE
        ),
        weak_opener_pattern=re.compile(
            "^(?:" + "|".join(re.escape(opener) for opener in weak_openers) + ")",
            re.IGNORECASE,
        ),
        messages={str(key): str(value) for key, value in messages.items()},
    )


def _is_technical(word: str, rules: ScoringRules) -> bool:
    return word in rules.technical_terms or bool(rules.extension_pattern.match(word))


def extract_phrases(text: str) -> list[str]:
    """Return the fixed technical phrases found in ``text``, in order of first appearance."""
    rules = load_scoring_rules()
    found: list[str] = []
    for match in rules.phrase_pattern.finditer(text):
        normalized = _WHITESPACE_RE.sub(" ", match.group(0).lower())
        if normalized and normalized not in found:
            found.append(normalized)
    return found


def extract_keywords(text: str | None) -> list[str]:
    """Extract ranked keywords from a job description.

    Multi-word phrases come from a closed list. A single word is kept when it is
    a known technology or repeats in the text. The result is ordered by word
    frequency, with ties in first-seen order, and capped at ``max_keywords``.
    """
    if text is None:
        return []
    if not isinstance(text, str):
        raise TypeError(f"text must be a string, got {type(text).__name__}")
    if not text:
        return []

    rules = load_scoring_rules()
    words = _NON_WORD_RE.sub(" ", text.lower()).split()

    word_freq: dict[str, int] = {}
    for word in words:
        if len(word) < rules.min_token_length or word in rules.stopwords:
            continue
        word_freq[word] = word_freq.get(word, 0) + 1

    keywords = extract_phrases(text)
    seen = set(keywords)
    for word, freq in word_freq.items():
        if word in seen:
            continue
        if _is_technical(word, rules) or freq >= rules.min_repeat_frequency:
            keywords.append(word)
            seen.add(word)

    # Phrases are absent from word_freq and rank as 0; sort is stable.
    keywords.sort(key=lambda keyword: -word_freq.get(keyword, 0))
    return keywords[: rules.max_keywords]


def _round_half_up(numerator: int, denominator: int) -> int:
    return (numerator * 2 + denominator) // (denominator * 2)


def calculate_ats_score(
    job_keywords: Sequence[str],
    resume_text: str,
    skills: Sequence[str],
) -> ScoreResult:
    rules = load_scoring_rules()
    if not job_keywords:
        return ScoreResult(score=rules.neutral_score, matched=[], missing=[])
    if not isinstance(resume_text, str):
        raise TypeError(f"resume_text must be a string, got {type(resume_text).__name__}")

    resume_lower = resume_text.lower()
    skills_lower = [skill.lower() for skill in skills]

    matched: list[str] = []
    missing: list[str] = []
    for keyword in job_keywords:
        keyword_lower = keyword.lower()
        in_resume = keyword_lower in resume_lower
        in_skills = any(
            keyword_lower in skill or skill in keyword_lower for skill in skills_lower
        )
        if in_resume or in_skills:
            matched.append(keyword)
        else:
            missing.append(keyword)

    score = _round_half_up(len(matched) * 100, len(job_keywords))
    return ScoreResult(score=score, matched=matched, missing=missing)


def _description(entry: Any) -> str:
    if isinstance(entry, Mapping):
        value = entry.get("description")
    else:
        value = getattr(entry, "description", None)
    return value if isinstance(value, str) else ""


def generate_suggestions(
    score: int,
    missing_keywords: Sequence[str],
    experience: Sequence[Any],
) -> list[str]:
    rules = load_scoring_rules()
    messages = rules.messages
    suggestions: list[str] = []

    # 70 <= score < 85 adds no band message.
    if score < rules.low_threshold:
        suggestions.append(messages["low"])
    elif score < rules.fair_threshold:
        suggestions.append(messages["fair"])
    elif score >= rules.excellent_threshold:
        suggestions.append(messages["excellent"])

    if missing_keywords:
        top_missing = list(missing_keywords)[: rules.max_missing_listed]
        suggestions.append(messages["missing_keywords"].format(keywords=", ".join(top_missing)))

    descriptions = [_description(entry) for entry in experience]

    if not any(rules.metric_pattern.search(text) for text in descriptions):
        suggestions.append(messages["metrics"])

    if any(rules.weak_opener_pattern.match(text) for text in descriptions):
        suggestions.append(messages["action_verbs"])

    return suggestions
