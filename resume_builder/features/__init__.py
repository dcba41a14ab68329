from .ats_scoring import (
    ScoreResult,
    ScoringRules,
    calculate_ats_score,
    extract_keywords,
    extract_phrases,
    generate_suggestions,
    load_scoring_rules,
)

__all__ = [
    "ScoreResult",
    "ScoringRules",
    "calculate_ats_score",
    "extract_keywords",
    "extract_phrases",
    "generate_suggestions",
    "load_scoring_rules",
]
