import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "gemini").strip().lower()
    default_model = "gpt-4o-mini" if provider == "openai" else "gemini-2.5-flash"
    model = (os.getenv("AI_MODEL") or default_model).strip()
    return AIConfig(provider=provider, model=model)
