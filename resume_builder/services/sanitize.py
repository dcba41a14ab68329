from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_IFRAME_RE = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE)
_JS_SCHEME_RE = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_text(value: str, max_chars: int) -> str:
    cleaned = _SCRIPT_RE.sub("", value)
    cleaned = _IFRAME_RE.sub("", cleaned)
    cleaned = _JS_SCHEME_RE.sub("", cleaned)
    return cleaned.strip()[:max_chars]


def _sanitize_value(value: Any, max_chars: int) -> Any:
    if isinstance(value, str):
        return sanitize_text(value, max_chars)
    if isinstance(value, dict):
        return {key: _sanitize_value(item, max_chars) for key, item in value.items()}
    if isinstance(value, list):
        return [_sanitize_value(item, max_chars) for item in value]
    return value


def sanitize_payload(payload: BaseModel, max_chars: int) -> dict[str, Any]:
    """Dump a request model and scrub markup from every string before it reaches a prompt."""
    return _sanitize_value(payload.model_dump(mode="json"), max_chars)
