from __future__ import annotations

import os
from typing import Optional, Sequence

from google import genai
from google.genai import types

from resume_builder.ai.types import ChatMessage


class GeminiProvider:
    def __init__(
        self,
        model: str,
        api_key: Optional[str] = None,
        temperature: float = 0.7,
        top_k: int = 40,
        top_p: float = 0.95,
        max_output_tokens: int = 8192,
    ):
        self._model = model
        self._temperature = temperature
        self._top_k = top_k
        self._top_p = top_p
        self._max_output_tokens = max_output_tokens
        key = (api_key or os.getenv("GEMINI_API_KEY") or "").strip()
        if not key:
            raise RuntimeError("GEMINI_API_KEY is missing")

        self._client = genai.Client(api_key=key)

    async def complete(self, messages: Sequence[ChatMessage]) -> str:
        system = "\n\n".join(m.content for m in messages if m.role == "system")
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part.from_text(text=m.content)],
            )
            for m in messages
            if m.role != "system"
        ]

        response = await self._client.aio.models.generate_content(
            model=self._model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=system or None,
                temperature=self._temperature,
                top_k=self._top_k,
                top_p=self._top_p,
                max_output_tokens=self._max_output_tokens,
            ),
        )
        return response.text or ""
