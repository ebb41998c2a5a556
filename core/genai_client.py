import logging
from dataclasses import dataclass
from typing import Optional

import google.generativeai as genai

from config.settings import (
    GENAI_API_KEY,
    GENAI_MODEL,
    GENAI_TEMPERATURE,
    GENAI_MAX_OUTPUT_TOKENS,
)

logger = logging.getLogger(__name__)


@dataclass
class NarrativeResult:
    """Outcome of one generation call: text on success, error on failure."""
    ok: bool
    text: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, text: str) -> "NarrativeResult":
        return cls(ok=True, text=text)

    @classmethod
    def failure(cls, error: str) -> "NarrativeResult":
        return cls(ok=False, error=error)


class NarrativeClient:
    """Anything that turns prompt text into generated text."""

    async def generate(self, prompt: str) -> NarrativeResult:
        raise NotImplementedError


class GeminiNarrativeClient(NarrativeClient):
    """
    Narrative generation over the Gemini API.

    One attempt per call. Every failure (missing key, transport error,
    blocked or empty response) comes back as NarrativeResult.failure.
    """

    def __init__(self, api_key: Optional[str] = GENAI_API_KEY, model_name: str = GENAI_MODEL):
        self.api_key = api_key
        self.model_name = model_name
        self._model = None

    def _get_model(self):
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(
                self.model_name,
                generation_config={
                    "temperature": GENAI_TEMPERATURE,
                    "top_k": 40,
                    "top_p": 0.95,
                    "max_output_tokens": GENAI_MAX_OUTPUT_TOKENS,
                },
            )
        return self._model

    async def generate(self, prompt: str) -> NarrativeResult:
        if not self.api_key:
            return NarrativeResult.failure("GENAI_API_KEY is not configured")

        try:
            response = await self._get_model().generate_content_async(prompt)
            text = (response.text or "").strip()
        except Exception as e:
            logger.error(f"Gemini API call failed: {e}")
            return NarrativeResult.failure(str(e))

        if not text:
            return NarrativeResult.failure("Empty response from Gemini API")
        return NarrativeResult.success(text)


_narrative_client: Optional[NarrativeClient] = None


def get_narrative_client() -> NarrativeClient:
    """FastAPI dependency returning the shared narrative client."""
    global _narrative_client
    if _narrative_client is None:
        _narrative_client = GeminiNarrativeClient()
    return _narrative_client
