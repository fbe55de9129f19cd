"""
Google Gemini Text Generation

Calls the Generative Language REST API (generateContent) with an API key.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from app.core.errors import GenerationError
from .text_base import GenerationOptions, TextGenerator

logger = logging.getLogger("uvicorn.error")


DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash-lite"


class GeminiTextGenerator(TextGenerator):
    """Gemini generateContent client"""

    def __init__(self, api_key: Optional[str] = None, api_base: str = DEFAULT_API_BASE, model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.api_base = (api_base or DEFAULT_API_BASE).rstrip("/")
        self.model = model or DEFAULT_MODEL

    @property
    def name(self) -> str:
        return "Google Gemini"

    @property
    def default_model(self) -> str:
        return self.model

    def is_available(self) -> bool:
        return bool(self.api_key)

    def _endpoint(self, model: str) -> str:
        # Accept both "gemini-2.0-flash-lite" and "models/gemini-2.0-flash-lite"
        if not model.startswith("models/"):
            model = f"models/{model}"
        return f"{self.api_base}/{model}:generateContent"

    async def generate_text(self, prompt: str, options: GenerationOptions) -> str:
        if not self.is_available():
            raise GenerationError(f"{self.name}: GEMINI_API_KEY is not configured")

        payload: Dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": options.temperature,
                "maxOutputTokens": options.max_tokens,
            },
        }
        url = self._endpoint(options.model or self.model)

        logger.info("[gemini] POST %s (temperature=%s, maxOutputTokens=%s)",
                    url, options.temperature, options.max_tokens)
        try:
            # Overall deadline is enforced by the caller; no client-side timeout here
            async with httpx.AsyncClient(timeout=None) as client:
                resp = await client.post(url, params={"key": self.api_key}, json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"{self.name} returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise GenerationError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise GenerationError(f"{self.name} returned invalid JSON") from e

        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"{self.name} response missing text content") from e
        if not isinstance(text, str):
            raise GenerationError(f"{self.name} returned non-text content: {type(text).__name__}")

        # Empty text is passed through; the parser substitutes the fallback dialogue
        logger.info("[gemini] generated %d characters", len(text))
        return text
