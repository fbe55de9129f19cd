"""
OpenAI GPT Text Generation

Uses the OpenAI chat completions API to generate conversation text.
"""
import logging
from typing import Optional

import httpx

from app.core.errors import GenerationError
from .text_base import GenerationOptions, TextGenerator

logger = logging.getLogger("uvicorn.error")


DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"


class OpenAITextGenerator(TextGenerator):
    """OpenAI chat completions client"""

    def __init__(self, api_key: Optional[str] = None, api_url: str = DEFAULT_API_URL, model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.api_url = api_url or DEFAULT_API_URL
        self.model = model or DEFAULT_MODEL

    @property
    def name(self) -> str:
        return "OpenAI GPT"

    @property
    def default_model(self) -> str:
        return self.model

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def generate_text(self, prompt: str, options: GenerationOptions) -> str:
        if not self.is_available():
            raise GenerationError(f"{self.name}: OPENAI_API_KEY is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "model": options.model or self.model,
            "messages": [
                {"role": "user", "content": prompt}
            ],
            "temperature": options.temperature,
            "max_tokens": options.max_tokens,
        }

        logger.info("[gpt] Calling %s to generate conversation...", payload["model"])
        try:
            async with httpx.AsyncClient(timeout=None) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"{self.name} returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise GenerationError(f"{self.name} request failed: {e}") from e
        except ValueError as e:
            raise GenerationError(f"{self.name} returned invalid JSON") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"{self.name} response missing message content") from e

        content = content or ""
        if not isinstance(content, str):
            raise GenerationError(f"{self.name} returned non-text content: {type(content).__name__}")
        logger.info("[gpt] generated %d characters", len(content))
        return content
