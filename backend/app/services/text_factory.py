"""
Text Generation Service Factory

Selects the provider from TEXT_PROVIDER ("gemini" or "openai")
"""
import logging
from typing import Optional

from app.config import Settings, settings
from .text_base import TextGenerator

logger = logging.getLogger("uvicorn.error")


def get_text_generator(name: Optional[str] = None, config: Optional[Settings] = None) -> TextGenerator:
    """
    Build the configured text generator

    Parameters:
    - name: Provider name, defaults to config.text_provider
    - config: Settings to build from, defaults to app.config.settings

    Raises:
    - ValueError: Unknown provider name

    Note:
    - A provider without credentials is still returned; calls fail with
      GenerationError so a misconfigured key shows up as a provider error
    """
    config = config or settings
    name = (name or config.text_provider).lower()
    if name == "gemini":
        from .text_gemini import GeminiTextGenerator

        generator = GeminiTextGenerator(
            api_key=config.gemini_api_key,
            api_base=config.gemini_api_base,
            model=config.gemini_model,
        )
    elif name == "openai":
        from .text_openai import OpenAITextGenerator

        generator = OpenAITextGenerator(
            api_key=config.openai_api_key,
            api_url=config.openai_api_url,
            model=config.gpt_model,
        )
    else:
        raise ValueError(f"Unknown text provider: {name}")

    if not generator.is_available():
        logger.warning("[text] %s selected but no API key is configured", generator.name)
    logger.info("[text] Using %s", generator.name)
    return generator
