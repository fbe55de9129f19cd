"""
TTS Service Factory

Selects the provider from TTS_PROVIDER ("google" or "elevenlabs")
"""
import logging
from typing import Optional

from app.config import Settings, settings
from .tts_base import SpeechSynthesizer

logger = logging.getLogger("uvicorn.error")


def get_speech_synthesizer(name: Optional[str] = None, config: Optional[Settings] = None) -> SpeechSynthesizer:
    """
    Build the configured speech synthesizer

    Parameters:
    - name: Provider name, defaults to config.tts_provider
    - config: Settings to build from, defaults to app.config.settings

    Raises:
    - ValueError: Unknown provider name
    """
    config = config or settings
    name = (name or config.tts_provider).lower()
    if name == "google":
        from .tts_google import GoogleSpeechSynthesizer

        synthesizer = GoogleSpeechSynthesizer(
            credentials_raw=config.google_tts_credentials_raw,
            language_code=config.tts_language_code,
            voice=config.default_voice,
        )
    elif name == "elevenlabs":
        from .tts_elevenlabs import ElevenLabsSpeechSynthesizer

        synthesizer = ElevenLabsSpeechSynthesizer(
            api_key=config.eleven_api_key,
            api_base=config.eleven_api_base,
            voice_id=config.eleven_voice_id,
        )
    else:
        raise ValueError(f"Unknown TTS provider: {name}")

    if not synthesizer.is_available():
        logger.warning("[tts] %s selected but no API key is configured", synthesizer.name)
    logger.info("[tts] Using %s (default voice=%s)", synthesizer.name, synthesizer.default_voice)
    return synthesizer
