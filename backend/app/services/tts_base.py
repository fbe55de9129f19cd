"""
TTS Service Abstract Interface

Provides unified interface for speech synthesis providers (Google Cloud TTS / ElevenLabs).
"""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional

from app.core.errors import ProviderError, SynthesisError, SynthesisTimeout

logger = logging.getLogger("uvicorn.error")


class SpeechSynthesizer(ABC):
    """TTS Service Abstract Base Class"""

    @abstractmethod
    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        """
        Synthesize text into MP3 audio

        Parameters:
        - text: Text to synthesize
        - voice: Provider-specific voice name or ID

        Returns:
        - bytes: Encoded MP3 audio

        Raises:
        - SynthesisError: Provider call failed
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider credentials are configured"""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., "Google Cloud TTS")"""
        pass

    @property
    @abstractmethod
    def default_voice(self) -> str:
        """Voice used when the request does not name one"""
        pass


async def synthesize_with_timeout(
    synthesizer: SpeechSynthesizer,
    text: str,
    voice: str,
    timeout: Optional[float],
) -> bytes:
    """
    Run one synthesis call under a deadline

    Raises:
    - SynthesisTimeout: No result within timeout seconds (None or 0 waits forever)
    - SynthesisError: Provider failed; unexpected exceptions are wrapped
    """
    try:
        return await asyncio.wait_for(synthesizer.synthesize_speech(text, voice), timeout=timeout or None)
    except asyncio.TimeoutError as e:
        logger.error("[tts] %s timed out after %ss", synthesizer.name, timeout)
        raise SynthesisTimeout(f"{synthesizer.name} timed out after {timeout}s") from e
    except ProviderError as e:
        logger.error("[tts] %s failed: %s", synthesizer.name, e)
        raise
    except Exception as e:
        logger.exception("[tts] %s raised an unexpected error", synthesizer.name)
        raise SynthesisError(f"{synthesizer.name} failed: {e}") from e
