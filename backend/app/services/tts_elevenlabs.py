import asyncio
import logging
from typing import AsyncGenerator, Optional

import httpx

from app.core.errors import SynthesisError
from .tts_base import SpeechSynthesizer

logger = logging.getLogger("uvicorn.error")


async def _stream_elevenlabs(
    text: str,
    voice_id: str,
    api_key: str,
    api_base: str,
    stability: float = 0.88,
    similarity_boost: float = 0.9,
    style: float = 0.40,
    use_speaker_boost: bool = True
) -> AsyncGenerator[bytes, None]:
    """
    Call ElevenLabs API for streaming TTS

    Parameters:
    - text: Text to synthesize
    - voice_id: ElevenLabs voice ID
    - stability: Stability (0-1), higher = more stable, lower = more expressive
    - similarity_boost: Similarity boost (0-1), similarity to original voice
    - style: Style exaggeration (0-1), speech expressiveness
    - use_speaker_boost: Whether to enable speaker boost
    """
    url = f"{api_base}/text-to-speech/{voice_id}/stream"
    headers = {
        "xi-api-key": api_key,
        "accept": "audio/mpeg",
        "content-type": "application/json",
    }
    payload = {
        "text": text,
        "model_id": "eleven_multilingual_v2",  # Mandarin needs the multilingual model
        "output_format": "mp3_44100_128",
        "voice_settings": {
            "stability": stability,
            "similarity_boost": similarity_boost,
            "style": style,
            "use_speaker_boost": use_speaker_boost
        },
    }

    logger.info("[tts:elevenlabs] HTTP POST %s voice=%s", url, voice_id)
    async with httpx.AsyncClient(timeout=None) as client:
        async with client.stream("POST", url, headers=headers, json=payload) as resp:
            resp.raise_for_status()
            async for chunk in resp.aiter_bytes():
                if chunk:
                    yield chunk
                await asyncio.sleep(0)


DEFAULT_API_BASE = "https://api.elevenlabs.io/v1"
# Multilingual preset voice that handles Mandarin
DEFAULT_VOICE_ID = "hkfHEbBvdQFNX4uWHqRF"


class ElevenLabsSpeechSynthesizer(SpeechSynthesizer):
    """ElevenLabs streaming TTS, collected into a single MP3 payload"""

    def __init__(self, api_key: Optional[str] = None, api_base: str = DEFAULT_API_BASE, voice_id: str = DEFAULT_VOICE_ID):
        self.api_key = api_key
        self.api_base = api_base or DEFAULT_API_BASE
        self.voice_id = voice_id or DEFAULT_VOICE_ID

    @property
    def name(self) -> str:
        return "ElevenLabs"

    @property
    def default_voice(self) -> str:
        return self.voice_id

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        if not self.is_available():
            raise SynthesisError("ELEVENLABS_API_KEY is missing")

        audio_chunks = []
        try:
            async for chunk in _stream_elevenlabs(
                text=text,
                voice_id=voice or self.voice_id,
                api_key=self.api_key,
                api_base=self.api_base,
            ):
                audio_chunks.append(chunk)
        except httpx.HTTPStatusError as e:
            raise SynthesisError(f"{self.name} returned HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise SynthesisError(f"{self.name} request failed: {e}") from e

        # Merge audio data
        audio_data = b''.join(audio_chunks)
        if not audio_data:
            raise SynthesisError(f"{self.name} returned no audio")
        logger.info("[tts:elevenlabs] Generation completed, size: %d bytes", len(audio_data))
        return audio_data
