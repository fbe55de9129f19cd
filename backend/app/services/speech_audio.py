"""
Cached Text-to-Speech

Short phrases (a vocabulary word, an example sentence) synthesized once per
(text, voice) and stored at tts/{md5(text + voice)}.mp3.
"""
import logging
from typing import Optional

from app.core.hashing import speech_audio_path
from app.core.metrics import CacheMetrics
from app.schemas.tts import SpeechAudioResult
from .blob_cache import MP3_CONTENT_TYPE, BlobCache
from .tts_base import SpeechSynthesizer, synthesize_with_timeout

logger = logging.getLogger("uvicorn.error")


class SpeechAudioService:
    def __init__(
        self,
        cache: BlobCache,
        synthesizer: SpeechSynthesizer,
        timeout_sec: Optional[float] = None,
        metrics: Optional[CacheMetrics] = None,
    ):
        self.cache = cache
        self.synthesizer = synthesizer
        self.timeout_sec = timeout_sec
        self.metrics = metrics or CacheMetrics()

    async def synthesize(
        self,
        text: str,
        voice: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SpeechAudioResult:
        """
        Public URL of the audio for text, synthesizing it on a cache miss

        Raises:
        - InfrastructureError: Cache lookup or write failed
        - SynthesisError / SynthesisTimeout: Speech provider failed or timed out
        """
        voice = voice or self.synthesizer.default_voice
        path = speech_audio_path(text, voice)

        if await self.cache.exists(path):
            self.metrics.record_hit()
            logger.info("[tts] cache hit: %s", path)
            cached = True
        else:
            self.metrics.record_miss()
            logger.info("[tts] cache miss: %s", path)
            audio = await synthesize_with_timeout(
                self.synthesizer, text, voice, timeout if timeout is not None else self.timeout_sec
            )
            await self.cache.write(path, audio, MP3_CONTENT_TYPE)
            logger.info("[tts] cached %d bytes: %s", len(audio), path)
            cached = False

        return SpeechAudioResult(audioUrl=self.cache.public_url(path), voice=voice, cached=cached)
