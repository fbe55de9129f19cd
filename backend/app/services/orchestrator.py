"""
Conversation Orchestrator

The only externally facing component: validates request parameters, runs the
text or audio pipeline and shapes results into their wire format.
"""
import logging
import re
from typing import Optional

from app.config import Settings, settings as default_settings
from app.core.errors import InvalidRequestError
from app.core.metrics import CacheMetricsRegistry
from app.schemas.conversation import utc_now_iso
from .blob_cache import BlobCache
from .conversation_generator import ConversationGenerator
from .speech_audio import SpeechAudioService
from .storage_factory import get_blob_store
from .text_base import GenerationOptions
from .text_factory import get_text_generator
from .tts_factory import get_speech_synthesizer
from .turn_audio import TurnAudioSynthesizer

logger = logging.getLogger("uvicorn.error")

# wordId becomes a path segment in the blob store
_WORD_ID_PATTERN = re.compile(r"^[\w.\-]+$")


def _validate_word_id(word_id: Optional[str]) -> str:
    word_id = (word_id or "").strip()
    if not word_id:
        raise InvalidRequestError("wordId is required")
    if word_id in (".", "..") or not _WORD_ID_PATTERN.match(word_id):
        raise InvalidRequestError(f"wordId contains unsupported characters: {word_id!r}")
    return word_id


class ConversationOrchestrator:
    def __init__(
        self,
        generator: ConversationGenerator,
        audio: TurnAudioSynthesizer,
        speech: SpeechAudioService,
        default_generator_version: str = "v1",
        max_speech_words: int = 15,
    ):
        self.generator = generator
        self.audio = audio
        self.speech = speech
        self.default_generator_version = default_generator_version
        self.max_speech_words = max_speech_words
        self.metrics = CacheMetricsRegistry()
        self.metrics.register("conversation", generator.metrics)
        self.metrics.register("turnAudio", audio.metrics)
        self.metrics.register("tts", speech.metrics)

    async def generate_conversation_text(
        self,
        word_id: Optional[str],
        word: Optional[str],
        generator_version: Optional[str] = None,
    ) -> dict:
        """
        Conversation JSON for a word, plus response metadata

        Returns:
            dict: Conversation fields (camelCase) and "_metadata": {mode, processedAt}
        """
        word_id = _validate_word_id(word_id)
        word = (word or "").strip()
        if not word:
            raise InvalidRequestError("word is required")
        generator_version = (generator_version or "").strip() or self.default_generator_version

        logger.info("[orchestrator] text request: word=%s (%s)", word, word_id)
        conversation = await self.generator.generate_text(word_id, word, generator_version)

        data = conversation.model_dump(mode="json")
        data["_metadata"] = {"mode": "real", "processedAt": utc_now_iso()}
        return data

    async def generate_turn_audio(
        self,
        word_id: Optional[str],
        turn_index: Optional[int],
        text: Optional[str],
        voice: Optional[str] = None,
    ) -> dict:
        """
        Audio URL for one conversation turn

        Returns:
            dict: {conversationId, turnIndex, audioUrl, voice, cached, generatedAt}
        """
        word_id = _validate_word_id(word_id)
        if turn_index is None or isinstance(turn_index, bool) or not isinstance(turn_index, int):
            raise InvalidRequestError("turnIndex must be an integer")
        if turn_index < 0:
            raise InvalidRequestError("turnIndex must be >= 0")

        logger.info("[orchestrator] audio request: wordId=%s turnIndex=%d", word_id, turn_index)
        result = await self.audio.generate_turn_audio(word_id, turn_index, text or "", voice)
        return result.model_dump(mode="json")

    async def generate_speech_audio(self, text: Optional[str], voice: Optional[str] = None) -> dict:
        """
        Audio URL for a short phrase (1 to max_speech_words words)

        Returns:
            dict: {audioUrl, voice, cached}
        """
        text = (text or "").strip()
        if not text:
            raise InvalidRequestError("text is required")
        word_count = len(text.split())
        if word_count > self.max_speech_words:
            raise InvalidRequestError(
                f"text has {word_count} words, expected between 1 and {self.max_speech_words}"
            )

        logger.info("[orchestrator] tts request: %d words, voice=%s", word_count, voice)
        result = await self.speech.synthesize(text, (voice or "").strip() or None)
        return result.model_dump(mode="json")

    def cache_metrics(self) -> dict:
        return self.metrics.aggregate()


def build_orchestrator(config: Optional[Settings] = None) -> ConversationOrchestrator:
    """
    Compose the pipeline from configured providers

    Each collaborator is built once here from config and passed in explicitly;
    one synthesizer and one blob cache are shared by both audio services.
    """
    config = config or default_settings

    cache = BlobCache(get_blob_store(config=config))
    text_generator = get_text_generator(config=config)
    synthesizer = get_speech_synthesizer(config=config)
    options = GenerationOptions(
        model=text_generator.default_model,
        temperature=min(max(config.text_temperature, 0.0), 1.0),
        max_tokens=max(1, config.text_max_tokens),
    )

    generator = ConversationGenerator(
        cache=cache,
        text_generator=text_generator,
        options=options,
        timeout_sec=config.text_timeout_sec,
    )
    audio = TurnAudioSynthesizer(
        cache=cache,
        synthesizer=synthesizer,
        timeout_sec=config.tts_timeout_sec,
    )
    speech = SpeechAudioService(
        cache=cache,
        synthesizer=synthesizer,
        timeout_sec=config.tts_timeout_sec,
    )
    return ConversationOrchestrator(
        generator,
        audio,
        speech,
        default_generator_version=config.generator_version,
        max_speech_words=max(1, config.tts_max_words),
    )
