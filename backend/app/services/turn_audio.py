"""
On-demand Turn Audio Synthesis

Audio for each turn is generated at most once:
- A turn whose audioUrl is already set is returned as cached
- Otherwise the audio blob is looked up by (wordId, turn, text hash) and only
  synthesized when missing, then the conversation record is updated

If the record update fails after the audio was written, the next request finds
the audio blob and repairs the record without calling the synthesizer again.
"""
import logging
from typing import Optional

from pydantic import ValidationError

from app.core.errors import ConversationNotFoundError, InfrastructureError, TurnNotFoundError
from app.core.hashing import conversation_id, conversation_text_path, turn_audio_path
from app.core.metrics import CacheMetrics
from app.schemas.conversation import Conversation, TurnAudioResult, utc_now_iso
from .blob_cache import JSON_CONTENT_TYPE, MP3_CONTENT_TYPE, BlobCache
from .tts_base import SpeechSynthesizer, synthesize_with_timeout

logger = logging.getLogger("uvicorn.error")


class TurnAudioSynthesizer:
    """Idempotent per-turn audio generation backed by the blob cache"""

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

    @property
    def default_voice(self) -> str:
        return self.synthesizer.default_voice

    async def generate_turn_audio(
        self,
        word_id: str,
        turn_index: int,
        text: str,
        voice: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> TurnAudioResult:
        """
        Return the audio URL for one turn, synthesizing it if needed

        Raises:
        - ConversationNotFoundError: No conversation for word_id
        - TurnNotFoundError: turn_index out of range
        - InfrastructureError: Cache lookup failed or the stored record is malformed
        - SynthesisError / SynthesisTimeout: Speech provider failed or timed out
        """
        voice = voice or self.default_voice
        record_path = conversation_text_path(word_id)
        convo_id = conversation_id(word_id)

        conversation = await self._load_conversation(record_path, word_id)
        if turn_index < 0 or turn_index >= len(conversation.turns):
            raise TurnNotFoundError(
                f"Turn {turn_index} not found in conversation {convo_id} ({len(conversation.turns)} turns)"
            )
        turn = conversation.turns[turn_index]

        if turn.audioUrl.strip():
            self.metrics.record_hit()
            logger.info("[audio] turn %d of %s already has audio", turn_index, convo_id)
            return TurnAudioResult(
                conversationId=convo_id,
                turnIndex=turn_index,
                audioUrl=turn.audioUrl,
                voice=voice,
                cached=True,
                generatedAt=utc_now_iso(),
            )

        text = text if text and text.strip() else turn.chinese
        audio_path = turn_audio_path(word_id, turn_index, text)

        if await self.cache.exists(audio_path):
            # Left behind by an earlier request whose record update did not land
            self.metrics.record_hit()
            logger.info("[audio] audio blob already present, repairing record: %s", audio_path)
        else:
            self.metrics.record_miss()
            logger.info("[audio] cache miss: %s", audio_path)
            audio = await synthesize_with_timeout(
                self.synthesizer, text, voice, timeout if timeout is not None else self.timeout_sec
            )
            await self.cache.write(audio_path, audio, MP3_CONTENT_TYPE)
            logger.info("[audio] cached %d bytes: %s", len(audio), audio_path)

        audio_url = self.cache.public_url(audio_path)
        turn.audioUrl = audio_url

        try:
            await self.cache.write(record_path, conversation.to_json_bytes(), JSON_CONTENT_TYPE)
        except InfrastructureError as e:
            # The audio itself is stored; the next request repairs the record
            logger.error("[audio] failed to update %s with turn %d audio: %s", record_path, turn_index, e)

        return TurnAudioResult(
            conversationId=convo_id,
            turnIndex=turn_index,
            audioUrl=audio_url,
            voice=voice,
            cached=False,
            generatedAt=utc_now_iso(),
        )

    async def _load_conversation(self, path: str, word_id: str) -> Conversation:
        if not await self.cache.exists(path):
            raise ConversationNotFoundError(
                f"Conversation not found for wordId: {word_id}. Generate text before audio."
            )
        data = await self.cache.read(path)
        try:
            return Conversation.from_json_bytes(data)
        except ValidationError as e:
            raise InfrastructureError(f"Stored conversation at {path} is malformed") from e
