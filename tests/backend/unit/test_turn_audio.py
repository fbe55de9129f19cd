"""
Unit tests for services.turn_audio module.
Tests idempotent synthesis, record repair, and lookup failures.
"""
import pytest

from app.core.errors import (
    ConversationNotFoundError,
    InfrastructureError,
    SynthesisError,
    SynthesisTimeout,
    TurnNotFoundError,
)
from app.core.hashing import conversation_text_path, turn_audio_path
from app.schemas.conversation import Conversation


async def _stored_conversation(conversation_generator, word_id="w1", word="你好"):
    return await conversation_generator.generate_text(word_id, word, "v1")


def _read_record(blob_store, word_id="w1") -> Conversation:
    return Conversation.from_json_bytes(blob_store.objects[conversation_text_path(word_id)][0])


class TestSynthesis:
    """Tests for first-time synthesis."""

    @pytest.mark.asyncio
    async def test_synthesizes_and_updates_record(
        self, conversation_generator, turn_audio, blob_store, speech_synthesizer, fake_mp3
    ):
        await _stored_conversation(conversation_generator)

        result = await turn_audio.generate_turn_audio("w1", 0, "你好！")

        audio_path = turn_audio_path("w1", 0, "你好！")
        assert result.cached is False
        assert result.turnIndex == 0
        assert result.voice == "fake-voice"
        assert result.audioUrl == f"https://blobs.test/{audio_path}"
        assert blob_store.objects[audio_path] == (fake_mp3, "audio/mpeg")
        assert speech_synthesizer.calls == [("你好！", "fake-voice")]

        record = _read_record(blob_store)
        assert record.turns[0].audioUrl == result.audioUrl
        assert record.turns[1].audioUrl == ""

    @pytest.mark.asyncio
    async def test_explicit_voice_used(self, conversation_generator, turn_audio, speech_synthesizer):
        await _stored_conversation(conversation_generator)
        result = await turn_audio.generate_turn_audio("w1", 1, "你好，很高兴认识你。", voice="cmn-CN-Wavenet-A")
        assert result.voice == "cmn-CN-Wavenet-A"
        assert speech_synthesizer.calls[0][1] == "cmn-CN-Wavenet-A"

    @pytest.mark.asyncio
    async def test_blank_text_falls_back_to_turn_text(self, conversation_generator, turn_audio, speech_synthesizer):
        await _stored_conversation(conversation_generator)
        await turn_audio.generate_turn_audio("w1", 2, "   ")
        assert speech_synthesizer.calls[0][0] == "我也很高兴认识你。"


class TestIdempotence:
    """Tests for at-most-once synthesis per turn."""

    @pytest.mark.asyncio
    async def test_second_request_is_cached(self, conversation_generator, turn_audio, speech_synthesizer):
        await _stored_conversation(conversation_generator)

        first = await turn_audio.generate_turn_audio("w1", 0, "你好！")
        second = await turn_audio.generate_turn_audio("w1", 0, "你好！")

        assert second.cached is True
        assert second.audioUrl == first.audioUrl
        assert len(speech_synthesizer.calls) == 1
        snapshot = turn_audio.metrics.snapshot()
        assert snapshot["hits"] == 1
        assert snapshot["misses"] == 1

    @pytest.mark.asyncio
    async def test_audio_persists_across_text_cache_hit(self, conversation_generator, turn_audio):
        """The text endpoint returns the updated record after audio generation."""
        await _stored_conversation(conversation_generator)
        result = await turn_audio.generate_turn_audio("w1", 0, "你好！")

        convo = await conversation_generator.generate_text("w1", "你好", "v1")
        assert convo.turns[0].audioUrl == result.audioUrl

    @pytest.mark.asyncio
    async def test_failed_record_update_repaired_without_resynthesis(
        self, conversation_generator, turn_audio, blob_store, speech_synthesizer
    ):
        await _stored_conversation(conversation_generator)
        record_path = conversation_text_path("w1")

        blob_store.fail_uploads.add(record_path)
        first = await turn_audio.generate_turn_audio("w1", 0, "你好！")
        assert first.cached is False
        assert _read_record(blob_store).turns[0].audioUrl == ""

        blob_store.fail_uploads.discard(record_path)
        second = await turn_audio.generate_turn_audio("w1", 0, "你好！")

        assert second.cached is False
        assert second.audioUrl == first.audioUrl
        assert len(speech_synthesizer.calls) == 1
        assert _read_record(blob_store).turns[0].audioUrl == first.audioUrl


class TestLookupFailures:
    """Tests for missing records and invalid turns."""

    @pytest.mark.asyncio
    async def test_missing_conversation(self, turn_audio, speech_synthesizer):
        with pytest.raises(ConversationNotFoundError, match="w1"):
            await turn_audio.generate_turn_audio("w1", 0, "你好！")
        assert speech_synthesizer.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("turn_index", [3, 10, -1])
    async def test_turn_index_out_of_range(self, conversation_generator, turn_audio, speech_synthesizer, turn_index):
        await _stored_conversation(conversation_generator)
        with pytest.raises(TurnNotFoundError):
            await turn_audio.generate_turn_audio("w1", turn_index, "你好！")
        assert speech_synthesizer.calls == []

    @pytest.mark.asyncio
    async def test_malformed_record(self, turn_audio, blob_store):
        blob_store.objects[conversation_text_path("w1")] = (b"[]", "application/json")
        with pytest.raises(InfrastructureError):
            await turn_audio.generate_turn_audio("w1", 0, "你好！")


class TestProviderFailures:
    """Tests for synthesizer errors and timeouts."""

    @pytest.mark.asyncio
    async def test_timeout(self, conversation_generator, turn_audio, speech_synthesizer, blob_store):
        await _stored_conversation(conversation_generator)
        uploads_before = list(blob_store.uploads)
        speech_synthesizer.delay = 1.0

        with pytest.raises(SynthesisTimeout):
            await turn_audio.generate_turn_audio("w1", 0, "你好！", timeout=0.05)

        assert blob_store.uploads == uploads_before
        assert _read_record(blob_store).turns[0].audioUrl == ""

    @pytest.mark.asyncio
    async def test_provider_error(self, conversation_generator, turn_audio, speech_synthesizer):
        await _stored_conversation(conversation_generator)
        speech_synthesizer.error = SynthesisError("voice not found")
        with pytest.raises(SynthesisError, match="voice not found"):
            await turn_audio.generate_turn_audio("w1", 0, "你好！")

    @pytest.mark.asyncio
    async def test_unexpected_error_wrapped(self, conversation_generator, turn_audio, speech_synthesizer):
        await _stored_conversation(conversation_generator)
        speech_synthesizer.error = ValueError("bad bytes")
        with pytest.raises(SynthesisError) as exc_info:
            await turn_audio.generate_turn_audio("w1", 0, "你好！")
        assert not isinstance(exc_info.value, SynthesisTimeout)

    @pytest.mark.asyncio
    async def test_audio_write_failure(self, conversation_generator, turn_audio, blob_store):
        await _stored_conversation(conversation_generator)
        blob_store.fail_uploads.add(turn_audio_path("w1", 0, "你好！"))
        with pytest.raises(InfrastructureError):
            await turn_audio.generate_turn_audio("w1", 0, "你好！")
        assert _read_record(blob_store).turns[0].audioUrl == ""
