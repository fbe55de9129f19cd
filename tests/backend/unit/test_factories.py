"""
Unit tests for provider and storage factories.
Tests provider selection, config pass-through and unknown-name handling.
"""
import pytest
from unittest.mock import patch

from app.config import Settings
from app.services.storage_factory import get_blob_store
from app.services.storage_gcs import GCSBlobStore
from app.services.storage_local import LocalBlobStore
from app.services.text_factory import get_text_generator
from app.services.text_gemini import GeminiTextGenerator
from app.services.text_openai import OpenAITextGenerator
from app.services.tts_elevenlabs import ElevenLabsSpeechSynthesizer
from app.services.tts_factory import get_speech_synthesizer
from app.services.tts_google import GoogleSpeechSynthesizer


class TestTextFactory:
    """Tests for get_text_generator."""

    def test_gemini_built_from_config(self):
        config = Settings(gemini_api_key="g-key", gemini_api_base="https://gemini.test/", gemini_model="gemini-x")
        generator = get_text_generator("gemini", config=config)
        assert isinstance(generator, GeminiTextGenerator)
        assert generator.api_key == "g-key"
        assert generator.api_base == "https://gemini.test"
        assert generator.default_model == "gemini-x"

    def test_openai_case_insensitive(self):
        config = Settings(openai_api_key="o-key", gpt_model="gpt-x")
        generator = get_text_generator("OpenAI", config=config)
        assert isinstance(generator, OpenAITextGenerator)
        assert generator.api_key == "o-key"
        assert generator.default_model == "gpt-x"

    def test_provider_name_from_config(self):
        generator = get_text_generator(config=Settings(text_provider="openai", openai_api_key=None))
        assert isinstance(generator, OpenAITextGenerator)
        assert generator.is_available() is False

    def test_defaults_to_app_settings(self):
        with patch('app.services.text_factory.settings', Settings(text_provider="gemini", gemini_api_key="env-key")):
            generator = get_text_generator()
        assert generator.api_key == "env-key"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown text provider"):
            get_text_generator("claude")


class TestTTSFactory:
    """Tests for get_speech_synthesizer."""

    def test_google_built_from_config(self):
        config = Settings(google_tts_credentials_raw=None, tts_language_code="cmn-TW", default_voice="cmn-TW-Wavenet-A")
        synthesizer = get_speech_synthesizer("google", config=config)
        assert isinstance(synthesizer, GoogleSpeechSynthesizer)
        assert synthesizer.language_code == "cmn-TW"
        assert synthesizer.default_voice == "cmn-TW-Wavenet-A"
        assert synthesizer.credentials_raw is None

    def test_elevenlabs_built_from_config(self):
        config = Settings(eleven_api_key="e-key", eleven_voice_id="voice-x")
        synthesizer = get_speech_synthesizer("elevenlabs", config=config)
        assert isinstance(synthesizer, ElevenLabsSpeechSynthesizer)
        assert synthesizer.api_key == "e-key"
        assert synthesizer.default_voice == "voice-x"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown TTS provider"):
            get_speech_synthesizer("melo")


class TestBlobStoreFactory:
    """Tests for get_blob_store."""

    def test_gcs(self):
        config = Settings(gcs_bucket_name="my-bucket", gcs_credentials_raw=None)
        store = get_blob_store("gcs", config=config)
        assert isinstance(store, GCSBlobStore)
        assert store.bucket_name == "my-bucket"

    def test_local(self, tmp_path):
        config = Settings(blob_backend="local", local_blob_dir=str(tmp_path), local_blob_base_url="http://cdn.test/b")
        store = get_blob_store(config=config)
        assert isinstance(store, LocalBlobStore)
        assert store.root == tmp_path.resolve()
        assert store.public_url("a.json") == "http://cdn.test/b/a.json"

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown blob backend"):
            get_blob_store("s3")
