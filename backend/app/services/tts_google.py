"""
Google Cloud Text-to-Speech

Mandarin (cmn-CN) MP3 synthesis through the async TTS client.
"""
import json
import logging
from typing import Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud import texttospeech
from google.oauth2 import service_account

from app.core.errors import SynthesisError
from .tts_base import SpeechSynthesizer

logger = logging.getLogger("uvicorn.error")


DEFAULT_LANGUAGE_CODE = "cmn-CN"
DEFAULT_VOICE = "cmn-CN-Wavenet-B"


class GoogleSpeechSynthesizer(SpeechSynthesizer):
    """Google Cloud TTS client wrapper"""

    def __init__(
        self,
        credentials_raw: Optional[str] = None,
        language_code: str = DEFAULT_LANGUAGE_CODE,
        voice: str = DEFAULT_VOICE,
    ):
        self.credentials_raw = credentials_raw
        self.language_code = language_code or DEFAULT_LANGUAGE_CODE
        self.voice = voice or DEFAULT_VOICE
        self._client = None

    @property
    def name(self) -> str:
        return "Google Cloud TTS"

    @property
    def default_voice(self) -> str:
        return self.voice

    def is_available(self) -> bool:
        # Application default credentials also work, so an unset key is not fatal
        return True

    def _get_client(self) -> texttospeech.TextToSpeechAsyncClient:
        if self._client is not None:
            return self._client
        if self.credentials_raw:
            try:
                info = json.loads(self.credentials_raw)
            except ValueError as e:
                raise SynthesisError(f"{self.name}: credentials are not valid JSON") from e
            credentials = service_account.Credentials.from_service_account_info(info)
            self._client = texttospeech.TextToSpeechAsyncClient(credentials=credentials)
        else:
            self._client = texttospeech.TextToSpeechAsyncClient()
        return self._client

    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        client = self._get_client()

        synthesis_input = texttospeech.SynthesisInput(text=text)
        voice_params = texttospeech.VoiceSelectionParams(
            language_code=self.language_code,
            name=voice or self.voice,
        )
        audio_config = texttospeech.AudioConfig(
            audio_encoding=texttospeech.AudioEncoding.MP3,
        )

        logger.info("[tts:google] Synthesizing %d chars with voice=%s", len(text), voice_params.name)
        try:
            response = await client.synthesize_speech(
                input=synthesis_input,
                voice=voice_params,
                audio_config=audio_config,
            )
        except GoogleAPIError as e:
            raise SynthesisError(f"{self.name} failed: {e}") from e

        logger.info("[tts:google] %d chars -> %d bytes audio", len(text), len(response.audio_content))
        return response.audio_content
