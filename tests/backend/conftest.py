import asyncio

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.v1.deps import get_orchestrator
from app.main import app
from app.services.blob_cache import BlobCache
from app.services.conversation_generator import ConversationGenerator
from app.services.orchestrator import ConversationOrchestrator
from app.services.speech_audio import SpeechAudioService
from app.services.storage_base import BlobStore
from app.services.text_base import GenerationOptions, TextGenerator
from app.services.tts_base import SpeechSynthesizer
from app.services.turn_audio import TurnAudioSynthesizer


SCENARIO_RESPONSE = (
    "A: 你好！ | Nǐ hǎo! | Hello!\n"
    "B: 你好，很高兴认识你。 | Nǐ hǎo, hěn gāoxìng rènshi nǐ. | Hello, nice to meet you.\n"
    "A: 我也很高兴认识你。 | Wǒ yě hěn gāoxìng rènshi nǐ. | Nice to meet you too."
)

FAKE_MP3 = b"ID3\x03\x00fake-mp3-bytes"


class FakeBlobStore(BlobStore):
    """
    In-memory blob store.
    Paths listed in fail_uploads raise on upload, to simulate storage outages.
    """

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_uploads: set[str] = set()
        self.fail_exists = False
        self.uploads: list[str] = []

    @property
    def name(self) -> str:
        return "Fake store"

    async def exists(self, path: str) -> bool:
        if self.fail_exists:
            raise ConnectionError("store unreachable")
        return path in self.objects

    async def download(self, path: str) -> bytes:
        return self.objects[path][0]

    async def upload(self, path: str, data: bytes, content_type: str) -> None:
        if path in self.fail_uploads:
            raise ConnectionError(f"upload to {path} failed")
        self.uploads.append(path)
        self.objects[path] = (data, content_type)

    def public_url(self, path: str) -> str:
        return f"https://blobs.test/{path}"


class FakeTextGenerator(TextGenerator):
    """Returns a fixed response (or raises) and records prompts"""

    def __init__(self, response: str = SCENARIO_RESPONSE):
        self.response = response
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.calls: list[tuple[str, GenerationOptions]] = []

    @property
    def name(self) -> str:
        return "Fake text"

    @property
    def default_model(self) -> str:
        return "fake-model"

    def is_available(self) -> bool:
        return True

    async def generate_text(self, prompt: str, options: GenerationOptions) -> str:
        self.calls.append((prompt, options))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


class FakeSpeechSynthesizer(SpeechSynthesizer):
    """Returns fixed MP3 bytes (or raises) and records requests"""

    def __init__(self):
        self.error: Exception | None = None
        self.delay: float = 0.0
        self.calls: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "Fake TTS"

    @property
    def default_voice(self) -> str:
        return "fake-voice"

    def is_available(self) -> bool:
        return True

    async def synthesize_speech(self, text: str, voice: str) -> bytes:
        self.calls.append((text, voice))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return FAKE_MP3


@pytest.fixture
def scenario_response():
    """Well-formed three turn response for the word 你好"""
    return SCENARIO_RESPONSE


@pytest.fixture
def fake_mp3():
    return FAKE_MP3


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def text_generator():
    return FakeTextGenerator()


@pytest.fixture
def speech_synthesizer():
    return FakeSpeechSynthesizer()


@pytest.fixture
def conversation_generator(blob_store, text_generator):
    return ConversationGenerator(
        cache=BlobCache(blob_store),
        text_generator=text_generator,
        options=GenerationOptions(model="fake-model", temperature=0.7, max_tokens=1000),
        timeout_sec=5,
    )


@pytest.fixture
def turn_audio(blob_store, speech_synthesizer):
    return TurnAudioSynthesizer(
        cache=BlobCache(blob_store),
        synthesizer=speech_synthesizer,
        timeout_sec=5,
    )


@pytest.fixture
def speech_audio(blob_store, speech_synthesizer):
    return SpeechAudioService(
        cache=BlobCache(blob_store),
        synthesizer=speech_synthesizer,
        timeout_sec=5,
    )


@pytest.fixture
def orchestrator(conversation_generator, turn_audio, speech_audio):
    return ConversationOrchestrator(
        conversation_generator,
        turn_audio,
        speech_audio,
        default_generator_version="v1",
        max_speech_words=15,
    )


@pytest_asyncio.fixture
async def client(orchestrator):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app, with the pipeline
    wired to in-memory fakes.
    """
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
