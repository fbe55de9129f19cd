"""
Services Module

Conversation pipeline and interfaces for external services:
- Text generation: Google Gemini / OpenAI GPT
- TTS (Text-to-Speech, per turn and standalone): Google Cloud TTS / ElevenLabs
- Blob storage: Google Cloud Storage / local filesystem

Provider adapters are imported lazily by the factories, so a missing SDK for an
unused provider does not break imports.
"""

# Interfaces
from .storage_base import BlobStore
from .text_base import GenerationOptions, TextGenerator
from .tts_base import SpeechSynthesizer

# Factories
from .storage_factory import get_blob_store
from .text_factory import get_text_generator
from .tts_factory import get_speech_synthesizer

# Pipeline
from .blob_cache import BlobCache
from .conversation_parser import ParseOutcome, parse_conversation_text
from .conversation_generator import ConversationGenerator
from .turn_audio import TurnAudioSynthesizer
from .speech_audio import SpeechAudioService
from .orchestrator import ConversationOrchestrator, build_orchestrator

__all__ = [
    # Interfaces
    "BlobStore",
    "GenerationOptions",
    "TextGenerator",
    "SpeechSynthesizer",
    # Factories
    "get_blob_store",
    "get_text_generator",
    "get_speech_synthesizer",
    # Pipeline
    "BlobCache",
    "ParseOutcome",
    "parse_conversation_text",
    "ConversationGenerator",
    "TurnAudioSynthesizer",
    "SpeechAudioService",
    "ConversationOrchestrator",
    "build_orchestrator",
]
