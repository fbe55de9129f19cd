# app/core/hashing.py
"""
Cache key derivation.

Conversation keys are truncated SHA-256 hex digests. Only the wordId feeds the conversation
key: the audio endpoint has no generator version to go on and must find the
same record as the text endpoint.
"""
import hashlib

KEY_LENGTH = 16  # hex chars kept from the SHA-256 digest

CONVERSATION_TEXT_PATH = "convo/{word_id}/{hash}.json"
TURN_AUDIO_PATH = "convo/{word_id}/{hash}-turn{turn_number}-{turn_hash}.mp3"
SPEECH_AUDIO_PATH = "tts/{hash}.mp3"


def _short_sha256(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:KEY_LENGTH]


def derive_key(word_id: str) -> str:
    """Deterministic short hash of a wordId."""
    return _short_sha256(word_id)


def turn_text_hash(text: str) -> str:
    """Content hash of the exact text of one turn."""
    return _short_sha256(text)


def conversation_id(word_id: str) -> str:
    return f"{word_id}-{derive_key(word_id)}"


def conversation_text_path(word_id: str) -> str:
    return CONVERSATION_TEXT_PATH.format(word_id=word_id, hash=derive_key(word_id))


def turn_audio_path(word_id: str, turn_index: int, text: str) -> str:
    # turn numbers in paths are 1-based
    return TURN_AUDIO_PATH.format(
        word_id=word_id,
        hash=derive_key(word_id),
        turn_number=turn_index + 1,
        turn_hash=turn_text_hash(text),
    )


def speech_hash(text: str, voice: str = "") -> str:
    """MD5 of text + voice, the key format used by existing tts/ objects."""
    return hashlib.md5(f"{text}{voice}".encode("utf-8")).hexdigest()


def speech_audio_path(text: str, voice: str = "") -> str:
    return SPEECH_AUDIO_PATH.format(hash=speech_hash(text, voice))
