# app/schemas/conversation.py
"""
Pydantic schemas for generated conversations and turn audio.
The same models validate cached JSON blobs read back from the blob store,
so a malformed cache entry is rejected at the deserialization boundary.
"""
import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

MIN_TURNS = 3
MAX_TURNS = 5

Speaker = Literal["A", "B"]


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with a trailing Z"""
    return dt.datetime.now(dt.timezone.utc).isoformat().replace("+00:00", "Z")


class ConversationTurn(BaseModel):
    """
    One utterance in a generated dialogue.
    audioUrl stays empty until audio has been synthesized for this turn.
    """
    speaker: Speaker  # Speaker label ("A" or "B")
    chinese: str = Field(min_length=1)  # Mandarin text
    pinyin: str = ""  # Romanization (may be empty)
    english: str = ""  # English translation (may be empty)
    audioUrl: str = ""  # Public URL of synthesized audio ("" until generated)


class Conversation(BaseModel):
    """
    Generated dialogue for one vocabulary word, stored as JSON in the blob cache.
    """
    id: str  # "{wordId}-{hash}"
    wordId: str  # Vocabulary item this conversation illustrates
    word: str  # Literal target-language word/phrase
    generatorVersion: str  # Generation logic tag recorded at creation time
    prompt: Optional[str] = None  # Prompt sent to the text generator
    turns: List[ConversationTurn] = Field(min_length=MIN_TURNS, max_length=MAX_TURNS)
    generatedAt: str  # Creation timestamp (ISO format), never updated afterwards

    def to_json_bytes(self) -> bytes:
        return self.model_dump_json().encode("utf-8")

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "Conversation":
        """Raises pydantic.ValidationError on malformed JSON or wrong shape"""
        return cls.model_validate_json(data)


class TurnAudioResult(BaseModel):
    """Response model for per-turn audio generation"""
    conversationId: str
    turnIndex: int
    audioUrl: str
    voice: str
    cached: bool  # True when the turn already had an audioUrl
    generatedAt: str  # Time of this response (ISO format)


class ConversationTextIn(BaseModel):
    """Request model for conversation text generation"""
    wordId: str
    word: str
    generatorVersion: Optional[str] = None


class TurnAudioIn(BaseModel):
    """Request model for turn audio generation"""
    wordId: str
    turnIndex: int
    text: str
    voice: Optional[str] = None


class ConversationRequestIn(BaseModel):
    """
    Request model for the unified endpoint.
    type selects text or audio generation; the other fields follow
    ConversationTextIn / TurnAudioIn.
    """
    type: Optional[str] = None
    wordId: Optional[str] = None
    word: Optional[str] = None
    generatorVersion: Optional[str] = None
    turnIndex: Optional[int] = None
    text: Optional[str] = None
    voice: Optional[str] = None
