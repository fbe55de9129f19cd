from typing import Optional

from pydantic import BaseModel


class SpeechAudioIn(BaseModel):
    """Request model for standalone text-to-speech"""
    text: str
    voice: Optional[str] = None


class SpeechAudioResult(BaseModel):
    """Response model for standalone text-to-speech"""
    audioUrl: str
    voice: str
    cached: bool  # True when the audio was already in the blob cache
