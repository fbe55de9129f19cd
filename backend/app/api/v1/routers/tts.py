"""
Standalone Text-to-Speech Router

Cache-first audio for short phrases, independent of any conversation.
"""
import logging

from fastapi import APIRouter, Depends

from app.api.v1.deps import get_orchestrator
from app.api.v1.errors import to_http_error
from app.core.errors import ConversationServiceError
from app.schemas.tts import SpeechAudioIn
from app.services.orchestrator import ConversationOrchestrator

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/tts", tags=["tts"])


@router.post("", response_model=dict)
async def synthesize(
    body: SpeechAudioIn,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Return a public MP3 URL for text, synthesizing it on first request.

    Args:
        body: text (1-15 words by default) and optional voice

    Returns:
        dict: {"success": True, "data": {audioUrl, voice, cached}}

    Raises:
        HTTPException (400): Blank text or too many words
        HTTPException (502/504): TTS provider failed or timed out
        HTTPException (503): Blob cache unavailable
    """
    try:
        data = await orchestrator.generate_speech_audio(body.text, body.voice)
    except ConversationServiceError as e:
        logger.warning("[api] tts failed: %r", e)
        raise to_http_error(e) from e
    return {"success": True, "data": data}
