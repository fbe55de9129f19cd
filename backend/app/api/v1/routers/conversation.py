"""
Conversation HTTP API Router

Text and per-turn audio generation for vocabulary words.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.v1.deps import get_orchestrator
from app.api.v1.errors import VALIDATION_ERROR, to_http_error
from app.core.errors import ConversationServiceError
from app.schemas.conversation import ConversationRequestIn, ConversationTextIn, TurnAudioIn
from app.services.orchestrator import ConversationOrchestrator

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["conversation"])


async def _generate_text(orchestrator: ConversationOrchestrator, word_id, word, generator_version) -> dict:
    try:
        data = await orchestrator.generate_conversation_text(word_id, word, generator_version)
    except ConversationServiceError as e:
        logger.warning("[api] text generation failed for wordId=%s: %r", word_id, e)
        raise to_http_error(e) from e
    return {"success": True, "data": data}


async def _generate_audio(orchestrator: ConversationOrchestrator, word_id, turn_index, text, voice) -> dict:
    try:
        data = await orchestrator.generate_turn_audio(word_id, turn_index, text, voice)
    except ConversationServiceError as e:
        logger.warning("[api] audio generation failed for wordId=%s turn=%s: %r", word_id, turn_index, e)
        raise to_http_error(e) from e
    return {"success": True, "data": data}


@router.post("/mandarin/conversation/text/generate", response_model=dict)
async def generate_conversation_text(
    body: ConversationTextIn,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Generate (or fetch from cache) the example conversation for a word.

    Args:
        body: wordId, word and optional generatorVersion

    Returns:
        dict: {"success": True, "data": conversation + "_metadata"}

    Raises:
        HTTPException (400): Missing or malformed wordId/word
        HTTPException (502/504): Text provider failed or timed out
        HTTPException (503): Blob cache unavailable
    """
    return await _generate_text(orchestrator, body.wordId, body.word, body.generatorVersion)


@router.post("/mandarin/conversation/audio/generate", response_model=dict)
async def generate_turn_audio(
    body: TurnAudioIn,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Generate (or reuse) audio for one turn of a previously generated conversation.

    Args:
        body: wordId, turnIndex, text and optional voice

    Returns:
        dict: {"success": True, "data": {conversationId, turnIndex, audioUrl, voice, cached, generatedAt}}

    Raises:
        HTTPException (400): Missing or malformed parameters
        HTTPException (404): Conversation not generated yet, or turnIndex out of range
        HTTPException (502/504): TTS provider failed or timed out
        HTTPException (503): Blob cache unavailable
    """
    if not body.text or not body.text.strip():
        logger.warning("[api] audio request rejected: text is empty (wordId=%s)", body.wordId)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=VALIDATION_ERROR)
    return await _generate_audio(orchestrator, body.wordId, body.turnIndex, body.text, body.voice)


@router.post("/conversation", response_model=dict)
async def conversation(
    body: ConversationRequestIn,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
):
    """
    Unified endpoint routed on body.type:
    - "text": same as /mandarin/conversation/text/generate
    - "audio": same as /mandarin/conversation/audio/generate
    """
    if body.type == "text":
        return await _generate_text(orchestrator, body.wordId, body.word, body.generatorVersion)
    if body.type == "audio":
        if not body.text or not body.text.strip():
            logger.warning("[api] audio request rejected: text is empty (wordId=%s)", body.wordId)
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=VALIDATION_ERROR)
        return await _generate_audio(orchestrator, body.wordId, body.turnIndex, body.text, body.voice)
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="INVALID_TYPE")
