"""
Pipeline error to HTTP error mapping, shared by the v1 routers.

detail is always a stable code; the error message itself only goes to the
server log.
"""
from fastapi import HTTPException, status

from app.core.errors import (
    ConversationNotFoundError,
    ConversationServiceError,
    GenerationError,
    GenerationTimeout,
    InfrastructureError,
    InvalidRequestError,
    NotFoundError,
    ProviderError,
    SynthesisTimeout,
    TurnNotFoundError,
)

VALIDATION_ERROR = "VALIDATION_ERROR"


def to_http_error(e: ConversationServiceError) -> HTTPException:
    if isinstance(e, InvalidRequestError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=VALIDATION_ERROR)
    if isinstance(e, NotFoundError):
        if isinstance(e, ConversationNotFoundError):
            code = "CONVERSATION_NOT_FOUND"
        elif isinstance(e, TurnNotFoundError):
            code = "TURN_NOT_FOUND"
        else:
            code = "NOT_FOUND"
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=code)
    if isinstance(e, (GenerationTimeout, SynthesisTimeout)):
        code = "TEXT_PROVIDER_TIMEOUT" if isinstance(e, GenerationTimeout) else "TTS_PROVIDER_TIMEOUT"
        return HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=code)
    if isinstance(e, ProviderError):
        code = "TEXT_PROVIDER_FAILED" if isinstance(e, GenerationError) else "TTS_PROVIDER_FAILED"
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=code)
    if isinstance(e, InfrastructureError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="CACHE_UNAVAILABLE")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="INTERNAL_ERROR")
