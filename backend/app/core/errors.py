# app/core/errors.py
"""
Error taxonomy for the conversation pipeline.

Services raise these typed errors; the HTTP layer maps them to status codes.
Parsing anomalies never show up here: malformed model output is recovered
locally by dropping lines and substituting the fallback conversation.
"""


class ConversationServiceError(Exception):
    """Base class for all pipeline errors."""


class InfrastructureError(ConversationServiceError):
    """Blob store unreachable, misconfigured, or returned unusable data."""


class ProviderError(ConversationServiceError):
    """An upstream text-generation or speech-synthesis call failed."""


class GenerationError(ProviderError):
    """Text generation failed."""


class GenerationTimeout(GenerationError):
    """Text generation did not finish within the timeout."""


class SynthesisError(ProviderError):
    """Speech synthesis failed."""


class SynthesisTimeout(SynthesisError):
    """Speech synthesis did not finish within the timeout."""


class NotFoundError(ConversationServiceError):
    """Referenced conversation or turn does not exist."""


class InvalidRequestError(ConversationServiceError):
    """Request parameters are missing or malformed."""


class ConversationNotFoundError(NotFoundError):
    """No stored conversation for the requested wordId."""


class TurnNotFoundError(NotFoundError):
    """turnIndex is outside the stored conversation's turns."""
