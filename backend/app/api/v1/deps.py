# app/api/v1/deps.py
from functools import lru_cache

from app.services.orchestrator import ConversationOrchestrator, build_orchestrator


@lru_cache(maxsize=1)
def get_orchestrator() -> ConversationOrchestrator:
    """
    FastAPI dependency providing the conversation pipeline.

    The orchestrator and its provider clients are built on first use from
    app.config.settings and reused for the life of the process.

    Usage:
        @router.post("/generate")
        async def generate(orchestrator: ConversationOrchestrator = Depends(get_orchestrator)):
            ...

    Tests replace it through app.dependency_overrides[get_orchestrator].
    """
    return build_orchestrator()
