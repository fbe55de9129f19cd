from fastapi import APIRouter, Depends

from app.api.v1.deps import get_orchestrator
from app.services.orchestrator import ConversationOrchestrator

router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/metrics", response_model=dict)
async def cache_metrics(orchestrator: ConversationOrchestrator = Depends(get_orchestrator)):
    """
    Cache hit/miss counters since process start.

    Returns:
        dict: {"success": True, "data": {"services": {...}, "overall": {hits, misses, total, hitRate}}}
    """
    return {"success": True, "data": orchestrator.cache_metrics()}
