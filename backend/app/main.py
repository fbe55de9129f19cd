# app/main.py
import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.api.v1.routers import cache, conversation, tts

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Local blob backend: serve cached audio so public URLs resolve during development
if settings.blob_backend.lower() == "local":
    _blob_dir = Path(settings.local_blob_dir)
    _blob_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/blobs", StaticFiles(directory=_blob_dir), name="blobs")

@app.on_event("startup")
async def on_startup():
    logger.info(
        "[startup] text=%s tts=%s blob=%s generatorVersion=%s",
        settings.text_provider, settings.tts_provider, settings.blob_backend, settings.generator_version,
    )
    if settings.blob_backend.lower() == "gcs" and not settings.gcs_bucket_name:
        logger.warning("[startup] BLOB_BACKEND=gcs but GCS_BUCKET_NAME is not set; cache calls will fail")

# REST
app.include_router(conversation.router, prefix="/api/v1")
app.include_router(cache.router, prefix="/api/v1")
app.include_router(tts.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "textProvider": settings.text_provider,
        "ttsProvider": settings.tts_provider,
        "blobBackend": settings.blob_backend,
    }
