# app/config.py
import os
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

class Settings(BaseModel):
    # General app settings
    APP_NAME: str = "Mandarin Conversation Cache API"
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))

    # CORS origins for frontend
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Text generation ("gemini" or "openai")
    text_provider: str = os.getenv("TEXT_PROVIDER", "gemini")
    gemini_api_key: str | None = os.getenv("GEMINI_API_KEY")
    gemini_api_base: str = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash-lite")
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_api_url: str = os.getenv("OPENAI_API_URL", "https://api.openai.com/v1/chat/completions")
    gpt_model: str = os.getenv("GPT_MODEL", "gpt-4o-mini")
    text_temperature: float = float(os.getenv("TEXT_TEMPERATURE", "0.7"))
    text_max_tokens: int = int(os.getenv("TEXT_MAX_TOKENS", "1000"))
    text_timeout_sec: float = float(os.getenv("TEXT_TIMEOUT_SEC", "30"))

    # Speech synthesis ("google" or "elevenlabs")
    tts_provider: str = os.getenv("TTS_PROVIDER", "google")
    google_tts_credentials_raw: str | None = os.getenv("GOOGLE_TTS_CREDENTIALS_RAW")
    tts_language_code: str = os.getenv("TTS_LANGUAGE_CODE", "cmn-CN")
    default_voice: str = os.getenv("DEFAULT_VOICE", "cmn-CN-Wavenet-B")
    eleven_api_key: str | None = os.getenv("ELEVENLABS_API_KEY")
    eleven_api_base: str = os.getenv("ELEVENLABS_API_URL", "https://api.elevenlabs.io/v1")
    # ElevenLabs voice for Mandarin (multilingual preset)
    eleven_voice_id: str = os.getenv("ELEVENLABS_VOICE_ID", "hkfHEbBvdQFNX4uWHqRF")
    tts_timeout_sec: float = float(os.getenv("TTS_TIMEOUT_SEC", "30"))
    # Standalone /tts accepts 1 to TTS_MAX_WORDS whitespace-separated words
    tts_max_words: int = int(os.getenv("TTS_MAX_WORDS", "15"))

    # Blob cache ("gcs" or "local")
    blob_backend: str = os.getenv("BLOB_BACKEND", "gcs")
    gcs_bucket_name: str | None = os.getenv("GCS_BUCKET_NAME")
    # Falls back to the TTS service account when no dedicated storage credentials are set
    gcs_credentials_raw: str | None = os.getenv("GCS_CREDENTIALS_RAW") or os.getenv("GOOGLE_TTS_CREDENTIALS_RAW")
    local_blob_dir: str = os.getenv("LOCAL_BLOB_DIR", "./.blob_cache")
    local_blob_base_url: str = os.getenv("LOCAL_BLOB_BASE_URL", "http://localhost:8000/blobs")

    # Stored in each conversation record; does not take part in the cache key
    generator_version: str = os.getenv("GENERATOR_VERSION", "v1")

settings = Settings()  # Instantiate configuration
