from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./entrepreneur_x.db"

    # Security
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Hugging Face (speech synthesis / recognition)
    HUGGINGFACEHUB_API_TOKEN: Optional[str] = None
    TTS_MODEL: str = "espnet/kan-bayashi_ljspeech_vits"
    ASR_MODEL: str = "openai/whisper-large-v3"

    # Scoring - set to make evaluations reproducible
    SCORING_SEED: Optional[int] = None

    # File Storage
    UPLOAD_DIRECTORY: str = "uploads"
    REPORT_DIRECTORY: str = "reports"
    MAX_AUDIO_SIZE: int = 10 * 1024 * 1024  # 10MB
    ALLOWED_AUDIO_TYPES: List[str] = ["wav", "mp3", "webm", "ogg", "flac"]

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://localhost:8080"
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()

# Input limits shared by the services
LOCATION_MAX_LENGTH = 200
GOALS_MAX_LENGTH = 5000
RESPONSE_MAX_LENGTH = 10000
FEEDBACK_MAX_LENGTH = 5000
EVALUATION_MIN_LENGTH = 20
