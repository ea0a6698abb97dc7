from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List

class Settings(BaseSettings):
    # App
    APP_NAME: str = "Receipt OCR Service"
    VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = True

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]
    MAX_UPLOAD_MB: int = 10

    # Rate limiting (slowapi storage URI, e.g. redis://localhost:6379/0)
    RATE_LIMIT: str = "60/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024

    class Config:
        env_file = ".env"
        extra = "ignore" # Allow extra fields in env file

@lru_cache()
def get_settings():
    return Settings()
