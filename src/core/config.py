from datetime import date
from pathlib import Path
from typing import List, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Daily Photo Gallery"
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"

    # Storage
    STORAGE_TYPE: str = "local"
    MEDIA_ROOT: str = "public/uploads"
    MEDIA_URL: str = "/uploads"
    METADATA_FILE: str = "metadata.json"  # relative to MEDIA_ROOT unless absolute

    # Calendar
    TIMEZONE: str = "America/Los_Angeles"
    TODAY_OVERRIDE: Optional[date] = None

    # Upload
    MAX_UPLOAD_SIZE: int = 10 * 1024 * 1024
    ALLOW_FUTURE_DATES: bool = False
    EXTRACT_EXIF: bool = True

    CORS_ORIGINS: List[str] = ["*"]

    class Config:
        env_file = ".env"

    @property
    def metadata_path(self) -> Path:
        path = Path(self.METADATA_FILE)
        if path.is_absolute():
            return path
        return Path(self.MEDIA_ROOT) / path


configs = Settings()
