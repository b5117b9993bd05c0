# carepulse/core/config.py
import os
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict
from typing import List
from functools import lru_cache
from zoneinfo import ZoneInfo

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "CarePulse Clinic API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = int(os.environ.get("PORT", 8000))

    # Database Settings
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "sqlite:///./carepulse.db")

    # CORS Settings (comma-separated to avoid JSON parsing in env)
    ALLOWED_ORIGINS: str = os.environ.get("ALLOWED_ORIGINS", "http://localhost:3000")
    CORS_ALLOW_CREDENTIALS: bool = True

    # Middleware settings
    MAX_REQUEST_SIZE: int = 1 * 1024 * 1024  # 1MB, JSON bodies only
    GZIP_MIN_SIZE: int = 500

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 120

    # Clinic Settings
    CLINIC_TIMEZONE: str = "Asia/Singapore"
    OPENING_HOUR: int = 9
    CLOSING_HOUR: int = 18
    ENFORCE_STATUS_TRANSITIONS: bool = False

    # Demo data
    SEED_ON_STARTUP: bool = False

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)

    @property
    def clinic_tz(self) -> ZoneInfo:
        return ZoneInfo(self.CLINIC_TIMEZONE)

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings: Settings = get_settings()
