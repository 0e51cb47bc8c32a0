"""
config/settings.py

- Reads environment variables (and .env) into one application-wide settings object.
- pydantic v2 / pydantic-settings v2.
- The workbook path may be left empty, in which case the store lives in memory
  (handy for local experiments and tests).
"""

from typing import List, Optional, Literal
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # =========================
    # App / runtime
    # =========================
    ENV: Literal["dev", "stage", "prod"] = "dev"
    APP_TITLE: str = "School Administration API"
    APP_DESCRIPTION: str = "Spreadsheet-backed school administration dashboard backend"
    APP_VERSION: str = "1.0.0"

    # =========================
    # CORS
    # =========================
    # comma separated string -> List[str]
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, v):
        if isinstance(v, str):
            # "a,b , c" -> ["a","b","c"]
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    # =========================
    # Workbook (row store)
    # =========================
    WORKBOOK_PATH: Optional[str] = "data/school.xlsx"

    # Admin credentials live in two fixed cells, outside every row collection
    ADMIN_SHEET: str = "Admin"
    ADMIN_USERNAME_CELL: str = "B1"
    ADMIN_PASSWORD_CELL: str = "B2"

    # =========================
    # Store lock
    # =========================
    LOCK_TIMEOUT_SECONDS: float = 15
    GRADES_LOCK_TIMEOUT_SECONDS: float = 20

    # =========================
    # Client facade
    # =========================
    SCHOOL_API_BASE_URL: Optional[str] = None
    CLIENT_TIMEOUT: int = 25

    # =========================
    # Logging / Misc
    # =========================
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # =========================
    # BaseSettings Config
    # =========================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# settings object importable from anywhere
settings = Settings()
