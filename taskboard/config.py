#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Task Board - Configuration
Settings for the task API with per-environment overrides

Version: 1.0.0
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from taskboard import __version__
from taskboard.utils.logger import setup_logging as configure_logging


class Settings(BaseSettings):
    """Task Board API settings"""

    # ===== BASIC SETTINGS =====

    APP_NAME: str = Field(
        default="Task Board API",
        description="Application name"
    )

    VERSION: str = Field(
        default=__version__,
        description="API version"
    )

    ENVIRONMENT: str = Field(
        default="development",
        description="Runtime environment (development/production/testing/staging)"
    )

    DEBUG: bool = Field(
        default=True,
        description="Debug mode"
    )

    # ===== NETWORK =====

    HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind"
    )

    PORT: int = Field(
        default=3000,
        description="Port to bind"
    )

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated CORS origins"
    )

    # ===== DATABASE =====

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./database/tasks.db",
        description="SQLAlchemy URL of the task database"
    )

    DB_ECHO: bool = Field(
        default=False,
        description="Echo SQL statements to the log"
    )

    AUTO_CREATE_SCHEMA: bool = Field(
        default=False,
        description="Create the tasks table at startup if it is missing"
    )

    # ===== PATHS =====

    STATIC_DIR: Path = Field(
        default=Path("public"),
        description="Directory with the pre-built frontend"
    )

    INDEX_FILE: str = Field(
        default="index.html",
        description="Document served at /"
    )

    LOGS_DIR: Path = Field(
        default=Path("logs"),
        description="Log directory"
    )

    # ===== LOGGING =====

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Log level (DEBUG/INFO/WARNING/ERROR/CRITICAL)"
    )

    LOG_FORMAT: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log record format"
    )

    LOG_DATE_FORMAT: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Log date format"
    )

    LOG_TO_FILE: bool = Field(
        default=True,
        description="Also write logs to LOGS_DIR/taskboard.log"
    )

    LOG_MAX_BYTES: int = Field(
        default=10_000_000,
        description="Rotate the log file after this many bytes"
    )

    LOG_BACKUP_COUNT: int = Field(
        default=5,
        description="Number of rotated log files to keep"
    )

    # ===== API =====

    DOCS_URL: Optional[str] = Field(
        default="/api/docs",
        description="Swagger UI URL (None to disable)"
    )

    OPENAPI_URL: Optional[str] = Field(
        default="/api/openapi.json",
        description="OpenAPI schema URL (None to disable)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===== VALIDATORS =====

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate runtime environment"""
        allowed_envs = ["development", "production", "testing", "staging"]
        if v.lower() not in allowed_envs:
            raise ValueError(f"ENVIRONMENT must be one of {allowed_envs}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v.upper()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port"""
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Point plain driver URLs at their async drivers"""
        if v.startswith("sqlite://"):
            return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Production hardening"""
        if self.ENVIRONMENT == "production":
            self.DEBUG = False
            self.DOCS_URL = None
            self.OPENAPI_URL = None
        return self

    # ===== HELPERS =====

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def is_testing(self) -> bool:
        return self.ENVIRONMENT == "testing"

    @property
    def allowed_origins(self) -> List[str]:
        """CORS origins as a list"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    @property
    def index_path(self) -> Path:
        return self.STATIC_DIR / self.INDEX_FILE

    def get_full_url(self, path: str = "") -> str:
        """Full URL of the service"""
        return f"http://{self.HOST}:{self.PORT}/{path.lstrip('/')}"

    def setup_logging(self) -> None:
        """Configure logging for this process"""
        configure_logging(self)
        logging.getLogger(__name__).info(
            f"✅ Settings loaded for {self.ENVIRONMENT} environment"
        )


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance"""
    return Settings()
