"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
API can be started locally without any setup: it listens on port 3001
and keeps containers in a SQLite file next to the project.  In a
production deployment override these via environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "T&D Rolloff API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_flag("DEBUG", "false")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Address used by ``run.py`` when serving the application with
    # uvicorn.  The port falls back to 3001 so that a frontend dev
    # server can keep 3000.
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3001"))

    # Which storage backend holds container records: ``sqlite`` keeps
    # them in the ``containers`` table, ``memory`` keeps them in a
    # process-wide list that is lost on restart.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "sqlite").lower()

    # Path or ``sqlite:///`` URL of the SQLite database.  Relative paths
    # are resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "rolloff.db")

    # Insert the sample container CNT-001 when the store starts empty.
    seed_sample_data: bool = _env_flag("SEED_SAMPLE_DATA", "true")

    # Value written to ``updatedBy`` on every create and update.  There
    # is no authentication, so every write is attributed to this name.
    updated_by: str = os.getenv("UPDATED_BY", "System")

    # Comma-separated list of origins allowed by the CORS middleware.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module.
settings = Settings()
