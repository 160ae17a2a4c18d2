"""
# Configuration Management Module

Application settings for the Campus Events API, built on **Pydantic Settings**.

## Loading Hierarchy

Higher layers override lower layers:

1.  **Environment Variables** (highest priority)
2.  **`CAMPUS_EVENTS_CONFIG_PATH`**: custom config file path from env var
3.  **`.env` File** in the project root
4.  **Default Values** hardcoded in `Settings` (lowest priority)

If no configuration file is found the application runs in environment-only mode.

## Configuration Groups

| Group | Purpose |
|-------|---------|
| **Server** | Host, port, debug mode, CORS origins |
| **Database (MongoDB)** | Connection URL, database name, timeouts, credentials |
| **Logging** | Default log level |
| **SMTP** | Reminder email delivery |
| **Events** | Reminder batch policy, fan-out concurrency, upcoming list size |

## Module Attributes

Attributes:
    CONFIG_PATH (Optional[str]): Resolved configuration file path, or `None`.
    settings (Settings): Settings instance shared by the application. It holds plain values
        only; connections are owned by the process entry point (see `campus_events.main`).
"""

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Constants ---
DEFAULT_ENV_FILENAME: str = ".env"
CONFIG_ENV_VAR: str = "CAMPUS_EVENTS_CONFIG_PATH"
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent

REMINDER_POLICIES = ("all_or_nothing", "partial")


# --- Config file discovery (no logging) ---
def get_config_path() -> Optional[str]:
    """
    Determines the configuration file path.

    Checks the `CAMPUS_EVENTS_CONFIG_PATH` environment variable first, then a `.env` file in the
    project root. Returns `None` when neither exists, which triggers environment-only mode.

    Returns:
        Optional[str]: The absolute path to the configuration file, or `None` if not found.
    """
    env_path: Optional[str] = os.environ.get(CONFIG_ENV_VAR)
    if env_path and os.path.exists(env_path):
        return env_path
    env_path_file: Path = PROJECT_ROOT / DEFAULT_ENV_FILENAME
    if env_path_file.exists():
        return str(env_path_file)
    return None


CONFIG_PATH: Optional[str] = get_config_path()
if CONFIG_PATH:
    load_dotenv(dotenv_path=CONFIG_PATH, override=True)


class Settings(BaseSettings):
    """
    Application configuration settings model.

    **Configuration Groups:**
    *   **Server**: Host, port, debug mode, CORS.
    *   **Database**: MongoDB connection details.
    *   **SMTP**: Outgoing mail for event reminders.
    *   **Events**: Reminder failure policy and listing limits.
    """

    model_config = SettingsConfigDict(
        env_file=CONFIG_PATH if CONFIG_PATH else None,
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Server configuration
    APP_NAME: str = "Campus Events API"
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000"

    # MongoDB configuration
    MONGODB_URL: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "campus_events"
    MONGODB_CONNECTION_TIMEOUT: int = 10000
    MONGODB_SERVER_SELECTION_TIMEOUT: int = 5000
    MONGODB_USERNAME: Optional[str] = None
    MONGODB_PASSWORD: Optional[SecretStr] = None

    # Logging
    DEFAULT_LOG_LEVEL: str = "INFO"

    # SMTP configuration (reminders are logged instead of sent when SMTP_HOST is unset)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASSWORD: Optional[SecretStr] = None
    SMTP_USE_TLS: bool = True
    SMTP_TIMEOUT: int = 30
    EMAIL_FROM: str = "no-reply@campus-events.local"

    # Event settings
    REMINDER_FAILURE_POLICY: str = "all_or_nothing"
    REMINDER_MAX_CONCURRENCY: int = 10
    UPCOMING_EVENTS_LIMIT: int = 10

    @field_validator("MONGODB_URL", mode="before")
    @classmethod
    def no_empty_urls(cls, v: Any, info: Any) -> Any:
        """
        Validates that the MongoDB URL is not empty.

        Raises:
            ValueError: If the URL is empty or whitespace.
        """
        if not v or not str(v).strip():
            raise ValueError(f"{info.field_name} must be set via environment or .env and not empty!")
        return v

    @field_validator("REMINDER_MAX_CONCURRENCY", "UPCOMING_EVENTS_LIMIT", "SMTP_TIMEOUT", mode="before")
    @classmethod
    def validate_positive_integers(cls, v: Any, info: Any) -> int:
        """Validates that numeric settings are positive integers."""
        value = int(v)
        if value <= 0:
            raise ValueError(f"{info.field_name} must be a positive integer")
        return value

    @field_validator("REMINDER_FAILURE_POLICY", mode="before")
    @classmethod
    def validate_reminder_policy(cls, v: Any, info: Any) -> str:
        value = str(v).strip().lower()
        if value not in REMINDER_POLICIES:
            raise ValueError(f"{info.field_name} must be one of: {', '.join(REMINDER_POLICIES)}")
        return value

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST)


settings: Settings = Settings()
