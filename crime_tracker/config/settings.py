"""
Crime Tracker Settings

Configuration management using Pydantic settings with environment variable support.
Every field can be set through a CRIME_TRACKER_* variable or a local .env file.
"""

from pathlib import Path
from typing import Literal, Optional, get_args

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LOG_LEVELS = get_args(LogLevel)


class Settings(BaseSettings):
    """Crime Tracker configuration"""

    # Persistence
    data_file: Path = Field(default=Path("crimedb.json"), description="Path of the JSON data file")

    # Authentication
    min_password_length: int = Field(default=4, ge=1, description="Minimum password length for registration")
    default_admin_username: str = Field(default="admin", description="Username of the bootstrap account")
    default_admin_password: str = Field(default="admin", description="Password of the bootstrap account")

    # Logging
    log_level: LogLevel = Field(default="WARNING", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[Path] = Field(default=None, description="Optional rotating log file")

    model_config = SettingsConfigDict(
        env_prefix="CRIME_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


# Global settings instance
settings = Settings()
