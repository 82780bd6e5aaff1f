import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Helper functions for parsing environment variables
def get_str_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default)

def get_int_env(key: str, default: int) -> int:
    try:
        return int(os.environ.get(key, str(default)))
    except ValueError:
        return default

def get_bool_env(key: str, default: bool) -> bool:
    value = os.environ.get(key, str(default)).lower()
    return value == "true"


# Default factory functions
def default_http_host() -> str:
    return get_str_env("HTTP_HOST", "0.0.0.0")

def default_http_port() -> int:
    return get_int_env("PORT", 3000)

def default_storage_backend() -> str:
    return get_str_env("STORAGE_BACKEND", "memory").lower()

def default_data_dir() -> str:
    return get_str_env("DATA_DIR", str(Path.home() / ".fleet_usage"))

def default_db_path() -> str:
    return get_str_env("DB_PATH", "fleet.db")

def default_log_level() -> str:
    return get_str_env("LOG_LEVEL", "INFO")

def default_log_dir() -> str:
    return get_str_env("LOG_DIR", "logs")

def default_max_size_mb() -> int:
    return get_int_env("LOG_MAX_SIZE_MB", 10)

def default_backup_count() -> int:
    return get_int_env("LOG_BACKUP_COUNT", 5)

def default_use_color() -> bool:
    return get_bool_env("LOG_USE_COLOR", True)


class ApiConfig(BaseModel):
    """HTTP API configuration."""
    host: str = Field(default_factory=default_http_host)
    http_port: int = Field(default_factory=default_http_port)


class StorageConfig(BaseModel):
    """Storage backend selection."""
    model_config = ConfigDict(validate_default=True)

    backend: Literal["memory", "sqlite"] = Field(default_factory=default_storage_backend)
    data_dir: str = Field(default_factory=default_data_dir)


class DbConfig(BaseModel):
    """SQLite database configuration."""
    path: str = Field(default_factory=default_db_path)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(validate_default=True)

    level: str = Field(default_factory=default_log_level)
    log_dir: str = Field(default_factory=default_log_dir)
    max_size_mb: int = Field(default_factory=default_max_size_mb)
    backup_count: int = Field(default_factory=default_backup_count)
    use_color: bool = Field(default_factory=default_use_color)

    @field_validator("level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.upper()


class AppConfig(BaseModel):
    """Application configuration."""
    api: ApiConfig = Field(default_factory=ApiConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    db: DbConfig = Field(default_factory=DbConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def db_file(self) -> Path:
        """Absolute location of the SQLite file."""
        return Path(self.storage.data_dir) / self.db.path


# Create a singleton config instance
config = AppConfig()
