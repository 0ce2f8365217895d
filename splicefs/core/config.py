from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SPLICEFS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="splicefs", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production"] = Field(
        default="production", description="Environment mode"
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING", description="Logging level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log output format"
    )

    default_dir_mode: int = Field(
        default=0o700, description="Permission bits for directories created on demand"
    )
    copy_buffer_size: int = Field(
        default=1 << 20, description="Chunk size in bytes used by copy"
    )
    splice_buffer_limit: int = Field(
        default=16 << 20,
        description="Largest tail in bytes that insert/extract buffer in one piece",
    )
    splice_chunk_size: int = Field(
        default=1 << 20, description="Chunk size in bytes for streamed tail shifts"
    )

    excluded_names: List[str] = Field(
        default=["system volume information", "recycler"],
        description="Entry names skipped by readfiles/readdirs (case-insensitive)",
    )

    @field_validator("copy_buffer_size", "splice_chunk_size")
    @classmethod
    def validate_chunk_size(cls, v):
        if v <= 0:
            raise ValueError("chunk sizes must be positive")
        return v

    @field_validator("splice_buffer_limit")
    @classmethod
    def validate_buffer_limit(cls, v):
        if v < 0:
            raise ValueError("splice_buffer_limit must not be negative")
        return v

    @field_validator("excluded_names")
    @classmethod
    def lowercase_excluded_names(cls, v):
        return [name.lower() for name in v]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings(new_settings: Optional[Settings] = None) -> Settings:
    """Replace the cached settings, mainly for tests."""
    global _settings
    _settings = new_settings if new_settings is not None else Settings()
    return _settings
