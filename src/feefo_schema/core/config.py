# src/feefo_schema/core/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_name: str = "Feefo Product Schema Service"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Keys for the admin endpoints: mapping of API key to operator name
    # Format: '{"key_abc123": "ops"}'
    api_keys: dict[str, str] = Field(default_factory=dict)

    # Feefo API
    feefo_api_base_url: str = "https://api.feefo.com/api"
    feefo_api_version: str = "10"
    merchant_identifier: str = ""
    request_timeout_seconds: float = Field(default=10.0, gt=0)

    # Cache
    option_prefix: str = "feefo_data__"
    database_url: str = "sqlite:///./feefo_cache.db"

    # Refresh schedule
    refresh_job_id: str = "product_schema_feefo_data_refresh"
    refresh_interval_seconds: int = Field(default=86400, gt=0)
    refresh_on_start: bool = True

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    model_config = SettingsConfigDict(
        env_prefix="FEEFO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
