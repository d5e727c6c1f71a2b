"""Application configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Settings are loaded in this priority order (highest to lowest):
    1. Environment variables
    2. .env file (for local development)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application
    # =========================================================================
    app_name: str = "Gibbername Resolver"
    debug: bool = False

    # =========================================================================
    # Ledger node
    # =========================================================================
    ledger_url: str = Field(
        default="http://127.0.0.1:8000/ledger",
        description="Root URL of the ledger node JSON API",
    )
    request_timeout: float = Field(
        default=30.0,
        description="HTTP request timeout in seconds",
    )
    max_retries: int = Field(
        default=3,
        description="Attempts per ledger request before failing",
    )
    retry_delay: float = Field(
        default=2.0,
        description="Initial backoff delay in seconds (doubles per attempt)",
    )
    watch_poll_interval: float = Field(
        default=5.0,
        description="Seconds between head polls while waiting for confirmations",
    )

    # =========================================================================
    # Wallet instructions
    # =========================================================================
    # Name of the melwallet-cli wallet that signs registration and transfers.
    wallet_name: str = "default"

    # =========================================================================
    # Resolution
    # =========================================================================
    resolution_cache_enabled: bool = Field(
        default=True,
        description="Cache resolutions until the ledger head advances",
    )

    # =========================================================================
    # CORS
    # =========================================================================
    cors_origins: list[str] = ["http://localhost:3000"]


settings = Settings()
