"""Runtime configuration for the hotel tool server.

Relies on pydantic-settings so that environment variables (prefixed with ``HOTEL_MCP_``)
can override defaults. See `.env.example` for common values.
"""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = frozenset({"json", "yaml"})
SERVER_VARIANTS = frozenset({"customer", "standard"})


class Settings(BaseSettings):
    """Captures runtime configuration for the tool server."""

    api_base_url: str = Field(
        default="https://api.dev.jinkotravel.com",
        description="Base URL of the travel backend (availability, places, quotes)",
    )
    http_timeout_s: float = Field(default=30.0, description="Timeout applied to every backend request")
    payment_base_url: str = Field(
        default="https://app.jinko.so/checkout/",
        description="Prefix joined with the quote reference to build the payment link",
    )
    quote_poll_interval_s: float = Field(
        default=2.0, description="Seconds to wait before every quote status poll"
    )
    quote_max_attempts: int = Field(
        default=30, description="Number of quote status polls before reporting the quote as processing"
    )

    default_language: str = Field(default="en")
    default_currency: str = Field(default="EUR")
    default_country_code: str = Field(default="fr")
    default_market: str = Field(default="fr")

    facilities_path: Path = Field(
        default=Path("facilities.json"), description="Path to the static facility catalog"
    )
    output_format: str = Field(default="json", description="Tool result rendering: json or yaml")
    server_variant: str = Field(default="customer", description="Tool set to expose: customer or standard")

    log_level: str = Field(default="INFO")
    log_dir: Path = Field(default=Path("data/logs"))

    model_config = SettingsConfigDict(
        env_prefix="HOTEL_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("facilities_path", "log_dir", mode="before")
    def _expand_path(cls, value: str | Path) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        return Path(value).expanduser()

    @field_validator("api_base_url")
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("quote_poll_interval_s")
    def _validate_interval(cls, value: float) -> float:
        if value < 0:
            raise ValueError("quote_poll_interval_s must not be negative")
        return value

    @field_validator("quote_max_attempts")
    def _validate_attempts(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("quote_max_attempts must be positive")
        return value

    @field_validator("output_format")
    def _validate_output_format(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {sorted(OUTPUT_FORMATS)}")
        return lowered

    @field_validator("server_variant")
    def _validate_variant(cls, value: str) -> str:
        lowered = value.strip().lower()
        if lowered not in SERVER_VARIANTS:
            raise ValueError(f"server_variant must be one of {sorted(SERVER_VARIANTS)}")
        return lowered

    def ensure_directories(self) -> None:
        """Create directories that must exist at runtime."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def worst_case_poll_seconds(self) -> float:
        return self.quote_poll_interval_s * self.quote_max_attempts
