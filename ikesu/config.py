"""Configuration for the application."""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class MackerelConfig(BaseSettings):
    """Configuration for the Mackerel API."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    apikey: str = Field(
        default="",
        validation_alias=AliasChoices("MACKEREL_APIKEY", "IKESU_MACKEREL_APIKEY", "apikey"),
        description="Mackerel API key",
    )
    apibase: str = Field(
        default="https://api.mackerelio.com/",
        validation_alias=AliasChoices("MACKEREL_APIBASE", "IKESU_MACKEREL_APIBASE", "apibase"),
        description="Mackerel API base URL",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("IKESU_MACKEREL_TIMEOUT_SECONDS", "timeout_seconds"),
        description="Timeout of each API request",
    )


class InspectionConfig(BaseSettings):
    """Configuration for the inspection run."""

    model_config = SettingsConfigDict(env_prefix="IKESU_", env_file=".env", extra="ignore")

    check_config: str = Field(default="", description="Path or URI of the check rule file")
    max_fetch_span_seconds: int = Field(
        default=60 * 60 * 20, gt=0, description="Longest window fetched by a single metric request"
    )
    fetch_delay_seconds: float = Field(default=0.2, ge=0.0, description="Pause after each metric request")
    report_batch_size: int = Field(default=100, ge=1, le=100, description="Check reports posted per request")


class LoggingConfig(BaseSettings):
    """Configuration for logging."""

    model_config = SettingsConfigDict(env_prefix="IKESU_LOG_", env_file=".env", extra="ignore")

    level: Literal["debug", "info", "warn", "warning", "error"] = Field(default="info", description="Log level")
    file: str | None = Field(default=None, description="Log file path (stdout when unset)")
    serialize: bool = Field(default=True, description="Emit JSON lines")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mackerel: MackerelConfig = Field(default_factory=MackerelConfig)
    inspection: InspectionConfig = Field(default_factory=InspectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
