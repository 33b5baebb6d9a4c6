# src/config/settings.py - v2
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Single source of truth for corpus locations, remote service endpoints,
throttling, artifact storage backend and logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is missing or internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from the process environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Corpus ===
    in_folder: Path = Path("./input")
    out_folder: Path = Path("./output")
    source_extensions: str = "pdf"

    # === Summarization service ===
    summarization_endpoint: str = ""
    summarization_key: str = ""
    summarization_limit: int = 25
    summarization_timeout_s: float = 60.0

    # === Translation service ===
    target_language: str = ""

    # === Rate limiting ===
    throttle_delay_s: float = 1.5

    # === Artifact storage ===
    artifact_store: Literal["local", "s3"] = "local"
    artifact_s3_bucket: str = ""
    artifact_s3_prefix: str = "corpusdigest/"
    artifact_s3_region: str = ""
    artifact_s3_endpoint_url: str = ""

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.summarization_limit < 1:
            errors.append("SUMMARIZATION_LIMIT must be >= 1")
        if self.throttle_delay_s < 0:
            errors.append("THROTTLE_DELAY_S must be >= 0")
        if not self.source_extensions_list:
            errors.append("SOURCE_EXTENSIONS must name at least one extension")
        if self.artifact_store == "s3" and not self.artifact_s3_bucket:
            errors.append("ARTIFACT_S3_BUCKET must be set when ARTIFACT_STORE=s3")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    def require_run_config(self) -> None:
        """Check the settings only the `run` command needs.

        Raises:
            ConfigurationError: If a remote service is not configured.
        """
        missing = [
            name.upper()
            for name in ("summarization_endpoint", "target_language")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    # --- Helpers ---

    @property
    def source_extensions_list(self) -> list[str]:
        """Parse comma-separated extensions into normalized '.ext' suffixes."""
        return [
            "." + e.strip().lower().lstrip(".")
            for e in self.source_extensions.split(",")
            if e.strip().lstrip(".")
        ]


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI flags or tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If a value cannot be parsed or the configuration
            is internally inconsistent.
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
