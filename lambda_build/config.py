"""Configuration settings for lambda_build.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lambda_build.types import OutputFormat


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the LAMBDA_BUILD_
    prefix. CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="LAMBDA_BUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Paths
    target_dir: Path = Field(
        default=Path("target"),
        description="Cargo target directory holding compiler output",
    )
    lambda_dir: Path | None = Field(
        default=None,
        description="Root directory for packaged functions (default: <target_dir>/lambda)",
    )
    manifest_path: Path = Field(
        default=Path("Cargo.toml"),
        description="Default Cargo manifest",
    )

    # Packaging
    output_format: OutputFormat = Field(
        default=OutputFormat.BINARY,
        description="Default output format (Binary or Zip)",
    )

    # External tools
    cargo_command: str = Field(default="cargo", description="cargo executable")
    rustc_command: str = Field(default="rustc", description="rustc executable")
    rustup_command: str = Field(default="rustup", description="rustup executable")
    auto_install: bool = Field(
        default=True,
        description="Install missing target components and linker tools",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @field_validator("output_format", mode="before")
    @classmethod
    def parse_output_format(cls, v: object) -> object:
        """Accept output format names in any case."""
        if isinstance(v, str):
            return OutputFormat.parse(v)
        return v


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
