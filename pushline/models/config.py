"""
Configuration models for Pushline.

Settings for the Maven goals, started applications, notifications and
logging. Loaded from a YAML file and PUSHLINE_* environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MavenConfig(BaseModel):
    """How Maven is invoked by the Maven goals."""

    executable: str = Field(default="mvn", description="Maven executable")
    build_args: list[str] = Field(
        default_factory=lambda: ["package"],
        description="Arguments for the build goal"
    )
    run_args: list[str] = Field(
        default_factory=lambda: [
            "spring-boot:run",
            "-Dspring-boot.run.arguments=--server.port={port}",
        ],
        description="Arguments for the run goal; {port} is replaced by the allocated port"
    )
    version_args: list[str] = Field(
        default_factory=lambda: [
            "versions:set",
            "-DnewVersion={version}",
            "-DgenerateBackupPoms=false",
        ],
        description="Arguments that apply a version; {version} is replaced"
    )
    timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout in seconds for Maven commands (None = no timeout)"
    )


class RunConfig(BaseModel):
    """Where started applications listen."""

    port_low: int = Field(default=8000, ge=1, le=65535, description="First candidate port")
    port_high: int = Field(default=8100, ge=1, le=65535, description="Last candidate port")
    bind_host: str = Field(default="127.0.0.1", description="Host used to probe ports")
    url_host: str = Field(default="localhost", description="Host used in reported URLs")

    @model_validator(mode="after")
    def check_range(self) -> "RunConfig":
        if self.port_low > self.port_high:
            raise ValueError(f"port_low ({self.port_low}) is above port_high ({self.port_high})")
        return self


class NotificationConfig(BaseModel):
    """Success notification settings."""

    enabled: bool = Field(default=True, description="Send notifications for successful goals")
    channel: Literal["log", "console"] = Field(
        default="log",
        description="Where notifications are delivered"
    )


class LoggingConfig(BaseModel):
    """Where Pushline logs go."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    file: str | None = Field(default=None, description="Also log to this file")
    json_format: bool = Field(default=False, description="Write the log file as JSON lines")


# Searched in the working directory, in order, when no file is given
CONFIG_FILENAMES = ("pushline.yaml", "pushline.yml", "config.yaml", "config.yml")


class PushlineConfig(BaseSettings):
    """
    Main Pushline configuration.

    Values come from, highest priority first: the YAML file passed to
    :meth:`load` (or the first of ``CONFIG_FILENAMES`` found), then
    ``PUSHLINE_*`` environment variables such as
    ``PUSHLINE_RUN__PORT_LOW=9000``, then the defaults below.
    """

    model_config = SettingsConfigDict(
        env_prefix="PUSHLINE_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    rules_file: str | None = Field(
        default=None,
        description="YAML rule table (None = built-in maven rules)"
    )
    maven: MavenConfig = Field(default_factory=MavenConfig)
    run: RunConfig = Field(default_factory=RunConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "PushlineConfig":
        """
        Load configuration.

        Raises:
            FileNotFoundError: If an explicit config_path does not exist
        """
        if config_path:
            path = Path(config_path)
            if not path.is_file():
                raise FileNotFoundError(f"Configuration file not found: {path}")
        else:
            path = next((Path(name) for name in CONFIG_FILENAMES if Path(name).is_file()), None)

        return cls(**cls.read_file(path)) if path else cls()

    @staticmethod
    def read_file(path: Path) -> dict[str, Any]:
        """Read a YAML configuration file; an empty file gives no values."""
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a mapping, not {type(data).__name__}")
        return data

    def save(self, path: str | Path) -> None:
        """Write the configuration as YAML, omitting unset optional values."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(self.model_dump(mode="json", exclude_none=True), sort_keys=False),
            encoding="utf-8",
        )
