"""Driver settings — Pydantic-based configuration with YAML and env var support.

Configuration is loaded from (in order of precedence):
  1. YAML config file (if loaded with ``from_yaml``)
  2. Environment variables (OSMOS_ELASTIC_ prefix)
  3. Default values
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class StoreSettings(BaseModel):
    """Document store connection and target index."""

    hosts: list[str] = Field(default_factory=list, description="Store node URLs")
    index: str = Field(default="osmos", description="Index holding every bucket served by the driver")
    username: str | None = Field(default=None, description="HTTP basic-auth username")
    password: str | None = Field(default=None, description="HTTP basic-auth password")
    verify_certs: bool = Field(default=True, description="Verify TLS certificates")
    extra: dict[str, Any] = Field(default_factory=dict, description="Options forwarded to the store client")

    @field_validator("hosts", mode="before")
    @classmethod
    def _parse_hosts(cls, v: Any) -> list[str]:
        """Parse hosts from JSON string (env var) or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(h) for h in parsed]
            except (json.JSONDecodeError, TypeError):
                pass
            # Single host as plain string
            return [v] if v else []
        return list(v)


class ObservabilitySettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="info", description="Log level: debug, info, warning, error")
    log_format: str = Field(default="json", description="Log format: json, console")


class DriverSettings(BaseSettings):
    """Root driver settings.

    Nested settings use double underscores::

        OSMOS_ELASTIC_STORE__HOSTS='["http://es-1:9200", "http://es-2:9200"]'
        OSMOS_ELASTIC_STORE__INDEX=catalog
        OSMOS_ELASTIC_OBSERVABILITY__LOG_FORMAT=console
    """

    model_config = {
        "env_prefix": "OSMOS_ELASTIC_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    store: StoreSettings = Field(default_factory=StoreSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    @classmethod
    def from_yaml(cls, path: str | Path) -> DriverSettings:
        """Load settings from a YAML file; keys set in the file take precedence over the environment."""
        import yaml  # type: ignore[import-untyped]

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
