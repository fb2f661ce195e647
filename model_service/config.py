"""Service configuration via environment variables."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field, field_validator

from model_service.models.pipeline import OUTPUT_FORMATS, OutputFormat

DEFAULT_PORT = 1212

_TRUTHY = ("1", "true", "yes", "on")

VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ServiceConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=DEFAULT_PORT)
    engine_binary: str = Field(default="blender")
    engine_timeout_s: float = Field(default=300.0)
    template_path: str = Field(default="")
    output_format: str = Field(default="glb")
    temp_dir: str = Field(default="")
    log_level: str = Field(default="INFO")
    log_model_code: bool = Field(default=False)

    @field_validator("port")
    @classmethod
    def validate_port(cls, value: int) -> int:
        if not 0 < value < 65536:
            raise ValueError(f"Invalid port {value}; expected 1-65535")
        return value

    @field_validator("engine_timeout_s")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value < 0:
            raise ValueError("engine_timeout_s must be >= 0 (0 disables the timeout)")
        return value

    @field_validator("engine_binary")
    @classmethod
    def validate_engine_binary(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("engine_binary must not be empty")
        return value

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, value: str) -> str:
        name = value.strip().lower()
        if name not in OUTPUT_FORMATS:
            allowed = ", ".join(sorted(OUTPUT_FORMATS))
            raise ValueError(f"Invalid output format '{value}'. Allowed: {allowed}")
        return name

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid log level '{value}'")
        return level

    @property
    def format(self) -> OutputFormat:
        return OUTPUT_FORMATS[self.output_format]

    @property
    def timeout(self) -> float | None:
        """Engine timeout in seconds, or None when unbounded."""
        return self.engine_timeout_s or None

    @classmethod
    def from_env(cls) -> ServiceConfig:
        """Build config from environment variables."""
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT") or DEFAULT_PORT),
            engine_binary=os.getenv("ENGINE_BINARY", "blender"),
            engine_timeout_s=float(os.getenv("ENGINE_TIMEOUT_SECONDS", "300")),
            template_path=os.getenv("MODEL_TEMPLATE", ""),
            output_format=os.getenv("OUTPUT_FORMAT", "glb"),
            temp_dir=os.getenv("MODEL_SERVICE_TMPDIR", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_model_code=os.getenv("LOG_MODEL_CODE", "").lower() in _TRUTHY,
        )


_config: ServiceConfig | None = None


def get_config() -> ServiceConfig:
    """Return the process-wide config, creating it on first access."""
    global _config
    if _config is None:
        _config = ServiceConfig.from_env()
    return _config
