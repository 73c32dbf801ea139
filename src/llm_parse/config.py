"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel, Field

from .exceptions import PREVIEW_CHARS, ConfigError

DEFAULT_CONFIG_PATH = "~/.llm-parse/config.yaml"


class TokenConfig(BaseModel):
    concurrency: int = Field(default=8, ge=1)  # Max in-flight token counts


class RecoveryConfig(BaseModel):
    preview_chars: int = Field(default=PREVIEW_CHARS, ge=0)  # 0 = never truncate
    log_level: str = "WARNING"
    tokens: TokenConfig = Field(default_factory=TokenConfig)


_ENV_REF_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_path(path: str | Path | None) -> Path:
    return Path(DEFAULT_CONFIG_PATH if path is None else path).expanduser()


def _expand_env(text: str) -> str:
    """Substitute ${NAME} references; unset variables become empty strings."""
    return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1), ""), text)


def _config_from_env() -> RecoveryConfig:
    """Build config from LLM_PARSE_* environment variables."""
    data: dict = {}
    if "LLM_PARSE_PREVIEW_CHARS" in os.environ:
        data["preview_chars"] = os.environ["LLM_PARSE_PREVIEW_CHARS"]
    if "LLM_PARSE_LOG_LEVEL" in os.environ:
        data["log_level"] = os.environ["LLM_PARSE_LOG_LEVEL"]
    if "LLM_PARSE_TOKEN_CONCURRENCY" in os.environ:
        data["tokens"] = {"concurrency": os.environ["LLM_PARSE_TOKEN_CONCURRENCY"]}
    return _build(data, "environment")


def _build(data: dict, source: str) -> RecoveryConfig:
    try:
        config = RecoveryConfig(**data)
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e
    config.log_level = config.log_level.upper()
    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ConfigError(f"Unknown log level in {source}: {config.log_level}")
    return config


def load_config(path: str | Path | None = None) -> RecoveryConfig:
    """Load config from YAML file, env vars, or defaults.

    Priority: config.yaml (with ${ENV} interpolation) > env vars > defaults.
    """
    path = _resolve_path(path)
    if not path.exists():
        return _config_from_env()

    raw_text = path.read_text()
    interpolated = _expand_env(raw_text)
    try:
        data = yaml.safe_load(interpolated)
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    if data is None:
        return RecoveryConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return _build(data, str(path))


def save_config(config: RecoveryConfig, path: str | Path | None = None) -> Path:
    """Write *config* as YAML, creating parent directories. Returns the path."""
    path = _resolve_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as fh:
        yaml.safe_dump(config.model_dump(mode="json"), fh, sort_keys=False)
    return path
