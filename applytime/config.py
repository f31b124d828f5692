from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from applytime.errors import ConfigError

logger = logging.getLogger(__name__)

ENV_CONFIG = "APPLYTIME_CONFIG"
_DEFAULT_CONFIG_PATH = Path("applytime.yml")

# env var -> config field
_ENV_OVERRIDES = {
    "APPLYTIME_TOP_N": "top_n",
    "APPLYTIME_LOG_LEVEL": "log_level",
    "APPLYTIME_LOG_FORMAT": "log_format",
}


class AppConfig(BaseModel):
    """
    Runtime knobs for the CLI. The core functions never read this;
    the CLI passes top_n explicitly.
    """

    top_n: int = Field(10, ge=0, description="Rows per report block")
    log_level: str = Field("WARNING", description="Root logger level")
    log_format: Literal["text", "json"] = Field("text", description="stderr log format")


def _read_raw_yaml(path: Path, *, required: bool) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        if required:
            raise ConfigError(str(path), "config file not found")
        return {}
    except yaml.YAMLError as exc:
        raise ConfigError(str(path), f"invalid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(str(path), "config root is not a mapping")
    return data


def _env_values() -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for env, name in _ENV_OVERRIDES.items():
        raw = os.getenv(env)
        if raw is not None and raw.strip():
            values[name] = raw.strip()
    return values


def load_config(path: Optional[Path] = None, **overrides: Any) -> AppConfig:
    """
    Defaults -> YAML file -> environment -> explicit overrides (CLI flags).

    - No path and no APPLYTIME_CONFIG: ./applytime.yml if it exists.
    - An explicit path that is missing or invalid raises ConfigError.
    """
    load_dotenv(find_dotenv(usecwd=True), override=False)

    env_path = os.getenv(ENV_CONFIG)
    if path is not None:
        config_path, required = Path(path), True
    elif env_path:
        config_path, required = Path(env_path), True
    else:
        config_path, required = _DEFAULT_CONFIG_PATH, False

    raw = _read_raw_yaml(config_path, required=required)
    raw.update(_env_values())
    raw.update({k: v for k, v in overrides.items() if v is not None})

    try:
        cfg = AppConfig(**raw)
    except ValidationError as exc:
        raise ConfigError(str(config_path), str(exc)) from exc

    logger.debug("config loaded", extra={"extra_data": {"config_path": str(config_path), **cfg.model_dump()}})
    return cfg
