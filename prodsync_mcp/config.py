"""Configuration loading for the ProdSync MCP server."""

import os
import re
from pathlib import Path
from typing import Mapping

import pydantic
import yaml

from prodsync_mcp.exceptions import ConfigurationError
from prodsync_mcp.models import ServerConfig

API_KEY_VAR = "DATADOG_API_KEY"
APP_KEY_VAR = "DATADOG_APP_KEY"
SITE_VAR = "DATADOG_SITE"
LOG_DIR_VAR = "PRODSYNC_LOG_DIR"


def _substitute_env_vars(obj, environ: Mapping[str, str]):
    """Recursively substitute ${VAR} with environment variables."""
    if isinstance(obj, str):
        pattern = r"\$\{([^}]+)\}"
        return re.sub(pattern, lambda m: environ.get(m.group(1), m.group(0)), obj)
    elif isinstance(obj, dict):
        return {k: _substitute_env_vars(v, environ) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item, environ) for item in obj]
    return obj


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {path}")
    return data


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerConfig:
    """Load server configuration from an optional YAML file and the environment.

    Credentials not present in the file are read from DATADOG_API_KEY and
    DATADOG_APP_KEY. Either one missing raises ConfigurationError.
    """
    if environ is None:
        environ = os.environ

    data: dict = {}
    if path is not None:
        data = _substitute_env_vars(_read_yaml(Path(path)), environ)

    datadog = dict(data.get("datadog") or {})
    if not datadog.get("api_key"):
        datadog["api_key"] = environ.get(API_KEY_VAR, "")
    if not datadog.get("app_key"):
        datadog["app_key"] = environ.get(APP_KEY_VAR, "")
    if environ.get(SITE_VAR) and "site" not in datadog:
        datadog["site"] = environ[SITE_VAR]

    # Unresolved placeholders count as missing
    for key, var in (("api_key", API_KEY_VAR), ("app_key", APP_KEY_VAR)):
        value = datadog[key]
        if not value or re.fullmatch(r"\$\{[^}]+\}", str(value)):
            raise ConfigurationError(f"{var} environment variable is required")

    data["datadog"] = datadog
    if environ.get(LOG_DIR_VAR) and "log_dir" not in data:
        data["log_dir"] = environ[LOG_DIR_VAR]

    try:
        return ServerConfig(**data)
    except pydantic.ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def validate_config(path: str | Path | None = None) -> list[str]:
    """Validate configuration and return list of errors."""
    errors = []
    try:
        config = load_config(path)
    except ConfigurationError as e:
        return [str(e)]

    if not config.datadog.site or "/" in config.datadog.site:
        errors.append(f"Invalid Datadog site: '{config.datadog.site}'")
    if config.datadog.timeout <= 0:
        errors.append("Datadog timeout must be positive")

    return errors
