"""Configuration loading from CLI args, env vars, and optional YAML file.

Precedence, lowest first: defaults, YAML file, environment, CLI flags.
"""

import logging
import os
from dataclasses import dataclass

import yaml

from accesslog.format import ErrorOrder

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
OUTPUT_FORMATS = ("text", "json")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    log_format: str = "combined"
    error_order: ErrorOrder = ErrorOrder.RIGHT_TO_LEFT
    strict: bool = False
    output: str = "text"
    color: bool = False
    log_level: str = "INFO"


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _pick(cli_value, env_name: str, yaml_data: dict, key: str, default):
    if cli_value is not None:
        return cli_value
    if env_name in os.environ:
        return os.environ[env_name]
    if key in yaml_data:
        return yaml_data[key]
    return default


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from CLI args, env vars, and parsed YAML data.

    Raises ValueError for unknown error orders, outputs or log levels.
    """
    log_format = _pick(getattr(cli_args, "format", None), "ACCESSLOG_FORMAT",
                       yaml_data, "format", Config.log_format)
    error_order = ErrorOrder(_pick(getattr(cli_args, "error_order", None), "ACCESSLOG_ERROR_ORDER",
                                   yaml_data, "error_order", Config.error_order.value))
    strict = _parse_bool(_pick(getattr(cli_args, "strict", None) or None, "ACCESSLOG_STRICT",
                               yaml_data, "strict", Config.strict))
    output = _pick(getattr(cli_args, "output", None), "ACCESSLOG_OUTPUT",
                   yaml_data, "output", Config.output)
    color = _parse_bool(_pick(getattr(cli_args, "color", None) or None, "ACCESSLOG_COLOR",
                              yaml_data, "color", Config.color))
    log_level = str(_pick(getattr(cli_args, "log_level", None), "ACCESSLOG_LOG_LEVEL",
                          yaml_data, "log_level", Config.log_level)).upper()

    if output not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format: {output}")
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}")

    return Config(
        log_format=log_format,
        error_order=error_order,
        strict=strict,
        output=output,
        color=color,
        log_level=log_level,
    )
