"""Configuration loading from CLI args, env vars, and optional YAML file.

Precedence: CLI args > env vars > YAML file > dataclass defaults.
"""

import logging
import os
from dataclasses import dataclass

import yaml

from chatlog.formatter import OUTPUT_FORMATS
from chatlog.reader import INPUT_FORMATS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    input_format: str = "hex"
    output_format: str = "text"
    color: bool = False
    log_level: str = "WARNING"
    lines: int | None = None


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path.

    Raises:
        ValueError: If the file is not valid YAML or not a mapping.
    """
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    logger.info("Loaded YAML config from %s", path)
    return data


def _pick(cli_value, env_name: str, yaml_data: dict, yaml_key: str, default):
    if cli_value is not None:
        return cli_value
    if env_name in os.environ:
        return os.environ[env_name]
    if yaml_data.get(yaml_key) is not None:
        return yaml_data[yaml_key]
    return default


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from CLI args, env vars, and parsed YAML data.

    Raises:
        ValueError: If a setting is not one of its allowed values.
    """
    input_format = str(_pick(
        getattr(cli_args, "input_format", None), "CHATLOG_INPUT_FORMAT",
        yaml_data, "input_format", Config.input_format,
    )).lower()
    output_format = str(_pick(
        getattr(cli_args, "output", None), "CHATLOG_OUTPUT_FORMAT",
        yaml_data, "output_format", Config.output_format,
    )).lower()
    color = _parse_bool(_pick(
        getattr(cli_args, "color", None), "CHATLOG_COLOR",
        yaml_data, "color", Config.color,
    ))
    log_level = str(_pick(
        getattr(cli_args, "log_level", None), "CHATLOG_LOG_LEVEL",
        yaml_data, "log_level", Config.log_level,
    )).upper()
    lines = getattr(cli_args, "lines", None)
    if lines is None:
        lines = yaml_data.get("lines")

    if input_format not in INPUT_FORMATS:
        raise ValueError(f"input_format must be one of {INPUT_FORMATS}, got {input_format!r}")
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}, got {output_format!r}")
    if log_level not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {log_level!r}")
    if lines is not None and int(lines) < 1:
        raise ValueError(f"lines must be at least 1, got {lines}")

    return Config(
        input_format=input_format,
        output_format=output_format,
        color=color,
        log_level=log_level,
        lines=int(lines) if lines is not None else None,
    )
