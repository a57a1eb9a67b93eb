"""Configuration loading for the dyadt CLI.

Supports .dyadt/config.toml, .dyadt/config.yaml or .dyadt/config.json in the
working directory, or an explicit path. Environment variables override file
values. The evaluation engine never reads configuration itself; the CLI
passes the relevant values in.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

from dyadt.errors import ConfigError
from dyadt.evidence.evaluator import DEFAULT_MAX_READ_BYTES

CONFIG_DIRNAME = ".dyadt"
CONFIG_FILENAMES: tuple[str, ...] = ("config.toml", "config.yaml", "config.yml", "config.json")

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_LOG_LEVEL = "DYADT_LOG_LEVEL"
ENV_MAX_READ_BYTES = "DYADT_MAX_READ_BYTES"
ENV_LOAD_PLUGINS = "DYADT_LOAD_PLUGINS"


@dataclass(frozen=True)
class DyadtConfig:
    """Resolved dyadt configuration."""

    max_read_bytes: int = DEFAULT_MAX_READ_BYTES
    log_level: str = "WARNING"
    load_plugins: bool = True
    disabled_checkers: tuple[str, ...] = ()
    path: Path | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Path | None = None) -> DyadtConfig:
        """Validate a decoded config mapping. Unknown keys are ignored."""
        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping, got {type(data).__name__}")

        section = data.get("dyadt", data)
        if not isinstance(section, dict):
            raise ConfigError("Config section 'dyadt' must be a mapping")

        config = cls(path=path)
        if "max_read_bytes" in section:
            config = replace(config, max_read_bytes=_parse_max_read_bytes(section["max_read_bytes"]))
        if "log_level" in section:
            config = replace(config, log_level=_parse_log_level(section["log_level"]))
        if "load_plugins" in section:
            value = section["load_plugins"]
            if not isinstance(value, bool):
                raise ConfigError("'load_plugins' must be a boolean")
            config = replace(config, load_plugins=value)
        if "disabled_checkers" in section:
            value = section["disabled_checkers"]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ConfigError("'disabled_checkers' must be a list of strings")
            config = replace(config, disabled_checkers=tuple(value))
        return config


def _parse_max_read_bytes(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        try:
            value = int(str(value).strip())
        except ValueError as e:
            raise ConfigError(f"'max_read_bytes' must be an integer, got {value!r}") from e
    if value <= 0:
        raise ConfigError(f"'max_read_bytes' must be positive, got {value}")
    return value


def _parse_log_level(value: Any) -> str:
    normalized = str(value).strip().upper()
    if normalized not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level {value!r}; expected one of {', '.join(LOG_LEVELS)}")
    return normalized


def parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"Expected a boolean value, got {value!r}")


def _read_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f)
        if suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        if suffix == ".json":
            with open(path, encoding="utf-8") as f:
                return json.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed TOML config at {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML config at {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON config at {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    raise ConfigError(f"Unsupported config format '{suffix}' for {path} (use .toml, .yaml or .json)")


def find_config_file(start: Path) -> Path | None:
    """Return the first config file under ``start/.dyadt``, in priority order."""
    config_dir = start / CONFIG_DIRNAME
    for filename in CONFIG_FILENAMES:
        candidate = config_dir / filename
        if candidate.is_file():
            return candidate
    return None


def apply_env_overrides(config: DyadtConfig, environ: Mapping[str, str] | None = None) -> DyadtConfig:
    """Apply DYADT_* environment variables on top of ``config``."""
    env = os.environ if environ is None else environ

    if env.get(ENV_LOG_LEVEL):
        config = replace(config, log_level=_parse_log_level(env[ENV_LOG_LEVEL]))
    if env.get(ENV_MAX_READ_BYTES):
        config = replace(config, max_read_bytes=_parse_max_read_bytes(env[ENV_MAX_READ_BYTES]))
    if env.get(ENV_LOAD_PLUGINS):
        config = replace(config, load_plugins=parse_bool(env[ENV_LOAD_PLUGINS]))
    return config


def load_config(
    path: Path | None = None,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> DyadtConfig:
    """
    Resolve configuration.

    Args:
        path: Explicit config file; must exist when given
        cwd: Directory searched for .dyadt/ when ``path`` is None
        environ: Environment mapping (defaults to os.environ)

    Returns:
        DyadtConfig with file values and environment overrides applied

    Raises:
        ConfigError: If the file is missing, malformed or holds invalid values
    """
    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        config_path: Path | None = path
    else:
        config_path = find_config_file(cwd or Path.cwd())

    if config_path is None:
        config = DyadtConfig()
    else:
        config = DyadtConfig.from_dict(_read_config_file(config_path), path=config_path)

    return apply_env_overrides(config, environ)
