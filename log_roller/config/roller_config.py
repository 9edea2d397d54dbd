"""Configuration loading.

The configuration file is JSON, grouped by concern::

    {
        "origin": {
            "directories": "/var/log/app;/var/log/batch",
            "copy_days": 1,
            "move_days": 7,
            "hold_days": 30
        },
        "backup": {
            "directory": "/backup/logs",
            "partition": "MONTH",
            "hold_days": 365
        },
        "extension": {"filter": true, "types": "log;out"},
        "delete": {"target": "origin"},
        "logging": {"level": "INFO", "file": null}
    }

List-valued keys accept either a JSON list or a single ``;``-delimited
string. A ``RollerConfig`` is built once at startup and handed to whatever
needs it.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from log_roller.config.defaults import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PARTITION,
    DELETE_TARGET_ORIGIN,
    DELETE_TARGETS,
    LIST_DELIMITER,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration value is missing or malformed."""


def split_list(value, delimiter: str = LIST_DELIMITER) -> list[str]:
    """Split a delimited string (or pass through a list), keeping order.

    Blank entries are dropped and surrounding whitespace is stripped.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(delimiter)
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        raise ConfigError(f"Expected a string or list, got {type(value).__name__}")
    return [item.strip() for item in items if item.strip()]


def expand_path(path_str: str) -> str:
    return os.path.expanduser(os.path.expandvars(path_str))


@dataclass(frozen=True)
class RollerConfig:
    origin_dirs: list[str]
    backup_dir: str
    backup_dirs: list[str]
    copy_days: int
    move_days: int
    origin_hold_days: int
    backup_hold_days: int
    partition: str = DEFAULT_PARTITION
    extension_filter: bool = False
    extension_types: frozenset[str] = field(default_factory=frozenset)
    delete_target: str = DELETE_TARGET_ORIGIN
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "RollerConfig":
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a JSON object")

        origin = _section(data, "origin")
        backup = _section(data, "backup")
        extension = data.get("extension") or {}
        delete = data.get("delete") or {}
        logging_cfg = data.get("logging") or {}

        origin_dirs = [expand_path(d) for d in split_list(_require(origin, "origin", "directories"))]
        if not origin_dirs:
            raise ConfigError("origin.directories must name at least one directory")

        backup_dir = _require(backup, "backup", "directory")
        if not isinstance(backup_dir, str) or not backup_dir.strip():
            raise ConfigError("backup.directory must be a non-empty string")
        backup_dir = expand_path(backup_dir.strip())
        backup_dirs = [expand_path(d) for d in split_list(backup.get("directories"))] or [backup_dir]

        partition = backup.get("partition", DEFAULT_PARTITION)
        if not isinstance(partition, str):
            raise ConfigError("backup.partition must be a string")

        delete_target = str(delete.get("target", DELETE_TARGET_ORIGIN)).lower()
        if delete_target not in DELETE_TARGETS:
            raise ConfigError(
                f"delete.target must be one of {', '.join(DELETE_TARGETS)}, got {delete_target!r}"
            )

        log_level = str(logging_cfg.get("level", DEFAULT_LOG_LEVEL)).upper()
        if log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ConfigError(f"logging.level is not a valid level: {log_level!r}")

        return cls(
            origin_dirs=origin_dirs,
            backup_dir=backup_dir,
            backup_dirs=backup_dirs,
            partition=partition,
            extension_filter=_as_bool(extension.get("filter", False), "extension.filter"),
            extension_types=frozenset(split_list(extension.get("types"))),
            copy_days=_as_int(_require(origin, "origin", "copy_days"), "origin.copy_days"),
            move_days=_as_int(_require(origin, "origin", "move_days"), "origin.move_days"),
            origin_hold_days=_as_int(_require(origin, "origin", "hold_days"), "origin.hold_days"),
            backup_hold_days=_as_int(_require(backup, "backup", "hold_days"), "backup.hold_days"),
            delete_target=delete_target,
            log_level=log_level,
            log_file=logging_cfg.get("file") or None,
        )


def load_config(config_path: str = None) -> RollerConfig:
    """Read and validate the JSON configuration file."""
    path = Path(config_path or DEFAULT_CONFIG_PATH)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    config = RollerConfig.from_dict(data)
    logger.debug("Loaded configuration from %s", path)
    return config


# ----------------------------------------------------------------------
# Value coercion
# ----------------------------------------------------------------------

def _section(data: dict, name: str) -> dict:
    section = data.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"Missing configuration section: {name}")
    return section


def _require(section: dict, section_name: str, key: str):
    if key not in section or section[key] is None:
        raise ConfigError(f"Missing configuration key: {section_name}.{key}")
    return section[key]


def _as_int(value, key: str) -> int:
    # bool is an int subclass
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ConfigError(f"{key} must be an integer, got {value!r}")


def _as_bool(value, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigError(f"{key} must be true or false, got {value!r}")
