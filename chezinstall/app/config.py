"""Configuration utilities for chezinstall.

Settings are resolved in order of precedence: explicit values (CLI options),
then an optional JSON config file, then the environment (``BINDIR``,
``LOG_LEVEL``), then built-in defaults.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError

from chezinstall.domain.errors import ConfigError
from chezinstall.domain.models import (
    DEFAULT_BASE_URL,
    DEFAULT_PROJECT,
    DEFAULT_REPO,
    LATEST_TAG,
)
from chezinstall.infrastructure.observability import DEFAULT_LOG_LEVEL

DEFAULT_BINDIR = "bin"
DEFAULT_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class InstallerConfig:
    """Resolved installer settings."""

    bindir: Path = Path(DEFAULT_BINDIR)
    tag: str = LATEST_TAG
    log_level: int = DEFAULT_LOG_LEVEL
    project: str = DEFAULT_PROJECT
    repo: str = DEFAULT_REPO
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    binary_args: tuple[str, ...] = field(default_factory=tuple)


class ConfigFile(BaseModel):
    """Schema of the optional JSON config file.

    Keys left out or set to ``null`` fall through to the environment and
    defaults.
    """

    model_config = ConfigDict(extra="forbid")

    bindir: StrictStr | None = None
    tag: StrictStr | None = None
    log_level: StrictInt | None = None
    project: StrictStr | None = None
    repo: StrictStr | None = None
    base_url: StrictStr | None = None
    timeout_seconds: float | None = None
    binary_args: list[StrictStr] | None = None


def load_config(path: str | Path) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file.

    Returns:
        A dictionary of configuration values.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"unable to read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must contain a JSON object")
    return data


def parse_log_level(value: Any) -> int:
    """Validate a ``LOG_LEVEL`` value (0-3)."""
    try:
        level = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"LOG_LEVEL must be an integer 0-3, got {value!r}") from exc
    if not 0 <= level <= 3:
        raise ConfigError(f"LOG_LEVEL must be between 0 and 3, got {level}")
    return level


def _from_environ(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    if environ.get("BINDIR"):
        values["bindir"] = environ["BINDIR"]
    if environ.get("LOG_LEVEL"):
        values["log_level"] = environ["LOG_LEVEL"]
    return values


def build_config(
    *,
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> InstallerConfig:
    """Merge defaults, environment, config file and ``overrides``.

    ``None`` overrides are ignored so Click options left unset fall through
    to the lower-precedence sources.
    """
    known = {f.name for f in fields(InstallerConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(sorted(unknown))}")

    merged: Dict[str, Any] = {}
    merged.update(_from_environ(os.environ if environ is None else environ))
    if config_path is not None:
        try:
            file_config = ConfigFile.model_validate(load_config(config_path))
        except ValidationError as exc:
            raise ConfigError(f"invalid config {config_path}: {exc}") from exc
        merged.update(file_config.model_dump(exclude_none=True))
    merged.update({k: v for k, v in overrides.items() if v is not None})

    if "bindir" in merged:
        merged["bindir"] = Path(merged["bindir"]).expanduser()
    if "log_level" in merged:
        merged["log_level"] = parse_log_level(merged["log_level"])
    if "timeout_seconds" in merged:
        try:
            merged["timeout_seconds"] = float(merged["timeout_seconds"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"timeout_seconds must be a number, got {merged['timeout_seconds']!r}"
            ) from exc
    if "binary_args" in merged:
        args = merged["binary_args"]
        if isinstance(args, str) or not all(isinstance(a, str) for a in args):
            raise ConfigError(f"binary_args must be a list of strings, got {args!r}")
        merged["binary_args"] = tuple(args)
    return InstallerConfig(**merged)


__all__ = [
    "DEFAULT_BINDIR",
    "ConfigFile",
    "InstallerConfig",
    "build_config",
    "load_config",
    "parse_log_level",
]
