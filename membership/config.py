"""Config loading for the membership reader.

Reads `.membership/config.yaml` (or `~/.membership/config.yaml`) into a flat
key → value lookup. Nested YAML mappings are flattened to dotted keys, so both
of these set the DFS include file:

    dfs.hosts: /etc/hadoop/dfs.include

    dfs:
      hosts: /etc/hadoop/dfs.include

Config search order:
  1. `config_path` argument (explicit override, used by tests)
  2. MEMBERSHIP_CONFIG environment variable (if set)
  3. `.membership/config.yaml` (working directory)
  4. `~/.membership/config.yaml` (home directory)

If no config file is found, an empty Config is returned and every lookup falls
back to its default (safe to run without config).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, runtime_checkable

import yaml

from membership.constants import ENV_CONFIG_PATH
from membership.hosts.store import MembershipError
from membership.utils.logger import get_logger

logger = get_logger(__name__)

# Default config search paths (MEMBERSHIP_CONFIG env var prepended at runtime)
DEFAULT_CONFIG_PATHS = [
    ".membership/config.yaml",
    os.path.expanduser("~/.membership/config.yaml"),
]


class ConfigError(MembershipError):
    """Raised when the config file is unreadable or a value has the wrong type."""


# ─── ConfigSource Protocol ────────────────────────────────────────────────────


@runtime_checkable
class ConfigSource(Protocol):
    """Key → value lookup with caller-supplied defaults."""

    def get_string(self, key: str, default: str = "") -> str:
        ...

    def get_int(self, key: str, default: int = 0) -> int:
        ...


# ─── Config ───────────────────────────────────────────────────────────────────


@dataclass
class Config:
    """Flat dotted-key config populated from a YAML file plus overrides."""

    values: dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None  # Path of the loaded config file, if any

    @classmethod
    def defaults(cls) -> "Config":
        """Return an empty Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], path: Optional[str] = None) -> "Config":
        """Construct a Config from a parsed YAML mapping, flattening nested keys."""
        return cls(values=_flatten(raw), path=path)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def get_string(self, key: str, default: str = "") -> str:
        value = self.values.get(key)
        if value is None:
            return default
        return str(value)

    def get_int(self, key: str, default: int = 0) -> int:
        """Return ``key`` as an int; numeric strings are accepted.

        Raises:
            ConfigError: the value is present but not an integer.
        """
        value = self.values.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            raise ConfigError(f"Config value for '{key}' must be an integer, got {value!r}")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigError(
                f"Config value for '{key}' must be an integer, got {value!r}"
            ) from None


def _flatten(raw: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in raw.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, Mapping):
            flat.update(_flatten(value, prefix=f"{full_key}."))
        else:
            flat[full_key] = value
    return flat


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> Config:
    """Load the membership config.

    Search order:
      1. ``config_path`` argument
      2. ``MEMBERSHIP_CONFIG`` environment variable
      3. ``.membership/config.yaml``
      4. ``~/.membership/config.yaml``

    A missing file is NOT an error; returns Config.defaults().

    Raises:
        ConfigError: On YAML parse error, unreadable file, or a non-mapping
                     top-level document.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get(ENV_CONFIG_PATH)
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    if found_path is None:
        logger.info("No config file found — using defaults", searched=search_paths)
        return Config.defaults()

    logger.info("Loading config", path=found_path)

    try:
        with open(found_path) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {found_path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Could not read {found_path}: {exc}") from exc

    # Empty file: nothing configured
    if raw is None:
        return Config(path=found_path)

    if not isinstance(raw, dict):
        raise ConfigError(
            f"{found_path} is not a valid YAML mapping. "
            "The config file must be a YAML dictionary at the top level."
        )

    config = Config.from_dict(raw, path=found_path)
    logger.info("Config loaded", path=found_path, keys=len(config.values))
    return config
