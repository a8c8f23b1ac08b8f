"""Layered configuration for h5packer.

A key is looked up in these layers, first hit wins:

    cli            options given on the command line
    env            H5PACKER_<KEY> with dots as underscores
    user_config    ~/.config/h5packer/config.yaml
    system_config  /etc/h5packer/config.yaml
    default        built-in values below
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from h5packer.core.errors import ConfigError

ALLOWED_LOGGING_LEVELS = frozenset({"quiet", "normal", "verbose", "debug"})
DEFAULT_LOGGING_LEVEL = "normal"

ENV_PREFIX = "H5PACKER_"

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})
_NULL_STRINGS = frozenset({"", "null", "none"})


@dataclass(frozen=True)
class LoggingPolicy:
    """Logging settings after validation."""

    level_name: str
    color: bool
    sources: dict[str, str] = field(default_factory=dict)


def env_name(key: str) -> str:
    """``pack.compresslevel`` -> ``H5PACKER_PACK_COMPRESSLEVEL``."""
    return ENV_PREFIX + key.upper().replace(".", "_")


def lookup(data: Mapping[str, Any], key: str) -> Any | None:
    """Walk ``data`` along the dotted ``key``; None when any step is missing."""
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


class ConfigResolver:
    """Look up settings across CLI, environment, YAML files and defaults.

    Example:
        resolver = ConfigResolver(cli_args={"pack": {"reproducible": True}})
        resolver.resolve("pack.reproducible")   # (True, "cli")
        resolver.resolve("unpack.dir_mode")     # (0o755, "default")

    YAML files are read lazily, at most once per resolver.
    """

    def __init__(
        self,
        cli_args: dict[str, Any] | None = None,
        user_config_path: Path | None = None,
        system_config_path: Path | None = None,
        defaults: dict[str, Any] | None = None,
    ) -> None:
        self.cli_args = cli_args or {}
        self.user_config_path = user_config_path or Path.home() / ".config/h5packer/config.yaml"
        self.system_config_path = system_config_path or Path("/etc/h5packer/config.yaml")
        self.defaults = self._default_config() if defaults is None else defaults
        self._files: dict[Path, dict[str, Any]] = {}

    def _layers(self) -> list[tuple[str, Callable[[str], Any | None]]]:
        return [
            ("cli", lambda key: lookup(self.cli_args, key)),
            ("env", lambda key: os.environ.get(env_name(key))),
            ("user_config", lambda key: lookup(self._file(self.user_config_path), key)),
            ("system_config", lambda key: lookup(self._file(self.system_config_path), key)),
            ("default", lambda key: lookup(self.defaults, key)),
        ]

    def resolve(self, key: str) -> tuple[Any, str]:
        """Return ``(value, source)`` for a dotted key such as ``logging.level``.

        Raises:
            ConfigError: If no layer provides the key, or a config file is unreadable.
        """
        found = self._try_resolve(key)
        if found is None:
            raise ConfigError(f"Config key '{key}' not found in any source")
        return found

    def _try_resolve(self, key: str) -> tuple[Any, str] | None:
        """Like :meth:`resolve`, but None when no layer provides ``key``."""
        for source, get in self._layers():
            value = get(key)
            if value is not None:
                return value, source
        return None

    def resolve_bool(self, key: str, default: bool = False) -> bool:
        found = self._try_resolve(key)
        if found is None:
            return default
        value = found[0]
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in _TRUE_STRINGS:
                return True
            if text in _FALSE_STRINGS:
                return False
        raise ConfigError(f"Config key '{key}' must be a bool, got {value!r}")

    def resolve_int(
        self,
        key: str,
        default: int | None = None,
        *,
        base: int = 10,
        valid: range | None = None,
    ) -> int | None:
        """Integer lookup; strings are parsed with ``base`` (``0o`` prefix allowed).

        When ``valid`` is given, a configured value outside it is a ConfigError;
        the default is returned unchecked.
        """
        found = self._try_resolve(key)
        if found is None:
            return default
        value = found[0]
        number: int | None = None
        if isinstance(value, int) and not isinstance(value, bool):
            number = value
        elif isinstance(value, str):
            text = value.strip().lower()
            if text in _NULL_STRINGS:
                return default
            try:
                number = int(text, 8) if text.startswith("0o") else int(text, base)
            except ValueError:
                pass
        if number is None:
            raise ConfigError(f"Config key '{key}' must be an int, got {value!r}")
        if valid is not None and number not in valid:
            raise ConfigError(
                f"Config key '{key}' must be between {valid.start} and {valid.stop - 1}, "
                f"got {value!r}"
            )
        return number

    def resolve_logging_policy(self) -> LoggingPolicy:
        found = self._try_resolve("logging.level")
        raw, src = found if found is not None else (DEFAULT_LOGGING_LEVEL, "default")
        if not isinstance(raw, str):
            raise ConfigError(
                f"Config key 'logging.level' must be a string, got {type(raw).__name__}"
            )
        level = raw.strip().lower()
        if level not in ALLOWED_LOGGING_LEVELS:
            raise ConfigError(
                f"Invalid 'logging.level': {raw!r}. "
                f"Allowed values: {', '.join(sorted(ALLOWED_LOGGING_LEVELS))}"
            )
        return LoggingPolicy(
            level_name=level,
            color=self.resolve_bool("logging.color", True),
            sources={"level_name": src},
        )

    def _file(self, path: Path) -> dict[str, Any]:
        if path not in self._files:
            self._files[path] = self._read_yaml(path)
        return self._files[path]

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Failed to load config from {path}: {e}") from e
        # An empty file or a top-level list carries no settings.
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _default_config() -> dict[str, Any]:
        return {
            "logging": {"level": DEFAULT_LOGGING_LEVEL, "color": True},
            "progress": {"enabled": True},
            # compresslevel None selects the zlib default level.
            "pack": {"compresslevel": None, "reproducible": False},
            "unpack": {"dir_mode": 0o755},
            "debug": {"include_trace": False},
        }
