"""
Configuration loading for YAML files.

Config is a plain dict of the loaded document, so it can be handed to
Application directly. On top of the YAML content it supports:
- ${dotted.path} substitution from values of the same document
- environment overrides: APPMODS_<SECTION>_<KEY>=value
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ConfigError
from .constants import DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES

_VAR_PATTERN = re.compile(r"\$\{([a-zA-Z0-9_.\-]+)\}")

_MISSING = object()


def _check_file_size(path: Path) -> None:
    """Check file size limit to prevent DoS attacks."""
    size = path.stat().st_size
    if size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "configuration file too large",
            path=str(path),
            size=size,
            limit=MAX_CONFIG_SIZE_BYTES,
        )


def _convert_env_value(value: str) -> Any:
    """Convert an environment variable string to bool, int, float, list or str."""
    lowered = value.lower()
    if lowered in ("null", "none", ""):
        return None
    if lowered in ("true", "false"):
        return lowered == "true"
    if "," in value:
        return [_convert_env_value(v.strip()) for v in value.split(",")]
    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def _set_nested_value(data: dict, path: list[str], value: Any) -> None:
    current = data
    for part in path[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[path[-1]] = value


class Config(dict):
    """
    Configuration loaded from a YAML file.

    Example:
        config = Config("etc/app.yaml")
        port = config.lookup("http.port", 8080)
        app = Application(config, "src/modules")
    """

    def __init__(
        self,
        fname: str | Path,
        enable_env_overrides: bool = True,
        env_prefix: str = DEFAULT_ENV_PREFIX,
    ) -> None:
        super().__init__()
        self._enable_env_overrides = enable_env_overrides
        self._env_prefix = env_prefix
        self._path = Path(fname).resolve()
        self._load()

    def _load(self) -> None:
        if not self._path.is_file():
            raise ConfigError("configuration file not found", path=str(self._path))
        _check_file_size(self._path)

        try:
            with open(self._path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(
                "invalid YAML", path=str(self._path), error=str(e)
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(
                "configuration root must be a mapping", path=str(self._path)
            )

        if self._enable_env_overrides:
            self._apply_env_overrides(data)

        self.clear()
        self.update(data)
        self.update(self._resolve(data))

    def lookup(self, path: str, default: Any = _MISSING) -> Any:
        """
        Get a value by dotted path.

        Raises:
            KeyError: If the path does not exist and no default was given
        """
        current: Any = self
        for part in path.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            elif default is _MISSING:
                raise KeyError(path)
            else:
                return default
        return current

    def _resolve(self, content: Any) -> Any:
        """Recursively replace ${path} references with their values."""
        if isinstance(content, dict):
            return {k: self._resolve(v) for k, v in content.items()}
        if isinstance(content, list):
            return [self._resolve(v) for v in content]
        if isinstance(content, str):
            return _VAR_PATTERN.sub(self._substitute_var, content)
        return content

    def _substitute_var(self, match: re.Match) -> str:
        var_name = match.group(1)
        try:
            return str(self.lookup(var_name))
        except KeyError:
            raise ConfigError(
                "undefined variable", variable=var_name, path=str(self._path)
            ) from None

    def _collect_env_vars(self) -> dict[str, str]:
        return {k: v for k, v in os.environ.items() if k.startswith(self._env_prefix)}

    def _env_key_to_path(self, env_key: str) -> list[str]:
        """Convert APPMODS_HTTP_PORT to ['http', 'port']."""
        return env_key[len(self._env_prefix) :].lower().split("_")

    def _apply_env_overrides(self, data: dict) -> None:
        for env_key, env_value in self._collect_env_vars().items():
            path = self._env_key_to_path(env_key)
            if not all(path):
                continue
            _set_nested_value(data, path, _convert_env_value(env_value))
