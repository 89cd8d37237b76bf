"""
Application configuration assembly.

Builds the module configuration map from a project manifest
(pyproject.toml) or a YAML file. The main application entry is stored under
MAIN_APP_NAME; every other top-level key is a module name.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ...config import Config
from ..constants import MAIN_APP_FIELDS, MAIN_APP_NAME, MANIFEST_TOOL_TABLE
from ..errors import ConfigurationError

MANIFEST_NAME = "pyproject.toml"


def find_manifest(start: str | Path) -> Path:
    """
    Find the nearest pyproject.toml at or above start.

    Raises:
        ConfigurationError: If none exists
    """
    path = Path(start).resolve()
    if path.is_file():
        path = path.parent
    for directory in (path, *path.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    raise ConfigurationError(f"no {MANIFEST_NAME} found at or above '{start}'")


def _author(project: Mapping[str, Any]) -> str | None:
    authors = project.get("authors") or []
    if not authors:
        return None
    first = authors[0]
    if isinstance(first, Mapping):
        name, email = first.get("name"), first.get("email")
        if name and email:
            return f"{name} <{email}>"
        return name or email
    return str(first)


def _homepage(project: Mapping[str, Any]) -> str | None:
    urls = project.get("urls") or {}
    for key in ("homepage", "Homepage", "home", "Home"):
        if key in urls:
            return urls[key]
    return None


def _main_entry_from_project(project: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "name": project.get("name"),
        "description": project.get("description"),
        "version": project.get("version"),
        "keywords": project.get("keywords"),
        "homepage": _homepage(project),
        "author": _author(project),
    }


def _merge(base: dict[str, Any], extra: Mapping[str, Any]) -> dict[str, Any]:
    """Merge extra into base; the main app entry is merged key by key."""
    for key, value in extra.items():
        if key == MAIN_APP_NAME and isinstance(value, Mapping):
            base[MAIN_APP_NAME] = {**base.get(MAIN_APP_NAME, {}), **value}
        else:
            base[key] = value
    return base


def get_config_from_pkg(pkg: Mapping[str, Any] | str | Path) -> dict[str, Any]:
    """
    Build the application configuration from a project manifest.

    Args:
        pkg: Parsed manifest, or a path searched upwards for pyproject.toml.
             A parsed manifest is either pyproject-shaped ({"project": ...,
             "tool": {"appmods": ...}}) or flat ({"name": ..., "config": ...}).

    Returns:
        dict: {"app": {name, description, version, keywords, homepage,
              author}, <module>: <module config>, ...}

    Example:
        # pyproject.toml
        # [project]
        # name = "my-app"
        # [tool.appmods.http]
        # port = 8080
        config = get_config_from_pkg("src/modules")
        # {"app": {"name": "my-app", ...}, "http": {"port": 8080}}
    """
    if isinstance(pkg, (str, Path)):
        with open(find_manifest(pkg), "rb") as f:
            try:
                pkg = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigurationError(f"invalid {MANIFEST_NAME}: {e}") from e

    if not isinstance(pkg, Mapping):
        raise ConfigurationError("package must be a mapping or a path")

    if "project" in pkg:
        main = _main_entry_from_project(pkg["project"])
        modules = pkg.get("tool", {}).get(MANIFEST_TOOL_TABLE, {})
    else:
        main = {field: pkg.get(field) for field in MAIN_APP_FIELDS}
        modules = pkg.get("config") or {}

    return _merge({MAIN_APP_NAME: main}, modules)


def load_app_config(
    path: str | Path, base: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """
    Load the configuration map from a YAML file.

    Args:
        path: YAML file (module name -> module config)
        base: Configuration to merge the file into, e.g. from the manifest

    Raises:
        ConfigError: If the file cannot be loaded
    """
    config = Config(path)
    return _merge(dict(base or {}), config)
