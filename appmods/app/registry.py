"""
Module registration and resolution.

ModuleRegistry maps module names to constructible classes. A name resolves
either through a factory registered up front or by loading
`<srcdir>/<name>.py` (or the `<name>/` package) from the source root.
Resolved classes are memoized.
"""

from __future__ import annotations

import importlib.util
import inspect
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from .constants import MAX_MODULE_COUNT, MAX_MODULE_NAME_LENGTH, MODULE_CLASS_ATTR
from .errors import ModuleRegistrationError, ModuleResolutionError
from .module import Module

# Loaded source files live under this package name in sys.modules
_LOADED_PREFIX = "appmods._loaded"

_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_-]*$")


def validate_module_name(name: Any) -> None:
    """Validate module name format."""
    if not isinstance(name, str):
        raise ModuleRegistrationError(str(name), "Module name must be a string")

    if not name:
        raise ModuleRegistrationError("", "Module must have a name")

    if len(name) > MAX_MODULE_NAME_LENGTH:
        raise ModuleRegistrationError(
            name,
            f"Module name exceeds maximum length of {MAX_MODULE_NAME_LENGTH} characters",
        )

    if not _NAME_PATTERN.match(name):
        raise ModuleRegistrationError(
            name,
            "Module name must start with a lowercase letter and contain only "
            "lowercase letters, numbers, underscores, and hyphens (e.g., 'http', 'db-pool')",
        )


def _candidate_paths(srcdir: Path, name: str) -> list[Path]:
    stems = [name]
    if "-" in name:
        stems.append(name.replace("-", "_"))

    paths = []
    for stem in stems:
        paths.append(srcdir / f"{stem}.py")
        paths.append(srcdir / stem / "__init__.py")
    return paths


def _load_source(name: str, path: Path) -> ModuleType:
    """Execute a source file as a fresh Python module."""
    mod_name = f"{_LOADED_PREFIX}.{name.replace('-', '_')}"
    kwargs: dict[str, Any] = {}
    if path.name == "__init__.py":
        kwargs["submodule_search_locations"] = [str(path.parent)]

    spec = importlib.util.spec_from_file_location(mod_name, path, **kwargs)
    if spec is None or spec.loader is None:
        raise ModuleResolutionError(name, f"cannot load '{path}'")

    pymod = importlib.util.module_from_spec(spec)
    sys.modules[mod_name] = pymod
    try:
        spec.loader.exec_module(pymod)
    except Exception as e:
        sys.modules.pop(mod_name, None)
        raise ModuleResolutionError(name, f"error loading '{path}': {e}") from e
    return pymod


def _find_module_class(name: str, pymod: ModuleType) -> type:
    """Pick the constructible unit out of a loaded source file."""
    explicit = getattr(pymod, MODULE_CLASS_ATTR, None)
    if explicit is not None:
        if not callable(explicit):
            raise ModuleResolutionError(name, f"'{MODULE_CLASS_ATTR}' is not callable")
        return explicit

    found = [
        obj
        for obj in vars(pymod).values()
        if inspect.isclass(obj)
        and issubclass(obj, Module)
        and obj is not Module
        and obj.__module__ == pymod.__name__
    ]
    if len(found) != 1:
        raise ModuleResolutionError(
            name,
            f"expected '{MODULE_CLASS_ATTR}' or exactly one Module subclass, "
            f"found {len(found)}",
        )
    return found[0]


class ModuleRegistry:
    """Resolves module names to classes relative to a source root."""

    def __init__(self, srcdir: str | Path) -> None:
        self._srcdir = Path(srcdir)
        self._factories: dict[str, Any] = {}
        self._classes: dict[str, Any] = {}

    @property
    def srcdir(self) -> Path:
        return self._srcdir

    def register(self, name: str, factory: Any) -> None:
        """
        Register a constructible unit for name, bypassing file lookup.

        Raises:
            ModuleRegistrationError: If the name is invalid or factory is not callable
        """
        validate_module_name(name)
        if not callable(factory):
            raise ModuleRegistrationError(name, "Module factory must be callable")
        self._factories[name] = factory
        self._classes.pop(name, None)

    def resolve(self, name: str) -> Any:
        """
        Resolve name to its module class, loading it on first use.

        Raises:
            ModuleRegistrationError: If the name is invalid or limits are exceeded
            ModuleResolutionError: If no module can be found or loaded
        """
        cached = self._classes.get(name)
        if cached is not None:
            return cached

        validate_module_name(name)
        if len(self._classes) >= MAX_MODULE_COUNT:
            raise ModuleRegistrationError(
                name,
                f"Cannot register module: maximum module count ({MAX_MODULE_COUNT}) exceeded",
            )

        if name in self._factories:
            cls = self._factories[name]
        else:
            cls = self._load(name)

        self._classes[name] = cls
        return cls

    def _load(self, name: str) -> Any:
        for path in _candidate_paths(self._srcdir, name):
            if path.is_file():
                return _find_module_class(name, _load_source(name, path))
        raise ModuleResolutionError(
            name, f"no module file found in '{self._srcdir}'"
        )

    def get(self, name: str) -> Any | None:
        """Get the resolved class for name, or None."""
        return self._classes.get(name)

    def is_resolved(self, name: str) -> bool:
        return name in self._classes

    def list_modules(self) -> list[str]:
        """List resolved module names in resolution order."""
        return list(self._classes.keys())

    def clear(self) -> None:
        """Forget resolved classes; registered factories are kept."""
        self._classes.clear()
