"""
Fixtures for module source directories and applications.
"""

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from appmods.app import Application
from appmods.log import Logger


@pytest.fixture
def srcdir(temp_dir: Path) -> Path:
    path = temp_dir / "modules"
    path.mkdir()
    return path


@pytest.fixture
def write_module(srcdir: Path) -> Callable[[str, str], Path]:
    """
    Write a module source file into srcdir.

    Usage:
        write_module("http", '''
            from appmods import Module

            class Http(Module):
                pass
        ''')
    """

    def _write(filename: str, source: str) -> Path:
        path = srcdir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source))
        return path

    return _write


@pytest.fixture
def make_app(srcdir: Path, lg: Logger) -> Callable[..., Application]:
    """
    Build an Application from a module-name -> class map.

    Classes are registered as factories, so no source files are needed.
    """

    def _make(modules: dict, name: str = "test-app", **configs) -> Application:
        config = {"app": {"name": name}}
        for mod in modules:
            config[mod] = dict(configs.get(mod, {}))
        app = Application(config, srcdir, lg=lg)
        for mod, cls in modules.items():
            app.registry.register(mod, cls)
        return app

    return _make
