#!/usr/bin/env python3
"""
appmods CLI - run and inspect module-based applications.

Usage:
    appmods run src/modules
    appmods run src/modules -c etc/app.yaml --log-level debug -- --port 9000
    appmods modules src/modules
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

import appmods
from appmods.app import (
    Application,
    ConfigurationError,
    InfraAppError,
    get_config_from_pkg,
    load_app_config,
)
from appmods.app.core.fanout import stop_timeout_ms
from appmods.exceptions import AppModsError
from appmods.log import LogConfig, Logger, LoggerFactory


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appmods", description="Run and inspect module-based applications"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"appmods {appmods.__version__}"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="start all modules and stop them on SIGINT/SIGTERM")
    _add_app_args(run)
    run.add_argument(
        "--log-level", default=None, help="log level (trace, debug, info, warning, error)"
    )

    modules = sub.add_parser("modules", help="list configured modules")
    _add_app_args(modules)
    return parser


def _add_app_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("srcdir", help="directory holding the module files")
    parser.add_argument(
        "-c", "--config", default=None, help="YAML file with module configuration"
    )


def _load_conf(srcdir: str, config_file: str | None) -> dict[str, Any]:
    """Configuration from pyproject.toml, overlaid with the YAML file if given."""
    try:
        base = get_config_from_pkg(srcdir)
    except ConfigurationError:
        if config_file is None:
            raise
        base = {}
    if config_file is None:
        return base
    return load_app_config(config_file, base)


def _create_logger(conf: dict[str, Any], level: str | None) -> Logger:
    section = dict((conf.get(Application.main_app_name) or {}).get("logging") or {})
    if level is not None:
        section["level"] = level
    return LoggerFactory.create_root(LogConfig.from_config(section))


def _split_module_args(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split argv at the first "--"; what follows is parsed by the modules."""
    if "--" not in argv:
        return argv, []
    i = argv.index("--")
    return argv[:i], argv[i + 1 :]


def _run(args: argparse.Namespace) -> int:
    conf = _load_conf(args.srcdir, args.config)
    lg = _create_logger(conf, args.log_level)
    try:
        return asyncio.run(
            Application.run(args.srcdir, conf, argv=args.module_args, lg=lg)
        )
    except Exception as e:
        lg.error("app error", extra={"exception": e})
        return 1


def _list_modules(args: argparse.Namespace, console: Console) -> int:
    conf = _load_conf(args.srcdir, args.config)
    lg = _create_logger(conf, "warning")
    app = Application(conf, args.srcdir, lg=lg)
    app.require()

    table = Table(title=f"{app.name} modules")
    table.add_column("Module", style="bold blue")
    table.add_column("Class")
    table.add_column("Stop timeout", justify="right")
    table.add_column("Config keys", style="dim")

    for name in app.modules:
        cls = app.registry.get(name)
        mod_conf = app.config[name] if isinstance(app.config[name], Mapping) else {}
        timeout = mod_conf.get("stop_timeout_ms")
        if timeout is None:
            timeout = stop_timeout_ms(cls)
        table.add_row(
            name,
            f"{cls.__module__}.{cls.__qualname__}",
            f"{timeout} ms",
            ", ".join(sorted(mod_conf)) or "-",
        )

    console.print(table)
    return 0


def main(argv: Sequence[str] | None = None, console: Console | None = None) -> int:
    """Main entry point for the appmods CLI."""
    own, module_args = _split_module_args(list(sys.argv[1:] if argv is None else argv))
    args = _build_parser().parse_args(own)
    args.module_args = module_args
    console = console or Console(stderr=args.command == "run")
    try:
        if args.command == "run":
            return _run(args)
        return _list_modules(args, console)
    except (AppModsError, InfraAppError) as e:
        console.print(f"[red bold]error:[/red bold] {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
