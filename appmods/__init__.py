from importlib.metadata import PackageNotFoundError, version

from .app import (
    Application,
    CodedError,
    ConfigurationError,
    ErrorReporter,
    LifecycleError,
    LifecycleState,
    Module,
    ModuleRegistry,
    Outcome,
    ShutdownCoordinator,
    StopResult,
    get_config_from_pkg,
    load_app_config,
)
from .config import Config
from .exceptions import AppModsError, ConfigError, LoggingError

# Version is read from package metadata (pyproject.toml)
try:
    __version__ = version("appmods")
except PackageNotFoundError:
    # Package not installed (development mode)
    __version__ = "0.0.0.dev0"

__all__ = [
    "AppModsError",
    "Application",
    "CodedError",
    "Config",
    "ConfigError",
    "ConfigurationError",
    "ErrorReporter",
    "LifecycleError",
    "LifecycleState",
    "LoggingError",
    "Module",
    "ModuleRegistry",
    "Outcome",
    "ShutdownCoordinator",
    "StopResult",
    "__version__",
    "get_config_from_pkg",
    "load_app_config",
]
