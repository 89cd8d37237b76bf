"""
Application framework: module registry, module base class, orchestrator.
"""

from .constants import DEFAULT_STOP_TIMEOUT_MS, MAIN_APP_NAME
from .core import (
    Application,
    LifecycleState,
    Outcome,
    ShutdownCoordinator,
    StopResult,
    get_config_from_pkg,
    load_app_config,
)
from .errors import (
    CodedError,
    ConfigurationError,
    InfraAppError,
    LifecycleError,
    ModuleInitError,
    ModuleRegistrationError,
    ModuleResolutionError,
    ModuleStartError,
)
from .module import Module, ModuleProtocol
from .registry import ModuleRegistry
from .reporter import ErrorReporter

__all__ = [
    "Application",
    "CodedError",
    "ConfigurationError",
    "DEFAULT_STOP_TIMEOUT_MS",
    "ErrorReporter",
    "InfraAppError",
    "LifecycleError",
    "LifecycleState",
    "MAIN_APP_NAME",
    "Module",
    "ModuleInitError",
    "ModuleProtocol",
    "ModuleRegistrationError",
    "ModuleRegistry",
    "ModuleResolutionError",
    "ModuleStartError",
    "Outcome",
    "ShutdownCoordinator",
    "StopResult",
    "get_config_from_pkg",
    "load_app_config",
]
