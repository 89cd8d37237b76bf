"""
Error classes for the appmods.app package.
"""

from typing import Any


class InfraAppError(Exception):
    """Base exception for appmods.app package."""

    pass


class ConfigurationError(InfraAppError):
    """Raised when the application configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class LifecycleError(InfraAppError):
    """Raised when a lifecycle operation is called in the wrong state."""

    def __init__(self, message: str):
        super().__init__(f"Lifecycle error: {message}")


class ModuleRegistrationError(InfraAppError):
    """Raised when a module name cannot be registered."""

    def __init__(self, module_name: str, reason: str):
        self.module_name = module_name
        self.reason = reason
        super().__init__(f"Failed to register module '{module_name}': {reason}")


class ModuleResolutionError(InfraAppError):
    """Raised when a module name cannot be resolved to a module class."""

    def __init__(self, module_name: str, reason: str):
        self.module_name = module_name
        self.reason = reason
        super().__init__(f"Failed to resolve module '{module_name}': {reason}")


class ModuleInitError(InfraAppError):
    """Raised when a module class fails to construct."""

    def __init__(self, module_name: str, cause: BaseException):
        self.module_name = module_name
        self.cause = cause
        super().__init__(f"Failed to initialize module '{module_name}': {cause}")


class ModuleStartError(InfraAppError):
    """Raised when a module fails to start, aborting the whole start."""

    def __init__(self, module_name: str, cause: BaseException):
        self.module_name = module_name
        self.cause = cause
        super().__init__(f"Failed to start module '{module_name}': {cause}")


class CodedError(InfraAppError):
    """
    Error carrying a machine-readable code namespaced to the application.

    Created through ErrorReporter, so the code always has the form
    `<APP_PREFIX>_<CODE>`, e.g. `MY_APP_MODULE_NOT_FOUND`.
    """

    def __init__(self, message: str, code: str, **context: Any):
        self.message = message
        self.code = code
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"
