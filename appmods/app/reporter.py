"""
Namespaced error-raising facility.

Every module of an application receives the same ErrorReporter, so every
error it raises carries the application's code prefix.
"""

from typing import Any

from .errors import CodedError, ConfigurationError


def code_prefix(app_name: str) -> str:
    """
    Derive the error-code prefix from the main application name.

    Example:
        >>> code_prefix("my-app")
        'MY_APP'
    """
    if not isinstance(app_name, str) or not app_name:
        raise ConfigurationError("main application name must be a non-empty string")
    return app_name.replace("-", "_").upper()


class ErrorReporter:
    """Builds and raises CodedError instances under a fixed prefix."""

    def __init__(self, prefix: str) -> None:
        self._prefix = prefix

    @property
    def prefix(self) -> str:
        return self._prefix

    def code(self, code: str) -> str:
        """Return the namespaced form of code."""
        return f"{self._prefix}_{code}"

    def raise_error(
        self,
        code: str,
        message: str = "Error",
        just_return: bool = False,
        **context: Any,
    ) -> CodedError:
        """
        Create a namespaced error and raise it.

        Args:
            code: Error code without prefix, e.g. "MODULE_NOT_FOUND"
            message: Human-readable message
            just_return: Return the error instead of raising it
            **context: Extra context stored on the error

        Returns:
            The error, only when just_return is True

        Raises:
            CodedError: Unless just_return is True
            TypeError: If arguments have the wrong type
        """
        if not isinstance(code, str):
            raise TypeError("code must be a string")
        if not isinstance(message, str):
            raise TypeError("message must be a string")
        if not isinstance(just_return, bool):
            raise TypeError("just_return must be a boolean")

        er = CodedError(message, self.code(code), **context)
        if just_return:
            return er
        raise er
