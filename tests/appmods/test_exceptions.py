"""
Tests for the exception hierarchy.
"""

import pytest

from appmods.app.errors import (
    CodedError,
    ConfigurationError,
    InfraAppError,
    LifecycleError,
    ModuleInitError,
    ModuleResolutionError,
    ModuleStartError,
)
from appmods.exceptions import AppModsError, ConfigError, LoggingError
from appmods.log import InvalidLogLevelError


@pytest.mark.unit
class TestAppModsError:
    """Test the framework base exception."""

    def test_message_only(self):
        assert str(AppModsError("boom")) == "boom"

    def test_context_rendered(self):
        err = ConfigError("bad file", path="/x", size=3)

        assert str(err) == "bad file (path=/x, size=3)"
        assert err.context == {"path": "/x", "size": 3}

    def test_hierarchy(self):
        assert issubclass(ConfigError, AppModsError)
        assert issubclass(InvalidLogLevelError, LoggingError)


@pytest.mark.unit
class TestAppErrors:
    """Test application error messages and attributes."""

    def test_configuration_error(self):
        assert str(ConfigurationError("x")) == "Configuration error: x"

    def test_lifecycle_error(self):
        assert str(LifecycleError("x")) == "Lifecycle error: x"

    def test_module_errors_keep_cause(self):
        cause = ValueError("v")

        for cls in (ModuleInitError, ModuleStartError):
            err = cls("http", cause)
            assert err.module_name == "http"
            assert err.cause is cause
            assert "'http'" in str(err)
            assert isinstance(err, InfraAppError)

    def test_resolution_error(self):
        err = ModuleResolutionError("db", "missing")

        assert err.reason == "missing"
        assert str(err) == "Failed to resolve module 'db': missing"

    def test_coded_error(self):
        err = CodedError("msg", "APP_X", a=1)

        assert str(err) == "[APP_X] msg"
        assert err.context == {"a": 1}
