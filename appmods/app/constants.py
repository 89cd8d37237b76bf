"""
Application-wide constants, error codes and resource limits.
"""

# Reserved configuration key holding the main application entry
MAIN_APP_NAME = "app"

# Fields copied from the project manifest into the main application entry
MAIN_APP_FIELDS = ("name", "description", "version", "keywords", "homepage", "author")

# Table of pyproject.toml holding per-module configuration
MANIFEST_TOOL_TABLE = "appmods"

DEFAULT_STOP_TIMEOUT_MS = 2000

# Attribute of a loaded module file naming its module class
MODULE_CLASS_ATTR = "module_class"

# Error codes, prefixed with the application code when raised
ERR_MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
ERR_MODULE_FUNCTION_NOT_FOUND = "MODULE_FUNCTION_NOT_FOUND"
ERR_STOP_TIMED_OUT = "STOP_TIMED_OUT"
ERR_INVALID_STOP_TIMEOUT = "INVALID_STOP_TIMEOUT"

# Resource limits
MAX_MODULE_COUNT = 1000
MAX_MODULE_NAME_LENGTH = 255
