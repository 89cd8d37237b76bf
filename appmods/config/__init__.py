"""YAML configuration loading."""

from .config import Config
from .constants import DEFAULT_ENV_PREFIX, MAX_CONFIG_SIZE_BYTES

__all__ = ["Config", "DEFAULT_ENV_PREFIX", "MAX_CONFIG_SIZE_BYTES"]
