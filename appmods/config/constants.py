"""Configuration constants."""

MAX_CONFIG_SIZE_BYTES = 10 * 1024 * 1024  # 10 MB

DEFAULT_ENV_PREFIX = "APPMODS_"
