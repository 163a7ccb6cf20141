"""
Configuration Management for daily-write.

All settings come from environment variables, read once when the
configuration object is built. Tests call reload_config() after changing
the environment.
"""

import os

DEFAULT_DATA_DIR = "~/.config/daily-write"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


class AppConfig:
    """
    Centralized application configuration.

    Attributes:
        data_dir: Directory holding the writing-session store.
        autosave_delay: Seconds of editor inactivity before an auto-save.
        save_max_attempts: Failed save attempts before the tracker gives up.
        save_base_delay: First retry delay in seconds (doubles per attempt).
        save_max_delay: Upper bound for a single retry delay.
        docs_page_size: Number of recent documents listed in the picker.
        host, port: Bind address for the HTTP API.
        log_level: Root logging level name.
    """

    def __init__(self):
        self.data_dir = os.path.expanduser(os.getenv("DAILY_WRITE_DATA_DIR", DEFAULT_DATA_DIR))
        self.autosave_delay = _env_float("DAILY_WRITE_AUTOSAVE_DELAY", 2.0)
        self.save_max_attempts = _env_int("DAILY_WRITE_SAVE_MAX_ATTEMPTS", 5)
        self.save_base_delay = _env_float("DAILY_WRITE_SAVE_BASE_DELAY", 2.0)
        self.save_max_delay = _env_float("DAILY_WRITE_SAVE_MAX_DELAY", 60.0)
        self.docs_page_size = _env_int("DAILY_WRITE_DOCS_PAGE_SIZE", 16)
        self.host = os.getenv("DAILY_WRITE_HOST", "127.0.0.1")
        self.port = _env_int("PORT", 8000)
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

        if self.save_max_attempts < 1:
            raise ValueError("DAILY_WRITE_SAVE_MAX_ATTEMPTS must be at least 1")
        if self.docs_page_size < 1:
            raise ValueError("DAILY_WRITE_DOCS_PAGE_SIZE must be at least 1")

    @property
    def data_file(self) -> str:
        """Path of the JSON file backing the data store."""
        return os.path.join(self.data_dir, "daily_write.json")


# Global configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Returns:
        The singleton configuration instance
    """
    global _config
    if _config is None:
        _config = AppConfig()
    return _config


def reload_config() -> AppConfig:
    """
    Reload the configuration from environment variables.

    Returns:
        The reloaded configuration instance
    """
    global _config
    _config = AppConfig()
    return _config
