"""
Configuration management with YAML loading and environment variable support.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _get_default_data_dir() -> Path:
    """Get default data directory based on XDG spec or platform."""
    if xdg_data := os.environ.get("XDG_DATA_HOME"):
        return Path(xdg_data) / "geo-workflow-engine"
    return Path.home() / ".local" / "share" / "geo-workflow-engine"


def _env_path(env_var: str, default: Path | None = None) -> Path | None:
    """Get path from environment variable or return default."""
    if value := os.environ.get(env_var):
        return Path(value)
    return default


@dataclass
class StoreConfig:
    # None = in-memory store (nothing persisted between runs)
    path: Path | None = field(
        default_factory=lambda: _env_path("GWE_STORE_PATH", _get_default_data_dir() / "store.json")
    )


@dataclass
class DefinitionsConfig:
    directory: Path | None = field(default_factory=lambda: _env_path("GWE_DEFINITIONS_DIR"))


@dataclass
class LoggingConfig:
    level: str = field(default_factory=lambda: os.environ.get("GWE_LOG_LEVEL", "INFO"))
    file_logging: bool = False
    console_logging: bool = True
    log_file: Path | None = None


@dataclass
class NotificationConfig:
    sender: str = "workflows@localhost"
    recipients: list[str] = field(default_factory=list)
    subject: str = "Workflow {workflow_id} update"


@dataclass
class AppConfig:
    store: StoreConfig = field(default_factory=StoreConfig)
    definitions: DefinitionsConfig = field(default_factory=DefinitionsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    notification: NotificationConfig = field(default_factory=NotificationConfig)

    SECTIONS = ("store", "definitions", "logging", "notification")
    PATH_KEYS = {"path", "directory", "log_file"}

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary."""
        config = cls()

        for attr in cls.SECTIONS:
            if attr not in data:
                continue
            section = getattr(config, attr)
            for key, value in (data[attr] or {}).items():
                if not hasattr(section, key):
                    continue
                if key in cls.PATH_KEYS and isinstance(value, str):
                    value = Path(value).expanduser()
                setattr(section, key, value)

        return config

    def _to_dict(self) -> dict:
        """Convert config to dictionary."""
        result = {}
        for attr in self.SECTIONS:
            section = getattr(self, attr)
            result[attr] = {
                key: str(value) if isinstance(value, Path) else value for key, value in vars(section).items()
            }
        return result


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    # Check environment variable first
    if config_dir := os.environ.get("GWE_CONFIG_DIR"):
        return Path(config_dir)

    # Check XDG config home
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "geo-workflow-engine"

    # Fall back to ~/.config
    return Path.home() / ".config" / "geo-workflow-engine"


def load_config(config_path: Path | None = None, config_dir: Path | None = None) -> AppConfig:
    """
    Load configuration from the first config file found.

    Args:
        config_path: Path to config file (default: searches standard locations)
        config_dir: Config directory to search

    Returns:
        AppConfig (defaults if no file is found)
    """
    if config_dir is None:
        config_dir = _get_default_config_dir()

    if config_path is None:
        search_paths = [
            config_dir / "config.yaml",
            Path.cwd() / "gwe.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return AppConfig.from_yaml(config_path) if config_path else AppConfig()


def validate_config(config: AppConfig) -> list[str]:
    """
    Validate configuration values.

    Returns:
        List of error messages (empty if valid)
    """
    errors = []
    if str(config.logging.level).upper() not in LOG_LEVELS:
        errors.append(f"logging.level must be one of {', '.join(sorted(LOG_LEVELS))}: {config.logging.level}")

    if config.logging.file_logging and config.logging.log_file is None:
        errors.append("logging.log_file is required when file_logging is enabled")

    if any(not isinstance(r, str) or not r.strip() for r in config.notification.recipients):
        errors.append("notification.recipients contains an empty entry")

    if config.definitions.directory is not None and not config.definitions.directory.is_dir():
        errors.append(f"definitions.directory does not exist: {config.definitions.directory}")

    return errors

