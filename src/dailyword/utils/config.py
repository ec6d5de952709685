"""Configuration manager for persistent settings stored as JSON."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from .errors import (
    ConfigurationError,
    DailyWordError,
    FileSystemError,
    InvalidConfigError,
    MissingConfigError,
)
from .logging import get_logger, log_call
from .paths import CONFIG_PATH, STORAGE_PATH

logger = get_logger(__name__)


class DraftsConfig(BaseModel):
    """Pydantic model for draft autosave settings."""

    enabled: bool = True
    storage_path: str = str(STORAGE_PATH)
    storage_key: str = "daily_word_draft"
    debounce_seconds: float = Field(default=1.0, gt=0)
    backup_interval_seconds: float = Field(default=5.0, gt=0)
    freshness_days: int = Field(default=7, gt=0)
    max_write_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=0.25, ge=0)


class ComposeConfig(BaseModel):
    """Pydantic model for message composition limits."""

    word_limit: int = Field(default=250, gt=0)
    warning_threshold: int = Field(default=200, gt=0)


class ShareConfig(BaseModel):
    """Pydantic model for the share hand-off."""

    base_url: str = "https://wa.me/"
    submit_delay_seconds: float = Field(default=0.8, ge=0)


class UIConfig(BaseModel):
    """Pydantic model for UI settings."""

    language: Literal["auto", "en", "fr"] = "auto"
    show_features: bool = True


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"
    max_file_size: int = 5_242_880  # 5 MB
    backup_count: int = 5


class AppConfig(BaseModel):
    """Pydantic model for overall application configuration."""

    version: str = "0.1.0"
    drafts: DraftsConfig = Field(default_factory=DraftsConfig)
    compose: ComposeConfig = Field(default_factory=ComposeConfig)
    share: ShareConfig = Field(default_factory=ShareConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages persistent application configuration."""

    _instance = None
    _initialized = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super(ConfigManager, cls).__new__(cls)
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None):
        if not ConfigManager._initialized:
            self.path = Path(config_path) if config_path else CONFIG_PATH
            self.config = self._load_or_create_config()
            logger.info(f"Configuration loaded from {self.path}")
            ConfigManager._initialized = True

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the shared instance so the next call reloads from disk."""
        cls._instance = None
        cls._initialized = False

    def _load_or_create_config(self) -> AppConfig:
        """Load configuration from file or create default if not present."""

        from pydantic import ValidationError

        if not self.path.exists():
            logger.info("No config file found, creating default configuration.")
            config = AppConfig()
            self._save_config(config)
            return config

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = AppConfig(**data)
            logger.debug("Configuration successfully loaded and validated.")
            return config

        except FileNotFoundError as e:
            raise FileSystemError(f"Configuration file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise InvalidConfigError(f"Configuration file is not valid JSON: {str(e)}") from e
        except ValidationError as e:
            logger.error(f"Failed to validate config file: {e}")
            raise InvalidConfigError(f"Configuration data does not match expected schema: {str(e)}") from e
        except DailyWordError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected error loading config: {e}")
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    def _save_config(self, config: Optional[AppConfig] = None):
        """Save the current configuration to file."""

        config = config or self.config

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(
                    config.model_dump(),
                    f,
                    indent=2,
                    ensure_ascii=False
                )
            logger.debug("Configuration successfully saved.")
        except IOError as e:
            raise FileSystemError(f"Failed to write configuration file: {str(e)}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to save configuration: {str(e)}") from e

    def get_config(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value using dot-separated key path."""

        obj = self.config
        for key in key_path.split("."):
            if not hasattr(obj, key):
                return default
            obj = getattr(obj, key)

        return obj

    @log_call
    def set_config(self, key_path: str, value: Any, persist: bool = True):
        """Set a configuration value using dot-separated key path."""

        from pydantic import ValidationError

        try:
            keys = key_path.split(".")
            obj = self.config

            for key in keys[:-1]:
                if not hasattr(obj, key):
                    raise MissingConfigError(f"Configuration path '{key_path}' is invalid: '{key}' not found")
                obj = getattr(obj, key)

            if not hasattr(obj, keys[-1]):
                raise MissingConfigError(f"Configuration key '{keys[-1]}' does not exist in path '{key_path}'")

            # Re-validate the section so bad values never reach disk
            updated = obj.model_validate({**obj.model_dump(), keys[-1]: value})
            setattr(obj, keys[-1], getattr(updated, keys[-1]))

            if persist:
                self._save_config()

            logger.info(f"Config key '{key_path}' updated.")

        except DailyWordError:
            raise
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid value for '{key_path}': {str(e)}") from e
        except Exception as e:
            raise ConfigurationError(f"Failed to set configuration key '{key_path}': {str(e)}") from e

    @log_call
    def reset_to_defaults(self):
        """Reset configuration to default values."""

        logger.warning("Resetting configuration to default values.")
        self.config = AppConfig()
        self._save_config()
        logger.info("Configuration reset to default values.")

    @log_call
    def backup_config(self) -> Path:
        """Create a backup of the current configuration file."""

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = self.path.with_name(f"config_backup_{timestamp}.json")

        try:
            backup_path.parent.mkdir(parents=True, exist_ok=True)
            with open(backup_path, "w", encoding="utf-8") as f:
                json.dump(self.config.model_dump(), f, indent=2, ensure_ascii=False)

            logger.info(f"Configuration backup created at {backup_path}")
            return backup_path

        except IOError as e:
            raise FileSystemError(f"Failed to write backup file: {str(e)}") from e
