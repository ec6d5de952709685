"""
Tests for configuration management

Tests cover:
- Configuration loading and defaults
- Configuration validation
- Updating and persisting settings
- Backups and resets
"""
import json

import pytest

from dailyword.utils.config import AppConfig, ConfigManager
from dailyword.utils.errors import InvalidConfigError, MissingConfigError


class TestConfigManagerInitialization:
    """Tests for ConfigManager initialization"""

    def test_creates_default_file(self, config_path):
        """Test a missing config file is created with defaults"""
        manager = ConfigManager(config_path)

        assert config_path.exists()
        assert manager.config == AppConfig()

    def test_singleton(self, config_path):
        """Test ConfigManager hands out one shared instance"""
        assert ConfigManager(config_path) is ConfigManager()

    def test_loads_existing_file(self, config_path):
        """Test values on disk override defaults"""
        config_path.write_text(json.dumps({"ui": {"language": "fr"}}), encoding="utf-8")

        manager = ConfigManager(config_path)

        assert manager.config.ui.language == "fr"
        assert manager.config.compose.word_limit == 250


class TestConfigurationDefaults:
    """Tests for default configuration values"""

    def test_draft_defaults(self):
        """Test draft autosave timings"""
        drafts = AppConfig().drafts
        assert drafts.enabled is True
        assert drafts.storage_key == "daily_word_draft"
        assert drafts.debounce_seconds == 1.0
        assert drafts.backup_interval_seconds == 5.0
        assert drafts.freshness_days == 7

    def test_compose_and_share_defaults(self):
        """Test word limit and share endpoint"""
        config = AppConfig()
        assert config.compose.word_limit == 250
        assert config.share.base_url == "https://wa.me/"
        assert config.share.submit_delay_seconds == 0.8

    def test_default_storage_path_under_home(self):
        """Test drafts live in the data directory by default"""
        assert AppConfig().drafts.storage_path.endswith("storage.json")


class TestConfigurationValidation:
    """Tests for configuration validation"""

    def test_invalid_json(self, config_path):
        """Test unreadable JSON raises InvalidConfigError"""
        config_path.write_text("{oops", encoding="utf-8")

        with pytest.raises(InvalidConfigError, match="not valid JSON"):
            ConfigManager(config_path)

    def test_schema_mismatch(self, config_path):
        """Test values of the wrong type are rejected"""
        config_path.write_text(json.dumps({"ui": {"language": "de"}}), encoding="utf-8")

        with pytest.raises(InvalidConfigError, match="expected schema"):
            ConfigManager(config_path)

    def test_non_positive_debounce(self, config_path):
        """Test timing values must be positive"""
        config_path.write_text(json.dumps({"drafts": {"debounce_seconds": 0}}), encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            ConfigManager(config_path)


class TestConfigUpdates:
    """Tests for reading and writing individual keys"""

    def test_get_config(self, config_path):
        """Test dotted key lookup"""
        manager = ConfigManager(config_path)

        assert manager.get_config("compose.word_limit") == 250
        assert manager.get_config("compose.missing", "fallback") == "fallback"

    def test_set_config_persists(self, config_path):
        """Test updates are written to disk"""
        manager = ConfigManager(config_path)
        manager.set_config("ui.language", "fr")

        on_disk = json.loads(config_path.read_text(encoding="utf-8"))
        assert on_disk["ui"]["language"] == "fr"
        assert manager.config.ui.language == "fr"

    def test_set_config_without_persist(self, config_path):
        """Test in-memory only updates"""
        manager = ConfigManager(config_path)
        manager.set_config("share.submit_delay_seconds", 0.0, persist=False)

        on_disk = json.loads(config_path.read_text(encoding="utf-8"))
        assert on_disk["share"]["submit_delay_seconds"] == 0.8
        assert manager.config.share.submit_delay_seconds == 0.0

    def test_set_config_unknown_key(self, config_path):
        """Test unknown keys raise MissingConfigError"""
        manager = ConfigManager(config_path)

        with pytest.raises(MissingConfigError):
            manager.set_config("drafts.nope", 1)
        with pytest.raises(MissingConfigError):
            manager.set_config("nope.enabled", True)

    def test_set_config_invalid_value(self, config_path):
        """Test values are validated before they are stored"""
        manager = ConfigManager(config_path)

        with pytest.raises(InvalidConfigError):
            manager.set_config("ui.language", "de")
        assert manager.config.ui.language == "auto"

    def test_reset_to_defaults(self, config_path):
        """Test reset discards changes"""
        manager = ConfigManager(config_path)
        manager.set_config("compose.word_limit", 100)
        manager.reset_to_defaults()

        assert manager.config.compose.word_limit == 250

    def test_backup_config(self, config_path):
        """Test a timestamped copy is written next to the config"""
        manager = ConfigManager(config_path)
        backup = manager.backup_config()

        assert backup.parent == config_path.parent
        assert backup.name.startswith("config_backup_")
        assert json.loads(backup.read_text(encoding="utf-8"))["compose"]["word_limit"] == 250
