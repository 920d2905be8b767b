"""Tests for configuration loading and validation."""

from pathlib import Path

from geo_workflow_engine.config import (
    AppConfig,
    load_config,
    validate_config,
)


class TestAppConfig:
    """Tests for AppConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AppConfig()

        assert config.store.path.name == "store.json"
        assert config.definitions.directory is None
        assert config.logging.level == "INFO"
        assert config.logging.file_logging is False
        assert config.notification.sender == "workflows@localhost"
        assert config.notification.recipients == []

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Test environment variables override built-in defaults."""
        monkeypatch.setenv("GWE_STORE_PATH", str(tmp_path / "custom.json"))
        monkeypatch.setenv("GWE_DEFINITIONS_DIR", str(tmp_path))
        monkeypatch.setenv("GWE_LOG_LEVEL", "DEBUG")

        config = AppConfig()

        assert config.store.path == tmp_path / "custom.json"
        assert config.definitions.directory == tmp_path
        assert config.logging.level == "DEBUG"

    def test_xdg_data_home(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert AppConfig().store.path == tmp_path / "geo-workflow-engine" / "store.json"

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from non-existent file returns defaults."""
        config = AppConfig.from_yaml(tmp_path / "nonexistent.yaml")

        assert config.logging.level == "INFO"

    def test_from_yaml_valid_file(self, tmp_path):
        """Test loading from valid YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
store:
  path: /custom/store.json

logging:
  level: DEBUG
  file_logging: true
  log_file: ~/gwe.log

notification:
  sender: ops@example.com
  recipients:
    - a@example.com
""")
        config = AppConfig.from_yaml(config_file)

        assert config.store.path == Path("/custom/store.json")
        assert config.logging.level == "DEBUG"
        assert config.logging.file_logging is True
        assert config.logging.log_file == Path("~/gwe.log").expanduser()
        assert config.notification.sender == "ops@example.com"
        assert config.notification.recipients == ["a@example.com"]

    def test_from_yaml_partial_config(self, tmp_path):
        """Test loading partial config preserves defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
notification:
  subject: "Done: {workflow_id}"
unknown_section:
  key: value
logging:
  not_a_setting: 1
""")
        config = AppConfig.from_yaml(config_file)

        assert config.notification.subject == "Done: {workflow_id}"
        assert config.notification.sender == "workflows@localhost"
        assert not hasattr(config.logging, "not_a_setting")

    def test_from_yaml_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert AppConfig.from_yaml(config_file).logging.level == "INFO"

    def test_to_dict(self):
        data = AppConfig()._to_dict()

        assert set(data) == {"store", "definitions", "logging", "notification"}
        assert isinstance(data["store"]["path"], str)


class TestLoadConfig:
    """Tests for config file discovery."""

    def test_no_config_file(self, tmp_path):
        config = load_config(config_dir=tmp_path)
        assert config.logging.level == "INFO"

    def test_config_dir(self, tmp_path):
        (tmp_path / "config.yaml").write_text("logging:\n  level: WARNING\n")

        config = load_config(config_dir=tmp_path)

        assert config.logging.level == "WARNING"

    def test_config_dir_from_env(self, tmp_path, monkeypatch):
        config_dir = tmp_path / "from-env"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("logging:\n  level: ERROR\n")
        monkeypatch.setenv("GWE_CONFIG_DIR", str(config_dir))

        assert load_config().logging.level == "ERROR"

    def test_explicit_path(self, tmp_path):
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("notification:\n  sender: me@example.com\n")

        assert load_config(config_file).notification.sender == "me@example.com"

    def test_cwd_file(self, tmp_path, monkeypatch):
        (tmp_path / "gwe.yaml").write_text("logging:\n  level: CRITICAL\n")
        monkeypatch.chdir(tmp_path)

        assert load_config(config_dir=tmp_path / "none").logging.level == "CRITICAL"


class TestValidateConfig:
    """Tests for validate_config."""

    def test_defaults_are_valid(self):
        assert validate_config(AppConfig()) == []

    def test_bad_log_level(self):
        config = AppConfig()
        config.logging.level = "LOUD"

        errors = validate_config(config)

        assert len(errors) == 1
        assert "logging.level" in errors[0]

    def test_file_logging_needs_file(self):
        config = AppConfig()
        config.logging.file_logging = True

        assert any("log_file" in e for e in validate_config(config))

    def test_empty_recipient(self):
        config = AppConfig()
        config.notification.recipients = ["a@example.com", ""]

        assert any("recipients" in e for e in validate_config(config))

    def test_missing_definitions_dir(self, tmp_path):
        config = AppConfig()
        config.definitions.directory = tmp_path / "missing"

        assert any("definitions.directory" in e for e in validate_config(config))
