"""
Tests for loading, validating and saving the service configuration.
"""

import json

import pytest

from camwake.backends.exceptions import ConfigurationError
from camwake.config import (
    DEFAULT_CONFIG_DIR,
    ServiceConfig,
    get_config_path,
    load_config,
    save_config,
)


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "config.json"


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")


class TestServiceConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = ServiceConfig()

        assert config.poll_interval == 1.0
        assert config.provider_timeout is None
        assert config.power_settle_delay == 2.0
        assert config.launch_command is None
        assert config.auto_launch is True
        assert config.source_tag == "usb_detection_service"
        assert config.log_level == "INFO"
        config.validate()

    @pytest.mark.parametrize("key,value", [
        ("poll_interval", 0),
        ("poll_interval", -1.0),
        ("poll_interval", "fast"),
        ("poll_interval", True),
        ("provider_timeout", 0),
        ("provider_timeout", True),
        ("power_settle_delay", -0.5),
        ("power_settle_delay", False),
        ("launch_command", []),
        ("launch_command", "open -a Player"),
        ("launch_command", ["open", 3]),
        ("auto_launch", "yes"),
        ("source_tag", ""),
        ("log_level", "LOUD"),
    ])
    def test_invalid_values(self, key, value):
        config = ServiceConfig(**{key: value})

        with pytest.raises(ConfigurationError) as exc_info:
            config.validate()
        assert exc_info.value.context["config_key"] == key

    def test_lowercase_log_level_accepted(self):
        ServiceConfig(log_level="debug").validate()


class TestConfigPath:

    def test_default_path(self):
        assert get_config_path() == DEFAULT_CONFIG_DIR / "config.json"

    def test_custom_path(self, config_file):
        assert get_config_path(str(config_file)) == config_file


class TestLoadConfig:
    """load_config behaviour."""

    def test_missing_file_gives_defaults(self, config_file):
        assert load_config(config_file) == ServiceConfig()

    def test_reads_values(self, config_file):
        write_json(config_file, {
            "poll_interval": 0.5,
            "launch_command": ["open", "-a", "Player"],
            "auto_launch": False,
        })

        config = load_config(config_file)

        assert config.poll_interval == 0.5
        assert config.launch_command == ["open", "-a", "Player"]
        assert config.auto_launch is False
        assert config.power_settle_delay == 2.0

    def test_unknown_keys_are_ignored(self, config_file, caplog):
        write_json(config_file, {"poll_interval": 2, "theme": "dark"})

        config = load_config(config_file)

        assert config.poll_interval == 2
        assert "theme" in caplog.text

    def test_invalid_json(self, config_file):
        config_file.write_text("{not json", encoding="utf-8")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_config(config_file)

    def test_non_object_json(self, config_file):
        write_json(config_file, [1, 2, 3])

        with pytest.raises(ConfigurationError, match="JSON object"):
            load_config(config_file)

    def test_invalid_value_in_file(self, config_file):
        write_json(config_file, {"poll_interval": -3})

        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)
        assert exc_info.value.context["config_key"] == "poll_interval"


class TestSaveConfig:
    """save_config behaviour."""

    def test_save_then_load(self, tmp_path):
        config_file = tmp_path / "nested" / "config.json"
        config = ServiceConfig(poll_interval=0.25, launch_command=["player"], auto_launch=False)

        written = save_config(config, config_file)

        assert written == config_file
        assert load_config(config_file) == config

    def test_saved_file_is_plain_json(self, config_file):
        save_config(ServiceConfig(source_tag="dashcam"), config_file)

        data = json.loads(config_file.read_text(encoding="utf-8"))
        assert data["source_tag"] == "dashcam"
        assert data["provider_timeout"] is None

    def test_no_temp_files_left(self, config_file):
        save_config(ServiceConfig(), config_file)
        save_config(ServiceConfig(auto_launch=False), config_file)

        assert [p.name for p in config_file.parent.iterdir()] == ["config.json"]

    def test_invalid_config_is_not_written(self, config_file):
        with pytest.raises(ConfigurationError):
            save_config(ServiceConfig(poll_interval=0), config_file)

        assert not config_file.exists()
