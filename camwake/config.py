"""
Configuration for camwake.

Settings are stored as JSON in ~/.camwake/config.json. A missing file means
defaults; a malformed one is reported as a ConfigurationError.
"""

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import List, Optional

from .backends.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".camwake"
DEFAULT_CONFIG_FILE = "config.json"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")



def _is_number(value) -> bool:
    # bool is an int subclass but never a valid duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class ServiceConfig:
    """
    Runtime settings of the detection service.

    Attributes:
        poll_interval: Seconds between two USB polls
        provider_timeout: Upper bound for one USB enumeration, None means
                          three poll intervals
        power_settle_delay: Seconds to wait after power is connected before
                            starting, so the USB bus can enumerate
        launch_command: Command bringing the application to the foreground
        auto_launch: User setting; monitoring only runs while enabled
        source_tag: Tag attached to launches caused by the poll loop
        log_level: Logging level name
    """
    poll_interval: float = 1.0
    provider_timeout: Optional[float] = None
    power_settle_delay: float = 2.0
    launch_command: Optional[List[str]] = None
    auto_launch: bool = True
    source_tag: str = "usb_detection_service"
    log_level: str = "INFO"

    def validate(self) -> None:
        """
        Check all values.

        Raises:
            ConfigurationError: Naming the first invalid key
        """
        if not _is_number(self.poll_interval) or self.poll_interval <= 0:
            raise ConfigurationError("poll_interval must be a positive number", config_key="poll_interval")
        if self.provider_timeout is not None and (
            not _is_number(self.provider_timeout) or self.provider_timeout <= 0
        ):
            raise ConfigurationError("provider_timeout must be a positive number", config_key="provider_timeout")
        if not _is_number(self.power_settle_delay) or self.power_settle_delay < 0:
            raise ConfigurationError("power_settle_delay must not be negative", config_key="power_settle_delay")
        if self.launch_command is not None and (
            not isinstance(self.launch_command, list)
            or not self.launch_command
            or not all(isinstance(part, str) for part in self.launch_command)
        ):
            raise ConfigurationError("launch_command must be a non-empty list of strings", config_key="launch_command")
        if not isinstance(self.auto_launch, bool):
            raise ConfigurationError("auto_launch must be true or false", config_key="auto_launch")
        if not isinstance(self.source_tag, str) or not self.source_tag:
            raise ConfigurationError("source_tag must be a non-empty string", config_key="source_tag")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"log_level must be one of {LOG_LEVELS}", config_key="log_level")


def get_config_path(path: Optional[Path] = None) -> Path:
    """Resolve the configuration file path."""
    if path is None:
        return DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE
    return Path(path)


def load_config(path: Optional[Path] = None) -> ServiceConfig:
    """
    Load settings from disk.

    Args:
        path: Optional custom config path

    Returns:
        ServiceConfig: Validated settings, defaults if the file does not exist

    Raises:
        ConfigurationError: If the file cannot be parsed or holds invalid values
    """
    config_path = get_config_path(path)
    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return ServiceConfig()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Config file is not valid JSON: {config_path}", cause=e)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file: {config_path}", cause=e)

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file must contain a JSON object: {config_path}")

    known = {f.name for f in fields(ServiceConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

    config = ServiceConfig(**{key: value for key, value in data.items() if key in known})
    config.validate()
    return config


def save_config(config: ServiceConfig, path: Optional[Path] = None) -> Path:
    """
    Write settings to disk atomically.

    Returns:
        Path: The file written

    Raises:
        ConfigurationError: If the settings are invalid or cannot be written
    """
    config.validate()
    config_path = get_config_path(path)

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=config_path.parent, prefix=".config_", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(asdict(config), f, indent=2)
            os.replace(temp_path, config_path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
    except OSError as e:
        raise ConfigurationError(f"Cannot write config file: {config_path}", cause=e)

    logger.debug(f"Saved config to {config_path}")
    return config_path
