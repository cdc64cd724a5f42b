"""
Centralized logging configuration for camwake.

Detection failures have no user-visible surface, so the log is the only
place they show up. This module sets up a rotating log file plus optional
console output with per-module levels.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional


class CamWakeLogger:
    """
    Centralized logger configuration for camwake.

    Provides consistent logging setup with file and console handlers,
    appropriate formatting, and configurable log levels.
    """

    _configured = False
    _log_file_path: Optional[Path] = None

    @classmethod
    def configure(
        cls,
        log_level: str = "INFO",
        log_file: Optional[Path] = None,
        console_output: bool = True,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5
    ) -> None:
        """
        Configure logging for camwake.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional path to log file. Defaults to ~/.camwake/camwake.log
            console_output: Whether to output logs to console
            max_file_size: Maximum size of log file before rotation
            backup_count: Number of backup log files to keep
        """
        if cls._configured:
            return

        level = getattr(logging, log_level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        try:
            if log_file is None:
                log_dir = Path.home() / ".camwake"
                log_dir.mkdir(parents=True, exist_ok=True)
                log_file = log_dir / "camwake.log"

            file_handler = logging.handlers.RotatingFileHandler(
                log_file,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.DEBUG)
            root_logger.addHandler(file_handler)
            cls._log_file_path = Path(log_file)
        except OSError as e:
            # Continue with console only
            print(f"Warning: Could not set up file logging: {e}", file=sys.stderr)

        if console_output:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            console_handler.setLevel(level)
            root_logger.addHandler(console_handler)

        cls._configure_camwake_loggers(level)

        cls._configured = True

        logger = logging.getLogger(__name__)
        logger.info(f"Logging configured - Level: {log_level}, File: {cls._log_file_path}")

    @classmethod
    def _configure_camwake_loggers(cls, level: int) -> None:
        """Configure specific loggers for camwake modules."""
        module_levels = {
            'camwake.service': level,
            'camwake.loop': level,
            'camwake.launcher': level,
            'camwake.classifier': level,
            'camwake.backends': level,
            'camwake.cli': level,
            # Emission traces are noisy at one poll per second
            'camwake.events': max(level, logging.INFO),
        }

        for module_name, module_level in module_levels.items():
            logging.getLogger(module_name).setLevel(module_level)

    @classmethod
    def get_log_file_path(cls) -> Optional[Path]:
        """Get the current log file path."""
        return cls._log_file_path

    @classmethod
    def set_level(cls, level: str) -> None:
        """
        Change the logging level for all camwake loggers.

        Args:
            level: New logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        log_level = getattr(logging, level.upper(), logging.INFO)

        root_logger = logging.getLogger()
        root_logger.setLevel(log_level)

        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler) and handler.stream == sys.stdout:
                handler.setLevel(log_level)

        cls._configure_camwake_loggers(log_level)

        logging.getLogger(__name__).info(f"Logging level changed to {level.upper()}")

    @classmethod
    def reset(cls) -> None:
        """Forget the configuration so configure() applies again."""
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()
        cls._configured = False
        cls._log_file_path = None


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    console_output: bool = True
) -> None:
    """
    Convenience function to set up camwake logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console_output: Whether to output logs to console
    """
    CamWakeLogger.configure(
        log_level=log_level,
        log_file=log_file,
        console_output=console_output
    )
