"""
Exception classes for camwake operations.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CamWakeError(Exception):
    """Base exception class for all camwake errors."""
    
    def __init__(self, message: str, cause: Optional[Exception] = None, context: Optional[dict] = None):
        """
        Initialize camwake error.
        
        Args:
            message: Error message
            cause: Original exception that caused this error
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}
        
        logger.error(f"{self.__class__.__name__}: {message}", extra={
            'cause': str(cause) if cause else None,
            'context': self.context
        })


class EnumerationError(CamWakeError):
    """Raised when the OS USB device list cannot be read."""
    
    def __init__(self, message: str, platform: Optional[str] = None, cause: Optional[Exception] = None):
        context = {'platform': platform} if platform else {}
        super().__init__(message, cause, context)


class EnumerationTimeoutError(EnumerationError):
    """Raised when a USB enumeration call does not return in time."""
    
    def __init__(self, message: str, timeout: Optional[float] = None):
        super().__init__(message)
        if timeout is not None:
            self.context['timeout'] = timeout


class UnsupportedPlatformError(CamWakeError):
    """Raised when no USB backend exists for the current platform."""
    
    def __init__(self, message: str, platform: Optional[str] = None):
        context = {'platform': platform} if platform else {}
        super().__init__(message, context=context)


class ActivationError(CamWakeError):
    """Raised when the application could not be brought to the foreground."""
    
    def __init__(self, message: str, command: Optional[list] = None, cause: Optional[Exception] = None):
        context = {'command': command} if command else {}
        super().__init__(message, cause, context)


class ConfigurationError(CamWakeError):
    """Raised when configuration is invalid or missing."""
    
    def __init__(self, message: str, config_key: Optional[str] = None, cause: Optional[Exception] = None):
        context = {'config_key': config_key} if config_key else {}
        super().__init__(message, cause, context)
