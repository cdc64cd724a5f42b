"""
Platform-specific backends for USB device enumeration.

This package contains backend implementations for different operating systems:
- Linux: Uses udev (pyudev) to walk USB devices and their interfaces
- Windows, macOS and BSDs: Use libusb (pyusb) descriptor enumeration
"""

from .base import UsbBackend, DeviceProvider
from .exceptions import (
    CamWakeError,
    EnumerationError,
    EnumerationTimeoutError,
    UnsupportedPlatformError,
    ActivationError,
    ConfigurationError,
)

__all__ = [
    "UsbBackend",
    "DeviceProvider",
    "CamWakeError",
    "EnumerationError",
    "EnumerationTimeoutError",
    "UnsupportedPlatformError",
    "ActivationError",
    "ConfigurationError",
]
