"""
Base classes and interfaces for platform-specific USB enumeration backends.
"""

import platform
from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import UsbDeviceDescriptor
from .exceptions import UnsupportedPlatformError

LIBUSB_PLATFORMS = ("windows", "darwin", "freebsd", "openbsd", "netbsd")


class UsbBackend(ABC):
    """
    Abstract base class for platform-specific USB enumeration backends.
    
    Each backend lists every attached USB device with its interface
    descriptors, independent of what kind of device it is. Classification
    happens later, on the returned descriptors.
    """

    @abstractmethod
    def list_devices(self) -> List[UsbDeviceDescriptor]:
        """
        Enumerate all USB devices currently attached.
        
        Returns:
            List[UsbDeviceDescriptor]: One fresh descriptor per attached device
            
        Raises:
            EnumerationError: If the OS device list cannot be read
        """
        pass

    @property
    @abstractmethod
    def platform_name(self) -> str:
        """Get the name of the platform this backend supports."""
        pass


class DeviceProvider:
    """
    Selects the USB backend for the current platform and exposes it as the
    device snapshot source of the detection loop.
    """

    def __init__(self, backend: Optional[UsbBackend] = None):
        """
        Initialize the provider.
        
        Args:
            backend: Explicit backend to use. Defaults to the backend for the
                     current platform.
        """
        self._backend = backend if backend is not None else self._get_platform_backend()

    def list_devices(self) -> List[UsbDeviceDescriptor]:
        """
        Take a snapshot of the attached USB devices.
        
        Raises:
            EnumerationError: If enumeration fails
        """
        return self._backend.list_devices()

    def get_platform_backend(self) -> UsbBackend:
        """Get the active backend."""
        return self._backend

    def _get_platform_backend(self) -> UsbBackend:
        """
        Select and instantiate the appropriate backend for the current platform.
        
        Raises:
            UnsupportedPlatformError: If the current platform is not supported
        """
        system = platform.system().lower()
        
        if system == "linux":
            from .linux import LinuxBackend
            return LinuxBackend()
        elif system in LIBUSB_PLATFORMS:
            from .libusb import LibUsbBackend
            return LibUsbBackend()
        else:
            raise UnsupportedPlatformError(f"Unsupported platform: {system}", platform=system)
