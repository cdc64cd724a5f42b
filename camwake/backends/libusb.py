"""
libusb based USB enumeration backend using pyusb.

Used on Windows, macOS and the BSDs, where udev is not available.
"""

import logging
from typing import List

import usb.core

from ..models import UsbDeviceDescriptor, UsbInterfaceDescriptor
from .base import UsbBackend
from .exceptions import EnumerationError

logger = logging.getLogger(__name__)


class LibUsbBackend(UsbBackend):
    """
    Backend reading USB device and interface descriptors through libusb.

    Descriptors are served from the libusb cache, so no device has to be
    opened or claimed.
    """

    def __init__(self, backend=None):
        """
        Initialize the backend.

        Args:
            backend: Optional pyusb backend object, pyusb picks one otherwise
        """
        self._usb_backend = backend

    @property
    def platform_name(self) -> str:
        """Get the platform name."""
        return "libusb"

    def list_devices(self) -> List[UsbDeviceDescriptor]:
        """
        Enumerate USB devices via libusb.

        Raises:
            EnumerationError: If no libusb backend is available or
                              enumeration fails
        """
        try:
            usb_devices = list(usb.core.find(find_all=True, backend=self._usb_backend))
        except usb.core.NoBackendError as e:
            raise EnumerationError("No libusb backend available", platform=self.platform_name, cause=e)
        except (usb.core.USBError, OSError) as e:
            raise EnumerationError(f"Failed to enumerate USB devices: {e}", platform=self.platform_name, cause=e)

        return [self._create_descriptor(dev) for dev in usb_devices]

    def _create_descriptor(self, dev: "usb.core.Device") -> UsbDeviceDescriptor:
        """Build a descriptor from a pyusb device."""
        name = f"usb:{dev.bus}-{dev.address}"
        try:
            interfaces = tuple(
                UsbInterfaceDescriptor(
                    interface_class=intf.bInterfaceClass,
                    interface_subclass=intf.bInterfaceSubClass,
                    interface_protocol=intf.bInterfaceProtocol,
                )
                for cfg in dev
                for intf in cfg
            )
        except (usb.core.USBError, NotImplementedError, ValueError) as e:
            logger.warning(f"Failed to read configuration of {name}: {e}")
            interfaces = ()

        return UsbDeviceDescriptor(
            name=name,
            vendor_id=dev.idVendor,
            product_id=dev.idProduct,
            interfaces=interfaces,
        )
