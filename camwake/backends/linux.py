"""
Linux USB enumeration backend using udev.

This module lists USB devices through pyudev and reads the interface
descriptors the kernel exposes for each of them in sysfs.
"""

import logging
from typing import List, Optional

import pyudev

from ..models import UsbDeviceDescriptor, UsbInterfaceDescriptor
from .base import UsbBackend
from .exceptions import EnumerationError

logger = logging.getLogger(__name__)


def _read_hex_attribute(device: "pyudev.Device", name: str) -> Optional[int]:
    """
    Read a hexadecimal sysfs attribute such as idVendor or bInterfaceClass.

    Returns:
        Optional[int]: The parsed value, or None if missing or malformed
    """
    try:
        value = device.attributes.asstring(name)
    except (KeyError, UnicodeDecodeError):
        return None
    try:
        return int(value.strip(), 16)
    except ValueError:
        return None


class LinuxBackend(UsbBackend):
    """
    Linux backend for USB enumeration using udev.

    Every device of DEVTYPE usb_device is reported; its usb_interface
    children supply the class/subclass/protocol triples.
    """

    def __init__(self, context: Optional["pyudev.Context"] = None):
        """
        Initialize the Linux backend.

        Args:
            context: Optional udev context, created on first use otherwise
        """
        self._context = context

    @property
    def platform_name(self) -> str:
        """Get the platform name."""
        return "linux"

    def list_devices(self) -> List[UsbDeviceDescriptor]:
        """
        Enumerate USB devices via udev.

        Returns:
            List[UsbDeviceDescriptor]: Attached USB devices

        Raises:
            EnumerationError: If udev cannot be queried
        """
        try:
            if self._context is None:
                self._context = pyudev.Context()
            udev_devices = list(self._context.list_devices(subsystem="usb", DEVTYPE="usb_device"))
        except Exception as e:
            raise EnumerationError(f"Failed to enumerate USB devices on Linux: {e}", platform="linux", cause=e)

        devices = []
        for udev_device in udev_devices:
            descriptor = self._create_descriptor(udev_device)
            if descriptor is not None:
                devices.append(descriptor)
        return devices

    def _create_descriptor(self, udev_device: "pyudev.Device") -> Optional[UsbDeviceDescriptor]:
        """
        Build a descriptor from a udev usb_device node.

        Devices without readable vendor/product ids are skipped.
        """
        vendor_id = _read_hex_attribute(udev_device, "idVendor")
        product_id = _read_hex_attribute(udev_device, "idProduct")
        if vendor_id is None or product_id is None:
            logger.warning(f"Skipping USB device without ids: {udev_device.sys_path}")
            return None

        name = udev_device.properties.get("DEVNAME") or udev_device.sys_name

        try:
            interfaces = tuple(self._read_interfaces(udev_device))
        except Exception as e:
            # Classification falls back to the vendor list
            logger.warning(f"Failed to read interfaces of {name}: {e}")
            interfaces = ()

        return UsbDeviceDescriptor(
            name=name,
            vendor_id=vendor_id,
            product_id=product_id,
            interfaces=interfaces,
        )

    def _read_interfaces(self, udev_device: "pyudev.Device") -> List[UsbInterfaceDescriptor]:
        """Read the interface descriptors of every usb_interface child."""
        interfaces = []
        for child in udev_device.children:
            if child.device_type != "usb_interface":
                continue
            interface_class = _read_hex_attribute(child, "bInterfaceClass")
            if interface_class is None:
                continue
            interfaces.append(UsbInterfaceDescriptor(
                interface_class=interface_class,
                interface_subclass=_read_hex_attribute(child, "bInterfaceSubClass") or 0,
                interface_protocol=_read_hex_attribute(child, "bInterfaceProtocol") or 0,
            ))
        return interfaces
