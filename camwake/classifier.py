"""
UVC camera classification.

Decides whether a USB device is a video camera, first from its interface
descriptors and then from a list of vendors that ship UVC chipsets.
"""

import logging

from .models import UsbDeviceDescriptor

logger = logging.getLogger(__name__)

USB_CLASS_VIDEO = 14
SUBCLASS_VIDEO_CONTROL = 1
SUBCLASS_VIDEO_STREAMING = 2

KNOWN_CAMERA_VENDOR_IDS = frozenset({
    0x046d,  # Logitech
    0x0bda,  # Realtek
    0x0ac8,  # Z-Star Microelectronics
    0x1e4e,  # Cubeternet
    0x1871,  # Aveo Technology
    0x0c45,  # Sonix Technology
    0x1bcf,  # Sunplus Innovation Technology
    0x05a9,  # OmniVision Technologies
    0x0c46,  # Microdia
})


def has_uvc_interfaces(device: UsbDeviceDescriptor) -> bool:
    """
    Check the interface descriptors for a UVC function.

    Args:
        device: The device to inspect

    Returns:
        bool: True if a video class interface with a control or streaming
              subclass is present
    """
    has_video = False
    has_control_or_streaming = False

    for interface in device.interfaces:
        if interface.interface_class != USB_CLASS_VIDEO:
            continue
        has_video = True
        if interface.interface_subclass in (SUBCLASS_VIDEO_CONTROL, SUBCLASS_VIDEO_STREAMING):
            has_control_or_streaming = True

    return has_video and has_control_or_streaming


def is_usb_camera(device: UsbDeviceDescriptor) -> bool:
    """
    Classify a USB device as camera or not.

    The interface structure is authoritative. Only when it does not show a
    UVC function is the vendor id checked against KNOWN_CAMERA_VENDOR_IDS.

    Args:
        device: The device to classify

    Returns:
        bool: True if the device should be treated as a camera
    """
    if has_uvc_interfaces(device):
        logger.debug(f"Confirmed UVC camera: {device.describe()}")
        return True

    if device.vendor_id in KNOWN_CAMERA_VENDOR_IDS:
        logger.debug(f"Found known camera vendor: {device.describe()}")
        return True

    return False
