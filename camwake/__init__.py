"""
camwake - USB camera presence detection and application auto-launch.

Polls the USB bus, recognises UVC video cameras and brings a host
application to the foreground whenever a camera is plugged in.
"""

__version__ = "0.1.0"

from .models import (
    UsbInterfaceDescriptor,
    UsbDeviceDescriptor,
    DetectionEvent,
    EventType,
    LaunchRequest,
    Trigger,
    TriggerSource,
    device_key,
)
from .classifier import is_usb_camera, KNOWN_CAMERA_VENDOR_IDS
from .tracker import PresenceTracker, PresenceDiff, diff_presence
from .launcher import Activator, CallbackActivator, CommandActivator, LaunchOrchestrator
from .loop import DetectionLoop
from .config import ServiceConfig, load_config, save_config
from .service import CameraWatchService
from .backends import DeviceProvider, UsbBackend, CamWakeError

__all__ = [
    "UsbInterfaceDescriptor",
    "UsbDeviceDescriptor",
    "DetectionEvent",
    "EventType",
    "LaunchRequest",
    "Trigger",
    "TriggerSource",
    "device_key",
    "is_usb_camera",
    "KNOWN_CAMERA_VENDOR_IDS",
    "PresenceTracker",
    "PresenceDiff",
    "diff_presence",
    "Activator",
    "CallbackActivator",
    "CommandActivator",
    "LaunchOrchestrator",
    "DetectionLoop",
    "ServiceConfig",
    "load_config",
    "save_config",
    "CameraWatchService",
    "DeviceProvider",
    "UsbBackend",
    "CamWakeError",
]
