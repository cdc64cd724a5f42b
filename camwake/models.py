"""
Core data models for camwake.

This module defines the USB descriptors captured on every poll, the
identity used to track camera presence between polls, and the requests
and triggers exchanged with the host application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple
import time


def device_key(vendor_id: int, product_id: int) -> str:
    """
    Build the canonical presence identity for a USB device.

    Args:
        vendor_id: USB vendor identifier
        product_id: USB product identifier

    Returns:
        str: Decimal "vendor:product" key, e.g. "1133:2085"
    """
    return f"{vendor_id}:{product_id}"


@dataclass(frozen=True)
class UsbInterfaceDescriptor:
    """Class/subclass/protocol triple of one USB interface."""
    interface_class: int
    interface_subclass: int
    interface_protocol: int


@dataclass(frozen=True)
class UsbDeviceDescriptor:
    """
    Snapshot of one attached USB device.

    Instances are re-created on every poll and carry no identity beyond
    their vendor and product id.
    """
    name: str
    vendor_id: int
    product_id: int
    interfaces: Tuple[UsbInterfaceDescriptor, ...] = ()

    @property
    def key(self) -> str:
        """Presence identity of this device."""
        return device_key(self.vendor_id, self.product_id)

    def describe(self) -> str:
        """Human-readable line used by diagnostics."""
        return f"{self.name} (VID:{self.vendor_id:x} PID:{self.product_id:x})"


class EventType(Enum):
    """Enumeration of presence events emitted by the detection loop."""
    ON_ARRIVED = "on_arrived"
    ON_DEPARTED = "on_departed"


@dataclass(frozen=True)
class DetectionEvent:
    """Keys that arrived or departed during one poll cycle."""
    kind: EventType
    keys: FrozenSet[str]


@dataclass(frozen=True)
class LaunchRequest:
    """
    Request handed to the application activator.

    Carries the auto-launch flag, the tag of the component that asked for
    the launch and the wall-clock time of the request in milliseconds.
    """
    auto_launch: bool
    source_tag: str
    timestamp_millis: int
    extras: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, source_tag: str, auto_launch: bool = True, **extras) -> "LaunchRequest":
        """Create a request stamped with the current time."""
        return cls(
            auto_launch=auto_launch,
            source_tag=source_tag,
            timestamp_millis=int(time.time() * 1000),
            extras=dict(extras),
        )

    def as_env(self) -> Dict[str, str]:
        """
        Render the request as environment variables for launch commands.

        Returns:
            Dict[str, str]: CAMWAKE_* variables describing the request
        """
        env = {
            "CAMWAKE_AUTO_LAUNCH": "1" if self.auto_launch else "0",
            "CAMWAKE_SOURCE": self.source_tag,
            "CAMWAKE_TIMESTAMP": str(self.timestamp_millis),
        }
        for name, value in self.extras.items():
            if isinstance(value, bool):
                value = "1" if value else "0"
            elif isinstance(value, (list, tuple, set, frozenset)):
                value = ",".join(str(item) for item in value)
            env[f"CAMWAKE_{name.upper()}"] = str(value)
        return env


class TriggerSource(Enum):
    """Closed set of external signals that reach the service."""
    BOOT_COMPLETED = "boot_completed"
    PACKAGE_REPLACED = "package_replaced"
    USER_PRESENT = "user_present"
    USB_ATTACHED = "usb_attached"
    USB_DETACHED = "usb_detached"
    USB_STATE_CHANGED = "usb_state_changed"
    POWER_CONNECTED = "power_connected"
    SETTING_TOGGLED = "setting_toggled"
    MANUAL = "manual"


@dataclass(frozen=True)
class Trigger:
    """
    One external signal delivered to the service.

    `device` is set for USB attach/detach notifications, `connected` and
    `host_connected` for USB state changes and `enabled` for setting toggles.
    """
    source: TriggerSource
    device: Optional[UsbDeviceDescriptor] = None
    connected: bool = False
    host_connected: bool = False
    enabled: bool = True
