"""
Presence tracking between poll cycles.
"""

from typing import FrozenSet, Iterable, NamedTuple

from .classifier import is_usb_camera
from .models import UsbDeviceDescriptor


class PresenceDiff(NamedTuple):
    """Result of comparing one snapshot against the previous presence set."""
    current: FrozenSet[str]
    arrived: FrozenSet[str]
    departed: FrozenSet[str]


def diff_presence(previous: Iterable[str], devices: Iterable[UsbDeviceDescriptor]) -> PresenceDiff:
    """
    Compute the camera keys that arrived and departed since the last poll.

    Args:
        previous: Keys believed attached after the previous poll
        devices: Every USB device of the current snapshot

    Returns:
        PresenceDiff: The new presence set plus arrived/departed keys
    """
    previous = frozenset(previous)
    current = frozenset(device.key for device in devices if is_usb_camera(device))
    return PresenceDiff(
        current=current,
        arrived=current - previous,
        departed=previous - current,
    )


class PresenceTracker:
    """
    Holds the cameras currently believed attached.

    The set is replaced wholesale on every update, never patched, so a
    missed cycle cannot leave stale entries behind.
    """

    def __init__(self):
        self._presence: FrozenSet[str] = frozenset()

    @property
    def presence(self) -> FrozenSet[str]:
        return self._presence

    def update(self, devices: Iterable[UsbDeviceDescriptor]) -> PresenceDiff:
        result = diff_presence(self._presence, devices)
        self._presence = result.current
        return result

    def reset(self) -> None:
        self._presence = frozenset()
