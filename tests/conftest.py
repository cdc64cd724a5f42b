"""
Pytest configuration and shared fixtures for camwake tests.

This module provides fake USB backends, recording activators and sample
device descriptors used across all test modules.
"""

import sys
import threading
import time
from pathlib import Path
from typing import List

import pytest

# Add the project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from camwake.backends.base import UsbBackend
from camwake.backends.exceptions import EnumerationError
from camwake.launcher import Activator
from camwake.models import LaunchRequest, UsbDeviceDescriptor, UsbInterfaceDescriptor


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "threaded: marks tests that run the background detection thread")
    config.addinivalue_line("markers", "slow: marks tests as slow running tests")


def pytest_collection_modifyitems(config, items):
    """Mark loop and service tests as threaded."""
    for item in items:
        if item.fspath.basename in ("test_loop.py", "test_service.py"):
            item.add_marker(pytest.mark.threaded)
        if "slow" in item.name.lower():
            item.add_marker(pytest.mark.slow)


class FakeUsbBackend(UsbBackend):
    """
    In-memory USB backend.

    The device list can be swapped at any time from the test thread; the
    next poll sees the new list.
    """

    def __init__(self, devices: List[UsbDeviceDescriptor] = None):
        self._devices = list(devices or [])
        self._lock = threading.Lock()
        self._failures = 0
        self.calls = 0

    @property
    def platform_name(self) -> str:
        return "fake"

    def list_devices(self) -> List[UsbDeviceDescriptor]:
        with self._lock:
            self.calls += 1
            if self._failures:
                self._failures -= 1
                raise EnumerationError("Simulated enumeration failure", platform="fake")
            return list(self._devices)

    def set_devices(self, devices: List[UsbDeviceDescriptor]) -> None:
        with self._lock:
            self._devices = list(devices)

    def fail_next(self, count: int = 1) -> None:
        with self._lock:
            self._failures = count


class RecordingActivator(Activator):
    """Activator that records every request it receives."""

    def __init__(self, error: Exception = None):
        self.requests: List[LaunchRequest] = []
        self.error = error
        self._lock = threading.Lock()

    def activate(self, request: LaunchRequest) -> None:
        with self._lock:
            self.requests.append(request)
        if self.error is not None:
            raise self.error

    @property
    def count(self) -> int:
        with self._lock:
            return len(self.requests)


def wait_for_condition(condition_func, timeout=5.0, interval=0.02):
    """Wait for a condition to become true with timeout."""
    start_time = time.time()
    while time.time() - start_time < timeout:
        if condition_func():
            return True
        time.sleep(interval)
    return False


@pytest.fixture
def wait_for():
    """Expose wait_for_condition to tests."""
    return wait_for_condition


@pytest.fixture
def uvc_camera():
    """Logitech webcam exposing a video streaming interface."""
    return UsbDeviceDescriptor(
        name="cam0",
        vendor_id=0x046d,
        product_id=0x0825,
        interfaces=(UsbInterfaceDescriptor(14, 2, 0),),
    )


@pytest.fixture
def generic_uvc_camera():
    """UVC camera from a vendor that is not on the known vendor list."""
    return UsbDeviceDescriptor(
        name="/dev/bus/usb/001/007",
        vendor_id=0x2b7e,
        product_id=0xb557,
        interfaces=(
            UsbInterfaceDescriptor(14, 1, 0),
            UsbInterfaceDescriptor(14, 2, 0),
            UsbInterfaceDescriptor(1, 1, 0),
        ),
    )


@pytest.fixture
def usb_hub():
    """Genesys Logic USB hub."""
    return UsbDeviceDescriptor(
        name="hub0",
        vendor_id=0x05e3,
        product_id=0x0608,
        interfaces=(UsbInterfaceDescriptor(9, 0, 1),),
    )


@pytest.fixture
def usb_keyboard():
    """HID keyboard from an unrelated vendor."""
    return UsbDeviceDescriptor(
        name="kbd0",
        vendor_id=0x04d9,
        product_id=0x1702,
        interfaces=(UsbInterfaceDescriptor(3, 1, 1),),
    )


@pytest.fixture
def fake_backend():
    """Create an empty FakeUsbBackend."""
    return FakeUsbBackend()


@pytest.fixture
def recording_activator():
    """Create a RecordingActivator."""
    return RecordingActivator()
