"""
Unit tests for UVC camera classification.
"""

import pytest

from camwake.classifier import (
    KNOWN_CAMERA_VENDOR_IDS,
    has_uvc_interfaces,
    is_usb_camera,
)
from camwake.models import UsbDeviceDescriptor, UsbInterfaceDescriptor

UNLISTED_VENDOR = 0x2b7e


def make_device(vendor_id=UNLISTED_VENDOR, product_id=0x0001, interfaces=()):
    return UsbDeviceDescriptor(
        name="dev",
        vendor_id=vendor_id,
        product_id=product_id,
        interfaces=tuple(UsbInterfaceDescriptor(*triple) for triple in interfaces),
    )


class TestStructuralClassification:
    """Interface descriptors are the authoritative signal."""

    @pytest.mark.parametrize("subclass", [1, 2])
    def test_video_control_or_streaming_is_camera(self, subclass):
        device = make_device(interfaces=[(14, subclass, 0)])
        assert UNLISTED_VENDOR not in KNOWN_CAMERA_VENDOR_IDS
        assert is_usb_camera(device)

    def test_composite_device_with_video_function(self, generic_uvc_camera):
        assert is_usb_camera(generic_uvc_camera)

    def test_video_class_with_other_subclass_is_not_enough(self):
        device = make_device(interfaces=[(14, 3, 0)])
        assert not has_uvc_interfaces(device)
        assert not is_usb_camera(device)

    def test_subclass_on_non_video_interface_does_not_count(self):
        # Audio control (class 1, subclass 1) next to an odd video interface
        device = make_device(interfaces=[(1, 1, 0), (14, 0, 0)])
        assert not is_usb_camera(device)

    def test_structural_match_ignores_vendor(self, uvc_camera):
        assert is_usb_camera(uvc_camera)


class TestVendorFallback:
    """Vendor list is consulted only when the structure does not match."""

    def test_known_vendor_without_interfaces(self):
        device = make_device(vendor_id=0x0c45, interfaces=[])
        assert is_usb_camera(device)

    def test_known_vendor_with_non_video_interfaces(self):
        # Logitech receiver: HID only, still matched by vendor
        device = make_device(vendor_id=0x046d, interfaces=[(3, 1, 2)])
        assert is_usb_camera(device)

    def test_unknown_vendor_without_video(self, usb_hub, usb_keyboard):
        assert not is_usb_camera(usb_hub)
        assert not is_usb_camera(usb_keyboard)

    def test_empty_interfaces_unknown_vendor(self):
        assert not is_usb_camera(make_device(interfaces=[]))

    def test_vendor_list_is_deduplicated_set(self):
        assert isinstance(KNOWN_CAMERA_VENDOR_IDS, frozenset)
        assert KNOWN_CAMERA_VENDOR_IDS == {
            0x046d, 0x0bda, 0x0ac8, 0x1e4e, 0x1871,
            0x0c45, 0x1bcf, 0x05a9, 0x0c46,
        }


class TestClassifierProperties:
    """General properties of the classifier."""

    def test_deterministic(self, uvc_camera, usb_hub, generic_uvc_camera):
        for device in (uvc_camera, usb_hub, generic_uvc_camera):
            assert is_usb_camera(device) == is_usb_camera(device)

    def test_interface_order_does_not_matter(self):
        forward = make_device(interfaces=[(3, 0, 0), (14, 1, 0), (14, 2, 0)])
        backward = make_device(interfaces=[(14, 2, 0), (14, 1, 0), (3, 0, 0)])
        assert is_usb_camera(forward) == is_usb_camera(backward) is True
