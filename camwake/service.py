"""
camwake service - process-wide owner of the detection loop.

This module contains the CameraWatchService class that starts and stops the
detection loop, answers diagnostic queries and maps external trigger
signals (boot, USB attach, power, settings...) onto the same entry points.
"""

import logging
import threading
from typing import Callable, List, Optional

from .backends.base import DeviceProvider
from .classifier import is_usb_camera
from .config import ServiceConfig
from .events import EventManager
from .launcher import Activator, CommandActivator, LaunchOrchestrator, LoggingActivator
from .loop import DetectionLoop
from .models import Trigger, TriggerSource
from .tracker import PresenceDiff

logger = logging.getLogger(__name__)

USB_DEVICE_RECEIVER_TAG = "usb_device_receiver"
USB_STATE_RECEIVER_TAG = "usb_state_receiver"


def log_foreground_notice() -> None:
    """Default keep-alive notice shown when monitoring starts."""
    logger.info("camwake active - monitoring USB camera connections")


class CameraWatchService:
    """
    Owns the single detection loop of the process.

    Integrates device enumeration, presence detection and launch
    orchestration behind a start/stop API that any number of independent
    triggers may call without creating a second polling loop.
    """

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        provider: Optional[DeviceProvider] = None,
        activator: Optional[Activator] = None,
        notifier: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize the service.

        Args:
            config: Service settings, defaults to ServiceConfig()
            provider: USB snapshot source, defaults to the platform backend
            activator: Application activation collaborator. Defaults to a
                       CommandActivator when a launch command is configured,
                       otherwise launches are only logged.
            notifier: Keep-alive notice invoked once per loop start
        """
        self.config = config or ServiceConfig()
        self._provider = provider

        if activator is None:
            if self.config.launch_command:
                activator = CommandActivator(self.config.launch_command)
            else:
                activator = LoggingActivator()

        self.orchestrator = LaunchOrchestrator(activator, source_tag=self.config.source_tag)
        self.events = EventManager()
        self.notifier = notifier or log_foreground_notice

        self._lock = threading.Lock()
        self._loop: Optional[DetectionLoop] = None
        self._pending_starts: List[threading.Timer] = []

        self._handlers = {
            TriggerSource.BOOT_COMPLETED: self._handle_start_request,
            TriggerSource.PACKAGE_REPLACED: self._handle_start_request,
            TriggerSource.USER_PRESENT: self._handle_start_request,
            TriggerSource.USB_ATTACHED: self._handle_device_attached,
            TriggerSource.USB_DETACHED: self._handle_device_detached,
            TriggerSource.USB_STATE_CHANGED: self._handle_usb_state_changed,
            TriggerSource.POWER_CONNECTED: self._handle_power_connected,
            TriggerSource.SETTING_TOGGLED: self._handle_setting_toggled,
            TriggerSource.MANUAL: self._handle_manual,
        }

        logger.info("camwake service initialized")

    @property
    def provider(self) -> DeviceProvider:
        if self._provider is None:
            self._provider = DeviceProvider()
        return self._provider

    def _ensure_loop(self) -> DetectionLoop:
        """Create the loop if none exists. Caller holds self._lock."""
        if self._loop is None:
            self._loop = DetectionLoop(
                self.provider,
                orchestrator=self.orchestrator,
                poll_interval=self.config.poll_interval,
                provider_timeout=self.config.provider_timeout,
                events=self.events,
            )
        return self._loop

    def start_service(self) -> bool:
        """
        Ensure the detection loop is running.

        Safe to call from several threads at once; only one loop is ever
        active.

        Returns:
            bool: True if this call started the loop
        """
        with self._lock:
            loop = self._ensure_loop()
            if loop.is_running():
                logger.debug("USB detection already running")
                return False

            try:
                self.notifier()
            except Exception as e:
                logger.error(f"Failed to show foreground notice: {e}")

            return loop.start()

    def stop_service(self) -> bool:
        """
        Stop the detection loop and release it.

        A later start_service() begins again from an empty presence set.

        Returns:
            bool: True if a running loop was stopped
        """
        with self._lock:
            for timer in self._pending_starts:
                timer.cancel()
            self._pending_starts.clear()

            loop, self._loop = self._loop, None
            if loop is None or not loop.is_running():
                logger.debug("USB detection not running")
                if loop is not None:
                    # Idle loops still hold a worker after trigger_once()
                    loop.close()
                return False
            return loop.stop()

    def is_monitoring(self) -> bool:
        """Check whether the detection loop is running."""
        loop = self._loop
        return loop is not None and loop.is_running()

    def current_devices(self) -> List[str]:
        """
        Describe every attached USB device, cameras or not.

        Returns:
            List[str]: One "name (VID:xxxx PID:xxxx)" line per device

        Raises:
            EnumerationError: If the device list cannot be read
        """
        return [device.describe() for device in self.provider.list_devices()]

    def trigger_once(self) -> Optional[PresenceDiff]:
        """Run one detection cycle now, outside the polling schedule."""
        with self._lock:
            loop = self._ensure_loop()
        return loop.trigger_once()

    def on(self, event_type, callback: Callable) -> None:
        """
        Subscribe to arrival or departure events.

        Subscriptions survive stop/start cycles.
        """
        self.events.subscribe(event_type, callback)

    def handle_trigger(self, trigger: Trigger) -> None:
        """
        Dispatch an external signal.

        Failures are logged, never raised to the caller.
        """
        logger.debug(f"Received trigger: {trigger.source.value}")
        handler = self._handlers[trigger.source]
        try:
            handler(trigger)
        except Exception as e:
            logger.error(f"Error handling {trigger.source.value} trigger: {e}")

    def _handle_start_request(self, trigger: Trigger) -> None:
        logger.info(f"{trigger.source.value}: ensuring USB detection is running")
        self.start_service()

    def _handle_device_attached(self, trigger: Trigger) -> None:
        device = trigger.device
        if device is None:
            logger.warning("USB attach notification without device")
            return

        logger.info(f"USB device attached: {device.describe()}")
        # Runs in addition to the poll; both may launch for the same attach
        if is_usb_camera(device):
            logger.info("UVC camera attached, launching application")
            self.orchestrator.launch(
                USB_DEVICE_RECEIVER_TAG,
                usb_camera_detected=True,
                bring_to_front=True,
                devices=[device.key],
            )

    def _handle_device_detached(self, trigger: Trigger) -> None:
        if trigger.device is not None:
            logger.info(f"USB device detached: {trigger.device.describe()}")

    def _handle_usb_state_changed(self, trigger: Trigger) -> None:
        logger.info(
            f"USB state changed - connected: {trigger.connected}, host: {trigger.host_connected}"
        )
        if not (trigger.connected and trigger.host_connected):
            return

        self.start_service()
        self.orchestrator.launch(USB_STATE_RECEIVER_TAG, usb_state_changed=True)

    def _handle_power_connected(self, trigger: Trigger) -> None:
        delay = self.config.power_settle_delay
        if delay <= 0:
            self.start_service()
            return

        logger.info(f"Power connected, starting USB detection in {delay}s")
        timer = threading.Timer(delay, self._delayed_start)
        timer.daemon = True
        with self._lock:
            self._pending_starts.append(timer)
        timer.start()

    def _delayed_start(self) -> None:
        current = threading.current_thread()
        with self._lock:
            if current not in self._pending_starts:
                # Cancelled by stop_service() after the timer fired
                return
            self._pending_starts.remove(current)
        self.start_service()

    def _handle_setting_toggled(self, trigger: Trigger) -> None:
        self.config.auto_launch = trigger.enabled
        if trigger.enabled:
            self.start_service()
        else:
            self.stop_service()

    def _handle_manual(self, trigger: Trigger) -> None:
        self.trigger_once()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure detection is stopped."""
        self.stop_service()
