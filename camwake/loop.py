"""
Periodic USB camera detection loop.

The loop polls the device provider at a fixed interval, diffs the camera
set against the previous poll and dispatches arrivals to the launch
orchestrator. One background thread runs per started loop.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from typing import Callable, List, Optional

from .backends.base import DeviceProvider
from .backends.exceptions import EnumerationTimeoutError
from .events import EventManager
from .launcher import LaunchOrchestrator
from .models import DetectionEvent, EventType, UsbDeviceDescriptor
from .tracker import PresenceDiff, PresenceTracker

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
PROVIDER_TIMEOUT_FACTOR = 3.0


class DetectionLoop:
    """
    Cancellable polling loop with at most one active run.

    The presence set belongs to this instance. It starts empty on every
    start(), so cameras attached before the loop started are reported as
    arrived on the first cycle.
    """

    def __init__(
        self,
        provider: DeviceProvider,
        orchestrator: Optional[LaunchOrchestrator] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        provider_timeout: Optional[float] = None,
        events: Optional[EventManager] = None,
    ):
        """
        Initialize the detection loop.

        Args:
            provider: Source of USB device snapshots
            orchestrator: Receives arrived camera keys
            poll_interval: Seconds between two polls
            provider_timeout: Upper bound for one snapshot call in seconds,
                              defaults to three poll intervals
            events: Event manager notified of arrivals and departures
        """
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")

        self.provider = provider
        self.orchestrator = orchestrator or LaunchOrchestrator()
        self.poll_interval = poll_interval
        self.provider_timeout = (
            provider_timeout if provider_timeout is not None
            else poll_interval * PROVIDER_TIMEOUT_FACTOR
        )
        self.events = events or EventManager()
        self.tracker = PresenceTracker()

        self._state_lock = threading.Lock()
        # Reentrant so event callbacks running on the loop thread may call stop()
        self._cycle_lock = threading.RLock()
        self._running = False
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._pending: Optional[Future] = None
        # Bumped by every start(); stop() only cleans up the run it stopped
        self._generation = 0

    def is_running(self) -> bool:
        """Check whether the loop is currently polling."""
        return self._running

    def on(self, event_type, callback: Callable) -> None:
        """Subscribe to arrival or departure events."""
        self.events.subscribe(event_type, callback)

    def start(self) -> bool:
        """
        Start polling in a background thread.

        Returns:
            bool: False if the loop was already running
        """
        with self._state_lock:
            if self._running:
                logger.warning("Detection loop already running")
                return False

            self._running = True
            self._generation += 1
            self.tracker.reset()
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="camwake-detection",
                daemon=True,
            )
            self._thread.start()

        logger.info(f"Started USB camera detection (interval {self.poll_interval}s)")
        return True

    def stop(self) -> bool:
        """
        Stop polling.

        Wakes the waiting thread immediately. When this returns, the stopped
        run emits no further events.

        Returns:
            bool: False if the loop was not running
        """
        with self._state_lock:
            if not self._running:
                logger.warning("Detection loop not running")
                return False

            self._running = False
            self._stop_event.set()
            thread = self._thread
            self._thread = None
            generation = self._generation

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.provider_timeout + self.poll_interval)
            if thread.is_alive():
                logger.warning("Detection thread did not stop gracefully")

        # Waits for any in-flight cycle. Only the run stopped here is cleaned
        # up; a start() since then owns the tracker and the worker.
        with self._cycle_lock:
            with self._state_lock:
                if self._generation == generation:
                    self.tracker.reset()
                    self._shutdown_executor()

        logger.info("Stopped USB camera detection")
        return True

    def trigger_once(self) -> Optional[PresenceDiff]:
        """
        Run one detection cycle on the calling thread.

        Works whether or not the loop is running and leaves its schedule
        untouched.

        Returns:
            Optional[PresenceDiff]: Cycle result, or None if the cycle failed
        """
        logger.debug("Manual camera detection triggered")
        try:
            return self._run_cycle()
        except Exception as e:
            logger.error(f"Error in manual detection cycle: {e}")
            return None

    def _run(self, stop_event: threading.Event) -> None:
        """Polling thread body."""
        logger.debug("Detection loop started")

        while not stop_event.is_set():
            try:
                self._run_cycle(stop_event)
            except Exception as e:
                logger.error(f"Error in USB detection loop: {e}")

            if stop_event.wait(timeout=self.poll_interval):
                break

        logger.debug("Detection loop stopped")

    def _run_cycle(self, stop_event: Optional[threading.Event] = None) -> Optional[PresenceDiff]:
        """
        Snapshot, diff and dispatch one cycle.

        Cycles are serialized, so events of one cycle are fully dispatched
        before the next cycle takes its snapshot.
        """
        with self._cycle_lock:
            if stop_event is not None and stop_event.is_set():
                return None

            devices = self._snapshot()

            if stop_event is not None and stop_event.is_set():
                return None

            result = self.tracker.update(devices)
            logger.debug(
                f"Checked {len(devices)} USB devices, cameras: {sorted(result.current)}"
            )

            if result.arrived:
                self.orchestrator.on_arrived(result.arrived)
                self.events.emit(
                    EventType.ON_ARRIVED,
                    DetectionEvent(EventType.ON_ARRIVED, result.arrived),
                )

            if result.departed:
                logger.info(f"USB camera disconnected: {', '.join(sorted(result.departed))}")
                self.events.emit(
                    EventType.ON_DEPARTED,
                    DetectionEvent(EventType.ON_DEPARTED, result.departed),
                )

            return result

    def _snapshot(self) -> List[UsbDeviceDescriptor]:
        """
        Query the provider, bounded by provider_timeout.

        At most one provider call is outstanding. While a timed out call is
        still running, later cycles fail fast instead of piling up workers.

        Raises:
            EnumerationTimeoutError: If the provider does not answer in time
        """
        if self._pending is not None and not self._pending.done():
            raise EnumerationTimeoutError(
                "Previous USB enumeration is still running",
                timeout=self.provider_timeout,
            )

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="camwake-usb")

        self._pending = self._executor.submit(self.provider.list_devices)
        try:
            devices = list(self._pending.result(timeout=self.provider_timeout))
        except FutureTimeoutError:
            raise EnumerationTimeoutError(
                f"USB enumeration did not finish within {self.provider_timeout}s",
                timeout=self.provider_timeout,
            )
        self._pending = None
        return devices

    def close(self) -> None:
        """Release the enumeration worker of a loop that is not polling."""
        with self._cycle_lock:
            self._shutdown_executor()

    def _shutdown_executor(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure polling is stopped."""
        if self._running:
            self.stop()
        else:
            self.close()
