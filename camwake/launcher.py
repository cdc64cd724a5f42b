"""
Launch orchestration for camwake.

Turns camera arrivals into requests that bring the host application to the
foreground. The activation itself is delegated to an Activator; failures are
logged and never reach the detection loop.
"""

import logging
import os
import subprocess
from abc import ABC, abstractmethod
from typing import Callable, Iterable, List, Optional

from .models import LaunchRequest
from .backends.exceptions import ActivationError

logger = logging.getLogger(__name__)

DETECTION_SOURCE_TAG = "usb_detection_service"


class Activator(ABC):
    """
    Application activation interface.

    Implementations bring the host application to the foreground, starting
    it if needed. Calls are fire-and-forget; repeated activations of an
    already foregrounded application are expected to coalesce.
    """

    @abstractmethod
    def activate(self, request: LaunchRequest) -> None:
        """
        Hand a launch request to the host application.

        Raises:
            ActivationError: If the request could not be delivered
        """
        pass


class CommandActivator(Activator):
    """
    Activates the application by spawning a command.

    The request is passed in CAMWAKE_* environment variables. The process is
    detached and not waited for.
    """

    def __init__(self, command: List[str]):
        if not command:
            raise ValueError("Launch command must not be empty")
        self.command = list(command)

    def activate(self, request: LaunchRequest) -> None:
        env = dict(os.environ)
        env.update(request.as_env())
        try:
            subprocess.Popen(
                self.command,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            raise ActivationError(f"Failed to run launch command: {e}", command=self.command, cause=e)


class CallbackActivator(Activator):
    """Activates the application through an in-process callable."""

    def __init__(self, callback: Callable[[LaunchRequest], None]):
        if not callable(callback):
            raise TypeError("Callback must be callable")
        self.callback = callback

    def activate(self, request: LaunchRequest) -> None:
        self.callback(request)


class LoggingActivator(Activator):
    """Only records launch requests in the log; used when nothing is configured."""

    def activate(self, request: LaunchRequest) -> None:
        logger.info(f"Launch requested by {request.source_tag} at {request.timestamp_millis}")


class LaunchOrchestrator:
    """
    Translates camera arrivals into activation requests.

    There is no debounce here: the presence tracker never reports a device
    as arrived twice without a departure in between, and the activator is
    expected to coalesce requests for an application already in front.
    """

    def __init__(self, activator: Optional[Activator] = None, source_tag: str = DETECTION_SOURCE_TAG):
        """
        Initialize the orchestrator.

        Args:
            activator: Activation collaborator, defaults to LoggingActivator
            source_tag: Tag attached to requests caused by poll arrivals
        """
        self.activator = activator or LoggingActivator()
        self.source_tag = source_tag

    def on_arrived(self, keys: Iterable[str]) -> bool:
        """
        Request a launch for cameras that just arrived.

        Args:
            keys: Device keys reported as arrived by one poll cycle

        Returns:
            bool: True if the activator accepted the request
        """
        keys = sorted(keys)
        if not keys:
            return False

        logger.info(f"New USB camera detected: {', '.join(keys)}")
        return self.launch(
            self.source_tag,
            usb_camera_detected=True,
            bring_to_front=True,
            devices=keys,
        )

    def launch(self, source_tag: str, **extras) -> bool:
        """
        Build an auto-launch request and hand it to the activator.

        Args:
            source_tag: Component asking for the launch
            **extras: Additional request fields

        Returns:
            bool: True on success, False if activation failed
        """
        request = LaunchRequest.create(source_tag, auto_launch=True, **extras)
        try:
            self.activator.activate(request)
        except Exception as e:
            logger.error(f"Failed to launch application ({source_tag}): {e}")
            return False

        logger.debug(f"Application launch requested by {source_tag}")
        return True
