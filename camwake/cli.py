"""
Command-line interface for camwake.

This module provides CLI commands for running the detection service in the
foreground and for inspecting the attached USB devices.
"""

import json
import shlex
import signal
import sys
import threading
from typing import Optional

import click

from . import __version__
from .backends import CamWakeError, ConfigurationError, DeviceProvider
from .classifier import is_usb_camera
from .config import load_config, save_config
from .logging_config import setup_logging
from .service import CameraWatchService

CONFIG_OPTION_HELP = 'Custom path for the configuration file'


def _load_config_or_exit(config_path: Optional[str]):
    try:
        return load_config(config_path)
    except ConfigurationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)


def _wait_for_shutdown() -> None:
    """Block until Ctrl+C or SIGTERM."""
    stop_requested = threading.Event()
    signal.signal(signal.SIGTERM, lambda signum, frame: stop_requested.set())
    try:
        while not stop_requested.wait(timeout=0.5):
            pass
    except KeyboardInterrupt:
        pass


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    camwake - bring an application to the front when a USB camera appears.

    Polls the USB bus, recognises UVC cameras and launches the configured
    application whenever a camera is plugged in.
    """
    pass


@cli.command()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help=CONFIG_OPTION_HELP)
@click.option('--poll-interval', type=float, help='Seconds between two USB polls')
@click.option('--launch-command', help='Command that brings the application to the foreground')
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    help='Logging level'
)
def watch(config_path: Optional[str], poll_interval: Optional[float],
          launch_command: Optional[str], log_level: Optional[str]):
    """
    Monitor USB cameras until interrupted.

    Every camera that appears triggers the launch command. Stop with Ctrl+C.
    """
    config = _load_config_or_exit(config_path)

    if poll_interval is not None:
        config.poll_interval = poll_interval
    if launch_command:
        config.launch_command = shlex.split(launch_command)
    if log_level:
        config.log_level = log_level.upper()

    try:
        config.validate()
    except ConfigurationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)

    if not config.auto_launch:
        click.echo("Auto-launch is disabled. Enable it with 'camwake auto-launch on'.", err=True)
        sys.exit(1)

    setup_logging(log_level=config.log_level)

    service = CameraWatchService(config)
    try:
        service.start_service()
        click.echo("Watching for USB cameras... (press Ctrl+C to stop)")
        _wait_for_shutdown()
    finally:
        service.stop_service()
    click.echo("Stopped.")


@cli.command()
def devices():
    """
    List every attached USB device.

    Shows all devices, cameras or not, with vendor and product ids.
    """
    try:
        service = CameraWatchService()
        lines = service.current_devices()
    except CamWakeError as e:
        click.echo(f"USB enumeration failed: {e}", err=True)
        sys.exit(1)

    if not lines:
        click.echo("No USB devices found.")
        return

    for line in lines:
        click.echo(line)


@cli.command()
@click.option(
    '--format',
    'output_format',
    type=click.Choice(['table', 'json']),
    default='table',
    help='Output format for the scan result'
)
def scan(output_format: str):
    """
    Enumerate USB devices once and classify them.

    Shows the presence key of each device and whether it counts as a camera.
    """
    try:
        usb_devices = DeviceProvider().list_devices()
    except CamWakeError as e:
        click.echo(f"USB enumeration failed: {e}", err=True)
        sys.exit(1)

    rows = [
        {
            'key': device.key,
            'name': device.name,
            'vendor_id': f"{device.vendor_id:04x}",
            'product_id': f"{device.product_id:04x}",
            'camera': is_usb_camera(device),
        }
        for device in usb_devices
    ]

    if output_format == 'json':
        click.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        click.echo("No USB devices found.")
        return

    click.echo(f"{'Key':<14} {'VID:PID':<11} {'Camera':<7} {'Name':<30}")
    click.echo("-" * 64)
    for row in rows:
        camera = "yes" if row['camera'] else "no"
        click.echo(
            f"{row['key']:<14} {row['vendor_id'] + ':' + row['product_id']:<11} {camera:<7} {row['name']:<30}"
        )

    cameras = sum(1 for row in rows if row['camera'])
    click.echo(f"\n{cameras} camera(s) among {len(rows)} USB device(s).")


@cli.command('auto-launch')
@click.argument('state', type=click.Choice(['on', 'off']))
@click.option('--config', 'config_path', type=click.Path(dir_okay=False), help=CONFIG_OPTION_HELP)
def auto_launch(state: str, config_path: Optional[str]):
    """
    Enable or disable launching on camera arrival.
    """
    config = _load_config_or_exit(config_path)
    config.auto_launch = state == 'on'

    try:
        path = save_config(config, config_path)
    except ConfigurationError as e:
        click.echo(f"Could not save configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"Auto-launch {'enabled' if config.auto_launch else 'disabled'} ({path})")


def main(args=None):
    """Main entry point for the CLI."""
    cli(args)


if __name__ == '__main__':
    main()
