#!/usr/bin/env python3
"""
Command Line Interface for the drive scanner.
Lists drives once or follows attach/detach events.
"""

from __future__ import annotations

import json
import sys
import threading

import click

from ..config.loader import ConfigLoader
from ..core.logger import setup_logging, get_logger
from ..discovery.adapters.block_device import BlockDeviceAdapter
from ..discovery.errors import ConfigurationError, ListingError
from ..discovery.hotplug import HotplugWatcher
from ..discovery.scanner import Scanner
from ..notification.notify_sender import NotifySender

logger = get_logger(__name__)

def _format_drive(drive) -> str:
    flags = []
    if drive.is_system:
        flags.append("system")
    if drive.is_removable:
        flags.append("removable")
    line = f"{drive.identity}  {drive.display_name}  {drive.description}  {drive.size}"
    if flags:
        line += f"  [{', '.join(flags)}]"
    return line

# CLI root
@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """Drive scanner - list and monitor block devices"""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging("DEBUG" if verbose else "WARNING")

    if verbose:
        logger.debug("Verbose logging enabled")

@cli.command(name="list")
@click.option("--include-system", is_flag=True, help="Include boot/system drives")
@click.option("--json", "as_json", is_flag=True, help="Print drives as JSON")
def list_command(include_system: bool, as_json: bool):
    """List the drives currently attached"""
    adapter = BlockDeviceAdapter(include_system_drives=include_system)

    try:
        drives = adapter.scan()
    except ListingError as e:
        click.echo(f"Error listing drives: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([drive.to_dict() for drive in drives], indent=2))
        return

    if not drives:
        click.echo("No drives found")
        return

    for drive in drives:
        click.echo(_format_drive(drive))

@cli.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="JSON options file")
@click.option("--interval", type=float, default=None, help="Seconds between scans")
@click.option("--include-system", is_flag=True, help="Include boot/system drives")
@click.option("--hotplug", is_flag=True, help="Rescan when /dev changes")
@click.option("--once", is_flag=True, help="Exit after the initial drive list")
@click.pass_context
def watch(ctx: click.Context, config_path, interval, include_system, hotplug, once):
    """Print drive add/remove events until interrupted"""
    try:
        config = ConfigLoader.load(config_path)
        if not ctx.obj.get("verbose"):
            setup_logging(config.log_level, config.log_file)

        scanner = Scanner(
            [BlockDeviceAdapter(
                include_system_drives=include_system or config.include_system_drives
            )],
            interval=config.interval if interval is None else interval,
        )
    except (ConfigurationError, ValueError) as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(2)

    done = threading.Event()
    failures = []

    def on_ready(drives):
        click.echo(f"READY {len(drives)} drive(s)")
        for drive in sorted(drives, key=lambda d: d.identity):
            click.echo(f"  {_format_drive(drive)}")
        if once:
            done.set()

    def on_error(error):
        failures.append(error)
        done.set()

    scanner.register_callback("ready", on_ready)
    scanner.register_callback("add", lambda drive: click.echo(f"ADD {_format_drive(drive)}"))
    scanner.register_callback("remove", lambda drive: click.echo(f"REMOVE {_format_drive(drive)}"))
    scanner.register_callback("error", on_error)

    if config.notify_service:
        NotifySender(config.notify_service).attach(scanner)

    watcher = None
    if hotplug or config.watch_hotplug:
        watcher = HotplugWatcher(scanner)
        watcher.start()

    scanner.start()
    try:
        while not done.wait(0.5):
            pass
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        if watcher is not None:
            watcher.stop()
        scanner.stop()

    if failures:
        click.echo(f"Scan failed: {failures[0]}", err=True)
        sys.exit(1)

def main():
    cli(obj={})

if __name__ == "__main__":
    main()
