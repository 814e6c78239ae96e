#!/usr/bin/env python3
"""
Hotplug trigger.
Watches /dev with watchdog and asks the scanner for an immediate cycle
when a block device node appears or disappears.
"""

import logging
import re
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

BLOCK_DEVICE_PATTERN = re.compile(r"^(sd[a-z]+|nvme\d+n\d+|mmcblk\d+|vd[a-z]+|hd[a-z]+|xvd[a-z]+)")

class DeviceNodeHandler(FileSystemEventHandler):
    """Forwards block device node creation/removal to the scanner"""

    def __init__(self, scanner):
        super().__init__()
        self.scanner = scanner

    def on_created(self, event):
        self._handle(event)

    def on_deleted(self, event):
        self._handle(event)

    def _handle(self, event):
        if event.is_directory:
            return

        name = Path(event.src_path).name
        if not BLOCK_DEVICE_PATTERN.match(name):
            return

        logger.debug(f"Device node {event.event_type}: {name}")
        self.scanner.request_scan()

class HotplugWatcher:
    """Owns the watchdog observer for the device directory"""

    def __init__(self, scanner, dev_dir: str = "/dev"):
        self.scanner = scanner
        self.dev_dir = Path(dev_dir)
        self.handler = DeviceNodeHandler(scanner)
        self.observer = None

    @property
    def is_running(self) -> bool:
        return self.observer is not None

    def start(self) -> None:
        if self.observer is not None:
            logger.warning("Hotplug watcher already running")
            return

        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.dev_dir), recursive=False)
        self.observer.start()
        logger.info(f"Watching {self.dev_dir} for device nodes")

    def stop(self) -> None:
        if self.observer is None:
            return

        self.observer.stop()
        self.observer.join(timeout=5)
        self.observer = None
        logger.info("Hotplug watcher stopped")
