"""
Helpers shared by the drive scanner tests.
"""

import threading
import time

from drive_scanner.discovery import Drive, Scanner
from drive_scanner.discovery.adapters import Adapter, BlockDeviceAdapter


def wait_for(predicate, timeout=2.0, interval=0.005):
    """Poll predicate until it is true or the timeout expires"""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


def make_drive(device, **fields):
    descriptor = {"device": device}
    descriptor.update(fields)
    return Drive.from_descriptor(descriptor)


class ScriptedAdapter(Adapter):
    """Returns one scripted result per scan; the last one repeats"""

    name = "scripted"

    def __init__(self, *results):
        self.results = list(results)
        self.calls = 0

    def scan(self):
        self.calls += 1
        result = self.results[0] if len(self.results) == 1 else self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return list(result)


class EventRecorder:
    """Collects scanner notifications in order"""

    def __init__(self, scanner):
        self.events = []
        self.lock = threading.Lock()
        self.ready = threading.Event()
        self.failed = threading.Event()
        for event_type in ("ready", "add", "remove", "error"):
            scanner.register_callback(event_type, self._recorder(event_type))

    def _recorder(self, event_type):
        def record(payload):
            with self.lock:
                self.events.append((event_type, payload))
            if event_type == "ready":
                self.ready.set()
            elif event_type == "error":
                self.failed.set()
        return record

    def of_type(self, event_type):
        with self.lock:
            return [payload for kind, payload in self.events if kind == event_type]


def start_scanner(include_system_drives=False, interval=60):
    """Start a block device scanner and wait for ready or error"""
    scanner = Scanner([BlockDeviceAdapter(lambda: include_system_drives)], interval=interval)
    recorder = EventRecorder(scanner)
    scanner.start()
    assert wait_for(lambda: recorder.ready.is_set() or recorder.failed.is_set())
    return scanner, recorder


LINUX_DRIVES = [
    {
        "device": "/dev/sda",
        "displayName": "/dev/sda",
        "description": "WDC WD10JPVX-75J",
        "size": "931.5G",
        "mountpoints": [{"path": "/"}],
        "isSystem": True,
        "isRemovable": False,
    },
    {
        "device": "/dev/sdb",
        "displayName": "/dev/sdb",
        "description": "Foo",
        "size": "14G",
        "mountpoints": [{"path": "/mnt/foo"}],
        "isSystem": False,
        "isRemovable": False,
    },
    {
        "device": "/dev/sdc",
        "displayName": "/dev/sdc",
        "description": "Bar",
        "size": "14G",
        "mountpoints": [{"path": "/mnt/bar"}],
        "isSystem": False,
        "isRemovable": False,
    },
]


WINDOWS_DRIVES = [
    {
        "device": "\\\\.\\PHYSICALDRIVE1",
        "displayName": "C:",
        "description": "WDC WD10JPVX-75J",
        "size": "931.5G",
        "mountpoints": [{"path": "C:"}],
        "isSystem": True,
        "isRemovable": False,
    },
    {
        "device": "\\\\.\\PHYSICALDRIVE2",
        "displayName": "\\\\.\\PHYSICALDRIVE2",
        "description": "Foo",
        "size": "14G",
        "mountpoints": [],
        "isSystem": False,
        "isRemovable": False,
    },
    {
        "device": "\\\\.\\PHYSICALDRIVE3",
        "displayName": "F:",
        "description": "Bar",
        "size": "14G",
        "mountpoints": [{"path": "F:"}, {"path": "G:"}, {"path": "H:"}],
        "isSystem": False,
        "isRemovable": True,
    },
]
