#!/usr/bin/env python3
"""
Drive scanner engine.
Polls adapters, diffs the result against the known drives and notifies subscribers.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from .adapters.base import Adapter
from .drive import Drive
from .errors import ConfigurationError, ListingError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0  # seconds between the end of a cycle and the next one

EVENT_TYPES = ("ready", "add", "remove", "error")

class ScannerState(Enum):
    """Lifecycle of a scanner run"""
    IDLE = "idle"              # constructed, never started
    SCANNING = "scanning"      # a cycle is in flight
    READY = "ready"            # last cycle succeeded, waiting for the next tick
    ERRORED = "errored"        # an adapter failed, error being reported
    STOPPED = "stopped"

RUNNING_STATES = (ScannerState.SCANNING, ScannerState.READY, ScannerState.ERRORED)
ACTIVE_STATES = (ScannerState.SCANNING, ScannerState.READY)

class Scanner:
    """
    Periodic drive scanner.

    Every cycle runs all adapters concurrently, merges their drives into one
    population keyed by identity and reports the difference with the previous
    population:

    - "ready": first successful cycle of a run, receives the drive set.
      Drives found by that cycle are the baseline and are not reported as "add".
    - "add" / "remove": one Drive per change on later cycles.
    - "error": an adapter failed; receives a ListingError. The scanner stops
      unless an error callback restarts it. stop() drops any notification
      of the current cycle not yet delivered.

    Callbacks run on the scanner's worker thread. The next cycle is scheduled
    only after the current one, notifications included, is finished.
    """

    def __init__(self, adapters: Iterable[Adapter], interval: float = DEFAULT_INTERVAL):
        """
        Initialize the scanner.

        Args:
            adapters: Adapters to poll
            interval: Seconds to wait between cycles

        Raises:
            ConfigurationError: If an adapter has no scan() or interval is not positive
        """
        self.adapters: List[Adapter] = list(adapters or [])
        for adapter in self.adapters:
            if not callable(getattr(adapter, "scan", None)):
                raise ConfigurationError(f"Adapter {adapter!r} has no scan() method")

        try:
            self.interval = float(interval)
        except (TypeError, ValueError):
            raise ConfigurationError(f"interval must be a number, got {interval!r}")
        if self.interval <= 0:
            raise ConfigurationError(f"interval must be > 0, got {self.interval}")

        self.callbacks: Dict[str, List[Callable]] = {event: [] for event in EVENT_TYPES}

        # State, guarded by _lock
        self._lock = threading.Lock()
        self._state = ScannerState.IDLE
        self._drives: Dict[str, Drive] = {}
        self._run = 0                  # bumped on start/stop; stale cycles are ignored
        self._pending: Optional[object] = None
        self._timer: Optional[threading.Timer] = None
        self._has_baseline = False
        self._rescan_requested = False

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def drives(self) -> Set[Drive]:
        """Snapshot of the current population"""
        return set(self._drives.values())

    def get_by(self, field: str, value: Any) -> Optional[Drive]:
        """
        Find a known drive by attribute.

        Args:
            field: Drive attribute name (e.g. "identity", "display_name")
            value: Expected value

        Returns:
            First matching drive or None
        """
        for drive in self._drives.values():
            if getattr(drive, field, None) == value:
                return drive
        return None

    def register_callback(self, event_type: str, callback: Callable):
        """
        Subscribe to scanner notifications.

        Args:
            event_type: One of "ready", "add", "remove", "error"
            callback: Called with the event payload

        Raises:
            ConfigurationError: If event_type is unknown
        """
        if event_type not in self.callbacks:
            raise ConfigurationError(
                f"Unknown event type: {event_type}. Must be one of: {', '.join(EVENT_TYPES)}"
            )

        self.callbacks[event_type].append(callback)
        logger.debug(f"Registered callback for event type: {event_type}")

    def unregister_callback(self, event_type: str, callback: Callable):
        if event_type in self.callbacks and callback in self.callbacks[event_type]:
            self.callbacks[event_type].remove(callback)
            logger.debug(f"Unregistered callback for event type: {event_type}")

    def start(self) -> None:
        """
        Start polling. Failures are reported through the "error" event.
        May be called from an "error" callback to restart after a failure.
        """
        with self._lock:
            if self._state in ACTIVE_STATES:
                logger.warning("Scanner already running")
                return

            self._run += 1
            self._drives = {}
            self._has_baseline = False
            self._rescan_requested = False
            self._state = ScannerState.SCANNING
            self._schedule(self._run, 0)

        logger.info(f"Scanner started with {len(self.adapters)} adapter(s), interval {self.interval}s")

    def stop(self) -> None:
        """Stop polling. Safe to call any number of times, before or after start()."""
        with self._lock:
            if self._state == ScannerState.STOPPED:
                return
            was_running = self._state in RUNNING_STATES
            self._halt()

        if was_running:
            logger.info("Scanner stopped")

    def request_scan(self) -> None:
        """
        Run a cycle as soon as possible.
        A cycle in flight is never interrupted; the next one follows it without waiting.
        """
        with self._lock:
            if self._state == ScannerState.READY and self._pending is not None:
                logger.debug("Immediate scan requested")
                self._schedule(self._run, 0)
            elif self._state in (ScannerState.SCANNING, ScannerState.READY):
                self._rescan_requested = True

    def _schedule(self, run: int, delay: float) -> None:
        """Arm the timer for the next cycle. Caller holds _lock."""
        if self._timer is not None:
            self._timer.cancel()

        token = object()
        self._pending = token
        self._timer = threading.Timer(delay, self._tick, args=(run, token))
        self._timer.daemon = True
        self._timer.start()

    def _halt(self) -> None:
        """Cancel the timer and drop the population. Caller holds _lock."""
        self._run += 1
        self._state = ScannerState.STOPPED
        self._pending = None
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._drives = {}
        self._rescan_requested = False

    def _tick(self, run: int, token: object) -> None:
        with self._lock:
            if run != self._run or token is not self._pending:
                return
            self._pending = None
            self._timer = None
            self._state = ScannerState.SCANNING

        try:
            results = self._scan_all()
        except Exception as e:
            self._fail(run, e)
            return

        self._apply(run, results)

    def _scan_all(self) -> List[List[Drive]]:
        """Run every adapter concurrently and wait for all of them"""
        if not self.adapters:
            return []

        with ThreadPoolExecutor(
            max_workers=len(self.adapters),
            thread_name_prefix="drive-scan"
        ) as executor:
            futures = [executor.submit(adapter.scan) for adapter in self.adapters]

        results = []
        for adapter, future in zip(self.adapters, futures):
            error = future.exception()
            if error is not None:
                logger.error(f"Adapter {adapter!r} failed: {error}")
                raise error
            results.append(future.result())
        return results

    def _apply(self, run: int, results: List[List[Drive]]) -> None:
        candidates: Dict[str, Drive] = {}
        for drives in results:
            for drive in drives:
                # Identities are expected to be unique across adapters
                candidates.setdefault(drive.identity, drive)

        with self._lock:
            if run != self._run:
                logger.debug("Discarding results of a cycle started before stop()")
                return

            previous = self._drives
            removed = [drive for identity, drive in previous.items() if identity not in candidates]
            added = [drive for identity, drive in candidates.items() if identity not in previous]
            first_cycle = not self._has_baseline

            self._drives = candidates
            self._has_baseline = True
            self._state = ScannerState.READY

        if first_cycle:
            logger.info(f"Scanner ready: {len(candidates)} drive(s)")
            notifications = [("ready", set(candidates.values()))]
        else:
            if added or removed:
                logger.debug(f"Cycle diff: {len(added)} added, {len(removed)} removed")
            notifications = [("remove", drive) for drive in removed] + [("add", drive) for drive in added]

        for event_type, payload in notifications:
            if event_type != "ready":
                logger.info(f"Drive {event_type}: {payload.identity} ({payload.display_name})")
            if not self._trigger_callbacks(run, event_type, payload):
                logger.debug(f"Scanner stopped during {event_type} notifications, dropping the rest")
                return

        with self._lock:
            if run != self._run:
                return
            delay = 0 if self._rescan_requested else self.interval
            self._rescan_requested = False
            self._schedule(run, delay)

    def _fail(self, run: int, error: BaseException) -> None:
        with self._lock:
            if run != self._run:
                logger.debug(f"Ignoring failure of a stale cycle: {error}")
                return
            self._state = ScannerState.ERRORED

        if isinstance(error, ListingError):
            listing_error = error
        else:
            listing_error = ListingError(str(error))
            listing_error.__cause__ = error

        logger.error(f"Scan failed, stopping scanner: {listing_error}")
        self._trigger_callbacks(run, "error", listing_error)

        # A subscriber may have stopped or restarted the scanner meanwhile
        with self._lock:
            if run == self._run:
                self._halt()

    def _trigger_callbacks(self, run: int, event_type: str, payload: Any) -> bool:
        """
        Deliver one notification of the given run.

        Returns:
            False if the run ended (stop() or restart) before every callback was called
        """
        for callback in list(self.callbacks[event_type]):
            if run != self._run:
                return False
            try:
                callback(payload)
            except Exception as e:
                logger.error(f"Error in callback for {event_type}: {e}", exc_info=True)
        return run == self._run
