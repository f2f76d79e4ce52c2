"""Background refresh loop publishing EMP snapshots."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import replace
from typing import Optional

from .models import PollerStatus
from .snapshot_builder import SnapshotBuilder
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_SECONDS = 10.0


class SnapshotPoller:
    """
    Run the SnapshotBuilder every ``interval`` seconds and publish results.

    A failed cycle is logged and leaves the published snapshot untouched; the
    next cycle runs after the same fixed delay.
    """

    def __init__(
        self,
        builder: SnapshotBuilder,
        store: SnapshotStore,
        interval: float = DEFAULT_POLL_SECONDS,
        stop_event: Optional[threading.Event] = None,
    ):
        self.builder = builder
        self.store = store
        self.interval = float(interval)
        self._stop = stop_event or threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._status = PollerStatus()
        self._status_lock = threading.Lock()

    def status(self) -> PollerStatus:
        with self._status_lock:
            return self._status

    def _record(self, failed: bool, **changes) -> None:
        with self._status_lock:
            s = self._status
            self._status = replace(
                s,
                cycles=s.cycles + 1,
                failures=s.failures + int(failed),
                **changes,
            )

    def poll_once(self) -> bool:
        """Run one cycle. Returns True if a snapshot was published."""
        try:
            snapshot = self.builder.build()
        except Exception as exc:
            logger.error("client polling error: %s", exc, exc_info=True)
            self._record(
                True,
                last_failure=time.time(),
                last_error=f"{type(exc).__name__}: {exc}",
            )
            return False

        if not self.store.publish(snapshot):
            self._record(False)
            return False
        self._record(False, last_success=snapshot.timestamp)
        logger.info(
            "client updated: sponsors=%d positions=%d undisputed_liquidations=%d",
            len(snapshot.sponsors),
            len(snapshot.positions),
            len(snapshot.undisputed_liquidations),
        )
        return True

    def run(self) -> None:
        """Poll until stopped."""
        logger.info("Starting SnapshotPoller (interval=%.2fs)", self.interval)
        while not self._stop.is_set():
            self.poll_once()
            self._stop.wait(self.interval)
        logger.info("SnapshotPoller stopped")

    def start(self) -> None:
        """Start the loop thread; no-op while a previous loop is still alive."""
        if self._thread is not None and self._thread.is_alive():
            if self._stop.is_set():
                logger.warning("SnapshotPoller still finishing a cycle after stop; not restarting")
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run, daemon=True, name="EmpSnapshotPoller")
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        if thread is not None and thread.is_alive():
            # stuck in a cycle; keep the handle so start() cannot spawn a second loop
            return
        self._thread = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
