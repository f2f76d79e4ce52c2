"""Single-slot holder for the published EMP snapshot."""
from threading import Lock
from typing import Optional
import logging

from .models import Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Holds the latest complete Snapshot; publishing replaces the reference."""

    def __init__(self):
        self._snapshot: Optional[Snapshot] = None
        self._lock = Lock()

    def publish(self, snapshot: Snapshot) -> bool:
        """Swap in a new snapshot; one older than the current is dropped."""
        with self._lock:
            current = self._snapshot
            if current is not None and snapshot.timestamp < current.timestamp:
                logger.warning(
                    "Out-of-order snapshot: new=%s current=%s, dropping snapshot",
                    snapshot.timestamp,
                    current.timestamp,
                )
                return False
            self._snapshot = snapshot
            return True

    def latest(self) -> Optional[Snapshot]:
        """Return the published snapshot (or None before the first publish)."""
        with self._lock:
            return self._snapshot

    def is_empty(self) -> bool:
        with self._lock:
            return self._snapshot is None
