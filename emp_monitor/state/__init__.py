"""
In-memory EMP snapshot: immutable records, the refresh cycle, the poll loop
and the client queried by bots.
"""

from .models import Liquidation, PollerStatus, Position, RiskParameters, Snapshot
from .snapshot_store import SnapshotStore
from .snapshot_builder import SnapshotBuilder
from .poller import SnapshotPoller
from .client import ExpiringMultiPartyClient

__all__ = [
    "RiskParameters",
    "Position",
    "Liquidation",
    "Snapshot",
    "PollerStatus",

    "SnapshotStore",
    "SnapshotBuilder",
    "SnapshotPoller",
    "ExpiringMultiPartyClient",
]
