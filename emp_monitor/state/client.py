"""Thick read-only client for an ExpiringMultiParty contract."""
from __future__ import annotations

import logging
from typing import List, Optional

from emp_monitor.contract.gateway import ContractGateway
from emp_monitor.contract.sponsors import SponsorSource
from emp_monitor.core.fixed_point import FIXED_POINT_SCALE, IntLike, is_undercollateralized
from emp_monitor.errors import SnapshotUnavailableError
from .models import Liquidation, PollerStatus, Position, Snapshot
from .poller import DEFAULT_POLL_SECONDS, SnapshotPoller
from .snapshot_builder import SnapshotBuilder
from .snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ExpiringMultiPartyClient:
    """
    Keeps a periodically refreshed snapshot of sponsors, open positions and
    undisputed liquidations.

    Every getter reads the last published snapshot and returns immediately;
    before the first successful refresh the lists are empty.
    """

    def __init__(
        self,
        gateway: ContractGateway,
        interval: float = DEFAULT_POLL_SECONDS,
        sponsor_source: Optional[SponsorSource] = None,
        max_workers: Optional[int] = None,
        scale: int = FIXED_POINT_SCALE,
        builder: Optional[SnapshotBuilder] = None,
    ):
        self.gateway = gateway
        self.scale = scale
        self.store = SnapshotStore()
        self.builder = builder or SnapshotBuilder(
            gateway, sponsor_source=sponsor_source, max_workers=max_workers
        )
        self.poller = SnapshotPoller(self.builder, self.store, interval=interval)

    # -------------------------
    # Lifecycle
    # -------------------------
    def start(self) -> None:
        """Begin background polling."""
        self.poller.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self.poller.stop(timeout=timeout)

    def update(self) -> bool:
        """Run one refresh cycle on the calling thread."""
        return self.poller.poll_once()

    def status(self) -> PollerStatus:
        return self.poller.status()

    @property
    def running(self) -> bool:
        """True while the background loop thread is alive."""
        return self.poller.running

    def snapshot(self) -> Optional[Snapshot]:
        return self.store.latest()

    # -------------------------
    # Queries
    # -------------------------
    def get_all_sponsors(self) -> List[str]:
        snap = self.store.latest()
        return list(snap.sponsors) if snap else []

    def get_all_positions(self) -> List[Position]:
        """Open positions with non-zero collateral."""
        snap = self.store.latest()
        return list(snap.positions) if snap else []

    def get_under_collateralized_positions(self, token_redemption_value: IntLike) -> List[Position]:
        """Positions below the collateral requirement at ``token_redemption_value``."""
        snap = self.store.latest()
        if snap is None:
            return []
        requirement = snap.risk_parameters.collateral_requirement
        return [
            p
            for p in snap.positions
            if is_undercollateralized(
                p.num_tokens, p.amount_collateral, token_redemption_value, requirement, self.scale
            )
        ]

    def get_undisputed_liquidations(self) -> List[Liquidation]:
        """
        Pre-dispute liquidations still inside their liveness window.

        Check each with ``is_disputable`` using the redemption value at its
        ``liquidation_time``.
        """
        snap = self.store.latest()
        return list(snap.undisputed_liquidations) if snap else []

    def is_disputable(self, liquidation: Liquidation, token_redemption_value: IntLike) -> bool:
        """
        Whether ``liquidation`` was collateralized at ``token_redemption_value``.

        The caller supplies the redemption value at ``liquidation.liquidation_time``.
        """
        snap = self.store.latest()
        if snap is None:
            raise SnapshotUnavailableError("collateral requirement not loaded yet")
        return not is_undercollateralized(
            liquidation.num_tokens,
            liquidation.amount_collateral,
            token_redemption_value,
            snap.risk_parameters.collateral_requirement,
            self.scale,
        )
