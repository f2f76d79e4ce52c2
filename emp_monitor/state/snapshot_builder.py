"""One refresh cycle: read the contract and assemble a complete Snapshot."""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from emp_monitor.contract.gateway import ContractGateway
from emp_monitor.contract.sponsors import FullHistorySponsorSource, SponsorSource
from emp_monitor.errors import ContractDataError
from .models import Liquidation, Position, RiskParameters, Snapshot

logger = logging.getLogger(__name__)

PRE_DISPUTE_STATE = "1"

# (positions(sponsor), getCollateral(sponsor), getLiquidations(sponsor))
SponsorData = Tuple[Dict[str, Any], int, List[Dict[str, Any]]]


def _field(record: Dict[str, Any], key: str, what: str) -> Any:
    try:
        return record[key]
    except (KeyError, TypeError) as exc:
        raise ContractDataError(f"{what}: missing field {key!r}") from exc


def _int_field(record: Dict[str, Any], key: str, what: str) -> int:
    value = _field(record, key, what)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ContractDataError(f"{what}.{key}: expected integer, got {value!r}") from exc


def select_undisputed_liquidations(
    sponsor_liquidations: Iterable[Tuple[str, Sequence[Dict[str, Any]]]],
    liveness: int,
    now: float,
) -> List[Liquidation]:
    """
    Keep liquidations still in the pre-dispute state whose liveness window
    has not elapsed at ``now``. The id is the index in the sponsor's history.
    """
    kept = []
    for _sponsor, history in sponsor_liquidations:
        for index, liq in enumerate(history):
            if str(_field(liq, "state", "getLiquidations")) != PRE_DISPUTE_STATE:
                continue
            liquidation_time = _int_field(liq, "liquidationTime", "getLiquidations")
            if liquidation_time + liveness <= now:
                continue
            kept.append(
                Liquidation(
                    sponsor=_field(liq, "sponsor", "getLiquidations"),
                    id=str(index),
                    num_tokens=_int_field(liq, "tokensOutstanding", "getLiquidations"),
                    amount_collateral=_int_field(liq, "liquidatedCollateral", "getLiquidations"),
                    liquidation_time=liquidation_time,
                )
            )
    return kept


def select_open_positions(
    sponsors: Sequence[str],
    positions: Sequence[Dict[str, Any]],
    collateral: Sequence[int],
) -> List[Position]:
    """Build Position records, skipping sponsors with zero raw collateral."""
    out = []
    for sponsor, pos, amount in zip(sponsors, positions, collateral):
        if _int_field(pos, "rawCollateral", "positions") == 0:
            continue
        request_pass = _int_field(pos, "requestPassTimestamp", "positions")
        out.append(
            Position(
                sponsor=sponsor,
                num_tokens=_int_field(pos, "tokensOutstanding", "positions"),
                amount_collateral=int(amount),
                withdrawal_request_amount=_int_field(pos, "withdrawalRequestAmount", "positions"),
                request_pass_timestamp=request_pass,
                has_pending_withdrawal=request_pass > 0,
            )
        )
    return out


class SnapshotBuilder:
    """
    Rebuild the full EMP state from the contract.

    Per-sponsor reads run on a thread pool sized ``max_workers``; ``None``
    gives every sponsor its own worker. Any failed read aborts the build.
    """

    def __init__(
        self,
        gateway: ContractGateway,
        sponsor_source: Optional[SponsorSource] = None,
        max_workers: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.gateway = gateway
        self.sponsor_source = sponsor_source or FullHistorySponsorSource(gateway)
        self.max_workers = max_workers
        self.clock = clock

    def fetch_risk_parameters(self) -> RiskParameters:
        return RiskParameters(
            collateral_requirement=int(self.gateway.collateral_requirement()),
            liquidation_liveness=int(self.gateway.liquidation_liveness()),
        )

    def _fetch_sponsor(self, sponsor: str) -> SponsorData:
        return (
            self.gateway.positions(sponsor),
            self.gateway.get_collateral(sponsor),
            self.gateway.get_liquidations(sponsor),
        )

    def fetch_sponsor_data(self, sponsors: Sequence[str]) -> List[SponsorData]:
        if not sponsors:
            return []
        workers = self.max_workers or len(sponsors)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="emp-fetch") as pool:
            # map re-raises the first failure in sponsor order
            return list(pool.map(self._fetch_sponsor, sponsors))

    def build(self) -> Snapshot:
        params = self.fetch_risk_parameters()
        sponsors = self.sponsor_source.sponsors()
        data = self.fetch_sponsor_data(sponsors)
        now = self.clock()

        liquidations = select_undisputed_liquidations(
            ((sponsor, d[2]) for sponsor, d in zip(sponsors, data)),
            params.liquidation_liveness,
            now,
        )
        positions = select_open_positions(
            sponsors, [d[0] for d in data], [d[1] for d in data]
        )
        logger.debug(
            "Built snapshot: sponsors=%d positions=%d liquidations=%d",
            len(sponsors),
            len(positions),
            len(liquidations),
        )
        return Snapshot(
            sponsors=tuple(sponsors),
            positions=tuple(positions),
            undisputed_liquidations=tuple(liquidations),
            risk_parameters=params,
            timestamp=now,
        )
