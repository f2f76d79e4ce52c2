"""Immutable records making up a published EMP snapshot."""
from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class RiskParameters:
    collateral_requirement: int
    liquidation_liveness: int


@dataclass(frozen=True)
class Position:
    sponsor: str
    num_tokens: int
    amount_collateral: int
    withdrawal_request_amount: int
    request_pass_timestamp: int
    has_pending_withdrawal: bool


@dataclass(frozen=True)
class Liquidation:
    sponsor: str
    id: str
    num_tokens: int
    amount_collateral: int
    liquidation_time: int


@dataclass(frozen=True)
class Snapshot:
    """One complete refresh cycle, built in full before it is published."""

    sponsors: Tuple[str, ...]
    positions: Tuple[Position, ...]
    undisputed_liquidations: Tuple[Liquidation, ...]
    risk_parameters: RiskParameters
    timestamp: float


@dataclass(frozen=True)
class PollerStatus:
    cycles: int = 0
    failures: int = 0
    last_success: Optional[float] = None
    last_failure: Optional[float] = None
    last_error: Optional[str] = field(default=None)
