"""Read-only access to an ExpiringMultiParty contract."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from web3 import Web3

from emp_monitor.errors import ContractDataError
from .abi import EMP_ABI, LIQUIDATION_FIELDS, POSITION_FIELDS

logger = logging.getLogger(__name__)


class ContractGateway(ABC):
    """
    Calls the monitor makes against the contract.

    Numeric results are plain Python ints (fixed-point values still scaled).
    Implementations let transport errors propagate.
    """

    @abstractmethod
    def collateral_requirement(self) -> int:
        ...

    @abstractmethod
    def liquidation_liveness(self) -> int:
        ...

    @abstractmethod
    def positions(self, sponsor: str) -> Dict[str, int]:
        """Return ``rawCollateral``, ``requestPassTimestamp``,
        ``withdrawalRequestAmount`` and ``tokensOutstanding``."""

    @abstractmethod
    def get_collateral(self, sponsor: str) -> int:
        ...

    @abstractmethod
    def get_liquidations(self, sponsor: str) -> List[Dict[str, Any]]:
        """Return the sponsor's liquidations in contract order, each with
        ``state``, ``sponsor``, ``tokensOutstanding``,
        ``liquidatedCollateral`` and ``liquidationTime``."""

    @abstractmethod
    def get_new_sponsor_events(
        self, from_block: int = 0, to_block: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """Return ``NewSponsor`` records as ``{"sponsor", "blockNumber"}``.

        ``to_block=None`` means latest.
        """

    @abstractmethod
    def latest_block(self) -> int:
        ...


def unwrap(value: Any) -> Any:
    """Strip a ``FixedPoint.Unsigned`` struct down to its ``rawValue``."""
    if isinstance(value, dict):
        if "rawValue" in value:
            return value["rawValue"]
        return value
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return value[0]
    return value


def as_int(value: Any, field: str) -> int:
    value = unwrap(value)
    if isinstance(value, bool):
        raise ContractDataError(f"{field}: expected integer, got bool")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ContractDataError(f"{field}: expected integer, got {value!r}") from exc


def as_record(raw: Any, fields: Sequence[str], what: str) -> Dict[str, Any]:
    """Name the members of a decoded struct tuple."""
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, (list, tuple)) or len(raw) < len(fields):
        raise ContractDataError(f"{what}: unexpected result shape {raw!r}")
    return dict(zip(fields, raw))


class Web3ContractGateway(ContractGateway):
    """ContractGateway backed by a web3.py HTTP provider."""

    def __init__(
        self,
        emp_address: str,
        rpc_url: Optional[str] = None,
        w3: Optional[Web3] = None,
        request_timeout: Optional[float] = None,
    ):
        if w3 is None:
            if not rpc_url:
                raise ValueError("rpc_url is required when no Web3 instance is given")
            request_kwargs = {"timeout": request_timeout} if request_timeout else None
            w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs=request_kwargs))
        self.w3 = w3
        self.emp_address = Web3.to_checksum_address(emp_address)
        self.emp = self.w3.eth.contract(address=self.emp_address, abi=EMP_ABI)
        logger.info("EMP gateway bound to %s", self.emp_address)

    def collateral_requirement(self) -> int:
        return as_int(self.emp.functions.collateralRequirement().call(), "collateralRequirement")

    def liquidation_liveness(self) -> int:
        return as_int(self.emp.functions.liquidationLiveness().call(), "liquidationLiveness")

    def positions(self, sponsor: str) -> Dict[str, int]:
        raw = self.emp.functions.positions(Web3.to_checksum_address(sponsor)).call()
        rec = as_record(raw, POSITION_FIELDS, "positions")
        return {
            "tokensOutstanding": as_int(rec["tokensOutstanding"], "tokensOutstanding"),
            "requestPassTimestamp": as_int(rec["requestPassTimestamp"], "requestPassTimestamp"),
            "withdrawalRequestAmount": as_int(rec["withdrawalRequestAmount"], "withdrawalRequestAmount"),
            "rawCollateral": as_int(rec["rawCollateral"], "rawCollateral"),
        }

    def get_collateral(self, sponsor: str) -> int:
        raw = self.emp.functions.getCollateral(Web3.to_checksum_address(sponsor)).call()
        return as_int(raw, "getCollateral")

    def get_liquidations(self, sponsor: str) -> List[Dict[str, Any]]:
        raw = self.emp.functions.getLiquidations(Web3.to_checksum_address(sponsor)).call()
        out = []
        for item in raw:
            rec = as_record(item, LIQUIDATION_FIELDS, "getLiquidations")
            out.append({
                "state": str(rec["state"]),
                "sponsor": rec["sponsor"],
                "tokensOutstanding": as_int(rec["tokensOutstanding"], "tokensOutstanding"),
                "liquidatedCollateral": as_int(rec["liquidatedCollateral"], "liquidatedCollateral"),
                "liquidationTime": as_int(rec["liquidationTime"], "liquidationTime"),
            })
        return out

    def get_new_sponsor_events(
        self, from_block: int = 0, to_block: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        logs = self.emp.events.NewSponsor.get_logs(
            from_block=from_block,
            to_block="latest" if to_block is None else to_block,
        )
        return [
            {"sponsor": log["args"]["sponsor"], "blockNumber": int(log["blockNumber"])}
            for log in logs
        ]

    def latest_block(self) -> int:
        return int(self.w3.eth.block_number)
