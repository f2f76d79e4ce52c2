from typing import Dict, List, Optional

from emp_monitor.contract.gateway import ContractGateway
from emp_monitor.core.fixed_point import FIXED_POINT_SCALE

S = FIXED_POINT_SCALE

SPONSOR_A = "0x00000000000000000000000000000000000000A1"
SPONSOR_B = "0x00000000000000000000000000000000000000B2"
SPONSOR_C = "0x00000000000000000000000000000000000000C3"


def make_position(tokens=0, raw_collateral=0, request_pass=0, withdrawal_amount=0) -> Dict[str, int]:
    return {
        "tokensOutstanding": tokens,
        "requestPassTimestamp": request_pass,
        "withdrawalRequestAmount": withdrawal_amount,
        "rawCollateral": raw_collateral,
    }


def make_liquidation(sponsor, state="1", liquidation_time=0, tokens=0, collateral=0) -> Dict:
    return {
        "state": state,
        "sponsor": sponsor,
        "tokensOutstanding": tokens,
        "liquidatedCollateral": collateral,
        "liquidationTime": liquidation_time,
    }


class FakeGateway(ContractGateway):
    """In-memory contract with switchable failures."""

    def __init__(self, collateral_requirement=12 * S // 10, liveness=7200):
        self.requirement = collateral_requirement
        self.liveness = liveness
        self.events: List[Dict] = []
        self.position_data: Dict[str, Dict[str, int]] = {}
        self.collateral: Dict[str, int] = {}
        self.liquidations: Dict[str, List[Dict]] = {}
        self.block = 0
        self.fail_on: Optional[str] = None
        self.event_queries: List[tuple] = []

    def add_sponsor(self, sponsor, position=None, collateral=0, liquidations=None, block=None):
        self.events.append({"sponsor": sponsor, "blockNumber": self.block if block is None else block})
        self.position_data[sponsor] = position or make_position()
        self.collateral[sponsor] = collateral
        self.liquidations[sponsor] = liquidations or []

    def _maybe_fail(self, name):
        if self.fail_on == name:
            raise ConnectionError(f"{name} unavailable")

    def collateral_requirement(self) -> int:
        self._maybe_fail("collateral_requirement")
        return self.requirement

    def liquidation_liveness(self) -> int:
        self._maybe_fail("liquidation_liveness")
        return self.liveness

    def positions(self, sponsor):
        self._maybe_fail("positions")
        return self.position_data[sponsor]

    def get_collateral(self, sponsor):
        self._maybe_fail("get_collateral")
        return self.collateral[sponsor]

    def get_liquidations(self, sponsor):
        self._maybe_fail("get_liquidations")
        return self.liquidations[sponsor]

    def get_new_sponsor_events(self, from_block=0, to_block=None):
        self._maybe_fail("get_new_sponsor_events")
        self.event_queries.append((from_block, to_block))
        return [
            e for e in self.events
            if e["blockNumber"] >= from_block and (to_block is None or e["blockNumber"] <= to_block)
        ]

    def latest_block(self) -> int:
        self._maybe_fail("latest_block")
        return self.block
