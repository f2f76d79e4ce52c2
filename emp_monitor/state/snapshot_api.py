"""Read-only EMP snapshot API (FastAPI adapter over registered clients)."""
from dataclasses import asdict
from typing import Any, Dict, Optional
import logging
import time

try:
    from fastapi import APIRouter, HTTPException, Query
except ImportError as exc:  # pragma: no cover - optional dependency
    raise ImportError(
        "FastAPI is required for emp_monitor.state.snapshot_api; install fastapi to use these endpoints"
    ) from exc

from .client import ExpiringMultiPartyClient
from .models import Snapshot

logger = logging.getLogger(__name__)

DEFAULT_CONTRACT = "EMP"

CLIENTS: Dict[str, ExpiringMultiPartyClient] = {}

router = APIRouter()


def register_client(name: str, client: ExpiringMultiPartyClient) -> None:
    """Register a client under a contract name (uppercased)."""
    CLIENTS[name.upper()] = client
    logger.info("Registered EMP client for %s", name.upper())


def get_client(name: str) -> Optional[ExpiringMultiPartyClient]:
    return CLIENTS.get(name.upper())


def _jsonable(record: Any) -> Dict[str, Any]:
    # uint256 values exceed the JSON safe integer range
    return {
        k: str(v) if isinstance(v, int) and not isinstance(v, bool) else v
        for k, v in asdict(record).items()
    }


def _require_snapshot(contract: str) -> ExpiringMultiPartyClient:
    client = get_client(contract)
    if client is None:
        raise HTTPException(status_code=404, detail="No client for contract")
    if client.snapshot() is None:
        raise HTTPException(status_code=404, detail="No snapshot available")
    return client


@router.get("/emp/sponsors")
def get_sponsors(contract: str = Query(DEFAULT_CONTRACT, description="Contract name")):
    return _require_snapshot(contract).get_all_sponsors()


@router.get("/emp/positions")
def get_positions(contract: str = Query(DEFAULT_CONTRACT, description="Contract name")):
    return [_jsonable(p) for p in _require_snapshot(contract).get_all_positions()]


@router.get("/emp/positions/undercollateralized")
def get_undercollateralized_positions(
    token_redemption_value: str = Query(..., pattern=r"^[0-9]+$", description="Scaled redemption value"),
    contract: str = Query(DEFAULT_CONTRACT, description="Contract name"),
):
    client = _require_snapshot(contract)
    positions = client.get_under_collateralized_positions(int(token_redemption_value))
    return [_jsonable(p) for p in positions]


@router.get("/emp/liquidations")
def get_liquidations(contract: str = Query(DEFAULT_CONTRACT, description="Contract name")):
    return [_jsonable(liq) for liq in _require_snapshot(contract).get_undisputed_liquidations()]


@router.get("/emp/status")
def get_status(contract: str = Query(DEFAULT_CONTRACT, description="Contract name")):
    client = get_client(contract)
    if client is None:
        raise HTTPException(status_code=404, detail="No client for contract")

    snap: Optional[Snapshot] = client.snapshot()
    age = None
    if snap is not None:
        age = max(time.time() - snap.timestamp, 0.0)

    return {
        "contract": contract.upper(),
        "running": client.running,
        "snapshot_timestamp": snap.timestamp if snap else None,
        "age_seconds": age,
        "collateral_requirement": str(snap.risk_parameters.collateral_requirement) if snap else None,
        "liquidation_liveness": snap.risk_parameters.liquidation_liveness if snap else None,
        **asdict(client.status()),
    }


def attach_to_app(app) -> None:
    """Include EMP routes on an existing FastAPI app."""
    app.include_router(router)
