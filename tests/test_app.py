import time

from fastapi.testclient import TestClient

from app import create_app
from emp_monitor import config
from emp_monitor.state import snapshot_api
from emp_monitor.state.client import ExpiringMultiPartyClient
from tests.helpers import S, SPONSOR_A, make_position


def test_lifespan_registers_starts_and_stops_client(monkeypatch, gateway):
    monkeypatch.setattr(snapshot_api, "CLIENTS", {}, raising=True)
    monkeypatch.setattr(config, "CONTRACT_NAME", "EMP", raising=True)
    gateway.add_sponsor(SPONSOR_A, position=make_position(tokens=S, raw_collateral=2 * S), collateral=2 * S)
    client = ExpiringMultiPartyClient(gateway, interval=60.0)

    with TestClient(create_app(client=client)) as api:
        assert snapshot_api.get_client("EMP") is client
        assert client.running

        deadline = time.time() + 5
        while client.snapshot() is None and time.time() < deadline:
            time.sleep(0.01)

        assert api.get("/emp/sponsors").json() == [SPONSOR_A]
        assert api.get("/emp/status").json()["running"] is True

    assert not client.running
