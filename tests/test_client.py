import pytest

from tests.helpers import S, SPONSOR_A, SPONSOR_B, SPONSOR_C, make_liquidation, make_position
from emp_monitor.core.fixed_point import is_undercollateralized, to_fixed_point
from emp_monitor.errors import SnapshotUnavailableError
from emp_monitor.state.client import ExpiringMultiPartyClient
from emp_monitor.state.models import Liquidation


def _populate(gateway, now):
    # A: closed position, non-zero other fields
    gateway.add_sponsor(
        SPONSOR_A,
        position=make_position(tokens=100 * S, raw_collateral=0, request_pass=5),
        collateral=0,
    )
    # B: 100 tokens against 50 collateral
    gateway.add_sponsor(
        SPONSOR_B,
        position=make_position(tokens=100 * S, raw_collateral=50 * S),
        collateral=50 * S,
        liquidations=[
            make_liquidation(SPONSOR_B, state="1", liquidation_time=int(now) - 60, tokens=10 * S, collateral=15 * S),
            make_liquidation(SPONSOR_B, state="2", liquidation_time=int(now) - 60, tokens=10 * S, collateral=5 * S),
        ],
    )
    # C: 100 tokens against 200 collateral
    gateway.add_sponsor(
        SPONSOR_C,
        position=make_position(tokens=100 * S, raw_collateral=200 * S),
        collateral=200 * S,
    )
    # duplicate NewSponsor record
    gateway.events.append({"sponsor": SPONSOR_B, "blockNumber": 0})


@pytest.fixture
def client(gateway):
    import time

    _populate(gateway, time.time())
    c = ExpiringMultiPartyClient(gateway)
    assert c.update() is True
    return c


def test_queries_empty_before_first_update(gateway):
    c = ExpiringMultiPartyClient(gateway)
    assert c.snapshot() is None
    assert c.get_all_sponsors() == []
    assert c.get_all_positions() == []
    assert c.get_under_collateralized_positions(S) == []
    assert c.get_undisputed_liquidations() == []


def test_is_disputable_requires_snapshot(gateway):
    c = ExpiringMultiPartyClient(gateway)
    liq = Liquidation(sponsor=SPONSOR_A, id="0", num_tokens=S, amount_collateral=S, liquidation_time=0)
    with pytest.raises(SnapshotUnavailableError):
        c.is_disputable(liq, S)


def test_sponsors_and_positions(client):
    assert client.get_all_sponsors() == [SPONSOR_A, SPONSOR_B, SPONSOR_C]
    assert [p.sponsor for p in client.get_all_positions()] == [SPONSOR_B, SPONSOR_C]


def test_under_collateralized_positions(client):
    # at 1.0 with a 1.2 requirement B (50 vs 120 needed) is short, C (200) is not
    assert [p.sponsor for p in client.get_under_collateralized_positions(S)] == [SPONSOR_B]
    # at 2.0 C needs 240 and is short too
    assert [p.sponsor for p in client.get_under_collateralized_positions(2 * S)] == [SPONSOR_B, SPONSOR_C]
    assert client.get_under_collateralized_positions(0) == []


def test_undisputed_liquidations(client):
    liqs = client.get_undisputed_liquidations()
    assert [(l.sponsor, l.id) for l in liqs] == [(SPONSOR_B, "0")]


def test_is_disputable_negates_comparator(client):
    liq = client.get_undisputed_liquidations()[0]
    requirement = client.snapshot().risk_parameters.collateral_requirement
    assert requirement == to_fixed_point("1.2")

    # 10 tokens, 15 collateral: needs 12 at 1.0, so the liquidation was wrong
    assert client.is_disputable(liq, S) is True
    # at 1.5 it needs 18, so the liquidation stands
    assert client.is_disputable(liq, to_fixed_point("1.5")) is False

    for value in (S // 2, S, to_fixed_point("1.25"), 2 * S):
        assert client.is_disputable(liq, value) == (
            not is_undercollateralized(liq.num_tokens, liq.amount_collateral, value, requirement)
        )


def test_failed_refresh_keeps_previous_results(client, gateway):
    sponsors = client.get_all_sponsors()
    positions = client.get_all_positions()
    liquidations = client.get_undisputed_liquidations()

    gateway.position_data[SPONSOR_C] = make_position(tokens=S, raw_collateral=0)
    gateway.fail_on = "get_collateral"
    assert client.update() is False

    assert client.get_all_sponsors() == sponsors
    assert client.get_all_positions() == positions
    assert client.get_undisputed_liquidations() == liquidations
    assert client.status().failures == 1


def test_returned_lists_do_not_alias_snapshot(client):
    positions = client.get_all_positions()
    positions.clear()
    assert len(client.get_all_positions()) == 2
