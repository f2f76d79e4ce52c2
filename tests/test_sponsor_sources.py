import pytest

from tests.helpers import SPONSOR_A, SPONSOR_B, SPONSOR_C
from emp_monitor.contract.sponsors import (
    FullHistorySponsorSource,
    IncrementalSponsorSource,
    dedupe_sponsors,
    make_sponsor_source,
)


def test_dedupe_keeps_first_seen_order():
    events = [{"sponsor": s} for s in (SPONSOR_B, SPONSOR_A, SPONSOR_B, SPONSOR_C, SPONSOR_A)]
    assert dedupe_sponsors(events) == [SPONSOR_B, SPONSOR_A, SPONSOR_C]


def test_full_history_rescans_from_start_block(gateway):
    gateway.add_sponsor(SPONSOR_A, block=1)
    gateway.add_sponsor(SPONSOR_B, block=3)
    source = FullHistorySponsorSource(gateway)

    assert source.sponsors() == [SPONSOR_A, SPONSOR_B]
    assert source.sponsors() == [SPONSOR_A, SPONSOR_B]
    assert gateway.event_queries == [(0, None), (0, None)]


def test_incremental_tails_from_cursor(gateway):
    gateway.add_sponsor(SPONSOR_A, block=1)
    gateway.block = 5
    source = IncrementalSponsorSource(gateway)

    assert source.sponsors() == [SPONSOR_A]
    assert source.next_block == 6

    gateway.add_sponsor(SPONSOR_B, block=7)
    gateway.add_sponsor(SPONSOR_A, block=8)
    gateway.block = 9
    assert source.sponsors() == [SPONSOR_A, SPONSOR_B]
    assert gateway.event_queries == [(0, 5), (6, 9)]


def test_incremental_skips_query_when_no_new_blocks(gateway):
    gateway.block = 2
    source = IncrementalSponsorSource(gateway)
    source.sponsors()
    source.sponsors()
    assert gateway.event_queries == [(0, 2)]


def test_incremental_cursor_unchanged_after_failure(gateway):
    gateway.add_sponsor(SPONSOR_A, block=1)
    gateway.block = 4
    source = IncrementalSponsorSource(gateway)

    gateway.fail_on = "get_new_sponsor_events"
    with pytest.raises(ConnectionError):
        source.sponsors()
    assert source.next_block == 0

    gateway.fail_on = None
    assert source.sponsors() == [SPONSOR_A]


def test_make_sponsor_source(gateway):
    assert isinstance(make_sponsor_source(gateway), FullHistorySponsorSource)
    assert isinstance(make_sponsor_source(gateway, mode="incremental"), IncrementalSponsorSource)
    with pytest.raises(ValueError):
        make_sponsor_source(gateway, mode="websocket")
