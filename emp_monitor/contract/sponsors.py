"""Strategies for discovering sponsor addresses from ``NewSponsor`` records."""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, Iterable, List

from .gateway import ContractGateway

logger = logging.getLogger(__name__)


def dedupe_sponsors(events: Iterable[Dict]) -> List[str]:
    """Collapse repeated sponsors, keeping first-seen order."""
    return list(dict.fromkeys(e["sponsor"] for e in events))


class SponsorSource(ABC):
    """Produces the full sponsor set for one refresh cycle."""

    @abstractmethod
    def sponsors(self) -> List[str]:
        ...


class FullHistorySponsorSource(SponsorSource):
    """Rescan every ``NewSponsor`` record from ``from_block`` on each call.

    Cost grows with the contract's event history.
    """

    def __init__(self, gateway: ContractGateway, from_block: int = 0):
        self.gateway = gateway
        self.from_block = from_block

    def sponsors(self) -> List[str]:
        return dedupe_sponsors(self.gateway.get_new_sponsor_events(from_block=self.from_block))


class IncrementalSponsorSource(SponsorSource):
    """
    Tail ``NewSponsor`` records from a block cursor and accumulate sponsors.

    The cursor and the known set only advance once a fetch has succeeded, so a
    failed cycle is retried from the same block next time.
    """

    def __init__(self, gateway: ContractGateway, from_block: int = 0):
        self.gateway = gateway
        self._next_block = from_block
        self._known: Dict[str, None] = {}
        self._lock = Lock()

    @property
    def next_block(self) -> int:
        return self._next_block

    def sponsors(self) -> List[str]:
        with self._lock:
            head = self.gateway.latest_block()
            if head >= self._next_block:
                events = self.gateway.get_new_sponsor_events(
                    from_block=self._next_block, to_block=head
                )
                before = len(self._known)
                for sponsor in dedupe_sponsors(events):
                    self._known.setdefault(sponsor, None)
                logger.debug(
                    "Scanned NewSponsor blocks %d-%d: %d new sponsors",
                    self._next_block,
                    head,
                    len(self._known) - before,
                )
                self._next_block = head + 1
            return list(self._known)


def make_sponsor_source(
    gateway: ContractGateway, mode: str = "full", from_block: int = 0
) -> SponsorSource:
    if mode == "full":
        return FullHistorySponsorSource(gateway, from_block=from_block)
    if mode == "incremental":
        return IncrementalSponsorSource(gateway, from_block=from_block)
    raise ValueError(f"Unknown sponsor discovery mode: {mode!r}")
