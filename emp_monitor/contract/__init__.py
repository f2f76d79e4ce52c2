"""
Contract access: the gateway interface, its web3 binding, and sponsor
discovery strategies.
"""

from .gateway import ContractGateway, Web3ContractGateway
from .sponsors import (
    FullHistorySponsorSource,
    IncrementalSponsorSource,
    SponsorSource,
    make_sponsor_source,
)

__all__ = [
    "ContractGateway",
    "Web3ContractGateway",
    "SponsorSource",
    "FullHistorySponsorSource",
    "IncrementalSponsorSource",
    "make_sponsor_source",
]
