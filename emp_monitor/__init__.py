"""
EMP Monitor: read-only thick client for ExpiringMultiParty contracts.

Polls the contract on a fixed interval and keeps an in-memory snapshot of
sponsors, open positions and liquidations still inside their dispute window,
so risk and dispute bots can query it without waiting on the network.
"""

__version__ = '0.1.0'

from emp_monitor.core.fixed_point import FIXED_POINT_SCALE, is_undercollateralized, to_fixed_point
from emp_monitor.state.client import ExpiringMultiPartyClient

__all__ = [
    '__version__',
    'FIXED_POINT_SCALE',
    'is_undercollateralized',
    'to_fixed_point',
    'ExpiringMultiPartyClient',
]
