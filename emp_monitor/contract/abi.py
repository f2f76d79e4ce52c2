"""Minimal ExpiringMultiParty ABI: only the members the monitor reads."""

_UNSIGNED = {
    "components": [{"internalType": "uint256", "name": "rawValue", "type": "uint256"}],
    "internalType": "struct FixedPoint.Unsigned",
    "type": "tuple",
}


def _unsigned(name: str) -> dict:
    return dict(_UNSIGNED, name=name)


EMP_ABI = [
    {"name": "collateralRequirement", "inputs": [],
     "outputs": [{"internalType": "uint256", "name": "rawValue", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"name": "liquidationLiveness", "inputs": [],
     "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
     "stateMutability": "view", "type": "function"},
    {"name": "positions", "inputs": [{"internalType": "address", "name": "", "type": "address"}], "outputs": [
        _unsigned("tokensOutstanding"),
        {"internalType": "uint256", "name": "requestPassTimestamp", "type": "uint256"},
        _unsigned("withdrawalRequestAmount"),
        _unsigned("rawCollateral"),
        {"internalType": "uint256", "name": "transferPositionRequestPassTimestamp", "type": "uint256"},
    ], "stateMutability": "view", "type": "function"},
    {"name": "getCollateral", "inputs": [{"internalType": "address", "name": "sponsor", "type": "address"}],
     "outputs": [_unsigned("")], "stateMutability": "view", "type": "function"},
    {"name": "getLiquidations", "inputs": [{"internalType": "address", "name": "sponsor", "type": "address"}],
     "outputs": [{
         "components": [
             {"internalType": "address", "name": "sponsor", "type": "address"},
             {"internalType": "address", "name": "liquidator", "type": "address"},
             {"internalType": "enum Liquidatable.Status", "name": "state", "type": "uint8"},
             {"internalType": "uint256", "name": "liquidationTime", "type": "uint256"},
             _unsigned("tokensOutstanding"),
             _unsigned("lockedCollateral"),
             _unsigned("liquidatedCollateral"),
             _unsigned("rawUnitCollateral"),
             {"internalType": "address", "name": "disputer", "type": "address"},
             _unsigned("settlementPrice"),
             _unsigned("finalFee"),
         ],
         "internalType": "struct Liquidatable.LiquidationData[]",
         "name": "",
         "type": "tuple[]",
     }], "stateMutability": "view", "type": "function"},
    {"anonymous": False, "name": "NewSponsor", "type": "event",
     "inputs": [{"indexed": True, "internalType": "address", "name": "sponsor", "type": "address"}]},
]

# Field order of the tuples returned by `positions` and `getLiquidations`.
POSITION_FIELDS = (
    "tokensOutstanding",
    "requestPassTimestamp",
    "withdrawalRequestAmount",
    "rawCollateral",
    "transferPositionRequestPassTimestamp",
)
LIQUIDATION_FIELDS = (
    "sponsor",
    "liquidator",
    "state",
    "liquidationTime",
    "tokensOutstanding",
    "lockedCollateral",
    "liquidatedCollateral",
    "rawUnitCollateral",
    "disputer",
    "settlementPrice",
    "finalFee",
)
