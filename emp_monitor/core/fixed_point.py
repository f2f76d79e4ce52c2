"""
Fixed-point collateralization math.

Contract values are integers scaled by ``FIXED_POINT_SCALE`` (10**18). Python
ints are arbitrary precision, so products of several scaled values never
overflow.
"""
from decimal import Decimal, localcontext
from typing import Union

FIXED_POINT_DECIMALS = 18
FIXED_POINT_SCALE = 10 ** FIXED_POINT_DECIMALS

IntLike = Union[int, str]


def to_fixed_point(value: Union[int, str, Decimal], scale: int = FIXED_POINT_SCALE) -> int:
    """
    Convert a human decimal into its scaled integer form.

    ``to_fixed_point("1.2")`` returns ``1200000000000000000``. Fractions finer
    than the scale are truncated toward zero.
    """
    with localcontext() as ctx:
        ctx.prec = 120
        dec = value if isinstance(value, Decimal) else Decimal(str(value))
        return int(dec * scale)


def is_undercollateralized(
    num_tokens: IntLike,
    amount_collateral: IntLike,
    token_redemption_value: IntLike,
    collateral_requirement: IntLike,
    scale: int = FIXED_POINT_SCALE,
) -> bool:
    """
    True if the position backing ``num_tokens`` with ``amount_collateral`` is
    below the collateral requirement at ``token_redemption_value``.

    The rule is ``(num_tokens * trv) * collateral_requirement > amount_collateral``
    in real terms. The left side carries two more factors of ``scale`` than the
    right, so the right side is multiplied by ``scale`` twice. Equality is not
    undercollateralized.
    """
    lhs = int(num_tokens) * int(token_redemption_value) * int(collateral_requirement)
    rhs = int(amount_collateral) * scale * scale
    return lhs > rhs
