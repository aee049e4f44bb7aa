"""
Order Fragmenter

Splits every confidential field of an order with its own random polynomial
and regroups the shares into n partial orders, one per pod member.
"""

import random
from typing import Dict, List, Optional

from podshare.core.errors import MalformedOrder
from podshare.crypto import shamir
from podshare.crypto.shamir import FieldShare
from podshare.orders.fragment import SHARED_FIELDS, OrderFragment
from podshare.orders.order import CoExp, Order


# Only the co-exp exponents carry a sign
UNSIGNED_FIELDS = ("tokens", "price_co", "volume_co", "minimum_volume_co", "nonce")


def shared_values(order: Order) -> Dict[str, int]:
    """
    Confidential fields of an order as field elements.

    Raises:
        MalformedOrder: if a field is absent, half of a co-exp pair is
            missing, a price, volume, token pair or nonce is negative, or a
            value does not fit the share field
    """
    if order is None:
        raise MalformedOrder("order is None")
    for name in ("parity", "order_type", "settlement", "expiry"):
        if getattr(order, name, None) is None:
            raise MalformedOrder(f"order field {name} is missing")

    raw = {"tokens": order.tokens, "nonce": order.nonce}
    for name in ("price", "volume", "minimum_volume"):
        pair = getattr(order, name, None)
        if not isinstance(pair, CoExp):
            raise MalformedOrder(f"order field {name} is missing")
        if pair.co is None or pair.exp is None:
            raise MalformedOrder(f"order field {name} has a coefficient without exponent or vice versa")
        raw[f"{name}_co"] = pair.co
        raw[f"{name}_exp"] = pair.exp

    values = {}
    for name in SHARED_FIELDS:
        value = raw[name]
        if value is None:
            raise MalformedOrder(f"order field {name} is missing")
        if isinstance(value, bool) or not isinstance(value, int):
            raise MalformedOrder(f"order field {name} must be an integer, got {type(value).__name__}")
        if name in UNSIGNED_FIELDS and value < 0:
            raise MalformedOrder(f"order field {name} must not be negative, got {value}")
        try:
            values[name] = shamir.encode_signed(value)
        except ValueError as e:
            raise MalformedOrder(f"order field {name}: {e}") from e
    return values


def fragment(order: Order, n: int, k: int, rng: Optional[random.Random] = None) -> List[OrderFragment]:
    """
    Split an order into n fragments with reconstruction threshold k.

    Each field gets a fresh polynomial so shares of different fields are
    independent.

    Args:
        order: Order to split
        n: Number of fragments (pod size)
        k: Fragments required to reconstruct any field
        rng: Randomness source (secure generator when omitted)

    Returns:
        Fragments ordered by index 1..n
    """
    values = shared_values(order)
    rng = rng or shamir.default_rng()

    shares_by_field = {name: shamir.split(values[name], n, k, rng) for name in SHARED_FIELDS}

    order_id = order.id
    return [
        OrderFragment(
            index=i + 1,
            order_id=order_id,
            parity=order.parity,
            order_type=order.order_type,
            settlement=order.settlement,
            expiry=order.expiry,
            shares={name: shares_by_field[name][i] for name in SHARED_FIELDS},
        )
        for i in range(n)
    ]


def reconstruct_field(fragments: List[OrderFragment], name: str, k: int) -> int:
    """Recover one signed field value from at least k fragments."""
    shares: List[FieldShare] = [f.shares[name] for f in fragments]
    return shamir.decode_signed(shamir.reconstruct(shares, k))
