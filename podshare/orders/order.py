"""
Order data structures (Order, CoExp) and the token-pair encoding.
"""

import secrets
import time
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from functools import cached_property
from typing import Optional, Union

from eth_utils import keccak

from podshare.core.errors import MalformedOrder
from podshare.utils.precision import format_co_exp, from_co_exp, to_co_exp


class Parity(IntEnum):
    """Order side. Buys lock the priority token, sells the non-priority token."""

    BUY = 0
    SELL = 1


class OrderType(IntEnum):
    MIDPOINT = 0
    LIMIT = 1
    MIDPOINT_FOK = 2
    LIMIT_FOK = 3


class Settlement(IntEnum):
    RENEX = 1
    RENEX_ATOMIC = 2


class Token(IntEnum):
    """Token codes understood by the matching network."""

    BTC = 0x0
    ETH = 0x1
    DGX = 0x100
    TUSD = 0x101
    REN = 0x10000
    ZRX = 0x10001
    OMG = 0x10002


def token_pair(priority: int, non_priority: int) -> int:
    """Pack two 32-bit token codes into the 64-bit pair encoding."""
    for code in (priority, non_priority):
        if not 0 <= int(code) < 2**32:
            raise ValueError(f"token code out of range: {code}")
    return (int(non_priority) << 32) | int(priority)


def priority_token(tokens: int) -> int:
    return tokens & 0xFFFFFFFF


def non_priority_token(tokens: int) -> int:
    return (tokens >> 32) & 0xFFFFFFFF


@dataclass(frozen=True)
class CoExp:
    """Arbitrary-precision number stored as co * 10**exp."""

    co: int
    exp: int

    @classmethod
    def parse(cls, value: Union[str, int, Decimal]) -> "CoExp":
        co, exp = to_co_exp(value)
        return cls(co=co, exp=exp)

    @classmethod
    def from_dict(cls, data: dict) -> "CoExp":
        try:
            co, exp = data["co"], data["exp"]
        except (KeyError, TypeError):
            raise MalformedOrder(f"co-exp pair needs both 'co' and 'exp', got {data!r}")
        if co is None or exp is None:
            raise MalformedOrder(f"co-exp pair needs both 'co' and 'exp', got {data!r}")
        try:
            return cls(co=int(co), exp=int(exp))
        except (TypeError, ValueError):
            raise MalformedOrder(f"co-exp pair must hold integers, got {data!r}")

    @property
    def value(self) -> Decimal:
        return from_co_exp(self.co, self.exp)

    def to_dict(self) -> dict:
        return {"co": str(self.co), "exp": str(self.exp)}

    def __str__(self) -> str:
        return format_co_exp(self.co, self.exp)


@dataclass(frozen=True)
class Order:
    """
    Immutable trader order.

    The order ID is the keccak-256 hash of the canonical encoding of every
    field, so two orders differ in ID whenever any field (including the
    random nonce) differs.
    """

    parity: Parity
    order_type: OrderType
    expiry: int  # Unix seconds
    settlement: Settlement
    tokens: int  # Token pair: low 32 bits priority, high 32 bits non-priority
    price: CoExp
    volume: CoExp
    minimum_volume: CoExp
    nonce: int

    @classmethod
    def new(
        cls,
        parity: Parity,
        tokens: int,
        price: Union[str, CoExp],
        volume: Union[str, CoExp],
        minimum_volume: Optional[Union[str, CoExp]] = None,
        order_type: OrderType = OrderType.LIMIT,
        settlement: Settlement = Settlement.RENEX,
        expiry: Optional[int] = None,
        ttl_sec: int = 24 * 3600,
        nonce: Optional[int] = None,
    ) -> "Order":
        """Build an order with a fresh random nonce and a default expiry."""
        price = price if isinstance(price, CoExp) else CoExp.parse(price)
        volume = volume if isinstance(volume, CoExp) else CoExp.parse(volume)
        if minimum_volume is None:
            minimum_volume = volume
        elif not isinstance(minimum_volume, CoExp):
            minimum_volume = CoExp.parse(minimum_volume)
        order = cls(
            parity=Parity(parity),
            order_type=OrderType(order_type),
            expiry=int(expiry if expiry is not None else time.time() + ttl_sec),
            settlement=Settlement(settlement),
            tokens=int(tokens),
            price=price,
            volume=volume,
            minimum_volume=minimum_volume,
            nonce=nonce if nonce is not None else secrets.randbits(64),
        )
        order.check_amounts()
        return order

    def check_amounts(self) -> None:
        """Raise MalformedOrder if a price, volume, token pair or nonce is negative."""
        for name in ("price", "volume", "minimum_volume"):
            if getattr(self, name).co < 0:
                raise MalformedOrder(f"order {name} must not be negative, got {getattr(self, name)}")
        if self.tokens < 0 or self.nonce < 0:
            raise MalformedOrder("order tokens and nonce must not be negative")

    @cached_property
    def id(self) -> bytes:
        return keccak(self.canonical_bytes())

    @property
    def token(self) -> int:
        """Token whose balance this order locks."""
        if self.parity == Parity.BUY:
            return priority_token(self.tokens)
        return non_priority_token(self.tokens)

    def canonical_bytes(self) -> bytes:
        """Deterministic byte encoding used for the order ID."""
        parts = [
            int(self.parity), int(self.order_type), self.expiry, int(self.settlement),
            self.tokens, self.price.co, self.price.exp, self.volume.co, self.volume.exp,
            self.minimum_volume.co, self.minimum_volume.exp, self.nonce,
        ]
        return b"".join(_int_bytes(p) for p in parts)

    def to_dict(self) -> dict:
        return {
            "id": self.id.hex(),
            "parity": int(self.parity),
            "orderType": int(self.order_type),
            "expiry": self.expiry,
            "settlement": int(self.settlement),
            "tokens": str(self.tokens),
            "price": self.price.to_dict(),
            "volume": self.volume.to_dict(),
            "minimumVolume": self.minimum_volume.to_dict(),
            "nonce": str(self.nonce),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        """Inverse of to_dict. Raises MalformedOrder on missing or bad fields."""
        required = ("parity", "orderType", "expiry", "settlement", "tokens",
                    "price", "volume", "minimumVolume", "nonce")
        missing = [k for k in required if data.get(k) is None]
        if missing:
            raise MalformedOrder(f"order is missing fields: {', '.join(missing)}")
        try:
            order = cls(
                parity=Parity(int(data["parity"])),
                order_type=OrderType(int(data["orderType"])),
                expiry=int(data["expiry"]),
                settlement=Settlement(int(data["settlement"])),
                tokens=int(data["tokens"]),
                price=CoExp.from_dict(data["price"]),
                volume=CoExp.from_dict(data["volume"]),
                minimum_volume=CoExp.from_dict(data["minimumVolume"]),
                nonce=int(data["nonce"]),
            )
        except (TypeError, ValueError) as e:
            raise MalformedOrder(f"order has an invalid field: {e}") from e
        if "id" in data and data["id"] != order.id.hex():
            raise MalformedOrder("order id does not match its contents")
        order.check_amounts()
        return order


def _int_bytes(value: int) -> bytes:
    """Fixed-width signed 32-byte big-endian encoding."""
    return int(value).to_bytes(32, "big", signed=True)
