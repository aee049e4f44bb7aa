"""
Order fragment data structures (OrderFragment, EncryptedFragment).
"""

import base64
from dataclasses import dataclass
from typing import Dict, Tuple

from eth_utils import keccak

from podshare.crypto.shamir import FieldShare
from podshare.orders.order import OrderType, Parity, Settlement


# Confidential fields, in wire order. Each holds one FieldShare per fragment.
SHARED_FIELDS: Tuple[str, ...] = (
    "tokens",
    "price_co",
    "price_exp",
    "volume_co",
    "volume_exp",
    "minimum_volume_co",
    "minimum_volume_exp",
    "nonce",
)


@dataclass(frozen=True)
class OrderFragment:
    """
    Partial order held by one pod member.

    Routing fields stay in cleartext; every confidential field is a share.
    """

    index: int
    order_id: bytes
    parity: Parity
    order_type: OrderType
    settlement: Settlement
    expiry: int
    shares: Dict[str, FieldShare]

    @property
    def id(self) -> bytes:
        """Content hash identifying this fragment."""
        data = self.order_id + self.index.to_bytes(4, "big")
        for name in SHARED_FIELDS:
            data += self.shares[name].to_bytes()
        return keccak(data)


@dataclass(frozen=True)
class EncryptedFragment:
    """An OrderFragment whose shares are sealed for one recipient."""

    index: int
    id: bytes
    order_id: bytes
    parity: Parity
    order_type: OrderType
    settlement: Settlement
    expiry: int
    ciphertexts: Dict[str, bytes]

    def to_wire(self, signature: str) -> dict:
        """Serialize into the ingress fragment shape."""
        c = {name: _b64(data) for name, data in self.ciphertexts.items()}
        return {
            "index": self.index,
            "id": _b64(self.id),
            "orderId": _b64(self.order_id),
            "orderParity": int(self.parity),
            "orderSettlement": int(self.settlement),
            "orderType": int(self.order_type),
            "orderExpiry": self.expiry,
            "tokens": c["tokens"],
            "price": [c["price_co"], c["price_exp"]],
            "volume": [c["volume_co"], c["volume_exp"]],
            "minimumVolume": [c["minimum_volume_co"], c["minimum_volume_exp"]],
            "nonce": c["nonce"],
            "signature": signature,
        }


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
