"""
Podshare: confidential order submission for decentralized matching networks

An order is split into threshold shares so that no single worker node ever
sees its price, volume or token pair. Shares are grouped per pod, sealed
for each pod member and submitted through the network's ingress.

Components:
- Secret Sharer: Shamir split/reconstruct over a 255-bit prime field
- Order Fragmenter: One independent polynomial per confidential field
- Fragment Encryptor: Sealed boxes for each pod member's public key
- Pod Mapper: Parallel per-pod fragmentation and encryption
- Submission Builder: Ingress payload assembly
- Order Router: Balance pre-check, submission, cancellation
- Order Ledger: Locked-balance index over a key/value store
"""

__version__ = "0.1.0"

from podshare.core.config import Config
from podshare.execution.router import OrderRouter
from podshare.orders.order import Order

__all__ = [
    "Config",
    "Order",
    "OrderRouter",
]
