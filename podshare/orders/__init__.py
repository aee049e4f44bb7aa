"""Order and fragment data structures."""

from podshare.orders.order import CoExp, Order, OrderType, Parity, Settlement, Token, token_pair
from podshare.orders.fragment import EncryptedFragment, OrderFragment

__all__ = [
    "CoExp",
    "Order",
    "OrderType",
    "Parity",
    "Settlement",
    "Token",
    "token_pair",
    "OrderFragment",
    "EncryptedFragment",
]
