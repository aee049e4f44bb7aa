"""
Order signatures from the trader's Ethereum key.
"""

import base64

from eth_account import Account
from eth_account.messages import encode_defunct

from podshare.orders.order import Order


OPEN_PREFIX = b"Podshare: open: "
CANCEL_PREFIX = b"Podshare: cancel: "


class OrderSigner:
    """Signs order IDs as EIP-191 personal messages."""

    def __init__(self, private_key: str):
        self.account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self.account.address

    def sign_open(self, order: Order) -> str:
        return self._sign(OPEN_PREFIX + order.id)

    def sign_cancel(self, order_id: bytes) -> str:
        return self._sign(CANCEL_PREFIX + order_id)

    def _sign(self, message: bytes) -> str:
        signed = self.account.sign_message(encode_defunct(primitive=message))
        return base64.b64encode(bytes(signed.signature)).decode("ascii")


def recover_signer(message_prefix: bytes, order_id: bytes, signature: str) -> str:
    """Address that produced a signature from OrderSigner."""
    return Account.recover_message(
        encode_defunct(primitive=message_prefix + order_id),
        signature=base64.b64decode(signature),
    )
