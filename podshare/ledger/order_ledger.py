"""
Local Order Ledger

Index of orders this trader has submitted, used to compute how much of
each token is locked by open orders before a new order or a withdrawal.

Layout in the store:
- "ORDERS"          -> JSON list of hex order IDs (the index)
- "ORDER" || id     -> JSON order body

The index is the commit point: a body is always written before its ID is
indexed and removed before its ID leaves the index.
"""

import json
import logging
import threading
from decimal import Decimal
from typing import List, Optional

from podshare.core.errors import KeyNotFound, MalformedOrder, StoreReadFailed, StoreWriteFailed
from podshare.ledger.store import KeyValueStore
from podshare.orders.order import Order


logger = logging.getLogger(__name__)

INDEX_KEY = b"ORDERS"
BODY_PREFIX = b"ORDER"
LOCK_STRIPES = 64


def body_key(order_id: bytes) -> bytes:
    return BODY_PREFIX + bytes(order_id)


class OrderLedger:
    """Order index over an injected key/value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._index_lock = threading.Lock()
        # Fixed stripes: same-ID append/remove always share a lock
        self._id_locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    def append(self, order: Order) -> None:
        """
        Record a submitted order.

        Raises:
            MalformedOrder: a price, volume, token pair or nonce is negative
            StoreWriteFailed: body or index could not be written; the index
                never references a body that was not written first
        """
        order.check_amounts()
        order_id = order.id
        with self._lock_for(order_id):
            try:
                self.store.write(body_key(order_id), json.dumps(order.to_dict()).encode("utf-8"))
            except Exception as e:
                raise StoreWriteFailed(f"writing order {order_id.hex()} failed: {e}") from e

            with self._index_lock:
                ids = self._read_index()
                if order_id.hex() in ids:
                    return
                ids.append(order_id.hex())
                self._write_index(ids)
        logger.info("Ledger: appended order %s", order_id.hex()[:16])

    def remove(self, order_id: bytes) -> None:
        """Forget an order. Unknown IDs are a no-op."""
        order_id = bytes(order_id)
        with self._lock_for(order_id):
            if order_id.hex() not in self._read_index():
                return

            try:
                self.store.delete(body_key(order_id))
            except Exception as e:
                raise StoreWriteFailed(f"deleting order {order_id.hex()} failed: {e}") from e

            with self._index_lock:
                ids = [x for x in self._read_index() if x != order_id.hex()]
                self._write_index(ids)
        logger.info("Ledger: removed order %s", order_id.hex()[:16])

    def get(self, order_id: bytes) -> Optional[Order]:
        """Order body by ID, or None if it is not stored."""
        try:
            data = self.store.read(body_key(order_id))
        except KeyNotFound:
            return None
        except Exception as e:
            raise StoreReadFailed(f"reading order {bytes(order_id).hex()} failed: {e}") from e
        try:
            return Order.from_dict(json.loads(data))
        except (ValueError, MalformedOrder) as e:
            raise StoreReadFailed(f"order {bytes(order_id).hex()} is corrupt: {e}") from e

    def orders(self, token: Optional[int] = None) -> List[Order]:
        """
        Indexed orders, optionally only those locking the given token.

        An indexed ID whose body is already gone belongs to an in-flight
        remove and is skipped.
        """
        result = []
        for hex_id in self._read_index():
            order = self.get(bytes.fromhex(hex_id))
            if order is None:
                continue
            if token is None or order.token == int(token):
                result.append(order)
        return result

    def locked_balance(self, token: int) -> Decimal:
        """Total volume of indexed orders locking the token (0 if none)."""
        return sum((o.volume.value for o in self.orders(token)), Decimal(0))

    def has_open_orders(self, token: int) -> bool:
        return len(self.orders(token)) > 0

    # ------------------------
    # Helpers
    # ------------------------
    def _lock_for(self, order_id: bytes) -> threading.Lock:
        return self._id_locks[int.from_bytes(bytes(order_id)[:8], "big") % LOCK_STRIPES]

    def _read_index(self) -> List[str]:
        try:
            data = self.store.read(INDEX_KEY)
        except KeyNotFound:
            return []
        except Exception as e:
            raise StoreReadFailed(f"reading order index failed: {e}") from e
        try:
            ids = json.loads(data)
        except ValueError as e:
            raise StoreReadFailed(f"order index is corrupt: {e}") from e
        if not isinstance(ids, list):
            raise StoreReadFailed("order index is corrupt: expected a list")
        return ids

    def _write_index(self, ids: List[str]) -> None:
        try:
            self.store.write(INDEX_KEY, json.dumps(ids).encode("utf-8"))
        except Exception as e:
            raise StoreWriteFailed(f"writing order index failed: {e}") from e
