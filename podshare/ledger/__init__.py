"""Local order ledger and its key/value stores."""

from podshare.ledger.order_ledger import OrderLedger
from podshare.ledger.store import FileStore, KeyValueStore, MemoryStore

__all__ = ["OrderLedger", "KeyValueStore", "MemoryStore", "FileStore"]
