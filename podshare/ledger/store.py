"""
Key/value stores backing the order ledger.

The ledger only needs byte-addressed read/write/delete with atomic
single-key writes; any engine offering that can be injected.
"""

import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Protocol

from podshare.core.errors import KeyNotFound


class KeyValueStore(Protocol):
    """Byte-addressed store. read raises KeyNotFound for absent keys."""

    def read(self, key: bytes) -> bytes:
        ...

    def write(self, key: bytes, value: bytes) -> None:
        ...

    def delete(self, key: bytes) -> None:
        ...

    def close(self) -> None:
        ...


class MemoryStore:
    """In-process store, used for tests and dry runs."""

    def __init__(self):
        self._data: Dict[bytes, bytes] = {}
        self._lock = threading.Lock()

    def read(self, key: bytes) -> bytes:
        with self._lock:
            try:
                return self._data[bytes(key)]
            except KeyError:
                raise KeyNotFound(key)

    def write(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._data[bytes(key)] = bytes(value)

    def delete(self, key: bytes) -> None:
        with self._lock:
            self._data.pop(bytes(key), None)

    def close(self) -> None:
        pass

    def __enter__(self) -> "MemoryStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class FileStore:
    """
    Durable store keeping one file per key under a directory.

    Writes go to a temp file that is fsynced and renamed over the target,
    so a reader sees either the old or the new value, never a partial one.
    """

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._closed = False

    def _path(self, key: bytes) -> Path:
        return self.data_dir / f"{bytes(key).hex()}.bin"

    def read(self, key: bytes) -> bytes:
        self._check_open()
        path = self._path(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            raise KeyNotFound(key)

    def write(self, key: bytes, value: bytes) -> None:
        self._check_open()
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self._path(key))
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def delete(self, key: bytes) -> None:
        self._check_open()
        self._path(key).unlink(missing_ok=True)

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise OSError(f"store at {self.data_dir} is closed")

    def __enter__(self) -> "FileStore":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
