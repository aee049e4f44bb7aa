"""
Error types raised by the fragmentation, distribution and ledger layers.

Every failure is a typed exception rooted at PodshareError so callers can
decide between aborting a submission, retrying a single pod or surfacing
the error to the trader.
"""

from typing import Optional


class PodshareError(Exception):
    """Base class for all podshare errors."""


class ConfigError(PodshareError):
    """Configuration is missing or out of range."""


# ------------------------
# Secret sharing
# ------------------------
class InvalidThreshold(PodshareError):
    """Threshold parameters violate 1 <= k <= n."""

    def __init__(self, n: int, k: int):
        super().__init__(f"invalid threshold: need 1 <= k <= n, got n={n} k={k}")
        self.n = n
        self.k = k


class InsufficientShares(PodshareError):
    """Fewer than k distinct shares were supplied for reconstruction."""

    def __init__(self, have: int, want: int):
        super().__init__(f"insufficient shares: have {have} distinct, want {want}")
        self.have = have
        self.want = want


# ------------------------
# Orders and fragments
# ------------------------
class MalformedOrder(PodshareError):
    """An order field is absent or inconsistently encoded."""


class EncryptionFailed(PodshareError):
    """A fragment could not be encrypted for its recipient."""


class PodTooSmall(PodshareError):
    """A pod has no members."""

    def __init__(self, pod_id: str):
        super().__init__(f"pod {pod_id or '<empty>'} has no members")
        self.pod_id = pod_id


class PodMappingFailed(PodshareError):
    """Fragmentation or encryption failed for one pod."""

    def __init__(self, pod_id: str, cause: Exception):
        super().__init__(f"mapping failed for pod {pod_id}: {cause}")
        self.pod_id = pod_id
        self.cause = cause


class DuplicatePod(PodshareError):
    """Two pods in one snapshot share a pod ID."""

    def __init__(self, pod_id: str):
        super().__init__(f"pod {pod_id} appears more than once in the snapshot")
        self.pod_id = pod_id


class EmptyMapping(PodshareError):
    """No pod produced fragments, so nobody could reconstruct the order."""


class InsufficientBalance(PodshareError):
    """Order volume exceeds the trader's usable balance."""

    def __init__(self, token: int, have, want):
        super().__init__(f"order volume exceeded usable balance of token {token}: have {have} want {want}")
        self.token = token
        self.have = have
        self.want = want


# ------------------------
# Storage
# ------------------------
class StoreError(PodshareError):
    """Base class for ledger storage failures."""


class KeyNotFound(StoreError):
    """Raised by a store when a key has no value."""

    def __init__(self, key: bytes):
        super().__init__(f"key not found: {key!r}")
        self.key = key


class StoreWriteFailed(StoreError):
    """A write or delete against the underlying store failed."""


class StoreReadFailed(StoreError):
    """A read against the underlying store failed or returned corrupt data."""


# ------------------------
# Ingress
# ------------------------
class IngressError(PodshareError):
    """Base class for ingress failures."""


class IngressUnavailable(IngressError):
    """The ingress could not be reached."""


class SubmissionRejected(IngressError):
    """The ingress answered an order submission with a non-200 status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"order submission rejected with status {status_code}")
        self.status_code = status_code
        self.body = body


class CancellationRejected(IngressError):
    """The ingress answered a cancellation with a non-200 status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"order cancellation rejected with status {status_code}")
        self.status_code = status_code
        self.body = body
