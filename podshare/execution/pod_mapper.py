"""
Pod Mapper

Drives fragmentation and encryption once per pod and assembles the
mapping from pod ID to that pod's encrypted fragments.

Pods are independent, so each one runs as its own task on a thread pool.
A pod either contributes all n fragments or nothing.
"""

import base64
import json
import logging
import random
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

from eth_utils import keccak

from podshare.core.config import Config
from podshare.core.errors import DuplicatePod, PodMappingFailed, PodTooSmall
from podshare.crypto import encryption, shamir
from podshare.execution import fragmenter
from podshare.orders.fragment import EncryptedFragment
from podshare.orders.order import Order


logger = logging.getLogger(__name__)


def pod_threshold(n: int) -> int:
    """
    Reconstruction threshold for a pod of n members: ceil(2*(n+1)/3).

    The formula is the value the network expects. It exceeds n only for a
    single-member pod, which is clamped to 1.
    """
    if n < 1:
        raise ValueError(f"pod size must be >= 1, got {n}")
    return min(n, -(-2 * (n + 1) // 3))


@dataclass(frozen=True)
class PodMember:
    """One worker node of a pod."""

    node_id: str
    public_key: bytes  # X25519 public key
    address: str = ""  # Network address, informational only


@dataclass(frozen=True)
class Pod:
    """Ordered group of nodes jointly holding one share set of an order."""

    members: tuple
    position: int = 0

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def threshold(self) -> int:
        return pod_threshold(self.size)

    @property
    def pod_id(self) -> str:
        """Base64 keccak-256 of the members' length-prefixed node IDs, in order."""
        data = b""
        for m in self.members:
            node_id = m.node_id.encode("utf-8")
            data += len(node_id).to_bytes(4, "big") + node_id
        return base64.b64encode(keccak(data)).decode("ascii")


class PodDirectory(Protocol):
    """Point-in-time source of the current pods."""

    def pods(self) -> List[Pod]:
        ...


class StaticPodDirectory:
    """
    Pod directory backed by a fixed snapshot.

    File format (YAML or JSON):
        pods:
          - members:
              - node_id: "8MJ..."
                public_key: "<base64 32 bytes>"
                address: "/ip4/1.2.3.4/tcp/18514"
    """

    def __init__(self, pods: Sequence[Pod]):
        self._pods = list(pods)

    def pods(self) -> List[Pod]:
        return list(self._pods)

    @classmethod
    def from_file(cls, path: str) -> "StaticPodDirectory":
        text = Path(path).read_text()
        if path.endswith((".yaml", ".yml")):
            import yaml
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> "StaticPodDirectory":
        pods = []
        for position, entry in enumerate(data.get("pods", [])):
            members = tuple(
                PodMember(
                    node_id=str(m["node_id"]),
                    public_key=base64.b64decode(m["public_key"]),
                    address=str(m.get("address", "")),
                )
                for m in entry.get("members", [])
            )
            pods.append(Pod(members=members, position=position))
        return cls(pods)


@dataclass
class MappingResult:
    """Outcome of one mapping build."""

    mapping: Dict[str, List[EncryptedFragment]] = field(default_factory=dict)
    failures: List[PodMappingFailed] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # Pod IDs never started (cancelled)
    duration_sec: float = 0.0
    signature: str = ""  # Trader signature the fragments were built for

    @property
    def pod_ids(self) -> List[str]:
        return list(self.mapping.keys())


class PodMapper:
    """
    Builds fragment mappings across pods.

    Flow per pod:
    1. n = pod size, k = ceil(2*(n+1)/3)
    2. Split the order into n fragments
    3. Encrypt fragment i for member i
    4. Key the encrypted list by the pod's content-hash ID
    """

    def __init__(self, config: Optional[Config] = None, rng: Optional[random.Random] = None):
        """
        Initialize pod mapper.

        Args:
            config: System configuration (worker pool size, failure policy)
            rng: Randomness source; a seeded random.Random gives reproducible
                shares, the default is a secure system generator
        """
        self.config = config or Config()
        self.rng = rng or shamir.default_rng()

    def build_mapping(
        self,
        order: Order,
        signature: str,
        pods: Sequence[Pod],
        all_or_nothing: Optional[bool] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> MappingResult:
        """
        Fragment and encrypt an order for every pod.

        Args:
            order: Order to distribute
            signature: Trader signature of the order (recorded on the result, not verified)
            pods: Pod snapshot from the directory
            all_or_nothing: Raise on the first pod failure (defaults to config)
            cancel_event: When set, pods that have not started are skipped

        Returns:
            MappingResult with successful pods, per-pod failures and skipped pods

        Raises:
            PodMappingFailed: first failing pod (including a repeated pod ID),
                when all_or_nothing
        """
        if all_or_nothing is None:
            all_or_nothing = self.config.sharing.all_or_nothing
        cancel_event = cancel_event or threading.Event()

        started = time.monotonic()
        result = MappingResult(signature=signature)
        if not pods:
            return result

        workers = self.config.sharing.max_workers or len(pods)
        pod_rngs = [self._pod_rng() for _ in pods]
        logger.info("Building fragment mapping for order %s across %d pods", order_id_hex(order), len(pods))

        # A repeated pod ID fails instead of overwriting the earlier pod's fragments
        seen = set()
        duplicates = []
        for pod in pods:
            duplicates.append(pod.pod_id in seen)
            seen.add(pod.pod_id)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pod-mapper") as pool:
            futures = [
                None if duplicate else pool.submit(self._map_pod, order, pod, pod_rng, cancel_event)
                for pod, pod_rng, duplicate in zip(pods, pod_rngs, duplicates)
            ]
            outcomes = [
                PodMappingFailed(pod.pod_id, DuplicatePod(pod.pod_id)) if f is None else f.result()
                for pod, f in zip(pods, futures)
            ]

        for pod, outcome in zip(pods, outcomes):
            if outcome is None:
                result.skipped.append(pod.pod_id)
            elif isinstance(outcome, PodMappingFailed):
                logger.warning("Pod %s failed: %s", outcome.pod_id, outcome.cause)
                result.failures.append(outcome)
            else:
                result.mapping[pod.pod_id] = outcome

        result.duration_sec = time.monotonic() - started
        logger.info(
            "Mapping complete: %d ok, %d failed, %d skipped in %.3fs",
            len(result.mapping), len(result.failures), len(result.skipped), result.duration_sec,
        )

        if all_or_nothing and result.failures:
            raise result.failures[0]
        return result

    def map_pod(self, order: Order, pod: Pod, rng: Optional[random.Random] = None) -> List[EncryptedFragment]:
        """
        Fragment and encrypt an order for a single pod.

        Raises:
            PodMappingFailed: wrapping PodTooSmall, MalformedOrder or EncryptionFailed
        """
        pod_id = pod.pod_id
        try:
            if pod.size == 0:
                raise PodTooSmall(pod_id)
            n, k = pod.size, pod.threshold
            fragments = fragmenter.fragment(order, n, k, rng or self.rng)
            return [
                encryption.encrypt(frag, member.public_key)
                for frag, member in zip(fragments, pod.members)
            ]
        except PodMappingFailed:
            raise
        except Exception as e:
            raise PodMappingFailed(pod_id, e) from e

    def _map_pod(self, order, pod, rng, cancel_event):
        """Worker task: None if cancelled before start, else fragments or the failure."""
        if cancel_event.is_set():
            logger.debug("Skipping pod %s: mapping cancelled", pod.pod_id)
            return None
        try:
            return self.map_pod(order, pod, rng)
        except PodMappingFailed as e:
            return e

    def _pod_rng(self) -> random.Random:
        """Independent generator per pod so results do not depend on thread scheduling."""
        if isinstance(self.rng, random.SystemRandom):
            return self.rng
        return random.Random(self.rng.getrandbits(256))


def order_id_hex(order: Order) -> str:
    try:
        return order.id.hex()[:16]
    except (AttributeError, TypeError, ValueError, OverflowError):
        return "<malformed>"
