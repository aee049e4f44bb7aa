"""
Routing result structures (OpenOrderReport, CancelReport).
"""

from dataclasses import dataclass, field
from typing import List, Literal


@dataclass
class OpenOrderReport:
    """
    Result of routing one order to the network.

    pod_ids lists the pods that received fragments; failed_pods and
    skipped_pods are only non-empty under partial-success mapping.
    """

    order_id: str  # Hex order ID
    status: Literal["submitted", "dry_run"] = "submitted"
    pod_ids: List[str] = field(default_factory=list)
    failed_pods: List[str] = field(default_factory=list)
    skipped_pods: List[str] = field(default_factory=list)
    fragments: int = 0  # Encrypted fragments sent across all pods


@dataclass
class CancelReport:
    """Result of cancelling one order."""

    order_id: str
    status: Literal["cancelled", "dry_run"] = "cancelled"
