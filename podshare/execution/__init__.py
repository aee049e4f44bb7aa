"""Execution: fragmentation, pod mapping, submission and order routing."""

from podshare.execution.pod_mapper import Pod, PodMapper, PodMember, StaticPodDirectory
from podshare.execution.router import OrderRouter
from podshare.execution.reports import OpenOrderReport, CancelReport

__all__ = [
    "Pod",
    "PodMember",
    "PodMapper",
    "StaticPodDirectory",
    "OrderRouter",
    "OpenOrderReport",
    "CancelReport",
]
