"""
Order Router

Opens and cancels orders on the matching network:
balance pre-check against the ledger, fragment mapping across pods,
payload assembly, ingress submission and ledger bookkeeping.
"""

import logging
import threading
from decimal import Decimal
from typing import Callable, Optional

from podshare.core.config import Config
from podshare.core.errors import IngressError, InsufficientBalance
from podshare.execution import submission
from podshare.execution.ingress import IngressClient
from podshare.execution.pod_mapper import PodDirectory, PodMapper
from podshare.execution.reports import CancelReport, OpenOrderReport
from podshare.ledger.order_ledger import OrderLedger
from podshare.monitoring.metrics import MetricsCollector
from podshare.orders.order import Order


logger = logging.getLogger(__name__)

BalanceSource = Callable[[int], Decimal]


class OrderRouter:
    """
    Order routing logic.

    Open flow:
    1. Usable balance = balance - locked balance; reject if volume exceeds it
    2. Snapshot pods from the directory
    3. Fragment + encrypt per pod (PodMapper)
    4. Build the payload and POST it to the ingress
    5. Record the order in the ledger

    Cancel flow: ingress DELETE, then ledger remove.
    """

    def __init__(
        self,
        config: Config,
        ledger: OrderLedger,
        ingress: IngressClient,
        pod_directory: PodDirectory,
        mapper: Optional[PodMapper] = None,
        balance_source: Optional[BalanceSource] = None,
        metrics: Optional[MetricsCollector] = None,
        dry_run: bool = False,
    ):
        """
        Initialize order router.

        Args:
            config: System configuration
            ledger: Local order ledger
            ingress: Ingress client
            pod_directory: Source of the current pod snapshot
            mapper: Pod mapper (built from config when omitted)
            balance_source: token -> deposited balance; skips the balance
                check when omitted
            metrics: Metrics collector
            dry_run: Build everything but never call the ingress
        """
        self.config = config
        self.ledger = ledger
        self.ingress = ingress
        self.pod_directory = pod_directory
        self.mapper = mapper or PodMapper(config)
        self.balance_source = balance_source
        self.metrics = metrics or MetricsCollector(config)
        self.dry_run = dry_run

    def usable_balance(self, token: int) -> Decimal:
        """Deposited balance minus volume locked by open orders."""
        if self.balance_source is None:
            raise ValueError("no balance source configured")
        balance = Decimal(self.balance_source(token))
        return balance - self.ledger.locked_balance(token)

    def open_order(
        self,
        order: Order,
        signature: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> OpenOrderReport:
        """
        Submit an order to every pod.

        Raises:
            InsufficientBalance: volume exceeds usable balance
            PodMappingFailed: a pod failed under all-or-nothing mapping
            EmptyMapping: no pod produced fragments
            IngressError: the ingress rejected or was unreachable
            StoreError: ledger I/O failed
        """
        order_id = order.id.hex()
        if self.balance_source is not None:
            usable = self.usable_balance(order.token)
            if order.volume.value > usable:
                raise InsufficientBalance(order.token, usable, order.volume.value)

        pods = self.pod_directory.pods()
        logger.info("Opening order %s across %d pods", order_id[:16], len(pods))
        result = self.mapper.build_mapping(order, signature, pods, cancel_event=cancel_event)
        self.metrics.record_mapping(len(result.mapping), len(result.failures), len(result.skipped), result.duration_sec)

        payload = submission.build(order, signature, result)
        report = OpenOrderReport(
            order_id=order_id,
            pod_ids=result.pod_ids,
            failed_pods=[f.pod_id for f in result.failures],
            skipped_pods=list(result.skipped),
            fragments=sum(len(frags) for frags in payload.mapping.values()),
        )

        if self.dry_run:
            logger.info("Dry run: not submitting order %s", order_id[:16])
            self.metrics.record_submission("dry_run")
            report.status = "dry_run"
            return report

        try:
            self.ingress.open_order(payload)
        except IngressError as e:
            self.metrics.record_submission(_outcome(e))
            raise
        self.metrics.record_submission("accepted")

        self.ledger.append(order)
        return report

    def cancel_order(self, order_id: bytes, signature: str) -> CancelReport:
        """
        Cancel an order on the network and drop it from the ledger.

        Raises:
            IngressError: the ingress rejected or was unreachable
            StoreError: ledger I/O failed
        """
        report = CancelReport(order_id=order_id.hex())
        if self.dry_run:
            logger.info("Dry run: not cancelling order %s", order_id.hex()[:16])
            self.metrics.record_cancellation("dry_run")
            report.status = "dry_run"
            return report

        try:
            self.ingress.cancel_order(order_id, signature)
        except IngressError as e:
            self.metrics.record_cancellation(_outcome(e))
            raise
        self.metrics.record_cancellation("accepted")

        self.ledger.remove(order_id)
        return report


def _outcome(error: IngressError) -> str:
    return "rejected" if hasattr(error, "status_code") else "unavailable"
