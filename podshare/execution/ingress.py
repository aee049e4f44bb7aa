"""
Ingress client: HTTP submission and cancellation of orders.
"""

import base64
import logging
from typing import Optional

import httpx

from podshare.core.errors import CancellationRejected, IngressUnavailable, SubmissionRejected
from podshare.execution.submission import SubmissionPayload


logger = logging.getLogger(__name__)


class IngressClient:
    """
    Synchronous client for the matching network's ingress.

    Failures are reported, never retried; retry policy belongs to the caller.
    """

    def __init__(self, base_url: str, timeout_sec: float = 10.0, client: Optional[httpx.Client] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = float(timeout_sec)
        self._client = client or httpx.Client(timeout=self._timeout)

    def open_order(self, payload: SubmissionPayload) -> None:
        """POST the payload to {ingress}/orders. Anything but 200 is a rejection."""
        logger.info("Submitting order %s to %d pods", payload.order_id.hex()[:16], len(payload.mapping))
        try:
            response = self._client.post(f"{self._base_url}/orders", json=payload.to_dict(), timeout=self._timeout)
        except httpx.HTTPError as e:
            raise IngressUnavailable(f"ingress unreachable: {e}") from e
        if response.status_code != 200:
            raise SubmissionRejected(response.status_code, response.text)
        logger.info("Order %s accepted by ingress", payload.order_id.hex()[:16])

    def cancel_order(self, order_id: bytes, signature: str) -> None:
        """DELETE {ingress}/orders?id=..&signature=.. Anything but 200 is a rejection."""
        params = {"id": base64.b64encode(order_id).decode("ascii"), "signature": signature}
        try:
            response = self._client.delete(f"{self._base_url}/orders", params=params, timeout=self._timeout)
        except httpx.HTTPError as e:
            raise IngressUnavailable(f"ingress unreachable: {e}") from e
        if response.status_code != 200:
            raise CancellationRejected(response.status_code, response.text)
        logger.info("Order %s cancelled", order_id.hex()[:16])

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "IngressClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
