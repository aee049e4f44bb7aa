"""
Submission Builder

Wraps a completed fragment mapping and the order signature into the
payload the ingress accepts. Pure data assembly, no I/O.
"""

from dataclasses import dataclass
from typing import Dict, List, Union

from podshare.core.errors import EmptyMapping
from podshare.execution.pod_mapper import MappingResult
from podshare.orders.fragment import EncryptedFragment
from podshare.orders.order import Order


@dataclass(frozen=True)
class SubmissionPayload:
    """Everything the ingress needs to open one order."""

    order_id: bytes
    signature: str
    mapping: Dict[str, List[EncryptedFragment]]

    def to_dict(self) -> dict:
        """Ingress request body."""
        return {
            "signature": self.signature,
            "orderFragmentMappings": [
                {
                    pod_id: [frag.to_wire(self.signature) for frag in fragments]
                    for pod_id, fragments in self.mapping.items()
                }
            ],
        }


def build(
    order: Order,
    signature: str,
    mapping: Union[MappingResult, Dict[str, List[EncryptedFragment]]],
) -> SubmissionPayload:
    """
    Assemble the submission payload.

    Raises:
        EmptyMapping: if no pod produced fragments
    """
    if isinstance(mapping, MappingResult):
        mapping = mapping.mapping
    if not mapping:
        raise EmptyMapping(f"no pod can reconstruct order {order.id.hex()}")
    return SubmissionPayload(order_id=order.id, signature=signature, mapping=dict(mapping))
