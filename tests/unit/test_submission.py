"""
Tests for submission payload assembly.
"""

import base64

import pytest

from podshare.core.errors import EmptyMapping
from podshare.execution import submission
from podshare.execution.pod_mapper import MappingResult, PodMapper
from tests.helpers import make_pod


@pytest.fixture
def mapping(order, config, rng):
    pods = [make_pod(4, tag="a")[0], make_pod(3, tag="b")[0]]
    return PodMapper(config, rng).build_mapping(order, "c2lnbmF0dXJl", pods)


class TestBuild:
    def test_empty_mapping_rejected(self, order):
        with pytest.raises(EmptyMapping):
            submission.build(order, "sig", MappingResult())
        with pytest.raises(EmptyMapping):
            submission.build(order, "sig", {})

    def test_accepts_result_or_plain_dict(self, order, mapping):
        a = submission.build(order, "sig", mapping)
        b = submission.build(order, "sig", mapping.mapping)
        assert a.mapping == b.mapping
        assert a.order_id == order.id

    def test_payload_shape(self, order, mapping):
        body = submission.build(order, "c2lnbmF0dXJl", mapping).to_dict()
        assert body["signature"] == "c2lnbmF0dXJl"
        assert len(body["orderFragmentMappings"]) == 1

        pods = body["orderFragmentMappings"][0]
        assert set(pods) == set(mapping.pod_ids)
        assert sorted(len(frags) for frags in pods.values()) == [3, 4]

    def test_wire_fragment(self, order, mapping):
        body = submission.build(order, "c2lnbmF0dXJl", mapping).to_dict()
        frag = next(iter(body["orderFragmentMappings"][0].values()))[0]

        assert frag["index"] == 1
        assert base64.b64decode(frag["orderId"]) == order.id
        assert frag["orderParity"] == int(order.parity)
        assert frag["orderType"] == int(order.order_type)
        assert frag["orderSettlement"] == int(order.settlement)
        assert frag["orderExpiry"] == order.expiry
        assert frag["signature"] == "c2lnbmF0dXJl"
        assert len(frag["price"]) == 2
        assert len(frag["volume"]) == 2
        assert len(frag["minimumVolume"]) == 2
        # Confidential fields are ciphertexts of 32-byte shares
        assert len(base64.b64decode(frag["tokens"])) == 32 + 48
        assert len(base64.b64decode(frag["nonce"])) == 32 + 48
