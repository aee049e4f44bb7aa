"""
Tests for the order fragmenter.

Coverage:
- Fragment count and indexing
- Reconstruction of every confidential field
- Independence of per-field polynomials
- Malformed orders
- Seeded determinism
"""

import random
from dataclasses import replace

import pytest

from podshare.core.errors import InvalidThreshold, MalformedOrder
from podshare.crypto import shamir
from podshare.execution import fragmenter
from podshare.orders.fragment import SHARED_FIELDS
from podshare.orders.order import CoExp


class TestFragment:
    @pytest.mark.parametrize("n,k", [(1, 1), (4, 4), (7, 6), (24, 17)])
    def test_returns_n_fragments_indexed_one_to_n(self, order, rng, n, k):
        frags = fragmenter.fragment(order, n, k, rng)
        assert len(frags) == n
        assert [f.index for f in frags] == list(range(1, n + 1))
        assert all(set(f.shares) == set(SHARED_FIELDS) for f in frags)

    def test_routing_fields_in_cleartext(self, order, rng):
        for f in fragmenter.fragment(order, 4, 4, rng):
            assert f.order_id == order.id
            assert f.parity == order.parity
            assert f.settlement == order.settlement
            assert f.order_type == order.order_type
            assert f.expiry == order.expiry

    def test_every_field_reconstructs(self, order, rng):
        frags = fragmenter.fragment(order, 7, 6, rng)
        subset = [frags[i] for i in (0, 2, 3, 4, 5, 6)]
        expected = {
            "tokens": order.tokens,
            "price_co": 15,
            "price_exp": -1,
            "volume_co": 100,
            "volume_exp": 0,
            "minimum_volume_co": 10,
            "minimum_volume_exp": 0,
            "nonce": order.nonce,
        }
        for name, value in expected.items():
            assert fragmenter.reconstruct_field(subset, name, 6) == value, name

    def test_fragment_ids_unique(self, order, rng):
        frags = fragmenter.fragment(order, 5, 4, rng)
        assert len({f.id for f in frags}) == 5

    def test_invalid_threshold(self, order, rng):
        with pytest.raises(InvalidThreshold):
            fragmenter.fragment(order, 3, 4, rng)


class TestFieldIndependence:
    """Fields must never share a polynomial."""

    def test_equal_values_get_different_shares(self, order, rng):
        same = replace(order, price=CoExp(100, 0), volume=CoExp(100, 0), minimum_volume=CoExp(100, 0))
        frags = fragmenter.fragment(same, 4, 3, rng)
        for f in frags:
            values = {f.shares[name].value for name in ("price_co", "volume_co", "minimum_volume_co")}
            assert len(values) == 3

    def test_mixing_fields_reveals_neither(self, order, rng):
        frags = fragmenter.fragment(order, 4, 4, rng)
        mixed = [frags[0].shares["price_co"], frags[1].shares["price_co"],
                 frags[2].shares["volume_co"], frags[3].shares["volume_co"]]
        value = shamir.decode_signed(shamir.reconstruct(mixed, 4))
        assert value not in (order.price.co, order.volume.co)

    def test_fresh_polynomials_per_call(self, order):
        gen = random.Random(3)
        a = fragmenter.fragment(order, 4, 3, gen)
        b = fragmenter.fragment(order, 4, 3, gen)
        assert a[0].shares["volume_co"] != b[0].shares["volume_co"]


class TestDeterminism:
    def test_same_seed_same_fragments(self, order):
        a = fragmenter.fragment(order, 5, 4, random.Random(9))
        b = fragmenter.fragment(order, 5, 4, random.Random(9))
        assert a == b

    def test_different_seed_different_fragments(self, order):
        a = fragmenter.fragment(order, 5, 4, random.Random(9))
        b = fragmenter.fragment(order, 5, 4, random.Random(10))
        assert [f.id for f in a] != [f.id for f in b]


class TestMalformedOrder:
    def test_coefficient_without_exponent(self, order, rng):
        with pytest.raises(MalformedOrder, match="price"):
            fragmenter.fragment(replace(order, price=CoExp(15, None)), 4, 4, rng)

    def test_missing_co_exp_field(self, order, rng):
        with pytest.raises(MalformedOrder, match="volume"):
            fragmenter.fragment(replace(order, volume=None), 4, 4, rng)

    def test_missing_nonce(self, order, rng):
        with pytest.raises(MalformedOrder, match="nonce"):
            fragmenter.fragment(replace(order, nonce=None), 4, 4, rng)

    def test_missing_expiry(self, order, rng):
        with pytest.raises(MalformedOrder, match="expiry"):
            fragmenter.fragment(replace(order, expiry=None), 4, 4, rng)

    def test_value_too_large_for_field(self, order, rng):
        with pytest.raises(MalformedOrder, match="nonce"):
            fragmenter.fragment(replace(order, nonce=2**300), 4, 4, rng)

    def test_non_integer_field(self, order, rng):
        with pytest.raises(MalformedOrder, match="tokens"):
            fragmenter.fragment(replace(order, tokens="ETH-REN"), 4, 4, rng)

    @pytest.mark.parametrize("name", ["price", "volume", "minimum_volume"])
    def test_negative_amount(self, order, rng, name):
        with pytest.raises(MalformedOrder, match=name):
            fragmenter.fragment(replace(order, **{name: CoExp(-100, 0)}), 4, 4, rng)

    def test_negative_exponent_allowed(self, order, rng):
        frags = fragmenter.fragment(replace(order, price=CoExp(15, -3)), 4, 4, rng)
        assert fragmenter.reconstruct_field(frags, "price_exp", 4) == -3
