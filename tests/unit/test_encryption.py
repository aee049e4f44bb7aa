"""
Tests for the fragment encryptor.
"""

import pytest
from nacl.exceptions import CryptoError
from nacl.public import PrivateKey

from podshare.core.errors import EncryptionFailed
from podshare.crypto import encryption
from podshare.execution import fragmenter
from podshare.orders.fragment import SHARED_FIELDS
from tests.helpers import open_fragment


@pytest.fixture
def fragment(order, rng):
    return fragmenter.fragment(order, 4, 4, rng)[0]


@pytest.fixture
def recipient():
    return PrivateKey.generate()


class TestEncrypt:
    def test_recipient_recovers_shares(self, fragment, recipient):
        sealed = encryption.encrypt(fragment, bytes(recipient.public_key))
        assert open_fragment(sealed, recipient) == fragment.shares

    def test_cleartext_routing_fields_kept(self, fragment, recipient):
        sealed = encryption.encrypt(fragment, bytes(recipient.public_key))
        assert sealed.index == fragment.index
        assert sealed.id == fragment.id
        assert sealed.order_id == fragment.order_id
        assert sealed.parity == fragment.parity
        assert sealed.expiry == fragment.expiry

    def test_ciphertext_is_opaque(self, fragment, recipient):
        sealed = encryption.encrypt(fragment, bytes(recipient.public_key))
        for name in SHARED_FIELDS:
            plain = fragment.shares[name].to_bytes()
            ct = sealed.ciphertexts[name]
            assert ct != plain
            assert plain not in ct
            # Ephemeral public key + Poly1305 tag
            assert len(ct) == len(plain) + 48

    def test_encryption_is_randomized(self, fragment, recipient):
        a = encryption.encrypt(fragment, bytes(recipient.public_key))
        b = encryption.encrypt(fragment, bytes(recipient.public_key))
        assert a.ciphertexts["volume_co"] != b.ciphertexts["volume_co"]

    def test_other_key_cannot_decrypt(self, fragment, recipient):
        sealed = encryption.encrypt(fragment, bytes(recipient.public_key))
        with pytest.raises(CryptoError):
            open_fragment(sealed, PrivateKey.generate())

    def test_accepts_public_key_object(self, fragment, recipient):
        sealed = encryption.encrypt(fragment, recipient.public_key)
        assert open_fragment(sealed, recipient) == fragment.shares


class TestMalformedKey:
    @pytest.mark.parametrize("key", [b"", b"short", b"\x01" * 33, "not-bytes", None, 12345])
    def test_raises_encryption_failed(self, fragment, key):
        with pytest.raises(EncryptionFailed):
            encryption.encrypt(fragment, key)
