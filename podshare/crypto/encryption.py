"""
Fragment Encryptor

Seals every share of an OrderFragment for a single recipient using
libsodium sealed boxes (X25519 + XSalsa20-Poly1305). Only the holder of
the matching private key can open them; decryption happens on the node.
"""

import logging
from typing import Union

from nacl.exceptions import CryptoError
from nacl.public import PublicKey, SealedBox

from podshare.core.errors import EncryptionFailed
from podshare.orders.fragment import SHARED_FIELDS, EncryptedFragment, OrderFragment


logger = logging.getLogger(__name__)

PUBLIC_KEY_SIZE = PublicKey.SIZE


def load_public_key(key: Union[bytes, PublicKey]) -> PublicKey:
    """Validate and wrap a raw recipient key."""
    if isinstance(key, PublicKey):
        return key
    if not isinstance(key, (bytes, bytearray)):
        raise EncryptionFailed(f"public key must be bytes, got {type(key).__name__}")
    if len(key) != PUBLIC_KEY_SIZE:
        raise EncryptionFailed(f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(key)}")
    try:
        return PublicKey(bytes(key))
    except (CryptoError, TypeError, ValueError) as e:
        raise EncryptionFailed(f"malformed public key: {e}") from e


def encrypt(fragment: OrderFragment, recipient_public_key: Union[bytes, PublicKey]) -> EncryptedFragment:
    """
    Encrypt a fragment for one recipient.

    Args:
        fragment: Plaintext fragment
        recipient_public_key: 32-byte X25519 public key of the pod member

    Returns:
        EncryptedFragment with one ciphertext per shared field
    """
    box = SealedBox(load_public_key(recipient_public_key))
    ciphertexts = {}
    try:
        for name in SHARED_FIELDS:
            ciphertexts[name] = box.encrypt(fragment.shares[name].to_bytes())
    except KeyError as e:
        raise EncryptionFailed(f"fragment {fragment.index} has no share for {e}") from e
    except CryptoError as e:
        raise EncryptionFailed(f"sealing fragment {fragment.index} failed: {e}") from e

    logger.debug("Sealed fragment %d of order %s", fragment.index, fragment.order_id.hex()[:16])
    return EncryptedFragment(
        index=fragment.index,
        id=fragment.id,
        order_id=fragment.order_id,
        parity=fragment.parity,
        order_type=fragment.order_type,
        settlement=fragment.settlement,
        expiry=fragment.expiry,
        ciphertexts=ciphertexts,
    )
