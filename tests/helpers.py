"""Test helpers: pods with real member keypairs, sample orders, fragment decryption."""

from nacl.public import PrivateKey, SealedBox

from podshare.crypto.shamir import FieldShare
from podshare.execution.pod_mapper import Pod, PodMember
from podshare.orders.fragment import SHARED_FIELDS, EncryptedFragment
from podshare.orders.order import Order, Parity, Token, token_pair


def make_pod(n: int, tag: str = "node", position: int = 0):
    """Pod of n members plus the members' private keys, in member order."""
    keys = [PrivateKey.generate() for _ in range(n)]
    members = tuple(
        PodMember(node_id=f"{tag}-{i}", public_key=bytes(k.public_key), address=f"10.0.0.{i}:18514")
        for i, k in enumerate(keys)
    )
    return Pod(members=members, position=position), keys


def open_fragment(fragment: EncryptedFragment, key: PrivateKey) -> dict:
    """Decrypt every share of a fragment as its recipient would."""
    box = SealedBox(key)
    return {
        name: FieldShare.from_bytes(fragment.index, box.decrypt(fragment.ciphertexts[name]))
        for name in SHARED_FIELDS
    }


def make_order(volume: str = "100", parity: Parity = Parity.BUY, nonce: int = 42) -> Order:
    return Order.new(
        parity=parity,
        tokens=token_pair(Token.ETH, Token.REN),
        price="1.5",
        volume=volume,
        minimum_volume="10",
        expiry=1_700_000_000,
        nonce=nonce,
    )
