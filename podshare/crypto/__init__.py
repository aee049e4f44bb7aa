"""Cryptographic primitives: secret sharing, sealed-box encryption, order signing."""
