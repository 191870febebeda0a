"""P256 (secp256r1) signer.

Signatures are deterministic (RFC 6979), low-S normalised and serialised as
``r(32) ‖ s(32) ‖ v`` with ``v`` = 0x1b / 0x1c from the recovery bit, the
layout P256 verifiers on OpenZeppelin accounts expect. Commonly used with
WebAuthn/FIDO2 keys and secure enclaves.
"""
from __future__ import annotations

import hashlib
import logging
from typing import Union

from cryptography.hazmat.primitives.asymmetric import ec
from ecdsa import NIST256p, SigningKey, VerifyingKey
from ecdsa.util import sigdecode_string, sigencode_strings_canonize

from ..exceptions import EncodingError
from ..utils import as_bytes
from .base import SECP_STUB_SIGNATURE, AccountSigner

logger = logging.getLogger(__name__)

P256_STUB_SIGNATURE = SECP_STUB_SIGNATURE

P256PrivateKey = Union[int, bytes, str, ec.EllipticCurvePrivateKey]


def _secret_exponent(private_key: P256PrivateKey) -> int:
    if isinstance(private_key, ec.EllipticCurvePrivateKey):
        if private_key.curve.name != ec.SECP256R1.name:
            raise EncodingError(
                f"Expected a secp256r1 key, got {private_key.curve.name}", private_key.curve.name
            )
        return private_key.private_numbers().private_value
    if isinstance(private_key, int) and not isinstance(private_key, bool):
        secret = private_key
    else:
        raw = as_bytes(private_key, "private_key")
        if len(raw) != 32:
            raise EncodingError(f"P256 private key must be 32 bytes, got {len(raw)}")
        secret = int.from_bytes(raw, "big")
    if not 1 <= secret < NIST256p.order:
        raise EncodingError("P256 private key out of range")
    return secret


class P256Signer(AccountSigner):
    """Signs account digests with a secp256r1 private key."""

    def __init__(self, private_key: P256PrivateKey):
        self._signing_key = SigningKey.from_secret_exponent(
            _secret_exponent(private_key), curve=NIST256p, hashfunc=hashlib.sha256
        )
        self._public_key = self._signing_key.get_verifying_key().to_string("uncompressed")
        logger.info("P256Signer initialized (public_key=0x%s...)", self._public_key.hex()[:18])

    @property
    def public_key(self) -> bytes:
        """Uncompressed public key (0x04 ‖ x ‖ y), 65 bytes."""
        return self._public_key

    @property
    def stub_signature(self) -> bytes:
        return P256_STUB_SIGNATURE

    def _recovery_bit(self, signature: bytes, digest: bytes) -> int:
        # Candidates come back ordered by the parity of R.y: even first
        candidates = VerifyingKey.from_public_key_recovery_with_digest(
            signature, digest, NIST256p, hashfunc=hashlib.sha256, sigdecode=sigdecode_string
        )
        for index, candidate in enumerate(candidates):
            if candidate.to_string("uncompressed") == self._public_key:
                return index
        raise RuntimeError("P256 signature does not recover to the signing key")

    def _sign(self, digest: bytes) -> bytes:
        r, s = self._signing_key.sign_digest_deterministic(
            digest, hashfunc=hashlib.sha256, sigencode=sigencode_strings_canonize
        )
        recovery = self._recovery_bit(r + s, digest)
        return r + s + (b"\x1c" if recovery else b"\x1b")
