"""RSA signer (PKCS#1 v1.5 over SHA-256 DigestInfo).

Useful for accounts that integrate with traditional PKI systems and X.509
certificates.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..exceptions import EncodingError
from .base import AccountSigner

logger = logging.getLogger(__name__)

# DigestInfo header for SHA-256:
# SEQUENCE { SEQUENCE { OID 2.16.840.1.101.3.4.2.1, NULL }, OCTET STRING (32) }
DIGEST_INFO_SHA256_PREFIX = bytes.fromhex("3031300d060960864801650304020105000420")

RSAPrivateKeyLike = Union[rsa.RSAPrivateKey, bytes, str]


def rsa_stub_signature(key_size: int) -> bytes:
    """All-0xff placeholder as long as a signature for ``key_size`` bits."""
    return b"\xff" * ((key_size + 7) // 8)


RSA_2048_BITS_STUB_SIGNATURE = rsa_stub_signature(2048)


def _load_private_key(private_key: RSAPrivateKeyLike, password: Optional[bytes]) -> rsa.RSAPrivateKey:
    if isinstance(private_key, rsa.RSAPrivateKey):
        return private_key
    if not isinstance(private_key, (bytes, bytearray, str)):
        raise EncodingError(
            f"RSA private key must be an RSAPrivateKey, PEM or DER, got {type(private_key).__name__}"
        )
    data = private_key.encode() if isinstance(private_key, str) else bytes(private_key)
    if data.lstrip().startswith(b"-----BEGIN"):
        key = serialization.load_pem_private_key(data, password=password)
    else:
        key = serialization.load_der_private_key(data, password=password)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise EncodingError(f"Expected an RSA private key, got {type(key).__name__}")
    return key


def digest_info(digest: bytes) -> bytes:
    """DigestInfo structure that gets padded and exponentiated."""
    return DIGEST_INFO_SHA256_PREFIX + digest


class RsaSigner(AccountSigner):
    """Signs account digests with an RSA private key.

    The signature is the PKCS#1 v1.5 (EMSA-PKCS1-v1_5) encoding of
    ``digest_info(digest)`` raised to the private exponent, i.e. exactly
    ``key_size / 8`` bytes.
    """

    def __init__(self, private_key: RSAPrivateKeyLike, password: Optional[bytes] = None):
        self._private_key = _load_private_key(private_key, password)
        self._public_key = self._private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        logger.info("RsaSigner initialized (key_size=%d)", self.key_size)

    @property
    def key_size(self) -> int:
        return self._private_key.key_size

    @property
    def public_key(self) -> bytes:
        """SubjectPublicKeyInfo PEM."""
        return self._public_key

    @property
    def stub_signature(self) -> bytes:
        return rsa_stub_signature(self.key_size)

    def _sign(self, digest: bytes) -> bytes:
        # Prehashed SHA-256 makes cryptography prepend DIGEST_INFO_SHA256_PREFIX
        return self._private_key.sign(digest, padding.PKCS1v15(), Prehashed(hashes.SHA256()))
