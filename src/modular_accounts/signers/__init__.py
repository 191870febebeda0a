"""Signature scheme providers for smart accounts."""

from .base import (
    SECP_STUB_SIGNATURE,
    AccountSigner,
    Message,
    hash_message,
    hash_typed_data,
)
from .ecdsa import ECDSA_STUB_SIGNATURE, EcdsaSigner
from .p256 import P256_STUB_SIGNATURE, P256Signer
from .rsa import (
    DIGEST_INFO_SHA256_PREFIX,
    RSA_2048_BITS_STUB_SIGNATURE,
    RsaSigner,
    digest_info,
    rsa_stub_signature,
)

__all__ = [
    "SECP_STUB_SIGNATURE",
    "AccountSigner",
    "Message",
    "hash_message",
    "hash_typed_data",
    "ECDSA_STUB_SIGNATURE",
    "EcdsaSigner",
    "P256_STUB_SIGNATURE",
    "P256Signer",
    "DIGEST_INFO_SHA256_PREFIX",
    "RSA_2048_BITS_STUB_SIGNATURE",
    "RsaSigner",
    "digest_info",
    "rsa_stub_signature",
]
