"""Signer capability shared by the ECDSA, P256 and RSA providers.

Every provider signs a 32-byte digest its own way; message and typed-data
signing hash first (EIP-191 / EIP-712) and then sign the digest. These
signers back smart accounts only, so native transaction and EIP-7702
authorization signing are refused.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Union

from eth_account.messages import SignableMessage, encode_defunct, encode_typed_data
from eth_utils import keccak

from ..exceptions import EncodingError, UnsupportedOperationError
from ..utils import ZERO_ADDRESS, as_bytes, fixed_bytes

# Text, raw bytes, or {"raw": bytes | hex}
Message = Union[str, bytes, Mapping[str, Any]]

# 65 bytes shaped like a maximal valid (r, s, v) signature, for gas estimation
SECP_STUB_SIGNATURE = bytes.fromhex(
    "fffffffffffffffffffffffffffffff000000000000000000000000000000000"
    "7aaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaaa"
    "1c"
)


def to_signable_message(message: Message) -> SignableMessage:
    if isinstance(message, str):
        return encode_defunct(text=message)
    if isinstance(message, (bytes, bytearray)):
        return encode_defunct(primitive=bytes(message))
    if isinstance(message, Mapping) and "raw" in message:
        return encode_defunct(primitive=as_bytes(message["raw"], "raw"))
    raise EncodingError(f"Unsupported message type: {type(message).__name__}", message)


def hash_signable(signable: SignableMessage) -> bytes:
    """EIP-191 hash: keccak256(0x19 ‖ version ‖ header ‖ body)."""
    return keccak(b"\x19" + signable.version + signable.header + signable.body)


def hash_message(message: Message) -> bytes:
    """Personal-message hash ("\\x19Ethereum Signed Message:\\n" + len + message)."""
    return hash_signable(to_signable_message(message))


def hash_typed_data(typed_data: Mapping[str, Any]) -> bytes:
    """EIP-712 hash of a ``{"types", "primaryType", "domain", "message"}`` document."""
    return hash_signable(encode_typed_data(full_message=dict(typed_data)))


class AccountSigner(ABC):
    """Signature scheme provider for a smart account.

    Implementations own their key material for their whole lifetime and
    never hand it out.
    """

    @property
    @abstractmethod
    def public_key(self) -> bytes:
        """Public key material the account uses to identify this signer."""

    @property
    def address(self) -> str:
        # Non-native schemes have no EOA address; the account resolves its own
        return ZERO_ADDRESS

    @property
    @abstractmethod
    def stub_signature(self) -> bytes:
        """Placeholder signature with the size of a real one."""

    @abstractmethod
    def _sign(self, digest: bytes) -> bytes:
        ...

    def sign_digest(self, digest: bytes) -> bytes:
        return self._sign(fixed_bytes(digest, 32, "digest"))

    def sign_message(self, message: Message) -> bytes:
        return self.sign_digest(hash_message(message))

    def sign_typed_data(self, typed_data: Mapping[str, Any]) -> bytes:
        return self.sign_digest(hash_typed_data(typed_data))

    def sign_transaction(self, *args: Any, **kwargs: Any) -> bytes:
        raise UnsupportedOperationError(
            "sign_transaction", "Native transactions unsupported in non-native accounts"
        )

    def sign_authorization(self, *args: Any, **kwargs: Any) -> bytes:
        raise UnsupportedOperationError(
            "sign_authorization", "Authorizations unsupported in non-native accounts"
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(public_key=0x{self.public_key.hex()[:16]}...)"
