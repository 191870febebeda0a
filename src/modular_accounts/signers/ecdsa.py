"""ECDSA (secp256k1) signer backed by ``eth_account``."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_keys import keys

from .base import SECP_STUB_SIGNATURE, AccountSigner, Message, to_signable_message

logger = logging.getLogger(__name__)

ECDSA_STUB_SIGNATURE = SECP_STUB_SIGNATURE


class EcdsaSigner(AccountSigner):
    """Delegates all signing to an Ethereum ``LocalAccount``."""

    def __init__(self, private_key: Union[LocalAccount, bytes, str]):
        if isinstance(private_key, LocalAccount):
            self._account = private_key
        else:
            self._account = Account.from_key(private_key)
        self._public_key = b"\x04" + keys.PrivateKey(self._account.key).public_key.to_bytes()
        logger.info("EcdsaSigner initialized (address=%s)", self._account.address)

    @property
    def address(self) -> str:
        return self._account.address

    @property
    def public_key(self) -> bytes:
        """Uncompressed secp256k1 public key (0x04 ‖ x ‖ y)."""
        return self._public_key

    @property
    def stub_signature(self) -> bytes:
        return ECDSA_STUB_SIGNATURE

    def _sign(self, digest: bytes) -> bytes:
        return bytes(self._account.unsafe_sign_hash(digest).signature)

    def sign_message(self, message: Message) -> bytes:
        return bytes(self._account.sign_message(to_signable_message(message)).signature)

    def sign_typed_data(self, typed_data: Mapping[str, Any]) -> bytes:
        return bytes(self._account.sign_typed_data(full_message=dict(typed_data)).signature)
