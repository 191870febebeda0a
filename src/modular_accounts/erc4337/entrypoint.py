"""EntryPoint bindings for ERC-4337."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from eth_abi import decode, encode
from web3 import Web3

from ..config import get_config
from ..exceptions import EncodingError

ENTRYPOINT_V07_ADDRESS = "0x0000000071727De22E5E9d8BAf0edAc6f37da032"
ENTRYPOINT_V08_ADDRESS = "0x4337084D9E255Ff0702461CF8895CE9E3b5Ff108"

# EntryPoint.getNonce(address sender, uint192 key)
GET_NONCE_SELECTOR = Web3.keccak(text="getNonce(address,uint192)")[:4]
NONCE_KEY_MAX = 2**192 - 1

# EIP-712 fields hashed for v0.8 (signature is excluded)
PACKED_USER_OPERATION_TYPES = [
    {"name": "sender", "type": "address"},
    {"name": "nonce", "type": "uint256"},
    {"name": "initCode", "type": "bytes"},
    {"name": "callData", "type": "bytes"},
    {"name": "accountGasLimits", "type": "bytes32"},
    {"name": "preVerificationGas", "type": "uint256"},
    {"name": "gasFees", "type": "bytes32"},
    {"name": "paymasterAndData", "type": "bytes"},
]


@dataclass(frozen=True)
class EntryPoint:
    address: str
    version: str


ENTRYPOINT_V07 = EntryPoint(address=ENTRYPOINT_V07_ADDRESS, version="0.7")
ENTRYPOINT_V08 = EntryPoint(address=ENTRYPOINT_V08_ADDRESS, version="0.8")

ENTRYPOINTS_BY_VERSION: Dict[str, EntryPoint] = {
    "0.7": ENTRYPOINT_V07,
    "0.8": ENTRYPOINT_V08,
}


def get_entrypoint(version: Optional[str] = None) -> EntryPoint:
    """Return the entry point for a version (default: from config)."""
    version = version or get_config().entry_point_version
    if version not in ENTRYPOINTS_BY_VERSION:
        raise ValueError(
            f"Unknown entry point version: {version}. "
            f"Valid options: {', '.join(ENTRYPOINTS_BY_VERSION)}"
        )
    return ENTRYPOINTS_BY_VERSION[version]


def encode_get_nonce(sender: str, key: int = 0) -> bytes:
    """Encode EntryPoint.getNonce() calldata for eth_call."""
    if not 0 <= key <= NONCE_KEY_MAX:
        raise EncodingError("Nonce key must fit in uint192", key)
    return GET_NONCE_SELECTOR + encode(
        ["address", "uint192"],
        [Web3.to_checksum_address(sender), key],
    )


def decode_get_nonce(data: bytes) -> int:
    (nonce,) = decode(["uint256"], data)
    return nonce
