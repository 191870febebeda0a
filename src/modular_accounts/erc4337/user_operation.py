"""UserOperation primitives for ERC-4337 (EntryPoint v0.7 / v0.8)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from eth_abi import encode
from web3 import Web3

from ..exceptions import EncodingError, MissingFieldError
from ..utils import address_bytes, as_address, as_bytes, to_hex
from .entrypoint import PACKED_USER_OPERATION_TYPES, EntryPoint

_EIP712_DOMAIN_TYPEHASH = Web3.keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
_PACKED_USER_OPERATION_TYPEHASH = Web3.keccak(
    text="PackedUserOperation("
    + ",".join(f"{f['type']} {f['name']}" for f in PACKED_USER_OPERATION_TYPES)
    + ")"
)

# EIP-712 domain used by EntryPoint v0.8
USER_OPERATION_DOMAIN_NAME = "ERC4337"
USER_OPERATION_DOMAIN_VERSION = "1"


def _to_hex_int(value: int) -> str:
    return hex(max(0, int(value)))


def _uint128(value: int, name: str) -> bytes:
    if not 0 <= value < 2**128:
        raise EncodingError(f"{name} must fit in uint128", value)
    return value.to_bytes(16, "big")


@dataclass
class PackedUserOperation:
    """On-chain PackedUserOperation layout."""
    sender: str
    nonce: int
    init_code: bytes
    call_data: bytes
    account_gas_limits: bytes
    pre_verification_gas: int
    gas_fees: bytes
    paymaster_and_data: bytes
    signature: bytes

    def to_tuple(self) -> tuple:
        return (
            self.sender,
            self.nonce,
            self.init_code,
            self.call_data,
            self.account_gas_limits,
            self.pre_verification_gas,
            self.gas_fees,
            self.paymaster_and_data,
            self.signature,
        )


@dataclass
class UserOperation:
    """Unpacked ERC-4337 user operation as exchanged with bundlers.

    ``sender`` may be left empty; the smart account fills it with its own
    address before hashing.
    """
    sender: Optional[str] = None
    nonce: int = 0
    factory: Optional[str] = None
    factory_data: bytes = b""
    call_data: bytes = b""
    call_gas_limit: int = 0
    verification_gas_limit: int = 0
    pre_verification_gas: int = 0
    max_fee_per_gas: int = 0
    max_priority_fee_per_gas: int = 0
    paymaster: Optional[str] = None
    paymaster_verification_gas_limit: int = 0
    paymaster_post_op_gas_limit: int = 0
    paymaster_data: bytes = b""
    signature: bytes = b""

    def __post_init__(self) -> None:
        if self.sender is not None:
            self.sender = as_address(self.sender)
        if self.factory is not None:
            self.factory = as_address(self.factory)
        if self.paymaster is not None:
            self.paymaster = as_address(self.paymaster)
        self.factory_data = as_bytes(self.factory_data, "factory_data")
        self.call_data = as_bytes(self.call_data, "call_data")
        self.paymaster_data = as_bytes(self.paymaster_data, "paymaster_data")
        self.signature = as_bytes(self.signature, "signature")

    @property
    def init_code(self) -> bytes:
        if self.factory is None:
            return b""
        return address_bytes(self.factory) + self.factory_data

    @property
    def account_gas_limits(self) -> bytes:
        return (
            _uint128(self.verification_gas_limit, "verification_gas_limit")
            + _uint128(self.call_gas_limit, "call_gas_limit")
        )

    @property
    def gas_fees(self) -> bytes:
        return (
            _uint128(self.max_priority_fee_per_gas, "max_priority_fee_per_gas")
            + _uint128(self.max_fee_per_gas, "max_fee_per_gas")
        )

    @property
    def paymaster_and_data(self) -> bytes:
        if self.paymaster is None:
            return b""
        return (
            address_bytes(self.paymaster)
            + _uint128(self.paymaster_verification_gas_limit, "paymaster_verification_gas_limit")
            + _uint128(self.paymaster_post_op_gas_limit, "paymaster_post_op_gas_limit")
            + self.paymaster_data
        )

    def pack(self) -> PackedUserOperation:
        if self.sender is None:
            raise MissingFieldError("sender")
        return PackedUserOperation(
            sender=self.sender,
            nonce=self.nonce,
            init_code=self.init_code,
            call_data=self.call_data,
            account_gas_limits=self.account_gas_limits,
            pre_verification_gas=self.pre_verification_gas,
            gas_fees=self.gas_fees,
            paymaster_and_data=self.paymaster_and_data,
            signature=self.signature,
        )

    def to_rpc(self) -> dict[str, Any]:
        rpc: dict[str, Any] = {
            "sender": self.sender,
            "nonce": _to_hex_int(self.nonce),
            "callData": to_hex(self.call_data),
            "callGasLimit": _to_hex_int(self.call_gas_limit),
            "verificationGasLimit": _to_hex_int(self.verification_gas_limit),
            "preVerificationGas": _to_hex_int(self.pre_verification_gas),
            "maxFeePerGas": _to_hex_int(self.max_fee_per_gas),
            "maxPriorityFeePerGas": _to_hex_int(self.max_priority_fee_per_gas),
            "signature": to_hex(self.signature),
        }
        if self.factory is not None:
            rpc["factory"] = self.factory
            rpc["factoryData"] = to_hex(self.factory_data)
        if self.paymaster is not None:
            rpc["paymaster"] = self.paymaster
            rpc["paymasterVerificationGasLimit"] = _to_hex_int(self.paymaster_verification_gas_limit)
            rpc["paymasterPostOpGasLimit"] = _to_hex_int(self.paymaster_post_op_gas_limit)
            rpc["paymasterData"] = to_hex(self.paymaster_data)
        return rpc


def _packed_fields(packed: PackedUserOperation) -> tuple[list[str], list[Any]]:
    """ABI types/values of the hashed fields, dynamic bytes replaced by their hash."""
    return (
        ["address", "uint256", "bytes32", "bytes32", "bytes32", "uint256", "bytes32", "bytes32"],
        [
            packed.sender,
            packed.nonce,
            Web3.keccak(packed.init_code),
            Web3.keccak(packed.call_data),
            packed.account_gas_limits,
            packed.pre_verification_gas,
            packed.gas_fees,
            Web3.keccak(packed.paymaster_and_data),
        ],
    )


def _hash_v07(packed: PackedUserOperation, entry_point: str, chain_id: int) -> bytes:
    types, values = _packed_fields(packed)
    inner = Web3.keccak(encode(types, values))
    return Web3.keccak(
        encode(["bytes32", "address", "uint256"], [inner, entry_point, chain_id])
    )


def _hash_v08(packed: PackedUserOperation, entry_point: str, chain_id: int) -> bytes:
    # Domain separator
    domain_separator = Web3.keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                _EIP712_DOMAIN_TYPEHASH,
                Web3.keccak(text=USER_OPERATION_DOMAIN_NAME),
                Web3.keccak(text=USER_OPERATION_DOMAIN_VERSION),
                chain_id,
                entry_point,
            ],
        )
    )

    types, values = _packed_fields(packed)
    struct_hash = Web3.keccak(
        encode(["bytes32", *types], [_PACKED_USER_OPERATION_TYPEHASH, *values])
    )

    # EIP-712 final hash
    return Web3.keccak(b"\x19\x01" + domain_separator + struct_hash)


def get_user_operation_hash(
    user_operation: UserOperation,
    entry_point: EntryPoint,
    chain_id: Optional[int],
) -> bytes:
    """Compute the hash the EntryPoint hands to ``validateUserOp``.

    Raises:
        MissingFieldError: If ``chain_id`` or ``sender`` is missing.
    """
    if chain_id is None:
        raise MissingFieldError("chain_id")
    packed = user_operation.pack()
    address = as_address(entry_point.address)

    if entry_point.version == "0.8":
        return _hash_v08(packed, address, chain_id)
    if entry_point.version == "0.7":
        return _hash_v07(packed, address, chain_id)
    raise ValueError(f"Unsupported entry point version: {entry_point.version}")
