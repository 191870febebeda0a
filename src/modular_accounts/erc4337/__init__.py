"""ERC-4337 helpers: entry point bindings and user operations."""

from .entrypoint import (
    ENTRYPOINT_V07,
    ENTRYPOINT_V07_ADDRESS,
    ENTRYPOINT_V08,
    ENTRYPOINT_V08_ADDRESS,
    ENTRYPOINTS_BY_VERSION,
    PACKED_USER_OPERATION_TYPES,
    EntryPoint,
    decode_get_nonce,
    encode_get_nonce,
    get_entrypoint,
)
from .user_operation import PackedUserOperation, UserOperation, get_user_operation_hash

__all__ = [
    "ENTRYPOINT_V07",
    "ENTRYPOINT_V07_ADDRESS",
    "ENTRYPOINT_V08",
    "ENTRYPOINT_V08_ADDRESS",
    "ENTRYPOINTS_BY_VERSION",
    "PACKED_USER_OPERATION_TYPES",
    "EntryPoint",
    "decode_get_nonce",
    "encode_get_nonce",
    "get_entrypoint",
    "PackedUserOperation",
    "UserOperation",
    "get_user_operation_hash",
]
