"""
modular-accounts: ERC-4337 smart accounts executing through ERC-7579.

Encodes calls into ``execute`` calldata, computes EntryPoint v0.7 / v0.8
user operation hashes and signs them with ECDSA, P256 or RSA keys.
"""

from .account import (
    OVERRIDABLE_METHODS,
    FactoryArgs,
    SmartAccount,
    to_ecdsa_account,
    to_p256_account,
    to_rsa_account,
    to_smart_account,
)
from .config import AccountsConfig, LoggingConfig, get_config, set_config
from .erc4337 import (
    ENTRYPOINT_V07,
    ENTRYPOINT_V08,
    EntryPoint,
    PackedUserOperation,
    UserOperation,
    get_entrypoint,
    get_user_operation_hash,
)
from .erc7579 import Call, decode_calls, encode_calls
from .exceptions import (
    AccountError,
    EncodingError,
    MissingFieldError,
    UnrecognizedCallTypeError,
    UnsupportedOperationError,
)
from .logging_utils import setup_logging
from .rpc_client import ChainClient, JsonRpcClient, RPCError
from .signers import AccountSigner, EcdsaSigner, P256Signer, RsaSigner

__version__ = "0.1.0"

__all__ = [
    # Accounts
    "OVERRIDABLE_METHODS",
    "FactoryArgs",
    "SmartAccount",
    "to_ecdsa_account",
    "to_p256_account",
    "to_rsa_account",
    "to_smart_account",
    # Config
    "AccountsConfig",
    "LoggingConfig",
    "get_config",
    "set_config",
    "setup_logging",
    # ERC-4337
    "ENTRYPOINT_V07",
    "ENTRYPOINT_V08",
    "EntryPoint",
    "PackedUserOperation",
    "UserOperation",
    "get_entrypoint",
    "get_user_operation_hash",
    # ERC-7579
    "Call",
    "decode_calls",
    "encode_calls",
    # Errors
    "AccountError",
    "EncodingError",
    "MissingFieldError",
    "UnrecognizedCallTypeError",
    "UnsupportedOperationError",
    # Network
    "ChainClient",
    "JsonRpcClient",
    "RPCError",
    # Signers
    "AccountSigner",
    "EcdsaSigner",
    "P256Signer",
    "RsaSigner",
]
