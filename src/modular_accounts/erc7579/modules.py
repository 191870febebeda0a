"""ERC-7579 module management calldata and account configuration reads.

The module type constants are exposed for interoperability; nothing here
enforces that an account actually supports a given type.
"""

from __future__ import annotations

from eth_abi import decode, encode

from ..rpc_client import ChainClient, read_contract
from ..utils import BytesLike, as_address, as_bytes, fixed_bytes, to_hex
from .abi import (
    ACCOUNT_ID_SELECTOR,
    INSTALL_MODULE_SELECTOR,
    IS_MODULE_INSTALLED_SELECTOR,
    MODULE_CONFIG_ARG_TYPES,
    SUPPORTS_EXECUTION_MODE_SELECTOR,
    SUPPORTS_MODULE_SELECTOR,
    UNINSTALL_MODULE_SELECTOR,
)


def _module_config_args(module_type_id: int, module: BytesLike, data: BytesLike) -> bytes:
    return encode(
        MODULE_CONFIG_ARG_TYPES,
        [module_type_id, as_address(module), as_bytes(data)],
    )


def encode_install_module(module_type_id: int, module: BytesLike, init_data: BytesLike = b"") -> str:
    """Encode ``installModule(uint256,address,bytes)`` calldata.

    The result is meant to be sent as a call to the account itself
    (``Call(to=account, data=...)``) so it goes through ``execute``.
    """
    return to_hex(INSTALL_MODULE_SELECTOR + _module_config_args(module_type_id, module, init_data))


def encode_uninstall_module(module_type_id: int, module: BytesLike, de_init_data: BytesLike = b"") -> str:
    """Encode ``uninstallModule(uint256,address,bytes)`` calldata."""
    return to_hex(UNINSTALL_MODULE_SELECTOR + _module_config_args(module_type_id, module, de_init_data))


async def account_id(client: ChainClient, account: str) -> str:
    """Read ``accountId()``, e.g. ``"vendorname.accountname.semver"``."""
    result = await read_contract(client, as_address(account), ACCOUNT_ID_SELECTOR)
    (value,) = decode(["string"], result)
    return value


async def supports_execution_mode(client: ChainClient, account: str, mode: BytesLike) -> bool:
    calldata = SUPPORTS_EXECUTION_MODE_SELECTOR + encode(["bytes32"], [fixed_bytes(mode, 32, "mode")])
    result = await read_contract(client, as_address(account), calldata)
    (value,) = decode(["bool"], result)
    return value


async def supports_module(client: ChainClient, account: str, module_type_id: int) -> bool:
    calldata = SUPPORTS_MODULE_SELECTOR + encode(["uint256"], [module_type_id])
    result = await read_contract(client, as_address(account), calldata)
    (value,) = decode(["bool"], result)
    return value


async def is_module_installed(
    client: ChainClient,
    account: str,
    module_type_id: int,
    module: BytesLike,
    additional_context: BytesLike = b"",
) -> bool:
    calldata = IS_MODULE_INSTALLED_SELECTOR + _module_config_args(
        module_type_id, module, additional_context
    )
    result = await read_contract(client, as_address(account), calldata)
    (value,) = decode(["bool"], result)
    return value
