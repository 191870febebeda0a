"""
Smart account composer for ERC-4337 / ERC-7579 accounts.

Binds a network client, a signer and the caller's resolvers into one object
with the shape bundler integrations expect:

    account = to_p256_account(
        client=JsonRpcClient("https://sepolia.base.org"),
        signer=P256Signer(private_key),
        get_address=resolve_address,
        get_factory_args=resolve_factory_args,
    )
    call_data = account.encode_calls([Call(to=token, data=transfer_data)])
    op = UserOperation(nonce=await account.get_nonce(), call_data=call_data, ...)
    op.signature = await account.sign_user_operation(op, chain_id=84532)

Flow:
1. Calls are packed into ``execute(mode, executionCalldata)``
2. The nonce is read from the EntryPoint with ``eth_call``
3. The user operation hash is computed for the EntryPoint version
4. The hash is signed as a personal message by the signer
"""
from __future__ import annotations

import logging
import types
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .erc4337.entrypoint import EntryPoint, decode_get_nonce, encode_get_nonce, get_entrypoint
from .erc4337.user_operation import UserOperation, get_user_operation_hash
from .erc7579.calls import Call, decode_calls, encode_calls
from .logging_utils import mask_address
from .rpc_client import ChainClient, read_contract
from .signers.base import AccountSigner, Message
from .signers.ecdsa import EcdsaSigner
from .signers.p256 import P256Signer
from .signers.rsa import RsaSigner
from .utils import BytesLike, as_address, as_bytes, to_hex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FactoryArgs:
    """Factory address and init data for the account's first user operation."""
    factory: Optional[str] = None
    factory_data: bytes = b""

    def __post_init__(self) -> None:
        if self.factory is not None:
            object.__setattr__(self, "factory", as_address(self.factory))
        object.__setattr__(self, "factory_data", as_bytes(self.factory_data or b"", "factory_data"))

    @classmethod
    def coerce(cls, value: Union["FactoryArgs", Mapping[str, Any], tuple, None]) -> "FactoryArgs":
        if value is None:
            return cls()
        if isinstance(value, FactoryArgs):
            return value
        if isinstance(value, Mapping):
            # factoryData: camelCase alias
            factory_data = value.get("factory_data", value.get("factoryData"))
            return cls(factory=value.get("factory"), factory_data=factory_data or b"")
        factory, factory_data = value
        return cls(factory=factory, factory_data=factory_data or b"")


AddressResolver = Callable[[], Awaitable[str]]
FactoryArgsResolver = Callable[[], Awaitable[Union[FactoryArgs, Mapping[str, Any], tuple, None]]]
StubSignatureResolver = Callable[[Optional[UserOperation]], Awaitable[BytesLike]]

OVERRIDABLE_METHODS = frozenset({
    "get_address",
    "get_factory_args",
    "get_stub_signature",
    "get_nonce",
    "encode_calls",
    "decode_calls",
    "sign_message",
    "sign_typed_data",
    "sign_user_operation",
})


class SmartAccount:
    """
    An ERC-4337 smart account that executes through ERC-7579 ``execute``.

    Holds no mutable state of its own: addresses and nonces are resolved on
    every call, and all errors from resolvers or the client propagate as raised.

    Any method listed in ``OVERRIDABLE_METHODS`` can be replaced through
    keyword overrides; the replacement receives the account as first argument.
    """

    def __init__(
        self,
        client: ChainClient,
        signer: AccountSigner,
        get_address: AddressResolver,
        get_factory_args: FactoryArgsResolver,
        get_stub_signature: Optional[StubSignatureResolver] = None,
        entry_point: Optional[EntryPoint] = None,
        **overrides: Callable[..., Any],
    ):
        self.client = client
        self.signer = signer
        self.entry_point = entry_point or get_entrypoint()
        self._resolve_address = get_address
        self._resolve_factory_args = get_factory_args
        self._resolve_stub_signature = get_stub_signature

        unknown = set(overrides) - OVERRIDABLE_METHODS
        if unknown:
            raise TypeError(f"Unknown account overrides: {', '.join(sorted(unknown))}")
        for name, func in overrides.items():
            setattr(self, name, types.MethodType(func, self))

        logger.info(
            "SmartAccount initialized (signer=%s, entry_point=%s v%s)",
            type(signer).__name__,
            self.entry_point.address,
            self.entry_point.version,
        )

    async def get_address(self) -> str:
        return as_address(await self._resolve_address())

    async def get_factory_args(self) -> FactoryArgs:
        return FactoryArgs.coerce(await self._resolve_factory_args())

    async def get_stub_signature(self, user_operation: Optional[UserOperation] = None) -> bytes:
        if self._resolve_stub_signature is None:
            return self.signer.stub_signature
        return as_bytes(await self._resolve_stub_signature(user_operation), "stub_signature")

    async def get_nonce(self, key: int = 0) -> int:
        """Read the account's EntryPoint nonce for a 192-bit key."""
        address = await self.get_address()
        calldata = encode_get_nonce(address, key)
        result = await read_contract(self.client, self.entry_point.address, calldata)
        nonce = decode_get_nonce(result)
        logger.debug(f"Nonce read for {mask_address(address)} (key={key}): {nonce}")
        return nonce

    def encode_calls(self, calls: Iterable[Union[Call, Mapping[str, Any], tuple]]) -> str:
        return encode_calls(calls)

    def decode_calls(self, calldata: BytesLike) -> List[Call]:
        return decode_calls(calldata)

    async def sign_message(self, message: Message) -> bytes:
        return self.signer.sign_message(message)

    async def sign_typed_data(self, typed_data: Mapping[str, Any]) -> bytes:
        return self.signer.sign_typed_data(typed_data)

    async def sign_user_operation(
        self,
        user_operation: UserOperation,
        chain_id: Optional[int] = None,
    ) -> bytes:
        """Sign a user operation for this account's EntryPoint.

        The user operation hash is signed as a raw personal message, so the
        signer hashes it once more with the EIP-191 prefix. Accounts verify
        exactly that, so the double hash is intended.

        Raises:
            MissingFieldError: If ``chain_id`` is not provided
        """
        if user_operation.sender is None:
            user_operation = replace(user_operation, sender=await self.get_address())

        user_op_hash = get_user_operation_hash(
            user_operation,
            entry_point=self.entry_point,
            chain_id=chain_id,
        )
        logger.debug(
            f"Signing user operation {to_hex(user_op_hash)} "
            f"for {mask_address(user_operation.sender)} on chain {chain_id}"
        )
        return self.signer.sign_message({"raw": user_op_hash})


def to_smart_account(
    client: ChainClient,
    signer: AccountSigner,
    get_address: AddressResolver,
    get_factory_args: FactoryArgsResolver,
    get_stub_signature: Optional[StubSignatureResolver] = None,
    entry_point: Optional[EntryPoint] = None,
    **overrides: Callable[..., Any],
) -> SmartAccount:
    """Create a smart account with explicit resolvers."""
    return SmartAccount(
        client=client,
        signer=signer,
        get_address=get_address,
        get_factory_args=get_factory_args,
        get_stub_signature=get_stub_signature,
        entry_point=entry_point,
        **overrides,
    )


def _with_signer_stub(
    scheme: str,
    expected: type,
    client: ChainClient,
    signer: AccountSigner,
    get_address: AddressResolver,
    get_factory_args: FactoryArgsResolver,
    entry_point: Optional[EntryPoint],
    overrides: Dict[str, Callable[..., Any]],
) -> SmartAccount:
    if not isinstance(signer, expected):
        raise TypeError(f"{scheme} account needs a {expected.__name__}, got {type(signer).__name__}")

    async def stub_signature(user_operation: Optional[UserOperation] = None) -> bytes:
        return signer.stub_signature

    return SmartAccount(
        client=client,
        signer=signer,
        get_address=get_address,
        get_factory_args=get_factory_args,
        get_stub_signature=stub_signature,
        entry_point=entry_point,
        **overrides,
    )


def to_ecdsa_account(
    client: ChainClient,
    signer: EcdsaSigner,
    get_address: AddressResolver,
    get_factory_args: FactoryArgsResolver,
    entry_point: Optional[EntryPoint] = None,
    **overrides: Callable[..., Any],
) -> SmartAccount:
    """Create a smart account verified with ECDSA (secp256k1) signatures."""
    return _with_signer_stub(
        "ECDSA", EcdsaSigner, client, signer, get_address, get_factory_args, entry_point, overrides
    )


def to_p256_account(
    client: ChainClient,
    signer: P256Signer,
    get_address: AddressResolver,
    get_factory_args: FactoryArgsResolver,
    entry_point: Optional[EntryPoint] = None,
    **overrides: Callable[..., Any],
) -> SmartAccount:
    """Create a smart account verified with P256 (secp256r1) signatures."""
    return _with_signer_stub(
        "P256", P256Signer, client, signer, get_address, get_factory_args, entry_point, overrides
    )


def to_rsa_account(
    client: ChainClient,
    signer: RsaSigner,
    get_address: AddressResolver,
    get_factory_args: FactoryArgsResolver,
    entry_point: Optional[EntryPoint] = None,
    **overrides: Callable[..., Any],
) -> SmartAccount:
    """Create a smart account verified with RSA signatures.

    The stub signature is sized to the signer's modulus.
    """
    return _with_signer_stub(
        "RSA", RsaSigner, client, signer, get_address, get_factory_args, entry_point, overrides
    )
