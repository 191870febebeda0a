"""ERC-7579 execution mode and execution calldata codec.

Layouts (``‖`` is byte concatenation):

- mode word:   callType(1) ‖ execType(1) ‖ unused(4) ‖ selector(4) ‖ payload(22)
- single call: target(20) ‖ value(32, big-endian) ‖ callData
- batch:       abi.encode((address,uint256,bytes)[])
- delegate:    target(20) ‖ callData

References:
- https://eips.ethereum.org/EIPS/eip-7579
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from ..exceptions import EncodingError
from ..utils import BytesLike, address_bytes, as_address, as_bytes, fixed_bytes

# ============ Module types ============

MODULE_TYPE_VALIDATOR = 1
MODULE_TYPE_EXECUTOR = 2
MODULE_TYPE_FALLBACK = 3
MODULE_TYPE_HOOK = 4

# ============ Exec / call types ============

EXEC_TYPE_DEFAULT = b"\x00"
EXEC_TYPE_TRY = b"\x01"

CALL_TYPE_CALL = b"\x00"
CALL_TYPE_BATCH = b"\x01"
CALL_TYPE_DELEGATE = b"\xff"

DEFAULT_SELECTOR = b"\x00" * 4
DEFAULT_PAYLOAD = b"\x00" * 22

MODE_SIZE = 32
UINT256_MAX = 2**256 - 1

_BATCH_TYPES = ["(address,uint256,bytes)[]"]
_SINGLE_HEADER_SIZE = 52  # address(20) + uint256(32)


@dataclass(frozen=True)
class EncodeMode:
    """Decoded fields of an ERC-7579 mode word."""
    call_type: bytes = CALL_TYPE_CALL
    exec_type: bytes = EXEC_TYPE_DEFAULT
    selector: bytes = DEFAULT_SELECTOR
    payload: bytes = DEFAULT_PAYLOAD


@dataclass(frozen=True)
class Execution:
    """One on-chain call: target, value in wei and calldata."""
    target: str
    value: int = 0
    call_data: bytes = b""

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", as_address(self.target))
        object.__setattr__(self, "value", _check_value(self.value))
        object.__setattr__(self, "call_data", as_bytes(self.call_data, "call_data"))


def _check_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"value must be an integer, got {type(value).__name__}", value)
    if not 0 <= value <= UINT256_MAX:
        raise EncodingError("value must fit in uint256", value)
    return value


def encode_mode(
    call_type: BytesLike = CALL_TYPE_CALL,
    exec_type: BytesLike = EXEC_TYPE_DEFAULT,
    selector: BytesLike = DEFAULT_SELECTOR,
    payload: BytesLike = DEFAULT_PAYLOAD,
) -> bytes:
    """Pack the 32-byte mode word."""
    return (
        fixed_bytes(call_type, 1, "call_type")
        + fixed_bytes(exec_type, 1, "exec_type")
        + b"\x00" * 4
        + fixed_bytes(selector, 4, "selector")
        + fixed_bytes(payload, 22, "payload")
    )


def decode_mode(mode: BytesLike) -> EncodeMode:
    word = fixed_bytes(mode, MODE_SIZE, "mode")
    return EncodeMode(
        call_type=word[0:1],
        exec_type=word[1:2],
        selector=word[6:10],
        payload=word[10:32],
    )


def encode_single(target: BytesLike, value: int = 0, data: BytesLike = b"") -> bytes:
    return (
        address_bytes(target)
        + _check_value(value).to_bytes(32, "big")
        + as_bytes(data)
    )


def decode_single(data: BytesLike) -> Execution:
    raw = as_bytes(data)
    if len(raw) < _SINGLE_HEADER_SIZE:
        raise EncodingError(
            f"Single execution needs at least {_SINGLE_HEADER_SIZE} bytes, got {len(raw)}",
            data,
        )
    return Execution(
        target=raw[0:20],
        value=int.from_bytes(raw[20:52], "big"),
        call_data=raw[52:] if len(raw) > _SINGLE_HEADER_SIZE else b"",
    )


def encode_batch(*executions: Execution) -> bytes:
    """ABI-encode executions as a dynamic (address,uint256,bytes)[] array."""
    return encode(
        _BATCH_TYPES,
        [[(e.target, e.value, e.call_data) for e in executions]],
    )


def decode_batch(data: BytesLike) -> List[Execution]:
    try:
        (entries,) = decode(_BATCH_TYPES, as_bytes(data))
    except DecodingError as e:
        raise EncodingError(f"Malformed batch execution calldata: {e}", data) from e
    return [
        Execution(target=target, value=value, call_data=call_data)
        for target, value, call_data in entries
    ]


def encode_delegate(target: BytesLike, data: BytesLike = b"") -> bytes:
    # Delegate calls carry no value
    return address_bytes(target) + as_bytes(data)


def decode_delegate(data: BytesLike) -> Execution:
    raw = as_bytes(data)
    if len(raw) < 20:
        raise EncodingError(
            f"Delegate execution needs at least 20 bytes, got {len(raw)}", data
        )
    return Execution(
        target=raw[0:20],
        value=0,
        call_data=raw[20:] if len(raw) > 20 else b"",
    )
