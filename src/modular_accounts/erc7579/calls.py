"""Translate between caller-facing calls and ERC-7579 ``execute`` calldata."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError

from ..exceptions import EncodingError, UnrecognizedCallTypeError
from ..utils import BytesLike, as_bytes, fixed_bytes, to_hex
from .abi import (
    EXECUTE_FROM_EXECUTOR_SELECTOR,
    EXECUTE_SELECTOR,
    EXECUTION_ARG_TYPES,
)
from .codec import (
    CALL_TYPE_BATCH,
    CALL_TYPE_CALL,
    CALL_TYPE_DELEGATE,
    EXEC_TYPE_DEFAULT,
    Execution,
    decode_batch,
    decode_delegate,
    decode_mode,
    decode_single,
    encode_batch,
    encode_mode,
    encode_single,
)


@dataclass(frozen=True)
class Call:
    """A call as supplied by the caller. ``value`` and ``data`` default to 0 / empty."""
    to: str
    value: int = 0
    data: bytes = b""

    def __post_init__(self) -> None:
        # Reuse Execution's validation so both shapes agree on what is valid
        execution = Execution(target=self.to, value=self.value, call_data=self.data)
        object.__setattr__(self, "to", execution.target)
        object.__setattr__(self, "data", execution.call_data)

    @classmethod
    def coerce(cls, call: Union["Call", Mapping[str, Any], Sequence[Any]]) -> "Call":
        """Accept a Call, a ``{"to", "value", "data"}`` mapping or a tuple."""
        if isinstance(call, Call):
            return call
        if isinstance(call, Mapping):
            if "to" not in call:
                raise EncodingError("Call is missing 'to'", call)
            return cls(
                to=call["to"],
                value=call.get("value") or 0,
                data=call.get("data") or b"",
            )
        if isinstance(call, (tuple, list)) and 1 <= len(call) <= 3:
            return cls(*call)
        raise EncodingError(f"Unsupported call shape: {type(call).__name__}", call)

    def to_execution(self) -> Execution:
        return Execution(target=self.to, value=self.value, call_data=self.data)

    @classmethod
    def from_execution(cls, execution: Execution) -> "Call":
        return cls(to=execution.target, value=execution.value, data=execution.call_data)


def _encode_execution_args(selector: bytes, mode: bytes, execution_calldata: bytes) -> str:
    return to_hex(selector + encode(EXECUTION_ARG_TYPES, [mode, execution_calldata]))


def encode_calls(
    calls: Iterable[Union[Call, Mapping[str, Any], Sequence[Any]]],
    exec_type: BytesLike = EXEC_TYPE_DEFAULT,
) -> str:
    """Encode ``execute(bytes32,bytes)`` calldata for one or more calls.

    A single call uses the CALL call type, more than one uses BATCH.

    Raises:
        EncodingError: If ``calls`` is empty or a call is malformed.
    """
    normalized = [Call.coerce(c) for c in calls]
    if not normalized:
        raise EncodingError("Cannot encode an empty call list", normalized)

    if len(normalized) == 1:
        call = normalized[0]
        mode = encode_mode(call_type=CALL_TYPE_CALL, exec_type=exec_type)
        execution_calldata = encode_single(call.to, call.value, call.data)
    else:
        mode = encode_mode(call_type=CALL_TYPE_BATCH, exec_type=exec_type)
        execution_calldata = encode_batch(*(c.to_execution() for c in normalized))

    return _encode_execution_args(EXECUTE_SELECTOR, mode, execution_calldata)


def decode_execution_args(calldata: BytesLike) -> tuple[bytes, bytes]:
    """Return ``(mode, executionCalldata)`` from execute/executeFromExecutor calldata."""
    raw = as_bytes(calldata, "calldata")
    selector = raw[:4]
    if selector not in (EXECUTE_SELECTOR, EXECUTE_FROM_EXECUTOR_SELECTOR):
        raise EncodingError(
            f"Calldata selector 0x{selector.hex()} is not an ERC-7579 execute function",
            calldata,
        )
    try:
        mode, execution_calldata = decode(EXECUTION_ARG_TYPES, raw[4:])
    except DecodingError as e:
        raise EncodingError(f"Malformed execute arguments: {e}", calldata) from e
    return mode, execution_calldata


def decode_calls(calldata: BytesLike) -> List[Call]:
    """Decode ``execute`` calldata back into the ordered list of calls.

    Raises:
        EncodingError: If the calldata is not an ERC-7579 execute call.
        UnrecognizedCallTypeError: If the mode carries an unknown call type.
    """
    mode, execution_calldata = decode_execution_args(calldata)
    call_type = decode_mode(mode).call_type

    if call_type == CALL_TYPE_DELEGATE:
        executions = [decode_delegate(execution_calldata)]
    elif call_type == CALL_TYPE_BATCH:
        executions = decode_batch(execution_calldata)
    elif call_type == CALL_TYPE_CALL:
        executions = [decode_single(execution_calldata)]
    else:
        raise UnrecognizedCallTypeError(call_type)

    return [Call.from_execution(e) for e in executions]


def encode_execute_from_executor(mode: BytesLike, execution_calldata: BytesLike) -> str:
    """Encode ``executeFromExecutor(bytes32,bytes)`` calldata for executor modules."""
    return _encode_execution_args(
        EXECUTE_FROM_EXECUTOR_SELECTOR,
        fixed_bytes(mode, 32, "mode"),
        as_bytes(execution_calldata, "execution_calldata"),
    )


def decode_execute_from_executor_result(data: BytesLike) -> List[bytes]:
    """Decode the ``bytes[] returnData`` returned by executeFromExecutor."""
    try:
        (return_data,) = decode(["bytes[]"], as_bytes(data))
    except DecodingError as e:
        raise EncodingError(f"Malformed executeFromExecutor result: {e}", data) from e
    return list(return_data)


__all__ = [
    "Call",
    "decode_calls",
    "decode_execute_from_executor_result",
    "decode_execution_args",
    "encode_calls",
    "encode_execute_from_executor",
]
