"""ERC-7579 execution codec, call dispatcher and module helpers."""

from .codec import (
    CALL_TYPE_BATCH,
    CALL_TYPE_CALL,
    CALL_TYPE_DELEGATE,
    EXEC_TYPE_DEFAULT,
    EXEC_TYPE_TRY,
    MODULE_TYPE_EXECUTOR,
    MODULE_TYPE_FALLBACK,
    MODULE_TYPE_HOOK,
    MODULE_TYPE_VALIDATOR,
    EncodeMode,
    Execution,
    decode_batch,
    decode_delegate,
    decode_mode,
    decode_single,
    encode_batch,
    encode_delegate,
    encode_mode,
    encode_single,
)
from .calls import (
    Call,
    decode_calls,
    decode_execute_from_executor_result,
    decode_execution_args,
    encode_calls,
    encode_execute_from_executor,
)
from .modules import (
    account_id,
    encode_install_module,
    encode_uninstall_module,
    is_module_installed,
    supports_execution_mode,
    supports_module,
)

__all__ = [
    "CALL_TYPE_BATCH",
    "CALL_TYPE_CALL",
    "CALL_TYPE_DELEGATE",
    "EXEC_TYPE_DEFAULT",
    "EXEC_TYPE_TRY",
    "MODULE_TYPE_EXECUTOR",
    "MODULE_TYPE_FALLBACK",
    "MODULE_TYPE_HOOK",
    "MODULE_TYPE_VALIDATOR",
    "EncodeMode",
    "Execution",
    "decode_batch",
    "decode_delegate",
    "decode_mode",
    "decode_single",
    "encode_batch",
    "encode_delegate",
    "encode_mode",
    "encode_single",
    "Call",
    "decode_calls",
    "decode_execute_from_executor_result",
    "decode_execution_args",
    "encode_calls",
    "encode_execute_from_executor",
    "account_id",
    "encode_install_module",
    "encode_uninstall_module",
    "is_module_installed",
    "supports_execution_mode",
    "supports_module",
]
