"""ERC-7579 function signatures and selectors."""

from __future__ import annotations

from web3 import Web3

# ============ IERC7579Execution ============

EXECUTE_SIGNATURE = "execute(bytes32,bytes)"
EXECUTE_FROM_EXECUTOR_SIGNATURE = "executeFromExecutor(bytes32,bytes)"

EXECUTE_SELECTOR = Web3.keccak(text=EXECUTE_SIGNATURE)[:4]
EXECUTE_FROM_EXECUTOR_SELECTOR = Web3.keccak(text=EXECUTE_FROM_EXECUTOR_SIGNATURE)[:4]

# Both entry points take (bytes32 mode, bytes executionCalldata)
EXECUTION_ARG_TYPES = ["bytes32", "bytes"]

# ============ IERC7579AccountConfig ============

ACCOUNT_ID_SELECTOR = Web3.keccak(text="accountId()")[:4]
SUPPORTS_EXECUTION_MODE_SELECTOR = Web3.keccak(text="supportsExecutionMode(bytes32)")[:4]
SUPPORTS_MODULE_SELECTOR = Web3.keccak(text="supportsModule(uint256)")[:4]

# ============ IERC7579ModuleConfig ============

MODULE_CONFIG_ARG_TYPES = ["uint256", "address", "bytes"]

INSTALL_MODULE_SELECTOR = Web3.keccak(text="installModule(uint256,address,bytes)")[:4]
UNINSTALL_MODULE_SELECTOR = Web3.keccak(text="uninstallModule(uint256,address,bytes)")[:4]
IS_MODULE_INSTALLED_SELECTOR = Web3.keccak(
    text="isModuleInstalled(uint256,address,bytes)"
)[:4]
