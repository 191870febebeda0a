"""
Minimal async JSON-RPC client for read-only account queries.

The smart account only needs ``eth_call`` (and optionally ``eth_chainId``);
any object exposing a compatible ``eth_call`` coroutine can be used instead.
There is no retry or failover here: errors propagate to the caller as raised.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .config import get_config
from .utils import as_bytes, to_hex

logger = logging.getLogger(__name__)


class ChainClient(Protocol):
    """What the account needs from a network client."""

    async def eth_call(self, tx: Dict[str, Any], block: str = "latest") -> str:
        ...


class RPCError(Exception):
    """Raised when the node answers with a JSON-RPC error object."""

    def __init__(self, message: str, code: Optional[int] = None, data: Any = None):
        self.code = code
        self.data = data
        super().__init__(message)


class JsonRpcClient:
    """JSON-RPC client over ``httpx.AsyncClient``."""

    def __init__(
        self,
        url: str,
        timeout_seconds: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._url = url
        if timeout_seconds is None:
            timeout_seconds = get_config().rpc_timeout_seconds
        self._timeout = timeout_seconds
        self._client = client
        self._request_id = 0

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Make a JSON-RPC call.

        Raises:
            RPCError: If the node returns an error object
            httpx.HTTPError: On transport or HTTP status failures
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params or [],
        }
        client = await self._get_client()
        response = await client.post(self._url, json=payload)
        response.raise_for_status()
        data = response.json()

        if data.get("error"):
            error = data["error"]
            raise RPCError(
                message=error.get("message", str(error)),
                code=error.get("code"),
                data=error.get("data"),
            )

        logger.debug(f"RPC call {method} succeeded (id={self._request_id})")
        return data.get("result")

    async def eth_call(self, tx: Dict[str, Any], block: str = "latest") -> str:
        """Execute a call without creating a transaction."""
        return await self.call("eth_call", [tx, block])

    async def get_chain_id(self) -> int:
        result = await self.call("eth_chainId")
        return int(result, 16)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "JsonRpcClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def read_contract(client: ChainClient, to: str, calldata: bytes) -> bytes:
    """Run a read-only ``eth_call`` and return the raw return data."""
    result = await client.eth_call({"to": to, "data": to_hex(calldata)}, "latest")
    return as_bytes(result or "0x", "eth_call result")
