"""Byte and address coercion shared by the codecs and signers."""

from __future__ import annotations

from typing import Union

from eth_utils import is_hexstr, to_bytes, to_checksum_address

from .exceptions import EncodingError

BytesLike = Union[bytes, bytearray, str]

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def as_bytes(value: BytesLike, name: str = "data") -> bytes:
    """Accept raw bytes or a 0x-prefixed hex string."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if value in ("", "0x"):
            return b""
        if not value.startswith("0x") or not is_hexstr(value) or len(value) % 2:
            raise EncodingError(f"{name} must be a 0x-prefixed even-length hex string", value)
        return to_bytes(hexstr=value)
    raise EncodingError(f"{name} must be bytes or hex string, got {type(value).__name__}", value)


def fixed_bytes(value: BytesLike, size: int, name: str) -> bytes:
    raw = as_bytes(value, name)
    if len(raw) != size:
        raise EncodingError(f"{name} must be exactly {size} bytes, got {len(raw)}", value)
    return raw


def address_bytes(value: BytesLike) -> bytes:
    """Return the 20 raw bytes of an address."""
    return fixed_bytes(value, 20, "address")


def as_address(value: BytesLike) -> str:
    """Normalise an address to its EIP-55 checksum form."""
    return to_checksum_address(address_bytes(value))


def to_hex(data: bytes) -> str:
    # bytes() first: HexBytes.hex() is 0x-prefixed on older hexbytes
    return "0x" + bytes(data).hex()
