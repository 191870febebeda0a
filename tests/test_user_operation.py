"""
Tests for ERC-4337 user operations and entry point bindings.

Tests cover:
- Packing of gas limits, fees, init code and paymaster data
- RPC serialization
- v0.7 and v0.8 user operation hashes
- EntryPoint selection and getNonce calldata
"""
from __future__ import annotations

from dataclasses import replace

import pytest
from eth_abi import decode, encode
from eth_utils import keccak
from web3 import Web3

from modular_accounts.config import AccountsConfig, set_config
from modular_accounts.erc4337 import (
    ENTRYPOINT_V07,
    ENTRYPOINT_V07_ADDRESS,
    ENTRYPOINT_V08,
    ENTRYPOINT_V08_ADDRESS,
    PACKED_USER_OPERATION_TYPES,
    EntryPoint,
    UserOperation,
    decode_get_nonce,
    encode_get_nonce,
    get_entrypoint,
    get_user_operation_hash,
)
from modular_accounts.exceptions import EncodingError, MissingFieldError
from modular_accounts.signers.base import hash_typed_data


SENDER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
FACTORY = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
PAYMASTER = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
BASE_SEPOLIA = 84532


@pytest.fixture
def user_operation():
    return UserOperation(
        sender=SENDER,
        nonce=3,
        call_data="0xe9ae5c53",
        call_gas_limit=100_000,
        verification_gas_limit=200_000,
        pre_verification_gas=50_000,
        max_fee_per_gas=2_000_000_000,
        max_priority_fee_per_gas=1_000_000,
    )


class TestPacking:
    def test_account_gas_limits(self, user_operation):
        packed = user_operation.pack()
        assert packed.account_gas_limits == (200_000).to_bytes(16, "big") + (100_000).to_bytes(16, "big")

    def test_gas_fees(self, user_operation):
        packed = user_operation.pack()
        assert packed.gas_fees == (1_000_000).to_bytes(16, "big") + (2_000_000_000).to_bytes(16, "big")

    def test_no_factory_no_paymaster(self, user_operation):
        packed = user_operation.pack()
        assert packed.init_code == b""
        assert packed.paymaster_and_data == b""

    def test_init_code(self, user_operation):
        op = replace(user_operation, factory=FACTORY, factory_data=b"\xca\xfe")
        assert op.init_code == bytes.fromhex(FACTORY[2:]) + b"\xca\xfe"

    def test_paymaster_and_data(self, user_operation):
        op = replace(
            user_operation,
            paymaster=PAYMASTER,
            paymaster_verification_gas_limit=30_000,
            paymaster_post_op_gas_limit=10_000,
            paymaster_data=b"\x01",
        )
        data = op.paymaster_and_data
        assert len(data) == 20 + 16 + 16 + 1
        assert data[:20] == bytes.fromhex(PAYMASTER[2:])
        assert int.from_bytes(data[20:36], "big") == 30_000
        assert int.from_bytes(data[36:52], "big") == 10_000
        assert data[52:] == b"\x01"

    def test_gas_overflow_raises(self, user_operation):
        op = replace(user_operation, call_gas_limit=2**128)
        with pytest.raises(EncodingError):
            op.pack()

    def test_pack_without_sender_raises(self):
        with pytest.raises(MissingFieldError) as exc_info:
            UserOperation(nonce=0).pack()
        assert exc_info.value.field == "sender"

    def test_to_tuple_order(self, user_operation):
        packed = user_operation.pack()
        assert packed.to_tuple()[0] == SENDER
        assert packed.to_tuple()[1] == 3
        assert packed.to_tuple()[-1] == b""


class TestToRpc:
    def test_minimal(self, user_operation):
        rpc = user_operation.to_rpc()
        assert rpc["sender"] == SENDER
        assert rpc["nonce"] == "0x3"
        assert rpc["callData"] == "0xe9ae5c53"
        assert rpc["callGasLimit"] == hex(100_000)
        assert rpc["signature"] == "0x"
        assert "factory" not in rpc
        assert "paymaster" not in rpc

    def test_with_factory_and_paymaster(self, user_operation):
        op = replace(user_operation, factory=FACTORY, paymaster=PAYMASTER, paymaster_data=b"\xff")
        rpc = op.to_rpc()
        assert rpc["factory"] == FACTORY
        assert rpc["factoryData"] == "0x"
        assert rpc["paymaster"] == PAYMASTER
        assert rpc["paymasterData"] == "0xff"


class TestUserOperationHash:
    def test_requires_chain_id(self, user_operation):
        with pytest.raises(MissingFieldError) as exc_info:
            get_user_operation_hash(user_operation, ENTRYPOINT_V08, None)
        assert exc_info.value.field == "chain_id"

    def test_is_32_bytes_and_deterministic(self, user_operation):
        first = get_user_operation_hash(user_operation, ENTRYPOINT_V08, BASE_SEPOLIA)
        second = get_user_operation_hash(user_operation, ENTRYPOINT_V08, BASE_SEPOLIA)
        assert len(first) == 32
        assert first == second

    @pytest.mark.parametrize("entry_point", [ENTRYPOINT_V07, ENTRYPOINT_V08])
    def test_changes_with_chain_id(self, user_operation, entry_point):
        assert get_user_operation_hash(user_operation, entry_point, 1) != get_user_operation_hash(
            user_operation, entry_point, BASE_SEPOLIA
        )

    def test_changes_with_entry_point(self, user_operation):
        v07 = get_user_operation_hash(user_operation, ENTRYPOINT_V07, BASE_SEPOLIA)
        v08 = get_user_operation_hash(user_operation, ENTRYPOINT_V08, BASE_SEPOLIA)
        other = get_user_operation_hash(
            user_operation, EntryPoint(address=FACTORY, version="0.8"), BASE_SEPOLIA
        )
        assert len({v07, v08, other}) == 3

    @pytest.mark.parametrize("entry_point", [ENTRYPOINT_V07, ENTRYPOINT_V08])
    def test_signature_is_not_hashed(self, user_operation, entry_point):
        signed = replace(user_operation, signature=b"\x01" * 65)
        assert get_user_operation_hash(signed, entry_point, BASE_SEPOLIA) == get_user_operation_hash(
            user_operation, entry_point, BASE_SEPOLIA
        )

    def test_v08_matches_eip712_typed_data(self, user_operation):
        op = replace(user_operation, factory=FACTORY, factory_data=b"\x01\x02")
        packed = op.pack()
        typed_data = {
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                    {"name": "verifyingContract", "type": "address"},
                ],
                "PackedUserOperation": PACKED_USER_OPERATION_TYPES,
            },
            "primaryType": "PackedUserOperation",
            "domain": {
                "name": "ERC4337",
                "version": "1",
                "chainId": BASE_SEPOLIA,
                "verifyingContract": ENTRYPOINT_V08_ADDRESS,
            },
            "message": {
                "sender": packed.sender,
                "nonce": packed.nonce,
                "initCode": packed.init_code,
                "callData": packed.call_data,
                "accountGasLimits": packed.account_gas_limits,
                "preVerificationGas": packed.pre_verification_gas,
                "gasFees": packed.gas_fees,
                "paymasterAndData": packed.paymaster_and_data,
            },
        }
        assert get_user_operation_hash(op, ENTRYPOINT_V08, BASE_SEPOLIA) == hash_typed_data(typed_data)

    def test_v07_matches_entry_point_formula(self, user_operation):
        op = replace(
            user_operation,
            factory=FACTORY,
            factory_data=b"\x01\x02",
            paymaster=PAYMASTER,
            paymaster_verification_gas_limit=30_000,
            paymaster_post_op_gas_limit=10_000,
            paymaster_data=b"\xff",
        )
        init_code = bytes.fromhex(FACTORY[2:]) + b"\x01\x02"
        account_gas_limits = (200_000).to_bytes(16, "big") + (100_000).to_bytes(16, "big")
        gas_fees = (1_000_000).to_bytes(16, "big") + (2_000_000_000).to_bytes(16, "big")
        paymaster_and_data = (
            bytes.fromhex(PAYMASTER[2:])
            + (30_000).to_bytes(16, "big")
            + (10_000).to_bytes(16, "big")
            + b"\xff"
        )
        inner = keccak(
            encode(
                ["address", "uint256", "bytes32", "bytes32", "bytes32", "uint256", "bytes32", "bytes32"],
                [
                    SENDER,
                    3,
                    keccak(init_code),
                    keccak(bytes.fromhex("e9ae5c53")),
                    account_gas_limits,
                    50_000,
                    gas_fees,
                    keccak(paymaster_and_data),
                ],
            )
        )
        expected = keccak(
            encode(["bytes32", "address", "uint256"], [inner, ENTRYPOINT_V07_ADDRESS, BASE_SEPOLIA])
        )

        assert get_user_operation_hash(op, ENTRYPOINT_V07, BASE_SEPOLIA) == expected

    def test_unknown_version_raises(self, user_operation):
        with pytest.raises(ValueError):
            get_user_operation_hash(
                user_operation, EntryPoint(address=FACTORY, version="0.6"), BASE_SEPOLIA
            )


class TestEntryPoint:
    def test_default_is_v08(self, reset_config):
        assert get_entrypoint() == ENTRYPOINT_V08
        assert get_entrypoint().address == ENTRYPOINT_V08_ADDRESS

    def test_default_follows_config(self, reset_config):
        set_config(AccountsConfig(entry_point_version="0.7"))
        assert get_entrypoint() == ENTRYPOINT_V07
        assert get_entrypoint().address == ENTRYPOINT_V07_ADDRESS

    def test_unknown_version(self):
        with pytest.raises(ValueError):
            get_entrypoint("0.6")

    def test_get_nonce_calldata(self):
        calldata = encode_get_nonce(SENDER.lower(), key=5)
        assert bytes(calldata[:4]).hex() == "35567e1a"
        sender, key = decode(["address", "uint192"], calldata[4:])
        assert (Web3.to_checksum_address(sender), key) == (SENDER, 5)

    def test_nonce_key_out_of_range(self):
        with pytest.raises(EncodingError):
            encode_get_nonce(SENDER, key=2**192)

    def test_decode_get_nonce(self):
        assert decode_get_nonce((2**64 + 1).to_bytes(32, "big")) == 2**64 + 1

    def test_selector_matches_signature(self):
        assert encode_get_nonce(SENDER)[:4] == keccak(text="getNonce(address,uint192)")[:4]
