"""
Tests for heartbeat signature recovery.
"""
import base64

import pytest
from eth_utils import keccak

from guardian_health.errors import InvalidSignatureError, UnknownGuardianProverError
from guardian_health.guardian_prover import GuardianProverRegistry
from guardian_health.signature import (
    HEART_BEAT_MESSAGE,
    decode_signature,
    recover_address,
    signature_to_guardian_prover,
)
from conftest import GUARDIAN_KEYS, OUTSIDER_KEY, address_of, sign_heartbeat


@pytest.fixture
def guardian_registry():
    return GuardianProverRegistry.from_config(
        [(gid, address_of(key)) for gid, key in GUARDIAN_KEYS.items()]
    )


def test_heart_beat_message_is_keccak_of_literal():
    assert HEART_BEAT_MESSAGE == keccak(b"HEART_BEAT")
    assert len(HEART_BEAT_MESSAGE) == 32


def test_recover_address_from_base64_signature():
    key = GUARDIAN_KEYS[1]
    assert recover_address(HEART_BEAT_MESSAGE, sign_heartbeat(key)) == address_of(key)


def test_recover_address_from_hex_signature():
    key = GUARDIAN_KEYS[2]
    raw = key.sign_msg_hash(HEART_BEAT_MESSAGE).to_bytes()
    assert recover_address(HEART_BEAT_MESSAGE, "0x" + raw.hex()) == address_of(key)


def test_recover_address_accepts_ethereum_recovery_id():
    key = GUARDIAN_KEYS[7]
    raw = bytearray(key.sign_msg_hash(HEART_BEAT_MESSAGE).to_bytes())
    raw[64] += 27
    encoded = base64.b64encode(bytes(raw)).decode()
    assert recover_address(HEART_BEAT_MESSAGE, encoded) == address_of(key)


def test_signature_over_other_message_recovers_someone_else():
    key = GUARDIAN_KEYS[1]
    other = sign_heartbeat(key, keccak(b"NOT_A_HEART_BEAT"))
    assert recover_address(HEART_BEAT_MESSAGE, other) != address_of(key)


@pytest.mark.parametrize("encoded", [
    "",
    "   ",
    "not base64 at all!",
    "0xzz",
    base64.b64encode(b"\x01" * 64).decode(),
    base64.b64encode(b"\x01" * 66).decode(),
])
def test_decode_signature_rejects_malformed_input(encoded):
    with pytest.raises(InvalidSignatureError):
        decode_signature(encoded)


def test_unrecoverable_signature_is_invalid():
    zero_signature = base64.b64encode(b"\x00" * 65).decode()
    with pytest.raises(InvalidSignatureError):
        recover_address(HEART_BEAT_MESSAGE, zero_signature)


def test_signature_to_guardian_prover_returns_known_guardian(guardian_registry):
    guardian_prover = signature_to_guardian_prover(
        HEART_BEAT_MESSAGE, sign_heartbeat(GUARDIAN_KEYS[7]), guardian_registry
    )
    assert guardian_prover.id == 7
    assert guardian_prover.address == address_of(GUARDIAN_KEYS[7])


def test_signature_to_guardian_prover_rejects_outsider(guardian_registry):
    with pytest.raises(UnknownGuardianProverError) as exc_info:
        signature_to_guardian_prover(
            HEART_BEAT_MESSAGE, sign_heartbeat(OUTSIDER_KEY), guardian_registry
        )
    assert exc_info.value.address == address_of(OUTSIDER_KEY)
    assert exc_info.value.to_dict()["error"] == "UnknownGuardianProverError"


def test_signature_to_guardian_prover_matches_lowercase_registry_entries():
    key = GUARDIAN_KEYS[2]
    registry = GuardianProverRegistry.from_config(f"2:{address_of(key).lower()}")
    guardian_prover = signature_to_guardian_prover(HEART_BEAT_MESSAGE, sign_heartbeat(key), registry)
    assert guardian_prover.id == 2
