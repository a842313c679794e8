"""
Heartbeat signature recovery.

Guardian provers sign the keccak256 digest of ``b"HEART_BEAT"`` with their
secp256k1 key and submit the 65 byte ``r || s || v`` signature, base64
encoded. The signer is identified by recovering its address from that
signature.
"""
import base64
import binascii
import logging

from eth_keys import keys
from eth_keys.exceptions import BadSignature
from eth_utils import ValidationError as KeyValidationError, keccak

from guardian_health.errors import InvalidSignatureError, UnknownGuardianProverError
from guardian_health.guardian_prover import GuardianProver, GuardianProverRegistry

logger = logging.getLogger(__name__)

HEART_BEAT_MESSAGE: bytes = keccak(b"HEART_BEAT")

SIGNATURE_LENGTH = 65


def decode_signature(encoded: str) -> bytes:
    """Decodes a base64 (or 0x-prefixed hex) signature into raw bytes."""
    if not isinstance(encoded, str) or not encoded.strip():
        raise InvalidSignatureError("signature is empty")
    encoded = encoded.strip()

    try:
        if encoded[:2].lower() == "0x":
            raw = bytes.fromhex(encoded[2:])
        else:
            raw = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSignatureError(f"signature is not valid base64 or hex: {e}") from e

    if len(raw) != SIGNATURE_LENGTH:
        raise InvalidSignatureError(
            f"signature must be {SIGNATURE_LENGTH} bytes, got {len(raw)}"
        )
    return raw


def recover_address(message_hash: bytes, encoded_signature: str) -> str:
    """Recovers the checksummed address that signed ``message_hash``."""
    raw = bytearray(decode_signature(encoded_signature))
    # Accept Ethereum style 27/28 recovery ids alongside 0/1.
    if raw[64] in (27, 28):
        raw[64] -= 27

    try:
        signature = keys.Signature(signature_bytes=bytes(raw))
        public_key = signature.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, KeyValidationError, ValueError, TypeError) as e:
        logger.debug(f"Signature recovery failed: {e}")
        raise InvalidSignatureError(f"could not recover signer: {e}") from e

    return public_key.to_checksum_address()


def signature_to_guardian_prover(
    message_hash: bytes,
    encoded_signature: str,
    guardian_provers: GuardianProverRegistry,
) -> GuardianProver:
    """
    Resolves a heartbeat signature to the guardian prover that produced it.

    Raises:
        InvalidSignatureError: the signature is malformed or unrecoverable.
        UnknownGuardianProverError: the signer is not a known guardian prover.
    """
    address = recover_address(message_hash, encoded_signature)
    guardian_prover = guardian_provers.find_by_address(address)
    if guardian_prover is None:
        raise UnknownGuardianProverError(address)
    return guardian_prover
