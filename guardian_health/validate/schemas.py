from pydantic import BaseModel, Field, StrictStr


class HealthCheckRequest(BaseModel):
    """A heartbeat submitted by a guardian prover."""

    # Informational only; the signer is identified by signature recovery.
    prover: StrictStr = Field("", description="Address the guardian prover claims to sign with.")
    heart_beat_signature: StrictStr = Field(
        ...,
        alias="heartBeatSignature",
        description="Base64 encoded 65 byte signature over keccak256('HEART_BEAT').",
    )
