"""Exceptions raised while processing guardian prover heartbeats."""
from typing import Any, Dict


class HeartbeatError(Exception):
    """Base class for errors surfaced to heartbeat submitters."""

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "message": str(self)}


class InvalidSignatureError(HeartbeatError):
    """The heartbeat signature could not be decoded or recovered."""
    pass


class UnknownGuardianProverError(HeartbeatError):
    """The signature recovered to an address outside the guardian prover set."""

    def __init__(self, address: str):
        super().__init__(f"signature recovered to unknown guardian prover {address}")
        self.address = address

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["recoveredAddress"] = self.address
        return data


class HealthCheckStoreError(HeartbeatError):
    """The health check could not be persisted."""
    pass
