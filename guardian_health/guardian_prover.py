"""
guardian_prover.py
In-memory registry of the guardian provers allowed to submit heartbeats.
"""
import logging
import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from eth_utils import is_address, to_checksum_address

from guardian_health.metrics import guardian_prover_health_checks

logger = logging.getLogger(__name__)

GuardianProverEntry = Union[str, Dict[str, Any], tuple]


class GuardianProver:
    """A registered guardian prover and its health check counter."""

    def __init__(self, guardian_prover_id: int, address: str):
        if not is_address(address):
            raise ValueError(f"Invalid guardian prover address: {address!r}")
        self.id = int(guardian_prover_id)
        if self.id < 0:
            raise ValueError(f"Guardian prover id must be non-negative, got {self.id}")
        self.address = to_checksum_address(address)
        self._health_check_count = 0
        self._lock = threading.Lock()

    @property
    def health_check_count(self) -> int:
        with self._lock:
            return self._health_check_count

    def increment_health_check(self) -> int:
        """Atomically bumps the counter and returns the new value."""
        with self._lock:
            self._health_check_count += 1
            count = self._health_check_count
        guardian_prover_health_checks.labels(str(self.id), self.address).inc()
        return count

    def matches(self, address: str) -> bool:
        return isinstance(address, str) and self.address.lower() == address.lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "address": self.address,
            "healthCheckCount": self.health_check_count,
        }

    def __repr__(self) -> str:
        return f"GuardianProver(id={self.id}, address={self.address})"


class GuardianProverRegistry:
    """
    Process-scoped set of known guardian provers.

    Membership is fixed once the registry is built; only the per-guardian
    health check counters change afterwards.
    """

    def __init__(self, guardian_provers: Iterable[GuardianProver] = ()):
        self._by_id: Dict[int, GuardianProver] = {}
        self._by_address: Dict[str, GuardianProver] = {}
        for guardian_prover in guardian_provers:
            self._add(guardian_prover)

    def _add(self, guardian_prover: GuardianProver) -> None:
        key = guardian_prover.address.lower()
        if guardian_prover.id in self._by_id:
            raise ValueError(f"Duplicate guardian prover id: {guardian_prover.id}")
        if key in self._by_address:
            raise ValueError(f"Duplicate guardian prover address: {guardian_prover.address}")
        self._by_id[guardian_prover.id] = guardian_prover
        self._by_address[key] = guardian_prover

    @classmethod
    def from_config(cls, value: Union[str, Iterable[GuardianProverEntry], None]) -> "GuardianProverRegistry":
        """
        Builds a registry from the GUARDIAN_PROVERS setting.

        Accepts a comma separated "id:address" string, or an iterable of
        "id:address" strings, {"id": .., "address": ..} mappings or
        (id, address) tuples.
        """
        if value is None:
            return cls()
        if isinstance(value, str):
            entries: List[GuardianProverEntry] = [part for part in value.split(",") if part.strip()]
        else:
            entries = list(value)

        guardian_provers = []
        for entry in entries:
            if isinstance(entry, str):
                guardian_prover_id, sep, address = entry.strip().partition(":")
                if not sep:
                    raise ValueError(f"Guardian prover entry must be 'id:address', got {entry!r}")
            elif isinstance(entry, dict):
                guardian_prover_id, address = entry.get("id"), entry.get("address")
            else:
                guardian_prover_id, address = entry

            try:
                guardian_prover_id = int(str(guardian_prover_id).strip())
            except (TypeError, ValueError):
                raise ValueError(f"Invalid guardian prover id: {guardian_prover_id!r}") from None
            guardian_provers.append(GuardianProver(guardian_prover_id, str(address).strip()))

        registry = cls(guardian_provers)
        logger.info(f"Loaded {len(registry)} guardian prover(s).")
        return registry

    def get(self, guardian_prover_id: int) -> Optional[GuardianProver]:
        return self._by_id.get(guardian_prover_id)

    def find_by_address(self, address: str) -> Optional[GuardianProver]:
        if not isinstance(address, str):
            return None
        return self._by_address.get(address.lower())

    def increment_health_check(self, address: str) -> int:
        """Increments every guardian prover whose address matches; returns how many did."""
        incremented = 0
        for guardian_prover in self:
            if guardian_prover.matches(address):
                guardian_prover.increment_health_check()
                incremented += 1
        return incremented

    def to_list(self) -> List[Dict[str, Any]]:
        return [guardian_prover.to_dict() for guardian_prover in self]

    def __iter__(self) -> Iterator[GuardianProver]:
        return iter(sorted(self._by_id.values(), key=lambda g: g.id))

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.lower() in self._by_address
