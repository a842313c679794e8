# guardian_health/models/health_check.py

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, BigInteger, Boolean, String, Text, DateTime
from guardian_health.extensions import db


class HealthCheck(db.Model):
    __tablename__ = "health_checks"

    # SQLite only autoincrements INTEGER primary keys.
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    guardian_prover_id = Column(Integer, nullable=False, index=True)
    alive = Column(Boolean, nullable=False, default=True)
    expected_address = Column(String(42), nullable=False)
    recovered_address = Column(String(42), nullable=False)
    signed_response = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def to_dict(self):
        """Serializes the HealthCheck object to a dictionary."""
        return {
            "id": self.id,
            "guardianProverId": self.guardian_prover_id,
            "alive": self.alive,
            "expectedAddress": self.expected_address,
            "recoveredAddress": self.recovered_address,
            "signedResponse": self.signed_response,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
