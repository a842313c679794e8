import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from guardian_health.errors import HealthCheckStoreError
from guardian_health.models import HealthCheck
from guardian_health.models.db_utils import get_session_scope

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100


class SaveHealthCheckOpts(BaseModel):
    """Everything needed to persist one health check."""
    guardian_prover_id: int = Field(..., ge=0)
    alive: bool
    expected_address: str
    recovered_address: str
    signed_response: str


class HealthCheckService:
    """Stores health checks and answers queries about them."""

    def init_app(self, app):
        app.extensions["health_check_service"] = self
        logger.info("HealthCheckService initialized.")

    def save(self, opts: SaveHealthCheckOpts) -> Dict[str, Any]:
        """
        Persists a health check.

        Returns:
            The stored record as a dict.

        Raises:
            HealthCheckStoreError if the database rejects or cannot complete the write.
        """
        try:
            with get_session_scope() as session:
                health_check = HealthCheck(
                    guardian_prover_id=opts.guardian_prover_id,
                    alive=opts.alive,
                    expected_address=opts.expected_address,
                    recovered_address=opts.recovered_address,
                    signed_response=opts.signed_response,
                )
                session.add(health_check)
                session.flush()  # Assign ID
                record = health_check.to_dict()
        except SQLAlchemyError as e:
            raise HealthCheckStoreError(f"failed to save health check: {e.__class__.__name__}") from e

        logger.debug(f"HealthCheck {record['id']} persisted for guardian prover {opts.guardian_prover_id}.")
        return record

    def get_all(self, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        """Returns a page of health checks across all guardian provers, newest first."""
        return self._paginate(None, page, per_page)

    def get_by_guardian_prover_id(self, guardian_prover_id: int, page: int = 1, per_page: int = 20) -> Dict[str, Any]:
        """Returns a page of health checks for one guardian prover, newest first."""
        return self._paginate(guardian_prover_id, page, per_page)

    def get_most_recent_by_guardian_prover_id(self, guardian_prover_id: int) -> Optional[Dict[str, Any]]:
        """Returns the latest health check for a guardian prover, or None."""
        with get_session_scope() as session:
            health_check = (
                session.query(HealthCheck)
                .filter(HealthCheck.guardian_prover_id == guardian_prover_id)
                .order_by(HealthCheck.created_at.desc(), HealthCheck.id.desc())
                .first()
            )
            return health_check.to_dict() if health_check else None

    def _paginate(self, guardian_prover_id: Optional[int], page: int, per_page: int) -> Dict[str, Any]:
        if page < 1 or per_page < 1:
            raise ValueError("page and per_page must be positive integers")
        per_page = min(per_page, MAX_PER_PAGE)

        with get_session_scope() as session:
            query = session.query(HealthCheck)
            if guardian_prover_id is not None:
                query = query.filter(HealthCheck.guardian_prover_id == guardian_prover_id)

            total = query.count()
            items = (
                query.order_by(HealthCheck.created_at.desc(), HealthCheck.id.desc())
                .limit(per_page)
                .offset((page - 1) * per_page)
                .all()
            )

            return {
                "items": [item.to_dict() for item in items],
                "pagination": {
                    "page": page,
                    "per_page": per_page,
                    "total_pages": (total + per_page - 1) // per_page,
                    "total": total,
                },
            }


health_check_service = HealthCheckService()
