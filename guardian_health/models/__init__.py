# guardian_health/models/__init__.py

from .health_check import HealthCheck

__all__ = [
    "HealthCheck",
]
