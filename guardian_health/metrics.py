"""
Prometheus metrics for the health check service.

Counters live in the process-wide default registry and are exposed by the
``/metrics`` route.
"""
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST

guardian_prover_health_checks = Counter(
    "guardian_prover_health_checks_total",
    "Successful health checks by guardian prover",
    ["guardian_prover_id", "address"],
)

health_check_requests = Counter(
    "guardian_health_check_requests_total",
    "Heartbeat submissions by outcome",
    ["outcome"],
)


def render_latest():
    """Returns the exposition payload and its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST
