"""
Tests for the service status, registry and metrics endpoints.
"""
import json

import pytest

from guardian_health.factory import create_app
from conftest import GUARDIAN_KEYS, address_of, heartbeat_payload


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200

    data = json.loads(response.data)
    assert data["status"] == "ok"
    assert "version" in data
    assert "timestamp" in data


def test_guardian_provers_endpoint_reports_counts(client):
    client.post("/healthCheck", json=heartbeat_payload(GUARDIAN_KEYS[7]))

    response = client.get("/guardianProvers")

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data["count"] == len(GUARDIAN_KEYS)
    by_id = {g["id"]: g for g in data["guardianProvers"]}
    assert by_id[7] == {"id": 7, "address": address_of(GUARDIAN_KEYS[7]), "healthCheckCount": 1}
    assert by_id[1]["healthCheckCount"] == 0


def test_metrics_endpoint_exposes_health_check_counters(client):
    client.post("/healthCheck", json=heartbeat_payload(GUARDIAN_KEYS[1]))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.content_type.startswith("text/plain")
    body = response.data.decode()
    assert "guardian_prover_health_checks_total" in body
    assert f'address="{address_of(GUARDIAN_KEYS[1])}"' in body
    assert 'guardian_health_check_requests_total{outcome="success"}' in body


def test_create_app_rejects_invalid_guardian_provers():
    with pytest.raises(ValueError):
        create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "GUARDIAN_PROVERS": "1:not-an-address",
        })


def test_init_db_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["init-db", "--drop"])
    assert result.exit_code == 0
    assert "Database initialized" in result.output


def test_list_guardian_provers_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["list-guardian-provers"])
    assert result.exit_code == 0
    assert address_of(GUARDIAN_KEYS[2]) in result.output
