"""Shared fixtures: an app backed by in-memory SQLite and real guardian keys."""
import base64

import pytest
from eth_keys import keys

from guardian_health.extensions import db
from guardian_health.factory import create_app
from guardian_health.signature import HEART_BEAT_MESSAGE

GUARDIAN_KEYS = {
    1: keys.PrivateKey(b"\x11" * 32),
    2: keys.PrivateKey(b"\x22" * 32),
    7: keys.PrivateKey(b"\x77" * 32),
}
OUTSIDER_KEY = keys.PrivateKey(b"\x99" * 32)


def address_of(private_key) -> str:
    return private_key.public_key.to_checksum_address()


def sign_heartbeat(private_key, message_hash: bytes = HEART_BEAT_MESSAGE) -> str:
    """Signs the heartbeat digest the way guardian provers do: base64(r || s || v)."""
    signature = private_key.sign_msg_hash(message_hash)
    return base64.b64encode(signature.to_bytes()).decode()


def heartbeat_payload(private_key) -> dict:
    return {"prover": address_of(private_key), "heartBeatSignature": sign_heartbeat(private_key)}


@pytest.fixture
def guardian_provers_config():
    return ",".join(f"{gid}:{address_of(key)}" for gid, key in GUARDIAN_KEYS.items())


@pytest.fixture
def app(guardian_provers_config):
    """Create a test Flask application."""
    test_app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "GUARDIAN_PROVERS": guardian_provers_config,
        "AUTO_CREATE_TABLES": True,
    })

    yield test_app

    with test_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def registry(app):
    return app.extensions["guardian_provers"]
