import os
import secrets


def _as_bool(value: str) -> bool:
    return str(value).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    Unified configuration class for development and production environments.
    Reads settings primarily from environment variables, with sensible defaults.
    """

    # --- General & Security ---
    SECRET_KEY = os.environ.get("SECRET_KEY", secrets.token_hex(16))
    FLASK_ENV = os.environ.get("FLASK_ENV", "development").lower()
    DEBUG = FLASK_ENV != "production"

    # --- Logging ---
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    # --- Database Configuration ---
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///guardian_health.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    AUTO_CREATE_TABLES = _as_bool(os.environ.get("AUTO_CREATE_TABLES", "true"))

    # --- Guardian Provers ---
    # Comma separated "id:address" pairs, e.g. "1:0xAbC...,2:0xDeF..."
    GUARDIAN_PROVERS = os.environ.get("GUARDIAN_PROVERS", "")

    # --- CORS Origins ---
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    # --- Swagger UI ---
    SWAGGER = {
        "title": "Guardian Prover Health Check API",
        "uiversion": 3,
        "description": "Heartbeat ingestion and health check queries for guardian provers.",
    }
