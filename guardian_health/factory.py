import logging
import sys
from typing import Any, Mapping, Optional

import click
from flask import Flask
from sqlalchemy import text

from guardian_health.config import Config
from guardian_health.extensions import db, cors, swagger
from guardian_health.guardian_prover import GuardianProverRegistry
from guardian_health.routes import register_routes
from guardian_health.services.health_check_service import health_check_service

logger = logging.getLogger(__name__)


def configure_logging(app: Flask) -> None:
    """Configures root logging from the app's LOG_LEVEL and LOG_FORMAT."""
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level, format=app.config.get("LOG_FORMAT"))
    logging.getLogger().setLevel(level)


def create_app(test_config: Optional[Mapping[str, Any]] = None) -> Flask:
    """Creates and configures the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.from_mapping(test_config)

    configure_logging(app)

    try:
        guardian_provers = GuardianProverRegistry.from_config(app.config.get("GUARDIAN_PROVERS"))
    except ValueError as e:
        logger.critical(f"🚨 FAILED TO LOAD GUARDIAN PROVERS: {e}")
        raise
    if not len(guardian_provers):
        logger.warning("⚠️ No guardian provers configured; every heartbeat will be rejected.")
    app.extensions["guardian_provers"] = guardian_provers

    # Initialize Flask extensions
    db.init_app(app)
    cors.init_app(app, origins=app.config.get("CORS_ORIGINS", "*"))
    swagger.init_app(app)
    health_check_service.init_app(app)
    logger.info("✅ Core Flask extensions initialized.")

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
            logger.info("✅ Database tables ensured.")

    register_routes(app)
    register_cli_commands(app)

    logger.info("🚀 Flask app created successfully!")
    return app


def register_cli_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    @click.option("--drop", is_flag=True, help="Drop existing tables before creating them.")
    def init_db_command(drop: bool) -> None:
        """Creates the health check tables."""
        try:
            if drop:
                click.echo("⚠️  Dropping tables...")
                db.drop_all()
            db.create_all()
            db.session.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Error initializing database: {e}", exc_info=True)
            click.secho(f"❌ Failed to initialize database: {e}", fg="red")
            sys.exit(1)
        click.secho("✅ Database initialized.", fg="green")

    @app.cli.command("list-guardian-provers")
    def list_guardian_provers_command() -> None:
        """Prints the configured guardian provers."""
        guardian_provers = app.extensions["guardian_provers"]
        if not len(guardian_provers):
            click.echo("No guardian provers configured.")
            return
        for guardian_prover in guardian_provers:
            click.echo(
                f"{guardian_prover.id}\t{guardian_prover.address}\t"
                f"{guardian_prover.health_check_count} health check(s)"
            )
