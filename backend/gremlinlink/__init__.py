import logging
import os

from flask import Flask, send_file, current_app
from flask_swagger_ui import get_swaggerui_blueprint
from sqlalchemy import event
from sqlalchemy.engine import Engine

from .config import config_by_name, store_engine_options
from .extensions import db, migrate, jwt
from .api.v1 import v1_bp
from .api.public import public_bp
from .application.analytics import ClickRecorder
from .middleware.request_context import request_context_middleware
from .errors import register_error_handlers
from .cli import register_commands

__version__ = "1.0.0"


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # ON DELETE CASCADE / SET NULL need this on SQLite
    if dbapi_connection.__class__.__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(config_name: str = "development", overrides: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    if overrides:
        app.config.update(overrides)

    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        store_engine_options(
            app.config.get("SQLALCHEMY_DATABASE_URI"),
            app.config["STORE_TIMEOUT_SECONDS"],
        ),
    )

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # -------------------------------------------------
    # Extensions
    # -------------------------------------------------
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    ClickRecorder(app)

    # -------------------------------------------------
    # Middleware
    # -------------------------------------------------
    request_context_middleware(app)

    # -------------------------------------------------
    # API Blueprints
    # -------------------------------------------------
    app.register_blueprint(v1_bp, url_prefix="/api/v1")
    register_error_handlers(app)
    register_commands(app)

    # -------------------------------------------------
    # Serve OpenAPI YAML
    # -------------------------------------------------
    @app.route("/openapi/gremlinlink.yaml", methods=["GET"], endpoint="openapi_document")
    def serve_openapi():
        document_path = os.path.join(
            current_app.root_path,
            "api",
            "v1",
            "openapi.yaml",
        )

        if not os.path.exists(document_path):
            raise FileNotFoundError("openapi.yaml not found")

        return send_file(
            document_path,
            mimetype="application/yaml",
            as_attachment=False,
        )

    # -------------------------------------------------
    # Swagger UI
    # -------------------------------------------------
    SWAGGER_URL = "/swagger"
    API_URL = "/openapi/gremlinlink.yaml"

    swaggerui_blueprint = get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            "app_name": "GremlinLink API",
            "deepLinking": True,
            "persistAuthorization": True,
        },
    )

    app.register_blueprint(swaggerui_blueprint, url_prefix=SWAGGER_URL)

    app.register_blueprint(public_bp)

    return app
