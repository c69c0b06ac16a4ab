# backend/garments/__init__.py
from flask import Flask, request, jsonify
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from .config import Config
from .errors import ServiceError, UnavailableError
from .extensions import db, migrate


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ServiceError)
    def handle_service_error(exc: ServiceError):
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(OperationalError)
    def handle_store_error(exc: OperationalError):
        db.session.rollback()
        app.logger.exception("Backing store unavailable")
        err = UnavailableError("Backing store unavailable; retry the request")
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.name, "message": exc.description}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        db.session.rollback()
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "InternalError", "message": "Internal server error"}), 500


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # The engine gets the store handle here; it is never a module global
    from .services.inventory_service import InventoryEngine
    app.extensions["garments.inventory_engine"] = InventoryEngine(
        db.session,
        retry_attempts=app.config["ORDER_RETRY_ATTEMPTS"],
        backoff_base=app.config["ORDER_RETRY_BACKOFF"],
        logger=app.logger,
    )

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.products import products_bp
    from .routes.orders import orders_bp
    from .routes.analytics import analytics_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(analytics_bp)

    register_error_handlers(app)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin in app.config["CORS_ORIGINS"]:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
