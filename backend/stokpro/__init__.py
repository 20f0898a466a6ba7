# Overview: Flask application factory; wires configuration, database, blueprints, CORS and CLI.

from flask import Flask, request
from sqlalchemy import event

from .config import Config
from .extensions import db, migrate
from .errors import register_error_handlers


def _enable_sqlite_foreign_keys(app: Flask) -> None:
    """SQLite ignores ON DELETE CASCADE / SET NULL unless the pragma is on per connection."""
    if not app.config["SQLALCHEMY_DATABASE_URI"].startswith("sqlite"):
        return

    with app.app_context():
        @event.listens_for(db.engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()


def create_app(config: Config | None = None) -> Flask:
    if config is None:
        config = Config.from_env()

    app = Flask(__name__, instance_relative_config=True)
    app.config.update(config.flask_settings())
    app.extensions["stokpro"] = config

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    _enable_sqlite_foreign_keys(app)
    register_error_handlers(app)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.products import products_bp
    from .routes.customers import customers_bp
    from .routes.sales import sales_bp
    from .routes.payments import payments_bp
    from .routes.returns import returns_bp
    from .routes.warehouses import warehouses_bp
    from .routes.accounts import accounts_bp
    from .routes.expenses import expenses_bp
    from .routes.quotes import quotes_bp
    from .routes.e_documents import e_documents_bp
    from .routes.users import users_bp
    from .routes.settings import settings_bp
    from .routes.dashboard import dashboard_bp
    from .routes.reports import reports_bp
    from .routes.admin import admin_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(sales_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(returns_bp)
    app.register_blueprint(warehouses_bp)
    app.register_blueprint(accounts_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(quotes_bp)
    app.register_blueprint(e_documents_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(admin_bp)

    allowed_origins = config.allowed_origins()

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if not origin:
            return response
        if allowed_origins is None:
            # "*" is never combined with Allow-Credentials
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Credentials"] = "true"
        else:
            return response
        response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type, X-API-Key"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    app.logger.info("StokPro API configured (env=%s)", config.env)
    return app
