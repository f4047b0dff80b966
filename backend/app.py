"""
Flask Application Factory - Sales Transactions Dashboard

- JSON API under API_PREFIX (default /api), CORS open to any origin
- Server-rendered dashboard page at /
- All settings come from the config object passed to create_app()
"""

import logging
import os

from flask import Flask
from flask_cors import CORS

from models.database import db

logger = logging.getLogger(__name__)


def create_app(config_object=None):
    """
    Build the application.

    Args:
        config_object: Class or object holding settings. Defaults to config.Config,
            which reads the environment (and .env) once at import time.
    """
    if config_object is None:
        from config import Config
        config_object = Config

    app = Flask(__name__)
    app.config.from_object(config_object)

    api_prefix = app.config.get('API_PREFIX', '/api')

    # Initialize CORS - allow all origins on the API
    CORS(app,
         resources={rf"{api_prefix}/*": {"origins": app.config.get('CORS_ORIGINS', '*')}},
         methods=["GET", "OPTIONS"],
         allow_headers=["Content-Type", "X-Request-ID"],
         expose_headers=["X-Request-ID"],
         supports_credentials=False,
         send_wildcard=True)

    # === MIDDLEWARE ===
    from api.middleware import (
        setup_request_id_middleware,
        setup_error_handlers,
        setup_request_logging_middleware,
    )
    setup_request_id_middleware(app)
    setup_error_handlers(app)
    setup_request_logging_middleware(app, api_prefix=api_prefix)

    # Initialize SQLAlchemy
    db.init_app(app)

    with app.app_context():
        # Import models before create_all to ensure tables are created
        from models.transaction import Transaction  # noqa: F401

        env = (os.environ.get("ENV") or os.environ.get("FLASK_ENV") or os.environ.get("APP_ENV") or "").lower()
        is_prod = env in {"prod", "production"}
        allow_create = app.config.get("TESTING") or not is_prod
        if allow_create:
            db.create_all()
            logger.info("Database initialized")
        else:
            logger.info("Database ready (schema creation disabled in production)")

    # Register routes
    from routes.api import api_bp
    app.register_blueprint(api_bp, url_prefix=api_prefix)

    from routes.dashboard import dashboard_bp
    app.register_blueprint(dashboard_bp)

    return app


def run_app():
    """Main entry point for local development - starts server with Flask's dev server."""
    from config import Config

    logging.basicConfig(
        level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(Config)

    with app.app_context():
        from models.transaction import Transaction
        count = db.session.query(Transaction).count()
        logger.info("Transactions in store: %d", count)
        if count == 0:
            logger.info("Store is empty. Seed it with GET %s/initialize", Config.API_PREFIX)

    app.run(debug=Config.DEBUG, host="0.0.0.0", port=Config.PORT)


if __name__ == "__main__":
    run_app()
