"""
Seed Endpoint

Endpoints:
- /initialize - Replace every transaction with the seed feed contents
"""

import time
from flask import current_app, jsonify
from routes.api import api_bp
from routes.api._route_utils import route_logger, log_success, log_error, operation_error
from services.seed_loader import seed_from_url

logger = route_logger("seed")


@api_bp.route("/initialize", methods=["GET"])
def initialize():
    """
    Fetch the configured seed feed and replace the transactions table.

    A fetch failure leaves the table untouched; an insert failure is rolled
    back. Either way the client only sees a generic 500.

    Example:
        GET /api/initialize
    """
    start = time.perf_counter()
    try:
        inserted = seed_from_url(
            current_app.config.get("SEED_DATA_URL"),
            timeout=current_app.config.get("SEED_REQUEST_TIMEOUT", 30),
        )
    except Exception as e:
        log_error(logger, "initialize", start, e)
        return operation_error("Unable to initialize database")

    log_success(logger, "initialize", start, {"inserted": inserted})
    return jsonify({"message": "Database successfully populated with seed data"})
