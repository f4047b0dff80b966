"""
Health Endpoints

Endpoints:
- / - Liveness text, no DB access
- /health - Store reachability and row count
"""

from flask import jsonify
from routes.api import api_bp
from routes.api._route_utils import route_logger
from models.database import db
from models.transaction import Transaction

logger = route_logger("health")


@api_bp.route("/", methods=["GET"])
def ping():
    return "Test..."


@api_bp.route("/health", methods=["GET"])
def health():
    """Report whether the store answers and how many rows it holds."""
    try:
        count = db.session.query(Transaction).count()
    except Exception as e:
        logger.exception("health check failed: %s", e)
        return jsonify({"status": "unavailable"}), 503
    return jsonify({"status": "healthy", "records": count})
