"""
Chart Endpoints

Endpoints:
- /bar-chart - Non-empty $100 price buckets for a month
- /pie-chart - Transaction count per category for a month
"""

import time
from flask import request, jsonify
from routes.api import api_bp
from routes.api._route_utils import route_logger, log_success, log_error, operation_error
from schemas.transactions import dump_list
from services.transaction_service import get_category_counts, get_price_histogram
from utils.normalize import to_month_window, ValidationError, validation_error_response

logger = route_logger("charts")


@api_bp.route("/bar-chart", methods=["GET"])
def get_bar_chart():
    """
    Price histogram for the month.

    Returns [{"_id": <bucket lower bound or "901-above">, "count": n}, ...]
    with empty buckets omitted.

    Example:
        GET /api/bar-chart?month=2022-03
    """
    start = time.perf_counter()
    try:
        window = to_month_window(request.args.get("month"))
    except ValidationError as e:
        return validation_error_response(e)

    try:
        buckets = get_price_histogram(window)
    except Exception as e:
        log_error(logger, "bar-chart", start, e, {"month": window.label})
        return operation_error("Unable to retrieve bar chart data")

    log_success(logger, "bar-chart", start, {"month": window.label, "buckets": len(buckets)})
    return jsonify(dump_list(buckets))


@api_bp.route("/pie-chart", methods=["GET"])
def get_pie_chart():
    """
    Category counts for the month, most frequent first.

    Example:
        GET /api/pie-chart?month=2022-03
    """
    start = time.perf_counter()
    try:
        window = to_month_window(request.args.get("month"))
    except ValidationError as e:
        return validation_error_response(e)

    try:
        categories = get_category_counts(window)
    except Exception as e:
        log_error(logger, "pie-chart", start, e, {"month": window.label})
        return operation_error("Unable to retrieve pie chart data")

    log_success(logger, "pie-chart", start, {"month": window.label, "categories": len(categories)})
    return jsonify(dump_list(categories))
