"""
Transaction Endpoints

Endpoints:
- /all-transactions - Every stored transaction
- /transactions - One page of a month's transactions
- /statistics - Sale amount, sold and unsold counts for a month
- /combined-data - Page + statistics + category counts in one response
"""

import time
from flask import request, jsonify
from routes.api import api_bp
from routes.api._param_utils import read_pagination
from routes.api._route_utils import route_logger, log_success, log_error, operation_error
from schemas.transactions import dump
from services.transaction_service import (
    get_combined_data,
    get_monthly_statistics,
    list_all_transactions,
    list_transactions_for_month,
)
from utils.normalize import (
    to_date, to_month_window, window_starting_at,
    ValidationError, validation_error_response
)

logger = route_logger("transactions")


@api_bp.route("/all-transactions", methods=["GET"])
def get_all_transactions():
    """Return every transaction with its count. No pagination."""
    start = time.perf_counter()
    try:
        result = list_all_transactions()
    except Exception as e:
        log_error(logger, "all-transactions", start, e)
        return operation_error("Error retrieving transactions from database")

    log_success(logger, "all-transactions", start, {"rows": result.total})
    return jsonify(dump(result))


@api_bp.route("/transactions", methods=["GET"])
def get_transactions():
    """
    Return one page of the month's transactions.

    Query params:
        - month: YYYY-MM (required)
        - page: Page number (default 1)
        - perPage: Records per page (default DEFAULT_PER_PAGE)
        - search: Accepted for compatibility; filtering happens client-side

    `total` in the response is the size of the returned page.

    Example:
        GET /api/transactions?month=2022-03&page=2&perPage=10
    """
    start = time.perf_counter()
    try:
        window = to_month_window(request.args.get("month"))
        page, per_page = read_pagination()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = list_transactions_for_month(window, page=page, per_page=per_page)
    except Exception as e:
        log_error(logger, "transactions", start, e, {"month": window.label})
        return operation_error("Unable to retrieve transactions")

    log_success(logger, "transactions", start, {"month": window.label, "page": page, "rows": result.total})
    return jsonify(dump(result))


@api_bp.route("/statistics", methods=["GET"])
def get_statistics():
    """
    Return totals for the month.

    `month` may be YYYY-MM or YYYY-MM-DD; the window starts at that date and
    spans one calendar month. There is no 400 here: a month that cannot be
    parsed is reported like any other failure.

    Example:
        GET /api/statistics?month=2022-03-01
    """
    start = time.perf_counter()
    month = request.args.get("month")
    try:
        start_date = to_date(month, field="month")
        if start_date is None:
            raise ValidationError("month is required", field="month")
        result = get_monthly_statistics(window_starting_at(start_date))
    except Exception as e:
        log_error(logger, "statistics", start, e, {"month": month})
        return operation_error("Unable to fetch statistics")

    log_success(logger, "statistics", start, {"month": month})
    return jsonify(dump(result))


@api_bp.route("/combined-data", methods=["GET"])
def get_combined():
    """
    Return the month's page, statistics and category counts together.

    All-or-nothing: any failing part fails the whole response.

    Example:
        GET /api/combined-data?month=2022-03&page=1&perPage=10
    """
    start = time.perf_counter()
    try:
        window = to_month_window(request.args.get("month"))
        page, per_page = read_pagination()
    except ValidationError as e:
        return validation_error_response(e)

    try:
        result = get_combined_data(window, page=page, per_page=per_page)
    except Exception as e:
        log_error(logger, "combined-data", start, e, {"month": window.label})
        return operation_error("Error combining data from multiple sources")

    log_success(logger, "combined-data", start, {"month": window.label, "page": page})
    return jsonify(dump(result))
