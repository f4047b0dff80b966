"""
Dashboard Page - server-rendered transactions dashboard

Renders three independent widgets for the selected month:
- Transactions table (one fetched page, filtered by the search box)
- Monthly statistics box
- Price-range bar chart (ten fixed ranges, zero-filled)

A widget that fails renders a plain-text message in its place; the others
still render.

Query params:
    - month: 01..12 (default 03)
    - year: 2021..2025 (default 2022)
    - page: table page (default 1; selector changes drop it, resetting to 1)
    - search: substring filter over the fetched page only
"""

import logging
from typing import Any, Callable, Optional, Tuple

from flask import Blueprint, render_template, request

from models.database import db
from schemas.transactions import dump, dump_list
from services.dashboard_view import (
    DEFAULT_MONTH, DEFAULT_YEAR, MONTHS, MONTH_LABELS, YEARS, TABLE_PER_PAGE,
    build_table_view, rebucket_histogram,
)
from services.transaction_service import (
    get_monthly_statistics, get_price_histogram, list_transactions_for_month,
)
from utils.normalize import to_int, to_month_window, to_str, ValidationError

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__, template_folder='templates')


def _load_widget(name: str, loader: Callable[[], Any], message: str) -> Tuple[Optional[Any], Optional[str]]:
    try:
        return loader(), None
    except Exception as e:
        logger.exception("dashboard widget %s failed: %s", name, e)
        db.session.rollback()
        return None, message


@dashboard_bp.route("/", methods=["GET"])
def index():
    month = request.args.get("month", DEFAULT_MONTH)
    if month not in MONTH_LABELS:
        month = DEFAULT_MONTH
    year = request.args.get("year", DEFAULT_YEAR)
    if year not in YEARS:
        year = DEFAULT_YEAR
    try:
        page = to_int(request.args.get("page"), default=1, minimum=1, field="page")
    except ValidationError:
        page = 1
    search = to_str(request.args.get("search"), default="")

    window = to_month_window(f"{year}-{month}")

    table, table_error = _load_widget(
        "table",
        lambda: build_table_view(
            dump(list_transactions_for_month(window, page=page, per_page=TABLE_PER_PAGE)),
            search,
        ),
        "Failed to load transactions.",
    )
    statistics, statistics_error = _load_widget(
        "statistics",
        lambda: dump(get_monthly_statistics(window)),
        "Failed to fetch statistics.",
    )
    bars, chart_error = _load_widget(
        "bar-chart",
        lambda: rebucket_histogram(dump_list(get_price_histogram(window))),
        "Failed to load chart data.",
    )

    return render_template(
        "dashboard.html",
        months=MONTHS,
        years=YEARS,
        month=month,
        month_label=MONTH_LABELS[month],
        year=year,
        search=search,
        table=table,
        table_error=table_error,
        statistics=statistics,
        statistics_error=statistics_error,
        bars=bars,
        chart_error=chart_error,
    )
