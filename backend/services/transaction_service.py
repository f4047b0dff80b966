"""
Transaction Query Service - month-scoped reads and aggregations

Every month-filtered operation uses the same half-open window
[startOfMonth, startOfMonth + 1 month) built by utils.normalize.

Operations:
- list_all_transactions       every row, unfiltered
- list_transactions_for_month skip/limit page of the month
- get_monthly_statistics      sale amount, sold and unsold counts
- get_price_histogram         non-empty $100 price buckets
- get_category_counts         rows per category, most frequent first
- get_combined_data           page + statistics + category counts

Each function takes an optional SQLAlchemy session so it can run against an
injected store; the Flask-SQLAlchemy scoped session is used otherwise.

Usage:
    from services.transaction_service import get_monthly_statistics
    from utils.normalize import to_month_window

    stats = get_monthly_statistics(to_month_window("2022-03"))
"""

import logging
import time
from functools import wraps
from typing import List

from sqlalchemy import and_, case, func

from models.database import db
from models.transaction import Transaction
from schemas.transactions import (
    OVERFLOW_BUCKET,
    CategoryCount,
    CombinedResponse,
    CombinedTransactions,
    MonthlyStatistics,
    PriceBucket,
    TransactionItem,
    TransactionListResponse,
    TransactionPageResponse,
)
from utils.normalize import MonthWindow

logger = logging.getLogger(__name__)

# Lower bounds of the $100 price buckets; the last boundary opens the overflow bucket
PRICE_BUCKET_BOUNDARIES = [0, 100, 200, 300, 400, 500, 600, 700, 800, 900]
OVERFLOW_BUCKET_KEY = PRICE_BUCKET_BOUNDARIES[-1]


def log_timing(operation: str):
    """Decorator to log operation timing."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                result = fn(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                logger.debug("%s completed in %.1fms", operation, elapsed)
                if elapsed > 1000:
                    logger.warning("SLOW OPERATION: %s took %.1fms", operation, elapsed)
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                logger.error("%s failed after %.1fms: %s", operation, elapsed, e)
                raise
        return wrapper
    return decorator


def _session(session):
    return session if session is not None else db.session


# =============================================================================
# LISTINGS
# =============================================================================

@log_timing("list_all_transactions")
def list_all_transactions(session=None) -> TransactionListResponse:
    """Return every stored transaction. Reads the whole table into memory."""
    rows = _session(session).query(Transaction).order_by(Transaction.id).all()
    items = TransactionItem.from_rows(rows)
    return TransactionListResponse(transactions=items, total=len(items))


def _fetch_page(session, window: MonthWindow, page: int, per_page: int) -> List[TransactionItem]:
    skip = (page - 1) * per_page
    rows = (
        session.query(Transaction)
        .filter(Transaction.window_filter(window))
        .order_by(Transaction.id)
        .offset(skip)
        .limit(per_page)
        .all()
    )
    return TransactionItem.from_rows(rows)


@log_timing("list_transactions_for_month")
def list_transactions_for_month(
    window: MonthWindow,
    page: int = 1,
    per_page: int = 10,
    session=None,
) -> TransactionPageResponse:
    """
    Return one skip/limit page of the month's transactions.

    `total` is the size of the returned page, not the number of rows in the
    month. Callers that need a global count must query for it separately.
    """
    items = _fetch_page(_session(session), window, page, per_page)
    return TransactionPageResponse(
        transactions=items,
        page=page,
        per_page=per_page,
        total=len(items),
    )


# =============================================================================
# AGGREGATIONS
# =============================================================================

@log_timing("monthly_statistics")
def get_monthly_statistics(window: MonthWindow, session=None) -> MonthlyStatistics:
    """
    Aggregate the month in one pass.

    Rows whose sold flag is not true (false or NULL) count as unsold.
    A month with no rows yields all zeros.
    """
    sold_expr = case((Transaction.sold == True, 1), else_=0)  # noqa: E712
    unsold_expr = case((Transaction.sold == True, 0), else_=1)  # noqa: E712

    row = _session(session).query(
        func.coalesce(func.sum(Transaction.price), 0).label('total_sale_amount'),
        func.coalesce(func.sum(sold_expr), 0).label('total_sold_items'),
        func.coalesce(func.sum(unsold_expr), 0).label('total_unsold_items'),
    ).filter(Transaction.window_filter(window)).one()

    return MonthlyStatistics(
        total_sale_amount=float(row.total_sale_amount or 0),
        total_sold_items=int(row.total_sold_items or 0),
        total_unsold_items=int(row.total_unsold_items or 0),
    )


def price_bucket_expression():
    """
    CASE expression mapping price to its bucket's lower bound.

    Prices in [0, 900) land in their $100 bucket; everything else (>= 900, or
    negative) falls through to OVERFLOW_BUCKET_KEY.
    """
    whens = [
        (and_(Transaction.price >= lower, Transaction.price < upper), lower)
        for lower, upper in zip(PRICE_BUCKET_BOUNDARIES[:-1], PRICE_BUCKET_BOUNDARIES[1:])
    ]
    return case(*whens, else_=OVERFLOW_BUCKET_KEY)


@log_timing("price_histogram")
def get_price_histogram(window: MonthWindow, session=None) -> List[PriceBucket]:
    """
    Count the month's rows per price bucket.

    Only non-empty buckets are returned, lower bounds ascending with the
    overflow bucket last. Counts sum to the number of rows in the window.
    """
    bucket = price_bucket_expression().label('bucket')
    rows = (
        _session(session).query(bucket, func.count(Transaction.id).label('count'))
        .filter(Transaction.window_filter(window))
        .group_by('bucket')
        .order_by('bucket')
        .all()
    )
    return [
        PriceBucket(
            bucket=OVERFLOW_BUCKET if int(r.bucket) == OVERFLOW_BUCKET_KEY else int(r.bucket),
            count=r.count,
        )
        for r in rows
    ]


@log_timing("category_counts")
def get_category_counts(window: MonthWindow, session=None) -> List[CategoryCount]:
    """Count the month's rows per category, most frequent first (ties by name)."""
    count_expr = func.count(Transaction.id)
    rows = (
        _session(session).query(Transaction.category, count_expr.label('count'))
        .filter(Transaction.window_filter(window))
        .group_by(Transaction.category)
        .order_by(count_expr.desc(), Transaction.category)
        .all()
    )
    return [CategoryCount(category=r.category, count=r.count) for r in rows]


@log_timing("combined_data")
def get_combined_data(
    window: MonthWindow,
    page: int = 1,
    per_page: int = 10,
    session=None,
) -> CombinedResponse:
    """Page, statistics and category counts for one month in a single result."""
    session = _session(session)
    items = _fetch_page(session, window, page, per_page)
    return CombinedResponse(
        transactions=CombinedTransactions(
            page=page,
            per_page=per_page,
            total=len(items),
            data=items,
        ),
        statistics=get_monthly_statistics(window, session=session),
        pie_chart_data=get_category_counts(window, session=session),
    )
