"""
Dashboard View Shaping - Pure Functions for Testing

Reshapes API payloads (the JSON-ready dicts the /api endpoints return) into
what the dashboard page renders. No I/O, no database access.

Usage:
    from services.dashboard_view import rebucket_histogram, filter_page

    bars = rebucket_histogram(dump_list(get_price_histogram(window)))
    rows = filter_page(page_payload['transactions'], "shirt")
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from schemas.transactions import OVERFLOW_BUCKET

logger = logging.getLogger(__name__)


# =============================================================================
# SELECTOR OPTIONS
# =============================================================================

MONTHS = [
    ("01", "January"),
    ("02", "February"),
    ("03", "March"),
    ("04", "April"),
    ("05", "May"),
    ("06", "June"),
    ("07", "July"),
    ("08", "August"),
    ("09", "September"),
    ("10", "October"),
    ("11", "November"),
    ("12", "December"),
]
MONTH_LABELS = dict(MONTHS)

YEARS = [str(year) for year in range(2021, 2026)]

DEFAULT_MONTH = "03"
DEFAULT_YEAR = "2022"
TABLE_PER_PAGE = 10


# =============================================================================
# HISTOGRAM RE-BUCKETING
# =============================================================================

PRICE_RANGE_LABELS = [
    '0-100',
    '101-200',
    '201-300',
    '301-400',
    '401-500',
    '501-600',
    '601-700',
    '701-800',
    '801-900',
    OVERFLOW_BUCKET,
]
PRICE_RANGE_WIDTH = 100


@dataclass
class ChartBar:
    label: str
    count: int
    height_pct: float = 0.0


def _range_index(bucket_id: Any) -> Optional[int]:
    if bucket_id == OVERFLOW_BUCKET:
        return len(PRICE_RANGE_LABELS) - 1
    try:
        lower = int(bucket_id)
    except (TypeError, ValueError):
        return None
    if lower < 0:
        return None
    return min(lower // PRICE_RANGE_WIDTH, len(PRICE_RANGE_LABELS) - 1)


def rebucket_histogram(buckets: List[Dict[str, Any]]) -> List[ChartBar]:
    """
    Spread sparse `{_id, count}` buckets over the ten fixed range labels.

    Every label is present in the result; labels with no bucket get 0.
    Bar heights are relative to the tallest bar.

    Example:
        >>> [b.count for b in rebucket_histogram([{"_id": 100, "count": 2}])]
        [0, 2, 0, 0, 0, 0, 0, 0, 0, 0]
    """
    counts = [0] * len(PRICE_RANGE_LABELS)
    for bucket in buckets:
        index = _range_index(bucket.get('_id'))
        if index is None:
            logger.warning("Skipping unrecognized histogram bucket %r", bucket.get('_id'))
            continue
        counts[index] += int(bucket.get('count') or 0)

    tallest = max(counts)
    return [
        ChartBar(
            label=label,
            count=count,
            height_pct=round(count * 100.0 / tallest, 1) if tallest else 0.0,
        )
        for label, count in zip(PRICE_RANGE_LABELS, counts)
    ]


# =============================================================================
# SINGLE-PAGE SEARCH
# =============================================================================

def price_text(price: Any) -> str:
    """Render a price the way it is searched: integral floats lose the '.0'."""
    if isinstance(price, float) and price.is_integer():
        return str(int(price))
    return str(price)


def matches_search(transaction: Dict[str, Any], query: str) -> bool:
    needle = query.lower()
    title = transaction.get('title') or ''
    description = transaction.get('description') or ''
    return (
        needle in title.lower()
        or needle in description.lower()
        or needle in price_text(transaction.get('price'))
    )


def filter_page(transactions: List[Dict[str, Any]], query: Optional[str]) -> List[Dict[str, Any]]:
    """
    Case-insensitive substring filter over an already-fetched page.

    Matches title, description, or the stringified price. Rows outside the
    fetched page are never considered.
    """
    if not query:
        return list(transactions)
    return [t for t in transactions if matches_search(t, query)]


@dataclass
class TableView:
    """What the transactions table renders for one fetched page."""
    page: int
    per_page: int
    rows: List[Dict[str, Any]] = field(default_factory=list)
    fetched: int = 0
    search: str = ''

    @property
    def total(self) -> int:
        return len(self.rows)

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        # Only a full page hints at more rows; the API does not report a global count
        return self.fetched >= self.per_page


def build_table_view(page_payload: Dict[str, Any], search: Optional[str]) -> TableView:
    """Apply the search box to a /transactions payload."""
    transactions = page_payload.get('transactions') or []
    return TableView(
        page=page_payload.get('page', 1),
        per_page=page_payload.get('perPage', TABLE_PER_PAGE),
        rows=filter_page(transactions, search),
        fetched=len(transactions),
        search=search or '',
    )
