# API Schema Contract Package
from .transactions import (
    OVERFLOW_BUCKET,
    SeedRecord,
    TransactionItem,
    TransactionListResponse,
    TransactionPageResponse,
    MonthlyStatistics,
    PriceBucket,
    CategoryCount,
    CombinedTransactions,
    CombinedResponse,
    dump,
    dump_list,
)

__all__ = [
    'OVERFLOW_BUCKET',
    'SeedRecord',
    'TransactionItem',
    'TransactionListResponse',
    'TransactionPageResponse',
    'MonthlyStatistics',
    'PriceBucket',
    'CategoryCount',
    'CombinedTransactions',
    'CombinedResponse',
    'dump',
    'dump_list',
]
