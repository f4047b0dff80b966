"""
Pydantic models for the transaction endpoints.

Response models serialize backend snake_case to frontend camelCase via Field
aliases. Use: `Model.model_dump(mode='json', by_alias=True)`.

Covers:
- /all-transactions, /transactions
- /statistics
- /bar-chart, /pie-chart
- /combined-data
- seed feed records (/initialize)
"""

from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from models.transaction import Transaction

# Histogram bucket id for prices outside [0, 900)
OVERFLOW_BUCKET = '901-above'


def to_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after shifting aware datetimes to UTC; naive values are taken as UTC."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# =============================================================================
# INPUT MODELS
# =============================================================================

class SeedRecord(BaseModel):
    """One transaction-shaped object from the seed feed."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: Optional[str] = None
    price: float = 0.0
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    sold: bool = False
    date_of_sale: datetime = Field(alias='dateOfSale')

    @field_validator('price', 'sold', mode='before')
    @classmethod
    def _null_to_default(cls, value, info):
        # Feed items may carry explicit nulls; they take the field default
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator('date_of_sale')
    @classmethod
    def _normalize_date_of_sale(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    def to_model(self) -> Transaction:
        return Transaction(
            id=self.id,
            title=self.title,
            price=self.price,
            description=self.description,
            category=self.category,
            image=self.image,
            sold=self.sold,
            date_of_sale=self.date_of_sale,
        )


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class TransactionItem(BaseModel):
    """A single transaction row as the dashboard consumes it."""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: Optional[str] = None
    price: float
    description: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    sold: bool = False
    date_of_sale: datetime = Field(alias='dateOfSale')

    @field_serializer('date_of_sale')
    def _serialize_date_of_sale(self, value: datetime) -> str:
        return value.isoformat(timespec='milliseconds') + 'Z'

    @classmethod
    def from_rows(cls, rows: List[Transaction]) -> List['TransactionItem']:
        return [cls.model_validate(row.to_dict()) for row in rows]


class TransactionListResponse(BaseModel):
    """Full response model for /all-transactions."""
    transactions: List[TransactionItem]
    total: int


class TransactionPageResponse(BaseModel):
    """
    Full response model for /transactions.

    `total` is the length of this page, not the number of matching rows.
    """
    model_config = ConfigDict(populate_by_name=True)

    transactions: List[TransactionItem]
    page: int
    per_page: int = Field(alias='perPage')
    total: int


class MonthlyStatistics(BaseModel):
    """Full response model for /statistics."""
    model_config = ConfigDict(populate_by_name=True)

    total_sale_amount: float = Field(default=0, alias='totalSaleAmount')
    total_sold_items: int = Field(default=0, alias='totalSoldItems')
    total_unsold_items: int = Field(default=0, alias='totalUnsoldItems')


class PriceBucket(BaseModel):
    """One non-empty histogram bucket; `_id` is the lower bound or OVERFLOW_BUCKET."""
    model_config = ConfigDict(populate_by_name=True)

    bucket: Union[int, str] = Field(alias='_id')
    count: int


class CategoryCount(BaseModel):
    category: Optional[str] = None
    count: int


class CombinedTransactions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    per_page: int = Field(alias='perPage')
    total: int
    data: List[TransactionItem]


class CombinedResponse(BaseModel):
    """Full response model for /combined-data."""
    model_config = ConfigDict(populate_by_name=True)

    transactions: CombinedTransactions
    statistics: MonthlyStatistics
    pie_chart_data: List[CategoryCount] = Field(alias='pieChartData')


def dump(model: BaseModel) -> dict:
    """Serialize a response model with camelCase keys and JSON-safe values."""
    return model.model_dump(mode='json', by_alias=True)


def dump_list(models: List[BaseModel]) -> list:
    return [dump(m) for m in models]
