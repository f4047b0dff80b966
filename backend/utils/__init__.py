"""
Utility modules for the backend.
"""
from .normalize import (
    INVALID_MONTH_MESSAGE,
    MonthWindow,
    ValidationError,
    to_date,
    to_int,
    to_month_window,
    to_str,
    validation_error_response,
    window_starting_at,
)

__all__ = [
    'INVALID_MONTH_MESSAGE',
    'MonthWindow',
    'ValidationError',
    'to_date',
    'to_int',
    'to_month_window',
    'to_str',
    'validation_error_response',
    'window_starting_at',
]
