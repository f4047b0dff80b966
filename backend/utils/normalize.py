"""
Input Normalization Utilities
=============================

Single source of truth for input normalization.
All parsing of external inputs happens here, nowhere else.

Usage:
    from utils.normalize import to_month_window, to_int, ValidationError

    @bp.route("/data")
    def get_data():
        try:
            window = to_month_window(request.args.get("month"))
            page = to_int(request.args.get("page"), default=1, minimum=1, field="page")
        except ValidationError as e:
            return validation_error_response(e)

        # Now types are guaranteed correct
        return service.get_data(window, page=page)
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

MONTH_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}')
INVALID_MONTH_MESSAGE = 'Invalid month format. Please use YYYY-MM'


class ValidationError(ValueError):
    """Raised when input cannot be normalized to expected type."""

    def __init__(self, message: str, field: str = None, received_value=None):
        super().__init__(message)
        self.field = field
        self.received_value = received_value


@dataclass(frozen=True)
class MonthWindow:
    """Half-open datetime interval [start, end) covering one calendar month."""
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return self.start.strftime('%Y-%m')

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


def window_starting_at(start: Union[date, datetime]) -> MonthWindow:
    """
    Build a window that starts at `start` and spans one calendar month.

    A window whose end would fall past year 9999 is closed at datetime.max.
    """
    if not isinstance(start, datetime):
        start = datetime(start.year, start.month, start.day)
    try:
        end = start + relativedelta(months=1)
    except (ValueError, OverflowError):
        end = datetime.max
    return MonthWindow(start=start, end=end)


def to_month_window(value: Optional[str], *, field: str = 'month') -> MonthWindow:
    """
    Convert a strict YYYY-MM month token to its half-open window.

    Raises:
        ValidationError: If the token is missing, malformed, or names no real month
    """
    if value is None or not MONTH_PATTERN.fullmatch(value):
        raise ValidationError(INVALID_MONTH_MESSAGE, field=field, received_value=value)
    try:
        start = datetime.strptime(value, '%Y-%m')
    except ValueError:
        raise ValidationError(INVALID_MONTH_MESSAGE, field=field, received_value=value)
    return window_starting_at(start)


def to_int(
    value: Optional[str],
    *,
    default: Optional[int] = None,
    minimum: Optional[int] = None,
    field: str = None
) -> Optional[int]:
    """
    Convert string to int, with explicit None handling.

    Args:
        value: Input string (typically from request.args.get())
        default: Value to return if input is None or empty
        minimum: Smallest accepted value, if any
        field: Field name for error messages

    Returns:
        Parsed integer or default

    Raises:
        ValidationError: If value cannot be converted to int or is below minimum
    """
    if value is None or value == "":
        return default
    try:
        result = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected int, got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )
    if minimum is not None and result < minimum:
        raise ValidationError(
            f"Expected int >= {minimum}, got: {value!r}",
            field=field,
            received_value=value
        )
    return result


def to_date(
    value: Optional[Union[str, date]],
    *,
    default: Optional[date] = None,
    field: str = None
) -> Optional[date]:
    """
    Convert string to date object.

    Accepts formats:
        - YYYY-MM-DD (full date)
        - YYYY-MM (first of month)
        - Already a date object (passthrough)
        - Already a datetime object (extracts date)

    Raises:
        ValidationError: If value cannot be parsed as date
    """
    if value is None or value == "":
        return default
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, datetime):
        return value.date()
    try:
        # Support both YYYY-MM-DD and YYYY-MM
        if len(value) == 7:  # YYYY-MM
            return datetime.strptime(value, "%Y-%m").date()
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (ValueError, TypeError):
        raise ValidationError(
            f"Expected date (YYYY-MM-DD), got {type(value).__name__}: {value!r}",
            field=field,
            received_value=value
        )


def to_str(
    value: Optional[str],
    *,
    default: Optional[str] = None,
    strip: bool = True,
) -> Optional[str]:
    """Normalize string input; whitespace-only counts as empty."""
    if value is None or value == "":
        return default
    result = str(value)
    if strip:
        result = result.strip()
    if result == "":
        return default
    return result


def validation_error_response(error: ValidationError) -> tuple:
    """
    Convert ValidationError to a structured 400 response tuple.

    Usage:
        try:
            window = to_month_window(request.args.get("month"))
        except ValidationError as e:
            return validation_error_response(e)

    Returns:
        Tuple of (dict, 400) suitable for Flask response
    """
    response = {
        "error": str(error),
        "type": "validation_error"
    }
    if error.field:
        response["field"] = error.field
    if error.received_value is not None:
        response["received_value"] = str(error.received_value)
    return response, 400
