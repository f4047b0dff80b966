"""
Small parameter normalization helpers shared by API routes.
"""

from typing import Tuple

from flask import current_app, request

from utils.normalize import to_int


def read_pagination() -> Tuple[int, int]:
    """
    Return (page, per_page) from the query string.

    Defaults come from DEFAULT_PER_PAGE; per_page is capped at MAX_PER_PAGE.

    Raises:
        ValidationError: If page or perPage is not an int >= 1
    """
    page = to_int(request.args.get("page"), default=1, minimum=1, field="page")
    per_page = to_int(
        request.args.get("perPage"),
        default=current_app.config.get("DEFAULT_PER_PAGE", 10),
        minimum=1,
        field="perPage",
    )
    max_per_page = current_app.config.get("MAX_PER_PAGE")
    if max_per_page:
        per_page = min(per_page, max_per_page)
    return page, per_page
