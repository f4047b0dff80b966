"""
Seed Loader - replace the transactions table with the third-party feed

The feed is a single JSON array of transaction-shaped objects:
    [{"id": 1, "title": "...", "price": 329.85, "description": "...",
      "category": "men's clothing", "image": "https://...", "sold": false,
      "dateOfSale": "2021-11-27T20:29:54+05:30"}, ...]

Contract:
- The fetch happens first; any fetch or parse failure raises SeedFetchError
  before the table is touched.
- Replacement is delete-all then insert-all in one session. An insert failure
  rolls the session back and re-raises.
- No retries.

Usage:
    from services.seed_loader import SeedClient, initialize_database

    with SeedClient(url, timeout=30) as client:
        inserted = initialize_database(client.fetch())
"""

import logging
import time
from typing import List, Optional

import requests
from pydantic import ValidationError as PydanticValidationError

from models.database import db
from models.transaction import Transaction
from schemas.transactions import SeedRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class SeedLoaderError(Exception):
    """Base exception for seed loading errors."""
    pass


class SeedFetchError(SeedLoaderError):
    """The feed could not be fetched or did not contain a valid JSON array."""
    pass


class SeedClient:
    """
    HTTP client for the seed feed.

    Example:
        client = SeedClient("https://example.com/product_transaction.json")
        records = client.fetch()
        print(f"{len(records)} records")
    """

    def __init__(self, url: Optional[str], timeout: float = DEFAULT_TIMEOUT_SECONDS):
        if not url:
            raise SeedLoaderError(
                "Seed URL not configured. Set THIRD_PARTY_API_URL environment variable "
                "or pass url to constructor."
            )
        self.url = url
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": "SalesDashboard/1.0 (seed loader)",
            "Accept": "application/json",
        })

    def fetch(self) -> List[SeedRecord]:
        """
        Fetch and validate the feed.

        Raises:
            SeedFetchError: on network errors, non-2xx status, a non-JSON body,
                a body that is not an array, or an item that fails validation.
        """
        start = time.perf_counter()
        try:
            response = self._session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SeedFetchError(f"Seed fetch failed: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SeedFetchError(f"Seed feed is not valid JSON: {e}") from e

        if not isinstance(payload, list):
            raise SeedFetchError(
                f"Seed feed must be a JSON array, got {type(payload).__name__}"
            )

        try:
            records = [SeedRecord.model_validate(item) for item in payload]
        except PydanticValidationError as e:
            raise SeedFetchError(f"Seed feed contains an invalid record: {e}") from e

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("Fetched %d seed records in %.1fms", len(records), elapsed_ms)
        return records

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def initialize_database(records: List[SeedRecord], session=None) -> int:
    """
    Replace every stored transaction with `records`.

    Returns:
        Number of inserted rows.
    """
    session = session if session is not None else db.session
    try:
        deleted = session.query(Transaction).delete()
        session.add_all([record.to_model() for record in records])
        session.commit()
    except Exception:
        session.rollback()
        logger.exception("Seed insert failed; session rolled back")
        raise

    logger.info("Seed replaced %d rows with %d rows", deleted, len(records))
    return len(records)


def seed_from_url(url: Optional[str], timeout: float = DEFAULT_TIMEOUT_SECONDS, session=None) -> int:
    """Fetch the feed at `url` and replace the table with it."""
    with SeedClient(url, timeout=timeout) as client:
        records = client.fetch()
    return initialize_database(records, session=session)
