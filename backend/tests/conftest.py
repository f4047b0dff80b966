"""
Root pytest configuration for backend tests.

Provides:
- In-memory SQLite TestConfig (no PostgreSQL needed)
- Shared fixtures (app, client, add_transactions)
- make_transaction() builder
"""

import os
import sys
from datetime import datetime
from pathlib import Path

# Add backend directory to Python path so imports like
# `from services.transaction_service import ...` work
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# config.Config reads DATABASE_URL at import time
os.environ.setdefault('DATABASE_URL', 'sqlite://')

import pytest

from config import Config


class TestConfig(Config):
    __test__ = False

    TESTING = True
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SEED_DATA_URL = 'https://seed.example.test/product_transaction.json'
    SEED_REQUEST_TIMEOUT = 5
    DEFAULT_PER_PAGE = 10
    MAX_PER_PAGE = 100
    REQUEST_LOG_ENABLED = True
    REQUEST_LOG_SAMPLE_RATE = '0.0'
    REQUEST_LOG_ENDPOINTS = ''


def make_transaction(id, price=100.0, sold=True, date_of_sale=None, category='electronics', **overrides):
    """Build an unsaved Transaction with sensible defaults."""
    from models.transaction import Transaction

    fields = {
        'id': id,
        'title': f'Product {id}',
        'price': price,
        'description': f'Description of product {id}',
        'category': category,
        'image': f'https://img.example.test/{id}.jpg',
        'sold': sold,
        'date_of_sale': date_of_sale or datetime(2022, 3, 15, 12, 0, 0),
    }
    fields.update(overrides)
    return Transaction(**fields)


@pytest.fixture
def app():
    """Create test Flask application with an app context pushed."""
    from app import create_app
    from models.database import db

    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def add_transactions(app):
    """Insert Transaction rows and commit. Usage: add_transactions(make_transaction(1), ...)"""
    from models.database import db

    def _add(*rows):
        db.session.add_all(rows)
        db.session.commit()
        return rows

    return _add


@pytest.fixture
def march_scenario(add_transactions):
    """Three March 2022 rows: prices 50, 150, 950; two sold, one unsold."""
    return add_transactions(
        make_transaction(1, price=50.0, sold=True, category='clothing',
                         date_of_sale=datetime(2022, 3, 2, 9, 30)),
        make_transaction(2, price=150.0, sold=True, category='electronics',
                         date_of_sale=datetime(2022, 3, 18, 14, 0)),
        make_transaction(3, price=950.0, sold=False, category='electronics',
                         date_of_sale=datetime(2022, 3, 31, 23, 59, 59)),
        # Neighbouring months must never leak in
        make_transaction(4, price=300.0, sold=True, date_of_sale=datetime(2022, 2, 28, 23, 59, 59)),
        make_transaction(5, price=400.0, sold=False, date_of_sale=datetime(2022, 4, 1, 0, 0, 0)),
    )


@pytest.fixture
def make_txn():
    """The make_transaction() builder, for tests that assemble their own rows."""
    return make_transaction
