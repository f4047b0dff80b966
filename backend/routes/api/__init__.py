"""
Transactions API Routes - Split into domain-specific modules

This package organizes the dashboard endpoints into logical domains:
- seed.py: /initialize (replace the table from the seed feed)
- transactions.py: /all-transactions, /transactions, /statistics, /combined-data
- charts.py: /bar-chart, /pie-chart
- health.py: liveness and store health

All modules share the same blueprint (api_bp), registered under API_PREFIX.
"""

from flask import Blueprint

# Create the shared blueprint
api_bp = Blueprint('api', __name__)


# Import all route modules to register their routes with the blueprint
from routes.api import seed  # noqa: E402,F401
from routes.api import transactions  # noqa: E402,F401
from routes.api import charts  # noqa: E402,F401
from routes.api import health  # noqa: E402,F401
