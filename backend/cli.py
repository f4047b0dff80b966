#!/usr/bin/env python3
"""
CLI for the Sales Transactions Dashboard

Commands:
    seed       - Replace the transactions table with the seed feed
    stats      - Print monthly statistics as JSON
    bar-chart  - Print the monthly price histogram as JSON

Usage:
    python cli.py seed
    python cli.py seed --url https://example.com/product_transaction.json
    python cli.py stats 2022-03
    python cli.py bar-chart 2022-03
"""

import json
import logging
import sys

import click

logger = logging.getLogger(__name__)


def get_app():
    """Build the Flask app for database access."""
    from app import create_app
    return create_app()


def _load_month(month):
    from utils.normalize import to_month_window, ValidationError
    try:
        return to_month_window(month)
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="MONTH")


@click.group()
@click.version_option(version="1.0.0", prog_name="dashboard-cli")
@click.option("--log-level", default="INFO", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]))
def cli(log_level):
    """Sales Transactions Dashboard CLI - seed and inspect the store."""
    logging.basicConfig(
        level=getattr(logging, log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command("seed")
@click.option("--url", default=None, help="Seed feed URL (defaults to THIRD_PARTY_API_URL)")
def seed(url):
    """Fetch the seed feed and replace every stored transaction."""
    from services.seed_loader import seed_from_url

    app = get_app()
    with app.app_context():
        seed_url = url or app.config.get("SEED_DATA_URL")
        click.echo(f"Seeding from {seed_url}...")
        try:
            inserted = seed_from_url(seed_url, timeout=app.config.get("SEED_REQUEST_TIMEOUT", 30))
        except Exception as e:
            logger.exception("Seed command failed")
            click.secho(f"Error: {e}", fg="red")
            sys.exit(1)

    click.secho(f"Inserted {inserted} transactions", fg="green")


@cli.command("stats")
@click.argument("month")
def stats(month):
    """Print statistics for MONTH (YYYY-MM)."""
    from schemas.transactions import dump
    from services.transaction_service import get_monthly_statistics

    window = _load_month(month)
    app = get_app()
    with app.app_context():
        result = get_monthly_statistics(window)
    click.echo(json.dumps(dump(result), indent=2))


@cli.command("bar-chart")
@click.argument("month")
def bar_chart(month):
    """Print the price histogram for MONTH (YYYY-MM)."""
    from schemas.transactions import dump_list
    from services.transaction_service import get_price_histogram

    window = _load_month(month)
    app = get_app()
    with app.app_context():
        buckets = get_price_histogram(window)
    click.echo(json.dumps(dump_list(buckets), indent=2))


if __name__ == "__main__":
    cli()
