"""
API Endpoint Tests

Drives every /api route through the Flask test client against an in-memory
SQLite store. Service failures are simulated by patching the service function
the route module imported.

Covers:
- 400 validation envelope for malformed months (service never called)
- 500 static messages (no exception detail leaks)
- Response shapes and camelCase keys
- /statistics lenient month parsing
- /initialize success and failure
- Middleware: request id echo, 404 envelope, CORS
"""

import logging
from unittest.mock import patch

import pytest
import requests

from utils.normalize import INVALID_MONTH_MESSAGE

MONTH_ROUTES = ["/api/transactions", "/api/bar-chart", "/api/pie-chart", "/api/combined-data"]

SERVICE_TARGETS = {
    "/api/transactions": "routes.api.transactions.list_transactions_for_month",
    "/api/bar-chart": "routes.api.charts.get_price_histogram",
    "/api/pie-chart": "routes.api.charts.get_category_counts",
    "/api/combined-data": "routes.api.transactions.get_combined_data",
}

STATIC_MESSAGES = {
    "/api/transactions?month=2022-03": (
        "routes.api.transactions.list_transactions_for_month", "Unable to retrieve transactions"),
    "/api/bar-chart?month=2022-03": (
        "routes.api.charts.get_price_histogram", "Unable to retrieve bar chart data"),
    "/api/pie-chart?month=2022-03": (
        "routes.api.charts.get_category_counts", "Unable to retrieve pie chart data"),
    "/api/combined-data?month=2022-03": (
        "routes.api.transactions.get_combined_data", "Error combining data from multiple sources"),
    "/api/statistics?month=2022-03": (
        "routes.api.transactions.get_monthly_statistics", "Unable to fetch statistics"),
    "/api/all-transactions": (
        "routes.api.transactions.list_all_transactions", "Error retrieving transactions from database"),
}


# =============================================================================
# VALIDATION
# =============================================================================

class TestMonthValidation:

    @pytest.mark.parametrize("route", MONTH_ROUTES)
    @pytest.mark.parametrize("month", ["2022/03", "03-2022", "2022-3", "2022-13"])
    def test_malformed_month_is_400(self, client, route, month):
        with patch(SERVICE_TARGETS[route]) as service:
            r = client.get(route, query_string={"month": month})

        assert r.status_code == 400
        body = r.get_json()
        assert body["error"] == INVALID_MONTH_MESSAGE
        assert body["type"] == "validation_error"
        assert body["field"] == "month"
        assert body["received_value"] == month
        service.assert_not_called()

    @pytest.mark.parametrize("route", MONTH_ROUTES)
    def test_missing_month_is_400(self, client, route):
        r = client.get(route)
        assert r.status_code == 400
        assert r.get_json()["error"] == INVALID_MONTH_MESSAGE

    @pytest.mark.parametrize("query", [
        {"month": "2022-03", "page": "abc"},
        {"month": "2022-03", "page": "0"},
        {"month": "2022-03", "perPage": "-5"},
    ])
    def test_bad_pagination_is_400(self, client, query):
        r = client.get("/api/transactions", query_string=query)
        assert r.status_code == 400
        assert r.get_json()["type"] == "validation_error"

    @pytest.mark.parametrize("route", MONTH_ROUTES + ["/api/statistics"])
    def test_december_9999_is_a_valid_empty_month(self, client, march_scenario, route):
        r = client.get(route, query_string={"month": "9999-12"})
        assert r.status_code == 200

    def test_december_9999_results_are_empty(self, client, march_scenario):
        page = client.get("/api/transactions?month=9999-12").get_json()
        assert page["transactions"] == []
        assert page["total"] == 0
        assert client.get("/api/bar-chart?month=9999-12").get_json() == []
        assert client.get("/api/statistics?month=9999-12").get_json() == {
            "totalSaleAmount": 0,
            "totalSoldItems": 0,
            "totalUnsoldItems": 0,
        }

    def test_per_page_is_capped(self, client, app):
        r = client.get("/api/transactions?month=2022-03&perPage=5000")
        assert r.status_code == 200
        assert r.get_json()["perPage"] == app.config["MAX_PER_PAGE"]


# =============================================================================
# OPERATION FAILURES
# =============================================================================

class TestOperationErrors:

    @pytest.mark.parametrize("url", sorted(STATIC_MESSAGES))
    def test_service_failure_is_static_500(self, client, url):
        target, message = STATIC_MESSAGES[url]
        with patch(target, side_effect=RuntimeError("connection reset by peer")):
            r = client.get(url)

        assert r.status_code == 500
        assert r.get_json() == {"error": message}
        assert b"connection reset" not in r.data


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TestTransactionsEndpoints:

    def test_all_transactions(self, client, march_scenario):
        r = client.get("/api/all-transactions")
        assert r.status_code == 200
        body = r.get_json()
        assert body["total"] == 5
        assert [t["id"] for t in body["transactions"]] == [1, 2, 3, 4, 5]

    def test_all_transactions_empty_store(self, client):
        r = client.get("/api/all-transactions")
        assert r.status_code == 200
        assert r.get_json() == {"transactions": [], "total": 0}

    def test_transactions_page(self, client, march_scenario):
        r = client.get("/api/transactions?month=2022-03&page=1&perPage=2")
        assert r.status_code == 200
        body = r.get_json()
        assert body["page"] == 1
        assert body["perPage"] == 2
        assert body["total"] == 2
        assert [t["id"] for t in body["transactions"]] == [1, 2]
        assert body["transactions"][0]["dateOfSale"] == "2022-03-02T09:30:00.000Z"

    def test_transactions_default_pagination(self, client, march_scenario):
        body = client.get("/api/transactions?month=2022-03").get_json()
        assert body["page"] == 1
        assert body["perPage"] == 10
        assert body["total"] == 3

    def test_search_param_is_ignored(self, client, march_scenario):
        r = client.get("/api/transactions?month=2022-03&search=nothing-matches-this")
        assert r.get_json()["total"] == 3


# =============================================================================
# STATISTICS
# =============================================================================

class TestStatisticsEndpoint:

    @pytest.mark.parametrize("month", ["2022-03", "2022-03-01"])
    def test_statistics(self, client, march_scenario, month):
        r = client.get("/api/statistics", query_string={"month": month})
        assert r.status_code == 200
        assert r.get_json() == {
            "totalSaleAmount": 1150,
            "totalSoldItems": 2,
            "totalUnsoldItems": 1,
        }

    def test_statistics_empty_month(self, client, march_scenario):
        r = client.get("/api/statistics?month=2023-07")
        assert r.get_json() == {"totalSaleAmount": 0, "totalSoldItems": 0, "totalUnsoldItems": 0}

    @pytest.mark.parametrize("month", ["garbage", "2022/03", None])
    def test_unparseable_month_is_500(self, client, month):
        query = {} if month is None else {"month": month}
        r = client.get("/api/statistics", query_string=query)
        assert r.status_code == 500
        assert r.get_json() == {"error": "Unable to fetch statistics"}


# =============================================================================
# CHARTS
# =============================================================================

class TestChartEndpoints:

    def test_bar_chart(self, client, march_scenario):
        r = client.get("/api/bar-chart?month=2022-03")
        assert r.status_code == 200
        assert r.get_json() == [
            {"_id": 0, "count": 1},
            {"_id": 100, "count": 1},
            {"_id": "901-above", "count": 1},
        ]

    def test_bar_chart_empty_month(self, client, march_scenario):
        assert client.get("/api/bar-chart?month=2021-01").get_json() == []

    def test_pie_chart(self, client, march_scenario):
        r = client.get("/api/pie-chart?month=2022-03")
        assert r.status_code == 200
        assert r.get_json() == [
            {"category": "electronics", "count": 2},
            {"category": "clothing", "count": 1},
        ]


# =============================================================================
# COMBINED
# =============================================================================

class TestCombinedEndpoint:

    def test_combined_shape(self, client, march_scenario):
        r = client.get("/api/combined-data?month=2022-03&page=1&perPage=10")
        assert r.status_code == 200
        body = r.get_json()
        assert set(body) == {"transactions", "statistics", "pieChartData"}
        assert set(body["transactions"]) == {"page", "perPage", "total", "data"}
        assert body["transactions"]["total"] == 3
        assert body["statistics"]["totalSaleAmount"] == 1150
        assert body["pieChartData"][0] == {"category": "electronics", "count": 2}

    def test_partial_failure_fails_whole_response(self, client, march_scenario):
        with patch("services.transaction_service.get_category_counts",
                   side_effect=RuntimeError("boom")):
            r = client.get("/api/combined-data?month=2022-03")
        assert r.status_code == 500
        assert r.get_json() == {"error": "Error combining data from multiple sources"}


# =============================================================================
# SEED
# =============================================================================

class TestInitializeEndpoint:

    @pytest.fixture
    def feed_response(self):
        def _build(payload):
            response = requests.Response()
            response.status_code = 200
            response._content = payload
            response.headers["Content-Type"] = "application/json"
            return response
        return _build

    def test_initialize_success(self, client, add_transactions, make_txn, feed_response):
        add_transactions(make_txn(42))
        body = (
            b'[{"id": 1, "title": "Backpack", "price": 109.95, "description": "d",'
            b' "category": "men\'s clothing", "image": "i", "sold": false,'
            b' "dateOfSale": "2021-11-27T20:29:54+05:30"}]'
        )
        with patch("services.seed_loader.requests.Session.get", return_value=feed_response(body)):
            r = client.get("/api/initialize")

        assert r.status_code == 200
        assert r.get_json() == {"message": "Database successfully populated with seed data"}
        all_rows = client.get("/api/all-transactions").get_json()
        assert all_rows["total"] == 1
        assert all_rows["transactions"][0]["dateOfSale"] == "2021-11-27T14:59:54.000Z"

    def test_initialize_fetch_failure(self, client, add_transactions, make_txn):
        add_transactions(make_txn(42))
        with patch("services.seed_loader.requests.Session.get",
                   side_effect=requests.ConnectionError("unreachable")):
            r = client.get("/api/initialize")

        assert r.status_code == 500
        assert r.get_json() == {"error": "Unable to initialize database"}
        assert client.get("/api/all-transactions").get_json()["total"] == 1

    def test_initialize_without_url(self, client, app):
        app.config["SEED_DATA_URL"] = None
        r = client.get("/api/initialize")
        assert r.status_code == 500
        assert r.get_json() == {"error": "Unable to initialize database"}


# =============================================================================
# HEALTH AND MIDDLEWARE
# =============================================================================

class TestHealthAndMiddleware:

    def test_liveness_text(self, client):
        r = client.get("/api/")
        assert r.status_code == 200
        assert r.data == b"Test..."

    def test_health(self, client, march_scenario):
        r = client.get("/api/health")
        assert r.status_code == 200
        assert r.get_json() == {"status": "healthy", "records": 5}

    def test_health_store_down(self, client):
        with patch("routes.api.health.db") as mock_db:
            mock_db.session.query.side_effect = RuntimeError("down")
            r = client.get("/api/health")
        assert r.status_code == 503
        assert r.get_json() == {"status": "unavailable"}

    def test_request_id_generated(self, client):
        r = client.get("/api/")
        assert r.headers.get("X-Request-ID")

    def test_request_id_echoed(self, client):
        r = client.get("/api/", headers={"X-Request-ID": "trace-abc-123"})
        assert r.headers["X-Request-ID"] == "trace-abc-123"

    def test_route_logs_carry_request_id(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="api.charts"):
            client.get("/api/pie-chart?month=2022-03", headers={"X-Request-ID": "trace-route-1"})
        messages = [r.getMessage() for r in caplog.records if r.name == "api.charts"]
        assert any("route_success" in m and "trace-route-1" in m for m in messages)

    def test_route_error_logs_carry_request_id(self, client, caplog):
        with patch("routes.api.charts.get_price_histogram", side_effect=RuntimeError("boom")), \
                caplog.at_level(logging.ERROR, logger="api.charts"):
            client.get("/api/bar-chart?month=2022-03", headers={"X-Request-ID": "trace-route-2"})
        messages = [r.getMessage() for r in caplog.records if r.name == "api.charts"]
        assert any("route_error" in m and "trace-route-2" in m for m in messages)

    def test_unknown_route_envelope(self, client):
        r = client.get("/api/does-not-exist", headers={"X-Request-ID": "trace-404"})
        assert r.status_code == 404
        error = r.get_json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["requestId"] == "trace-404"

    def test_method_not_allowed_envelope(self, client):
        r = client.post("/api/statistics?month=2022-03")
        assert r.status_code == 405
        assert r.get_json()["error"]["code"] == "METHOD_NOT_ALLOWED"

    def test_cors_any_origin(self, client):
        r = client.get("/api/", headers={"Origin": "http://localhost:5173"})
        assert r.headers.get("Access-Control-Allow-Origin") == "*"
