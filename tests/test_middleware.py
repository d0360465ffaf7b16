"""Tests for CORS, request logging, metrics and health."""

import logging
from unittest.mock import MagicMock, patch

import taskboard.middleware.metrics as metrics_mod


EXPECTED_CORS = {
    "Access-Control-Allow-Origin": "http://localhost:5173",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Credentials": "true",
}


def _assert_cors(response):
    for header, value in EXPECTED_CORS.items():
        assert response.headers[header] == value


class TestCors:
    def test_headers_on_success(self, client, db):
        _assert_cors(client.get("/api/tasks"))

    def test_headers_on_error(self, client, db):
        response = client.delete("/api/tasks/missing")
        assert response.status_code == 404
        _assert_cors(response)

    def test_options_short_circuits(self, client, db):
        response = client.options("/api/tasks/anything")
        assert response.status_code == 200
        assert response.get_data() == b""
        _assert_cors(response)

    def test_options_does_not_reach_route(self, client, db, store):
        with patch.object(store, "list_tasks") as list_tasks:
            client.options("/api/tasks")
        list_tasks.assert_not_called()

    def test_origin_from_config(self, app, client, db):
        app.config["CORS_ORIGIN"] = "https://tasks.example.com"
        response = client.get("/api/tasks")
        assert response.headers["Access-Control-Allow-Origin"] == "https://tasks.example.com"


class TestRequestLogging:
    def test_logs_method_and_path(self, client, db, caplog):
        with caplog.at_level(logging.INFO, logger="taskboard.middleware.request_logging"):
            client.get("/api/tasks?view=all")

        assert "GET /api/tasks?view=all" in caplog.messages

    def test_logs_each_request(self, client, db, caplog):
        with caplog.at_level(logging.INFO, logger="taskboard.middleware.request_logging"):
            client.post("/api/tasks", json={"title": "Buy milk"})
            client.get("/api/tasks")

        assert caplog.messages.count("POST /api/tasks") == 1
        assert caplog.messages.count("GET /api/tasks") == 1


class TestMetricsMiddleware:
    def test_records_route_pattern(self, app, db):
        meter = MagicMock()
        counter = meter.create_counter.return_value
        histogram = meter.create_histogram.return_value

        with patch.object(metrics_mod, "get_meter", return_value=meter):
            metrics_mod.register_metrics_middleware(app)

        test_client = app.test_client()
        task_id = test_client.post("/api/tasks", json={"title": "Buy milk"}).get_json()["id"]
        test_client.put(f"/api/tasks/{task_id}", json={"completed": True})

        attributes = counter.add.call_args.args[1]
        assert counter.add.call_args.args[0] == 1
        assert attributes == {"method": "PUT", "route": "/api/tasks/<task_id>", "status": "200"}
        assert histogram.record.call_args.args[0] >= 0

    def test_skips_health_checks(self, app, db):
        meter = MagicMock()
        counter = meter.create_counter.return_value

        with patch.object(metrics_mod, "get_meter", return_value=meter):
            metrics_mod.register_metrics_middleware(app)

        app.test_client().get("/api/health")

        counter.add.assert_not_called()

    def test_excluded_paths_from_config(self, app, db):
        app.config["METRICS_EXCLUDED_PATHS"] = ("/api/tasks",)
        meter = MagicMock()
        counter = meter.create_counter.return_value

        with patch.object(metrics_mod, "get_meter", return_value=meter):
            metrics_mod.register_metrics_middleware(app)

        test_client = app.test_client()
        test_client.get("/api/tasks")
        counter.add.assert_not_called()

        test_client.get("/api/health")
        assert counter.add.call_args.args[1]["route"] == "/api/health"


class TestHealth:
    def test_health_check(self, client, db):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"
