"""
Unit tests for the API Gateway Lambda handler.

Each request builds a fresh app over one shared in-memory storage, the
same way separate Lambda invocations share the DynamoDB table.
"""

import json

import pytest

from bucketlist.lambdas import api_handler


@pytest.fixture
def call(monkeypatch, app_factory):
    """Invoke the handler with an API Gateway event."""
    monkeypatch.setattr(api_handler, "create_app", app_factory)

    def invoke(method, resource, body=None, path_id=None, query=None):
        event = {
            "httpMethod": method,
            "resource": resource,
            "pathParameters": {"id": path_id} if path_id is not None else None,
            "queryStringParameters": query,
            "body": json.dumps(body) if isinstance(body, (dict, list)) else body,
            "requestContext": {"requestId": "test-request"},
        }
        response = api_handler.lambda_handler(event, None)
        payload = json.loads(response["body"]) if response["body"] else None
        return response["statusCode"], payload

    return invoke


def _create(call, text, **extra):
    status, payload = call("POST", "/activities", {"text": text, **extra})
    assert status == 201
    return payload["activity"]


class TestActivityRoutes:
    def test_create_and_get(self, call):
        created = _create(call, "Visit the aquarium", category="fun")

        status, payload = call("GET", "/activities/{id}", path_id=created["id"])

        assert status == 200
        assert payload["activity"]["text"] == "Visit the aquarium"
        assert payload["activity"]["category"] == "fun"
        assert payload["activity"]["completedAt"] is None

    def test_create_with_blank_text(self, call):
        status, payload = call("POST", "/activities", {"text": "   "})

        assert status == 400
        assert payload["error"] == "Validation Error"

    def test_create_without_body(self, call):
        status, payload = call("POST", "/activities")

        assert status == 400
        assert payload["error"] == "Missing Request Body"

    def test_create_with_invalid_json(self, call):
        status, payload = call("POST", "/activities", "{text:")

        assert status == 400
        assert payload["error"] == "Invalid JSON"

    def test_list_with_filter_newest_first(self, call, clock):
        first = _create(call, "First")
        clock.advance(minutes=5)
        _create(call, "Second")
        call("POST", "/activities/{id}/toggle", path_id=first["id"])

        _, everything = call("GET", "/activities")
        _, pending = call("GET", "/activities", query={"filter": "pending"})
        _, completed = call("GET", "/activities", query={"filter": "completed"})

        assert [a["text"] for a in everything["activities"]] == ["Second", "First"]
        assert [a["text"] for a in pending["activities"]] == ["Second"]
        assert completed["count"] == 1
        assert completed["filter"] == "completed"

    def test_list_with_invalid_filter(self, call):
        status, payload = call("GET", "/activities", query={"filter": "archived"})

        assert status == 400
        assert payload["error"] == "Invalid Filter"

    def test_toggle(self, call):
        created = _create(call, "Ride a bike")

        status, payload = call("POST", "/activities/{id}/toggle", path_id=created["id"])

        assert status == 200
        assert payload["activity"]["completed"] is True
        assert payload["activity"]["completedAt"] is not None

    def test_patch_fields(self, call):
        created = _create(call, "Go fishing")

        status, payload = call(
            "PATCH",
            "/activities/{id}",
            {"notes": "Dawn is best", "photo": "file:///fish.jpg"},
            path_id=created["id"],
        )

        assert status == 200
        assert payload["activity"]["notes"] == "Dawn is best"
        assert payload["activity"]["photo"] == "file:///fish.jpg"

    def test_patch_unknown_field(self, call):
        created = _create(call, "Go fishing")

        status, _ = call("PATCH", "/activities/{id}", {"completed": True}, path_id=created["id"])

        assert status == 400

    def test_delete(self, call):
        created = _create(call, "Temporary")

        status, payload = call("DELETE", "/activities/{id}", path_id=created["id"])
        assert status == 200
        assert payload["deleted"]["id"] == created["id"]

        status, payload = call("GET", "/activities/{id}", path_id=created["id"])
        assert status == 404
        assert payload["error"] == "Activity Not Found"

    def test_unknown_activity(self, call):
        status, _ = call("POST", "/activities/{id}/toggle", path_id="act_missing")
        assert status == 404


class TestDerivedRoutes:
    def test_stats_and_achievements(self, call):
        created = _create(call, "Lighthouse tour")
        _create(call, "Pier fries", category="food")
        call("POST", "/activities/{id}/toggle", path_id=created["id"])

        status, payload = call("GET", "/stats")

        assert status == 200
        assert payload["stats"]["total"] == 2
        assert payload["stats"]["completed"] == 1
        assert payload["stats"]["completion_rate"] == 0.5
        assert payload["progress"]["percentage"] == 50.0
        achieved = {a["code"] for a in payload["achievements"] if a["achieved"]}
        assert achieved == {"first_completion"}

    def test_memories(self, call):
        created = _create(call, "Sunset sail")
        call("PATCH", "/activities/{id}", {"photo": "file:///sail.jpg"}, path_id=created["id"])
        call("POST", "/activities/{id}/toggle", path_id=created["id"])
        _create(call, "Not yet")

        _, payload = call("GET", "/memories")

        assert payload["count"] == 1
        assert payload["memories"][0]["photo"] == "file:///sail.jpg"

    def test_export(self, call):
        _create(call, "Export me")

        status, payload = call("GET", "/export")

        assert status == 200
        assert payload["activities"][0]["text"] == "Export me"


class TestSettingsAndData:
    def test_settings_round_trip(self, call):
        status, payload = call("GET", "/settings")
        assert status == 200
        assert payload["settings"] == {
            "notifications": False,
            "dailyReminder": False,
            "darkMode": False,
        }

        call("PATCH", "/settings", {"darkMode": True})

        _, payload = call("GET", "/settings")
        assert payload["settings"]["darkMode"] is True

    def test_invalid_settings(self, call):
        status, payload = call("PATCH", "/settings", {"fontSize": 12})

        assert status == 400
        assert payload["error"] == "Validation Error"

    def test_clear_all_data(self, call, storage):
        _create(call, "Gone soon")
        call("PATCH", "/settings", {"notifications": True})

        status, _ = call("DELETE", "/data")

        assert status == 200
        assert storage.data == {}
        _, payload = call("GET", "/activities")
        assert payload["count"] == 0


class TestHandlerPlumbing:
    def test_cors_preflight(self, call):
        status, payload = call("OPTIONS", "/activities")
        assert status == 200
        assert payload is None

    def test_unknown_route(self, call):
        status, payload = call("GET", "/nowhere")

        assert status == 404
        assert payload["error"] == "Not Found"

    def test_health_check(self, call):
        status, payload = call("GET", "/health")

        assert status == 200
        assert payload["status"] == "healthy"
        assert payload["storage"]["backend"] == "memory"

    def test_health_check_degraded_after_storage_error(self, call, storage):
        storage.data["activities"] = "corrupted"

        status, payload = call("GET", "/health")

        assert status == 503
        assert payload["status"] == "degraded"

    def test_initialization_failure(self, monkeypatch):
        def broken_app():
            raise ValueError("DynamoDB table 'missing' not found")

        monkeypatch.setattr(api_handler, "create_app", broken_app)

        response = api_handler.lambda_handler({"httpMethod": "GET", "resource": "/health"}, None)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error"] == "Service initialization failed"
