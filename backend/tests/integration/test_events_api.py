"""
Integration tests for Events API endpoints.

Tests end-to-end flows for calendar events:
- CRUD operations via API
- Series creation and promotion
- Single occurrence vs whole series deletion
- Validation and error responses
"""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError


MISSING_ID = "evt_01hgw2bbg00000000000000001"
MISSING_SERIES = "ser_01hgw2bbg00000000000000001"


class TestEventsAPICreate:
    """Integration tests for POST /api/events"""

    def test_create_event(self, test_client, sample_event_data):
        """Test creating a standalone event via API"""
        response = test_client.post("/api/events", json=sample_event_data(
            title="Dentist",
            color="#3B82F6",
            notification=30,
        ))
        assert response.status_code == 201

        event = response.json()
        assert event["id"].startswith("evt_")
        assert event["title"] == "Dentist"
        assert event["start"] == "2024-01-01T09:00:00"
        assert event["end"] == "2024-01-01T10:00:00"
        assert event["color"] == "#3B82F6"
        assert event["notification"] == 30
        # Null fields are omitted
        assert "groupId" not in event
        assert "location" not in event
        assert "recurrence" not in event

    def test_create_sets_location_header(self, test_client, sample_event_data):
        response = test_client.post("/api/events", json=sample_event_data())
        assert response.status_code == 201

        event_id = response.json()["id"]
        assert response.headers["location"].endswith(f"/api/events/{event_id}")

        follow = test_client.get(response.headers["location"])
        assert follow.status_code == 200
        assert follow.json()["id"] == event_id

    def test_create_daily_series(self, test_client, sample_event_data):
        """Test that a daily event creates a full year of occurrences"""
        response = test_client.post("/api/events", json=sample_event_data(
            title="Standup",
            start="2024-01-01T09:00",
            end="2024-01-01T09:15",
            recurrence="daily",
        ))
        assert response.status_code == 201

        first = response.json()
        assert first["start"] == "2024-01-01T09:00:00"
        assert first["recurrence"] == "daily"
        assert first["groupId"].startswith("ser_")

        events = test_client.get("/api/events").json()
        assert len(events) == 365
        assert all(e["groupId"] == first["groupId"] for e in events)

    def test_create_series_case_insensitive(self, test_client, sample_event_data):
        response = test_client.post("/api/events", json=sample_event_data(recurrence="Weekly"))
        assert response.status_code == 201
        assert response.json()["recurrence"] == "weekly"

        assert len(test_client.get("/api/events").json()) == 52

    def test_create_accepts_z_suffix(self, test_client, sample_event_data):
        response = test_client.post("/api/events", json=sample_event_data(
            start="2024-05-01T12:00:00.000Z",
            end="2024-05-01T13:00:00.000Z",
        ))
        assert response.status_code == 201
        assert response.json()["start"] == "2024-05-01T12:00:00"

    @pytest.mark.parametrize("overrides", [
        {"title": ""},
        {"title": "   "},
        {"title": "x" * 101},
        {"location": "y" * 501},
        {"description": "z" * 501},
        {"end": "2024-01-01T08:00:00"},
        {"recurrence": "fortnightly"},
        {"start": "not-a-date"},
        {"groupId": "x" * 200},
        {"recurrence": "yearly", "start": "9998-06-01T09:00:00", "end": "9998-06-01T10:00:00"},
        {"recurrence": "daily", "start": "9999-12-01T09:00:00", "end": "9999-12-01T10:00:00"},
    ])
    def test_create_invalid_payload(self, test_client, sample_event_data, overrides):
        """Test that invalid payloads are rejected before any write"""
        response = test_client.post("/api/events", json=sample_event_data(**overrides))
        assert response.status_code == 422

        body = response.json()
        assert body["error"] == "Validation Error"
        assert body["details"]

        assert test_client.get("/api/events").json() == []

    def test_create_title_trimmed_before_length_check(self, test_client, sample_event_data):
        response = test_client.post("/api/events", json=sample_event_data(title="  " + "t" * 100))
        assert response.status_code == 201
        assert response.json()["title"] == "t" * 100

    def test_create_keeps_group_id_at_column_length(self, test_client, sample_event_data):
        group_id = "ser_" + "0" * 26

        response = test_client.post("/api/events", json=sample_event_data(groupId=group_id))
        assert response.status_code == 201
        assert response.json()["groupId"] == group_id

    def test_create_missing_title(self, test_client):
        response = test_client.post("/api/events", json={
            "start": "2024-01-01T09:00:00",
            "end": "2024-01-01T10:00:00",
        })
        assert response.status_code == 422


class TestEventsAPIRead:
    """Integration tests for GET /api/events"""

    def test_list_empty(self, test_client):
        response = test_client.get("/api/events")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_returns_every_event(self, test_client, sample_event_data):
        test_client.post("/api/events", json=sample_event_data(title="A"))
        test_client.post("/api/events", json=sample_event_data(title="B", recurrence="yearly"))

        events = test_client.get("/api/events").json()
        assert len(events) == 6

    def test_get_event(self, test_client, sample_event_data):
        created = test_client.post("/api/events", json=sample_event_data(
            title="Lunch",
            location="Cafe",
        )).json()

        response = test_client.get(f"/api/events/{created['id']}")
        assert response.status_code == 200
        assert response.json() == created

    def test_get_event_not_found(self, test_client):
        response = test_client.get(f"/api/events/{MISSING_ID}")
        assert response.status_code == 404

    def test_get_event_malformed_id(self, test_client):
        response = test_client.get("/api/events/12345")
        assert response.status_code == 404


class TestEventsAPIUpdate:
    """Integration tests for PUT /api/events/{id}"""

    def test_update_event(self, test_client, sample_event_data):
        created = test_client.post("/api/events", json=sample_event_data(color="#FF0000")).json()

        response = test_client.put(f"/api/events/{created['id']}", json=sample_event_data(
            title="Renamed",
            description="Updated agenda",
        ))
        assert response.status_code == 204
        assert response.content == b""

        event = test_client.get(f"/api/events/{created['id']}").json()
        assert event["title"] == "Renamed"
        assert event["description"] == "Updated agenda"
        assert "color" not in event

    def test_update_path_id_wins_over_body_id(self, test_client, sample_event_data):
        first = test_client.post("/api/events", json=sample_event_data(title="First")).json()
        second = test_client.post("/api/events", json=sample_event_data(title="Second")).json()

        response = test_client.put(f"/api/events/{first['id']}", json=sample_event_data(
            id=second["id"],
            title="Changed",
        ))
        assert response.status_code == 204

        assert test_client.get(f"/api/events/{first['id']}").json()["title"] == "Changed"
        assert test_client.get(f"/api/events/{second['id']}").json()["title"] == "Second"

    def test_update_promotes_to_series(self, test_client, sample_event_data):
        """Test that adding a weekly recurrence creates 51 siblings"""
        created = test_client.post("/api/events", json=sample_event_data(title="Review")).json()

        response = test_client.put(f"/api/events/{created['id']}", json=sample_event_data(
            title="Review",
            recurrence="weekly",
        ))
        assert response.status_code == 204

        events = test_client.get("/api/events").json()
        assert len(events) == 52

        promoted = test_client.get(f"/api/events/{created['id']}").json()
        assert promoted["recurrence"] == "weekly"
        assert all(e["groupId"] == promoted["groupId"] for e in events)

    def test_update_not_found(self, test_client, sample_event_data):
        response = test_client.put(f"/api/events/{MISSING_ID}", json=sample_event_data(recurrence="daily"))
        assert response.status_code == 404

        assert test_client.get("/api/events").json() == []

    def test_update_invalid_payload(self, test_client, sample_event_data):
        created = test_client.post("/api/events", json=sample_event_data()).json()

        response = test_client.put(f"/api/events/{created['id']}", json=sample_event_data(
            end="2023-12-31T09:00:00",
        ))
        assert response.status_code == 422

    def test_update_rejects_overlong_group_id(self, test_client, sample_event_data):
        created = test_client.post("/api/events", json=sample_event_data(title="Original")).json()

        response = test_client.put(f"/api/events/{created['id']}", json=sample_event_data(
            groupId="3f2504e0-4f89-11d3-9a0c-0305e82c3301",
        ))
        assert response.status_code == 422

        assert test_client.get(f"/api/events/{created['id']}").json()["title"] == "Original"


class TestEventsAPIDelete:
    """Integration tests for DELETE /api/events/{id} and /api/events/series/{groupId}"""

    def test_delete_event(self, test_client, sample_event_data):
        created = test_client.post("/api/events", json=sample_event_data()).json()

        response = test_client.delete(f"/api/events/{created['id']}")
        assert response.status_code == 204

        assert test_client.get(f"/api/events/{created['id']}").status_code == 404
        assert test_client.delete(f"/api/events/{created['id']}").status_code == 404

    def test_delete_occurrence_keeps_series(self, test_client, sample_event_data):
        first = test_client.post("/api/events", json=sample_event_data(recurrence="monthly")).json()

        response = test_client.delete(f"/api/events/{first['id']}")
        assert response.status_code == 204

        events = test_client.get("/api/events").json()
        assert len(events) == 11
        assert all(e["groupId"] == first["groupId"] for e in events)

    def test_delete_series(self, test_client, sample_event_data):
        first = test_client.post("/api/events", json=sample_event_data(recurrence="weekly")).json()
        standalone = test_client.post("/api/events", json=sample_event_data(title="Keep me")).json()

        response = test_client.delete(f"/api/events/series/{first['groupId']}")
        assert response.status_code == 204

        events = test_client.get("/api/events").json()
        assert [e["id"] for e in events] == [standalone["id"]]

        response = test_client.delete(f"/api/events/series/{first['groupId']}")
        assert response.status_code == 404

    def test_delete_series_not_found(self, test_client):
        response = test_client.delete(f"/api/events/series/{MISSING_SERIES}")
        assert response.status_code == 404


class TestEventsAPIErrors:
    """Integration tests for store failures"""

    def test_database_error_returns_500(self, test_client):
        with patch(
            "backend.src.services.event_store.SqlAlchemyEventStore.find_all",
            side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
        ):
            response = test_client.get("/api/events")

        assert response.status_code == 500
        assert response.json()["error"] == "Database Error"


class TestHealthEndpoints:

    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root(self, test_client):
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"

    def test_cors_allows_any_origin(self, test_client):
        response = test_client.options(
            "/api/events",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
            },
        )
        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] in ("*", "http://localhost:3000")
