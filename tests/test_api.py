"""Tests for the HTTP API."""
import pytest
from fastapi.testclient import TestClient

from parking_manager.config import AppConfig
from parking_manager.main import create_app


@pytest.fixture
def client(service):
    """Test client over the three-slot service fixture."""
    app = create_app(config=AppConfig(), service=service)
    return TestClient(app)


def park(client, vehicle_id, slot_id):
    return client.post("/api/v1/sessions", json={"vehicle_id": vehicle_id, "slot_id": slot_id})


class TestStatusAPI:

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["durable"] is True

    def test_status_of_fresh_lot(self, client):
        data = client.get("/api/v1/status").json()

        assert data["total_slots"] == 3
        assert data["available"] == 3
        assert data["occupancy_rate"] == "0.0"
        assert data["total_revenue"] == "0.00"
        assert [s["id"] for s in data["slots"]] == [1, 2, 3]

    def test_slot_filters(self, client):
        park(client, "AB12", 2)

        free = client.get("/api/v1/slots", params={"free": True}).json()
        occupied = client.get("/api/v1/slots", params={"free": False}).json()

        assert [s["id"] for s in free] == [1, 3]
        assert occupied == [{"id": 2, "occupied": True, "vehicle_id": "AB12"}]

    def test_unknown_slot(self, client):
        assert client.get("/api/v1/slots/42").status_code == 404


class TestSessionsAPI:

    def test_park_and_exit(self, client, clock):
        response = park(client, "ab12", 1)
        assert response.status_code == 201
        assert response.json()["vehicle_id"] == "AB12"
        assert response.json()["durable"] is True

        clock.advance(minutes=61)
        response = client.delete("/api/v1/sessions/ab12")

        assert response.status_code == 200
        assert response.json()["payment"] == "20.00"
        assert response.json()["duration"] == "1h 1m"
        assert client.get("/api/v1/slots/1").json()["occupied"] is False
        assert len(client.get("/api/v1/history").json()) == 1

    def test_duplicate_vehicle_conflicts(self, client):
        park(client, "ab12", 1)

        response = park(client, "AB12", 2)

        assert response.status_code == 409
        assert response.json()["error"] == "vehicle_already_parked"

    @pytest.mark.parametrize("slot_id", [1, 0, 9])
    def test_unavailable_slot_conflicts(self, client, slot_id):
        park(client, "AA11", 1)

        response = park(client, "BB22", slot_id)

        assert response.status_code == 409
        assert response.json()["error"] == "slot_unavailable"

    def test_blank_vehicle_is_invalid(self, client):
        response = park(client, "  ", 1)

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_vehicle_id"

    def test_exit_unknown_vehicle(self, client):
        response = client.delete("/api/v1/sessions/ZZ99")

        assert response.status_code == 404
        assert response.json()["error"] == "vehicle_not_found"

    def test_active_sessions_show_live_duration(self, client, clock):
        park(client, "AB12", 3)
        clock.advance(minutes=3, seconds=7)

        sessions = client.get("/api/v1/sessions").json()

        assert len(sessions) == 1
        assert sessions[0]["slot_id"] == 3
        assert sessions[0]["duration"] == "3m 7s"

    def test_history_newest_first(self, client):
        for vehicle in ["AA11", "BB22"]:
            park(client, vehicle, 1)
            client.delete(f"/api/v1/sessions/{vehicle}")

        history = client.get("/api/v1/history", params={"newest_first": True}).json()

        assert [h["vehicle_id"] for h in history] == ["BB22", "AA11"]


class TestSettingsAPI:

    def test_get_settings(self, client):
        data = client.get("/api/v1/settings").json()

        assert data == {
            "slot_count": 3,
            "hourly_rate": "10.00",
            "max_slot_count": 100,
            "durable": True,
        }

    def test_slot_count_change_requires_confirmation(self, client):
        park(client, "AB12", 1)

        response = client.put("/api/v1/settings/slot-count", json={"slot_count": 5})

        assert response.status_code == 428
        assert client.get("/api/v1/status").json()["total_slots"] == 3

    def test_slot_count_change_resets_lot(self, client):
        park(client, "AB12", 1)

        response = client.put(
            "/api/v1/settings/slot-count", params={"confirm": True}, json={"slot_count": 5}
        )

        assert response.status_code == 200
        assert response.json()["slot_count"] == 5
        status = client.get("/api/v1/status").json()
        assert status["total_slots"] == 5
        assert status["active_sessions"] == 0

    def test_slot_count_out_of_range(self, client):
        response = client.put(
            "/api/v1/settings/slot-count", params={"confirm": True}, json={"slot_count": 0}
        )

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_config"

    def test_update_rate(self, client):
        response = client.put("/api/v1/settings/hourly-rate", json={"hourly_rate": "7.5"})

        assert response.status_code == 200
        assert response.json()["hourly_rate"] == "7.50"

    def test_negative_rate(self, client):
        response = client.put("/api/v1/settings/hourly-rate", json={"hourly_rate": -1})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_config"

    def test_oversized_rate(self, client):
        response = client.put("/api/v1/settings/hourly-rate", json={"hourly_rate": "1e30"})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_config"
        assert client.get("/api/v1/settings").json()["hourly_rate"] == "10.00"


class TestResetAPI:

    def test_requires_confirmation(self, client):
        park(client, "AB12", 1)

        assert client.post("/api/v1/reset").status_code == 428
        assert client.get("/api/v1/status").json()["occupied"] == 1

    def test_clears_sessions_and_history(self, client):
        park(client, "AA11", 1)
        client.delete("/api/v1/sessions/AA11")
        park(client, "BB22", 2)

        response = client.post("/api/v1/reset", params={"confirm": True})

        assert response.status_code == 200
        status = client.get("/api/v1/status").json()
        assert status["occupied"] == 0
        assert status["completed_sessions"] == 0
        assert status["total_revenue"] == "0.00"


def test_report(client):
    park(client, "AB12", 2)

    response = client.get("/api/v1/report")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "Car Parking Management System" in response.text
    assert "Slot 2: AB12" in response.text
    assert "Page 1 of 1" in response.text


def test_metrics(client):
    park(client, "AB12", 1)

    response = client.get("/api/v1/metrics")

    assert response.status_code == 200
    assert "parking_sessions_started_total" in response.text
    assert "parking_slots_occupied" in response.text


def test_lifespan_opens_configured_snapshot(tmp_path):
    config = AppConfig(storage={"path": str(tmp_path / "lot.json")}, lot={"slot_count": 4})

    with TestClient(create_app(config=config)) as client:
        assert client.get("/api/v1/status").json()["total_slots"] == 4

    assert (tmp_path / "lot.json").exists()
