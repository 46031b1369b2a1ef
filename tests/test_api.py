"""
Tests for API endpoints
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.main import app, get_service
from src.api.service import IncidentRiskService
from src.core.exceptions import StorageUnavailableError


@pytest.fixture
def client(service):
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestSystemEndpoints:
    """Test suite for system routes."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] is True
        assert data["incident_count"] == 0

    def test_health_degraded(self):
        repository = MagicMock()
        repository.db.check_connection.return_value = False
        app.dependency_overrides[get_service] = lambda: IncidentRiskService(repository)
        try:
            with TestClient(app) as client:
                response = client.get("/health")
        finally:
            app.dependency_overrides.clear()

        data = response.json()
        assert data["status"] == "degraded"
        assert data["database"] is False
        assert data["incident_count"] is None
        repository.count.assert_not_called()


class TestIncidentEndpoints:
    """Test suite for incident routes."""

    def test_create_and_list(self, client):
        response = client.post("/api/v1/incidents", json={
            "type": "flood",
            "severity": "high",
            "lat": "16.5500",
            "lng": 81.53,
            "description": "Water over the road",
        })

        assert response.status_code == 201
        created = response.json()
        assert created["lat"] == 16.55
        assert created["verificationStatus"] == "unverified"

        listing = client.get("/api/v1/incidents").json()
        assert [i["id"] for i in listing] == [created["id"]]

    def test_create_invalid_coordinates(self, client):
        response = client.post("/api/v1/incidents", json={"type": "flood", "lat": "abc", "lng": 81.5})

        assert response.status_code == 400
        assert "lat" in response.json()["detail"]

    def test_delete(self, client, stored_incident):
        assert client.delete(f"/api/v1/incidents/{stored_incident.id}").status_code == 200
        assert client.delete(f"/api/v1/incidents/{stored_incident.id}").status_code == 404

    def test_clear_simulations(self, client, service):
        service.report_incident("flood", 16.55, 81.53, is_simulation=True)

        response = client.delete("/api/v1/incidents/simulations")

        assert response.status_code == 200
        assert response.json()["deletedCount"] == 1


class TestVoteEndpoint:
    """Test suite for the vote route."""

    def test_vote_recorded_then_already_voted(self, client, stored_incident):
        url = f"/api/v1/incidents/{stored_incident.id}/vote"

        first = client.post(url, json={"userId": "userA", "vote": "confirm"})
        second = client.post(url, json={"userId": "userA", "vote": "flag"})

        assert first.status_code == 200
        assert first.json()["status"] == "recorded"
        assert second.json()["status"] == "alreadyVoted"
        assert second.json()["incident"]["confirmations"] == 1
        assert second.json()["incident"]["flags"] == 0

    def test_vote_unknown_incident(self, client):
        response = client.post("/api/v1/incidents/missing/vote", json={"userId": "u", "vote": "confirm"})
        assert response.status_code == 404

    def test_vote_invalid_action(self, client, stored_incident):
        response = client.post(
            f"/api/v1/incidents/{stored_incident.id}/vote",
            json={"userId": "userA", "vote": "maybe"},
        )
        assert response.status_code == 400


class TestRiskEndpoints:
    """Test suite for risk and route routes."""

    def test_point_risk(self, client, stored_incident):
        response = client.post("/api/v1/risk/check", json={"lat": 16.5449, "lng": "81.5212"})

        assert response.status_code == 200
        assert response.json() == {"riskLevel": "Low", "nearbyCount": 1, "highCount": 0}

    def test_point_risk_invalid(self, client):
        response = client.post("/api/v1/risk/check", json={"lat": "north", "lng": 81.5})
        assert response.status_code == 400

    def test_route_sampled(self, client, stored_incident):
        response = client.post("/api/v1/route/check", json={
            "start": {"lat": 16.5449, "lng": 81.5212},
            "end": {"lat": 16.5549, "lng": 81.5212},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["riskLevel"] == "Caution"
        assert data["totalIncidentsOnRoute"] == 1
        assert len(data["sampleSummaries"]) == 26

    def test_route_corridor(self, client, stored_incident):
        response = client.post("/api/v1/route/corridor", json={
            "start": {"lat": 16.54, "lng": 81.53},
            "end": {"lat": 16.56, "lng": 81.53},
        })

        assert response.status_code == 200
        data = response.json()
        assert data["score"] == 85
        assert data["label"] == "Safe"
        assert data["nearbyIncidents"][0]["location"] == {"lat": 16.55, "lng": 81.53}

    def test_route_missing_endpoint(self, client):
        response = client.post("/api/v1/route/check", json={"start": {"lat": 16.5, "lng": 81.5}})
        assert response.status_code == 400

    def test_storage_unavailable(self):
        repository = MagicMock()
        repository.fetch_all_incidents.side_effect = StorageUnavailableError("Failed to fetch incidents")
        app.dependency_overrides[get_service] = lambda: IncidentRiskService(repository)
        try:
            with TestClient(app) as client:
                response = client.post("/api/v1/risk/check", json={"lat": 16.5, "lng": 81.5})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert response.json()["detail"] == "Failed to fetch incidents"


class TestRequestValidation:
    """Malformed request bodies are rejected as invalid input."""

    @pytest.mark.parametrize("lat", [True, False, [16.5], {"deg": 16.5}])
    def test_point_risk_rejects_non_numeric_json(self, client, lat):
        response = client.post("/api/v1/risk/check", json={"lat": lat, "lng": 81.5})

        assert response.status_code == 400
        assert "lat" in response.json()["detail"]

    @pytest.mark.parametrize("path", ["/api/v1/route/check", "/api/v1/route/corridor"])
    def test_route_rejects_boolean_coordinate(self, client, path):
        response = client.post(path, json={
            "start": {"lat": True, "lng": 81.5},
            "end": {"lat": 16.6, "lng": 81.6},
        })

        assert response.status_code == 400
        assert "start.lat" in response.json()["detail"]

    @pytest.mark.parametrize("path", ["/api/v1/route/check", "/api/v1/route/corridor"])
    def test_route_rejects_non_object_endpoint(self, client, path):
        response = client.post(path, json={"start": "x", "end": {"lat": 16.6, "lng": 81.6}})

        assert response.status_code == 400
        assert "start" in response.json()["detail"]

    def test_vote_rejects_non_string_user(self, client, stored_incident):
        response = client.post(
            f"/api/v1/incidents/{stored_incident.id}/vote",
            json={"userId": 42, "vote": "confirm"},
        )

        assert response.status_code == 400
        assert "userId" in response.json()["detail"]

    def test_create_rejects_boolean_coordinate(self, client):
        response = client.post("/api/v1/incidents", json={"type": "flood", "lat": True, "lng": 81.5})

        assert response.status_code == 400

    def test_body_that_is_not_an_object(self, client):
        response = client.post("/api/v1/risk/check", json=[16.5, 81.5])

        assert response.status_code == 400
        assert "detail" in response.json()

    def test_invalid_json(self, client):
        response = client.post(
            "/api/v1/risk/check",
            content="{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
