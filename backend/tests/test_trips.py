"""
TripTactix Trips API Tests
"""


class TestTripsAPI:
    """Tests for /api/trips endpoints."""

    def test_create_trip(self, client, sample_trip_create):
        """Test creating a new trip."""
        response = client.post("/api/trips", json=sample_trip_create)

        assert response.status_code == 201
        trip = response.json()["trip"]

        assert trip["destination"] == "Lisbon, Portugal"
        assert trip["status"] == "planning"
        assert trip["start_date"] == "2030-07-01"
        assert trip["duration"] == 7
        assert trip["party_size"] == 2
        assert trip["recommendations"]["itinerary"]["generated"] is False
        assert "id" in trip

    def test_create_trip_unknown_user(self, client, sample_trip_create):
        sample_trip_create["user_id"] = "missing"
        response = client.post("/api/trips", json=sample_trip_create)

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_create_trip_party_size_limits(self, client, sample_trip_create):
        sample_trip_create["party_size"] = 21
        response = client.post("/api/trips", json=sample_trip_create)

        assert response.status_code == 422

    def test_get_trip(self, client, created_trip):
        response = client.get(f"/api/trips/{created_trip['id']}")

        assert response.status_code == 200
        assert response.json()["trip"]["id"] == created_trip["id"]

    def test_get_trip_not_found(self, client):
        response = client.get("/api/trips/non-existent-id")

        assert response.status_code == 404

    def test_list_user_trips_newest_first(self, client, sample_trip_create):
        client.post("/api/trips", json=sample_trip_create)
        client.post("/api/trips", json={**sample_trip_create, "destination": "Porto, Portugal"})

        response = client.get(f"/api/trips/user/{sample_trip_create['user_id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert data["trips"][0]["destination"] == "Porto, Portugal"

    def test_update_trip_status(self, client, created_trip):
        response = client.put(f"/api/trips/{created_trip['id']}", json={"status": "booked"})

        assert response.status_code == 200
        trip = response.json()["trip"]
        assert trip["status"] == "booked"
        assert trip["destination"] == "Lisbon, Portugal"

    def test_update_trip_invalid_status(self, client, created_trip):
        response = client.put(f"/api/trips/{created_trip['id']}", json={"status": "cancelled"})

        assert response.status_code == 422

    def test_delete_trip(self, client, created_trip):
        """Test deleting a trip."""
        response = client.delete(f"/api/trips/{created_trip['id']}")
        assert response.status_code == 200

        # Verify it's gone
        get_response = client.get(f"/api/trips/{created_trip['id']}")
        assert get_response.status_code == 404


class TestRecommendationsUpdate:
    """Tests for PUT /api/trips/{id}/recommendations."""

    def test_store_recommendations(self, client, created_trip):
        response = client.put(
            f"/api/trips/{created_trip['id']}/recommendations",
            json={"type": "packing", "data": {"categories": []}},
        )

        assert response.status_code == 200
        entry = response.json()["trip"]["recommendations"]["packing"]
        assert entry["generated"] is True
        assert entry["data"] == {"categories": []}
        assert entry["generated_at"] is not None

    def test_other_types_untouched(self, client, created_trip):
        client.put(
            f"/api/trips/{created_trip['id']}/recommendations",
            json={"type": "cuisine", "data": {"restaurants": []}},
        )

        trip = client.get(f"/api/trips/{created_trip['id']}").json()["trip"]
        assert trip["recommendations"]["cuisine"]["generated"] is True
        assert trip["recommendations"]["itinerary"]["generated"] is False

    def test_invalid_type(self, client, created_trip):
        response = client.put(
            f"/api/trips/{created_trip['id']}/recommendations",
            json={"type": "weather", "data": {}},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Invalid recommendation type"}

    def test_unknown_trip(self, client):
        response = client.put(
            "/api/trips/missing/recommendations",
            json={"type": "packing", "data": {}},
        )

        assert response.status_code == 404
