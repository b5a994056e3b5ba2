"""
TripTactix Advisory Tests
"""

import json
from datetime import date, datetime
from unittest.mock import AsyncMock, patch

import pytest

from triptactix.models.schemas import RecommendationType, Trip, User
from triptactix.services.advisory import (
    FALLBACK_CUISINE,
    FALLBACK_DESTINATIONS,
    FALLBACK_PACKING,
    AdvisoryService,
    FallbackUsed,
    LLMNotConfigured,
    ParsedJSON,
    destinations_prompt,
    fallback_itinerary,
    itinerary_prompt,
    parse_json_response,
)

from conftest import llm_reply, make_llm_client


@pytest.fixture
def user():
    return User(
        id="user-1",
        name="Alice",
        age_range="26-35",
        travel_style="cultural",
        budget_range="mid-range",
        group_type="couple",
        interests=["culture", "food"],
        dietary_restrictions=["vegan"],
        created_at=datetime(2030, 1, 1),
        updated_at=datetime(2030, 1, 1),
    )


@pytest.fixture
def trip():
    return Trip(
        id="trip-1",
        user_id="user-1",
        destination="Lisbon, Portugal",
        start_date=date(2030, 7, 1),
        end_date=date(2030, 7, 8),
        duration=7,
        party_size=2,
        created_at=datetime(2030, 1, 1),
        updated_at=datetime(2030, 1, 1),
    )


class TestParseJsonResponse:
    def test_extracts_object_from_prose(self):
        result = parse_json_response('Sure! Here it is:\n{"days": [1, 2]}\nEnjoy your trip.')

        assert result == ParsedJSON({"days": [1, 2]})

    def test_keeps_nested_objects(self):
        payload = {"a": {"b": {"c": 1}}}
        result = parse_json_response(f"```json\n{json.dumps(payload)}\n```")

        assert isinstance(result, ParsedJSON)
        assert result.data == payload

    def test_no_object(self):
        result = parse_json_response("I cannot help with that.")

        assert isinstance(result, FallbackUsed)

    def test_invalid_json(self):
        result = parse_json_response("{days: one, two}")

        assert isinstance(result, FallbackUsed)

    def test_empty_response(self):
        assert isinstance(parse_json_response(""), FallbackUsed)


class TestPrompts:
    def test_itinerary_prompt_mentions_trip_and_profile(self, user, trip):
        prompt = itinerary_prompt(user, trip)

        assert "7-day trip to Lisbon, Portugal" in prompt
        assert "culture, food" in prompt
        assert "couple (2 people)" in prompt

    def test_destinations_prompt_uses_profile(self, user):
        prompt = destinations_prompt(user)

        assert "culture, food" in prompt
        assert "mid-range" in prompt

    def test_fallback_itinerary_uses_trip(self, trip):
        itinerary = fallback_itinerary(trip)

        assert itinerary["summary"] == "7-day itinerary for Lisbon, Portugal"
        assert itinerary["days"][0]["date"] == "2030-07-01"


class TestAdvisoryService:
    @pytest.mark.asyncio
    async def test_generate_content_without_client(self):
        service = AdvisoryService()
        service.llm_client = None

        with pytest.raises(LLMNotConfigured):
            await service.generate_content("hello")

    @pytest.mark.asyncio
    async def test_generate_packing_parses_reply(self, user, trip):
        client = make_llm_client('Here you go {"categories": [{"category": "Clothes"}]}')
        service = AdvisoryService(llm_client=client)

        result = await service.generate_packing_list(user, trip)

        assert result == {"categories": [{"category": "Clothes"}]}
        client.chat.completions.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_llm_error_uses_fallback(self, user):
        client = make_llm_client(side_effect=RuntimeError("rate limited"))
        service = AdvisoryService(llm_client=client)

        result = await service.generate_destinations(user)

        assert result == FALLBACK_DESTINATIONS

    @pytest.mark.asyncio
    async def test_unparseable_reply_uses_fallback(self, user, trip):
        service = AdvisoryService(llm_client=make_llm_client("no json here"))

        result = await service.generate_cuisine(user, trip)

        assert result == FALLBACK_CUISINE

    @pytest.mark.asyncio
    async def test_fallback_is_a_copy(self, user, trip):
        service = AdvisoryService(llm_client=make_llm_client("no json here"))

        result = await service.generate_packing_list(user, trip)
        result["categories"].clear()

        assert FALLBACK_PACKING["categories"]

    @pytest.mark.asyncio
    async def test_generate_all(self, user, trip):
        client = make_llm_client()
        client.chat.completions.create.return_value = llm_reply('{"ok": true}')
        service = AdvisoryService(llm_client=client)

        results, failures = await service.generate_all(user, trip)

        assert set(results) == {
            RecommendationType.ITINERARY,
            RecommendationType.PACKING,
            RecommendationType.CUISINE,
            RecommendationType.ACCOMMODATION,
        }
        assert failures == {}
        assert client.chat.completions.create.await_count == 4

    @pytest.mark.asyncio
    async def test_generate_all_keeps_partial_results(self, user, trip):
        service = AdvisoryService(llm_client=make_llm_client('{"ok": true}'))

        with patch.object(
            service, "generate_cuisine", new_callable=AsyncMock
        ) as mock_cuisine:
            mock_cuisine.side_effect = RuntimeError("boom")
            results, failures = await service.generate_all(user, trip)

        assert RecommendationType.CUISINE not in results
        assert failures == {RecommendationType.CUISINE: "boom"}
        assert results[RecommendationType.ITINERARY] == {"ok": True}


class TestAdvisoryAPI:
    """Tests for /api/advisory endpoints."""

    def test_generate_itinerary_stores_result(self, client, llm_client, created_trip):
        llm_client.chat.completions.create.return_value = llm_reply('{"days": [{"day": 1}]}')

        response = client.post(f"/api/advisory/itinerary/{created_trip['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["type"] == "itinerary"
        assert data["recommendations"] == {"days": [{"day": 1}]}

        trip = client.get(f"/api/trips/{created_trip['id']}").json()["trip"]
        assert trip["recommendations"]["itinerary"]["generated"] is True
        assert trip["recommendations"]["itinerary"]["data"] == {"days": [{"day": 1}]}

    def test_generate_for_unknown_trip(self, client):
        response = client.post("/api/advisory/packing/missing")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_destinations_not_stored(self, client, llm_client, created_user):
        llm_client.chat.completions.create.side_effect = RuntimeError("down")

        response = client.post(f"/api/advisory/destinations/{created_user['id']}")

        assert response.status_code == 200
        assert response.json()["recommendations"] == FALLBACK_DESTINATIONS

    def test_generate_all(self, client, llm_client, created_trip):
        llm_client.chat.completions.create.return_value = llm_reply('{"ok": true}')

        response = client.post(f"/api/advisory/all/{created_trip['id']}")

        assert response.status_code == 200
        data = response.json()
        assert set(data["recommendations"]) == {"itinerary", "packing", "cuisine", "accommodation"}
        assert data["failed"] == {}

        recommendations = client.get(f"/api/trips/{created_trip['id']}").json()["trip"]["recommendations"]
        assert recommendations["accommodation"]["generated"] is True
        assert recommendations["destinations"]["generated"] is False
