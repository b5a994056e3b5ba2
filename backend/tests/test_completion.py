"""
TripTactix Onboarding Completion Tests
"""

from datetime import date

import pytest

from triptactix.services.completion import (
    DEFAULT_DESTINATION,
    CompletionHandler,
    build_profile,
    build_trip,
    failure_explanation,
    trip_duration,
)
from triptactix.services.destination_suggestions import provisional_profile
from triptactix.services.session import OnboardingSession

from conftest import TODAY


class TestTripDuration:
    def test_week(self):
        assert trip_duration(date(2030, 7, 1), date(2030, 7, 8)) == 7

    def test_across_year_end(self):
        assert trip_duration(date(2030, 12, 25), date(2031, 1, 1)) == 7

    def test_same_day_is_one(self):
        assert trip_duration(date(2030, 7, 1), date(2030, 7, 1)) == 1

    def test_reversed_dates_use_absolute_difference(self):
        assert trip_duration(date(2030, 7, 8), date(2030, 7, 1)) == 7

    def test_missing_date(self):
        assert trip_duration(None, date(2030, 7, 1)) == 1
        assert trip_duration(date(2030, 7, 1), None) == 1


class TestBuildProfile:
    def test_defaults(self):
        profile = build_profile({})

        assert profile == {
            "name": "User",
            "age_range": "26-35",
            "travel_style": "mixed",
            "budget_range": "mid-range",
            "group_type": "solo",
            "energy_level": "moderate",
            "interests": ["culture"],
            "dietary_restrictions": [],
            "accommodation_preferences": [],
            "location_preferences": [],
        }

    def test_answers_override_defaults(self):
        profile = build_profile(
            {"name": "Ann", "group_type": "family", "interests": ["art"], "dietary_restrictions": ["vegan"]}
        )

        assert profile["name"] == "Ann"
        assert profile["group_type"] == "family"
        assert profile["interests"] == ["art"]
        assert profile["dietary_restrictions"] == ["vegan"]

    def test_cleared_interests_fall_back(self):
        assert build_profile({"interests": []})["interests"] == ["culture"]

    def test_provisional_profile_differs(self):
        profile = provisional_profile({})

        assert profile["group_type"] == "couple"
        assert profile["interests"] == ["culture", "food"]


class TestBuildTrip:
    def test_from_answers(self):
        trip = build_trip(
            {
                "destination": "Oslo, Norway",
                "start_date": "December 25, 2030",
                "end_date": "January 1, 2031",
                "party_size": 3,
            },
            "user-9",
            TODAY,
        )

        assert trip == {
            "user_id": "user-9",
            "destination": "Oslo, Norway",
            "start_date": "2030-12-25",
            "end_date": "2031-01-01",
            "duration": 7,
            "party_size": 3,
        }

    def test_defaults(self):
        trip = build_trip({}, "user-9", TODAY)

        assert trip["destination"] == DEFAULT_DESTINATION
        assert trip["start_date"] == "2030-06-01"
        assert trip["end_date"] == "2030-06-08"
        assert trip["duration"] == 1
        assert trip["party_size"] == 1


class TestFailureExplanation:
    def test_network(self):
        assert "network issue" in failure_explanation("network error: timed out")

    def test_service(self):
        assert "AI service" in failure_explanation("API error: quota exceeded")

    def test_unknown(self):
        assert "temporary issue" in failure_explanation("Something odd")

    def test_always_offers_retry(self):
        assert failure_explanation("x").endswith("Would you like to try again?")


class TestCompletionHandler:
    @pytest.mark.asyncio
    async def test_profile_failure_skips_trip(self, collaborators):
        collaborators.profile_error = RuntimeError("")
        handler = CompletionHandler(collaborators, today=lambda: TODAY)
        session = OnboardingSession(draft={"name": "Ann"}, cursor=12, is_complete=True)

        result = await handler.complete(session)

        assert result.success is False
        assert result.error == "An unexpected error occurred"
        assert collaborators.trips == []
        assert session.is_complete is False
        assert session.last_error == "An unexpected error occurred"

    @pytest.mark.asyncio
    async def test_profile_without_id_is_a_failure(self, collaborators, monkeypatch):
        async def no_id(fields):
            return {}

        monkeypatch.setattr(collaborators, "create_profile", no_id)
        handler = CompletionHandler(collaborators, today=lambda: TODAY)
        session = OnboardingSession(is_complete=True)

        result = await handler.complete(session)

        assert result.success is False
        assert result.error == "Failed to create user"
