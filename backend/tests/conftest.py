"""
TripTactix Test Configuration
Pytest fixtures and test database setup
"""

from datetime import date
from types import SimpleNamespace
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from triptactix.main import app
from triptactix.models.database import Base, get_db
from triptactix.services.advisory import AdvisoryService, get_advisory_service
from triptactix.services.collaborators import CollaboratorError
from triptactix.services.dialogue import DialogueEngine
from triptactix.services.onboarding import OnboardingService, get_onboarding_service


# Test database - in-memory SQLite
SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# All onboarding dates are checked against this day
TODAY = date(2030, 6, 1)


def llm_reply(content: str) -> SimpleNamespace:
    """Shape of an openai chat completion response."""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def make_llm_client(content: str = "", side_effect: Optional[Exception] = None) -> MagicMock:
    client = MagicMock()
    client.chat.completions.create = AsyncMock(
        return_value=llm_reply(content), side_effect=side_effect
    )
    return client


class FakeCollaborators:
    """In-memory persistence and advisory collaborators that record calls."""

    def __init__(self):
        self.profiles: list[dict[str, Any]] = []
        self.trips: list[dict[str, Any]] = []
        self.destination_requests: list[str] = []
        self.profile_error: Optional[Exception] = None
        self.trip_error: Optional[Exception] = None
        self.destinations_error: Optional[Exception] = None
        self.destinations: list[dict[str, Any]] = [
            {
                "destination": "Kyoto, Japan",
                "matchScore": 92,
                "whyRecommended": "Temples and food",
                "bestTimeToVisit": "March-May",
                "estimatedBudget": "$150 per day",
                "highlights": ["Fushimi Inari"],
                "travelTips": ["Get a bus pass"],
            },
            {"destination": "Lisbon, Portugal", "matchScore": 88},
        ]

    async def create_profile(self, fields: dict[str, Any]) -> dict[str, Any]:
        if self.profile_error:
            raise self.profile_error
        profile = {"id": f"user-{len(self.profiles) + 1}", **fields}
        self.profiles.append(profile)
        return profile

    async def create_trip(self, fields: dict[str, Any]) -> dict[str, Any]:
        if self.trip_error:
            raise self.trip_error
        trip = {"id": f"trip-{len(self.trips) + 1}", **fields}
        self.trips.append(trip)
        return trip

    async def get_trip(self, trip_id: str) -> dict[str, Any]:
        for trip in self.trips:
            if trip["id"] == trip_id:
                return trip
        raise CollaboratorError("Trip not found")

    async def generate_destinations(self, profile_id: str) -> dict[str, Any]:
        self.destination_requests.append(profile_id)
        if self.destinations_error:
            raise self.destinations_error
        return {"recommendations": self.destinations}


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def llm_client():
    """Mock LLM client returning an empty completion unless reconfigured."""
    return make_llm_client("")


@pytest.fixture
def advisory_service(llm_client):
    return AdvisoryService(llm_client=llm_client)


@pytest.fixture
def collaborators():
    return FakeCollaborators()


@pytest.fixture
def dialogue_engine(collaborators):
    """Engine without pacing delays and a fixed calendar."""
    return DialogueEngine(
        persistence=collaborators,
        advisory=collaborators,
        redirect_delay_seconds=2.0,
        today=lambda: TODAY,
    )


@pytest.fixture
def onboarding_service(dialogue_engine):
    return OnboardingService(engine=dialogue_engine)


@pytest.fixture(scope="function")
def client(db_session, advisory_service, onboarding_service):
    """Create a test client with database and service overrides."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_advisory_service] = lambda: advisory_service
    app.dependency_overrides[get_onboarding_service] = lambda: onboarding_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_user_create():
    """Sample user creation request matching UserCreate schema."""
    return {
        "name": "Alice",
        "age_range": "26-35",
        "travel_style": "cultural",
        "budget_range": "mid-range",
        "group_type": "couple",
        "energy_level": "moderate",
        "dietary_restrictions": ["vegetarian"],
        "interests": ["culture", "food"],
    }


@pytest.fixture
def created_user(client, sample_user_create):
    response = client.post("/api/users", json=sample_user_create)
    return response.json()["user"]


@pytest.fixture
def sample_trip_create(created_user):
    """Sample trip creation request matching TripCreate schema."""
    return {
        "user_id": created_user["id"],
        "destination": "Lisbon, Portugal",
        "start_date": "2030-07-01",
        "end_date": "2030-07-08",
        "duration": 7,
        "party_size": 2,
    }


@pytest.fixture
def created_trip(client, sample_trip_create):
    response = client.post("/api/trips", json=sample_trip_create)
    return response.json()["trip"]
