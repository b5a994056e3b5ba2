"""
TripTactix Travel Store
Persistence of traveler profiles and trips
"""

import json
import uuid
import logging
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from triptactix.models.database import TripModel, UserModel
from triptactix.models.schemas import (
    RecommendationType,
    Recommendations,
    Trip,
    TripCreate,
    TripStatus,
    TripUpdate,
    User,
    UserCreate,
    UserUpdate,
)

logger = logging.getLogger(__name__)

_LIST_FIELDS = (
    "dietary_restrictions",
    "interests",
    "accommodation_preferences",
    "location_preferences",
)


class RecordNotFound(LookupError):
    """Raised when a user or trip id does not resolve."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class TravelStore:
    """CRUD over users and trips, returning API schemas."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, data: UserCreate) -> User:
        fields = data.model_dump(mode="json")
        for key in _LIST_FIELDS:
            fields[key] = json.dumps(fields[key])

        user = UserModel(id=str(uuid.uuid4()), **fields)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Created user {user.id}")
        return self._user_to_schema(user)

    def get_user(self, user_id: str) -> User:
        return self._user_to_schema(self._get_user_model(user_id))

    def list_users(self) -> list[User]:
        users = self.db.query(UserModel).order_by(UserModel.created_at.desc()).all()
        return [self._user_to_schema(u) for u in users]

    def update_user(self, user_id: str, updates: UserUpdate) -> User:
        user = self._get_user_model(user_id)

        for key, value in updates.model_dump(mode="json", exclude_unset=True).items():
            if value is None:
                continue
            if key in _LIST_FIELDS:
                value = json.dumps(value)
            setattr(user, key, value)
        user.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(user)
        return self._user_to_schema(user)

    def delete_user(self, user_id: str) -> None:
        user = self._get_user_model(user_id)
        self.db.delete(user)
        self.db.commit()

    # ------------------------------------------------------------------
    # Trips
    # ------------------------------------------------------------------

    def create_trip(self, data: TripCreate) -> Trip:
        # Verify user exists
        self._get_user_model(data.user_id)

        trip = TripModel(
            id=str(uuid.uuid4()),
            user_id=data.user_id,
            destination=data.destination,
            start_date=data.start_date,
            end_date=data.end_date,
            duration=data.duration,
            party_size=data.party_size,
            status=TripStatus.PLANNING.value,
            recommendations=Recommendations().model_dump_json(),
        )
        self.db.add(trip)
        self.db.commit()
        self.db.refresh(trip)

        logger.info(f"Created trip {trip.id} to {trip.destination} for user {trip.user_id}")
        return self._trip_to_schema(trip)

    def get_trip(self, trip_id: str) -> Trip:
        return self._trip_to_schema(self._get_trip_model(trip_id))

    def list_user_trips(self, user_id: str) -> list[Trip]:
        trips = (
            self.db.query(TripModel)
            .filter(TripModel.user_id == user_id)
            .order_by(TripModel.created_at.desc())
            .all()
        )
        return [self._trip_to_schema(t) for t in trips]

    def update_trip(self, trip_id: str, updates: TripUpdate) -> Trip:
        trip = self._get_trip_model(trip_id)

        for key, value in updates.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            if key == "status":
                value = TripStatus(value).value
            setattr(trip, key, value)
        trip.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(trip)
        return self._trip_to_schema(trip)

    def delete_trip(self, trip_id: str) -> None:
        trip = self._get_trip_model(trip_id)
        self.db.delete(trip)
        self.db.commit()

    def save_recommendations(
        self,
        trip_id: str,
        results: dict[RecommendationType, Any],
    ) -> Trip:
        """Store generated payloads, marking each entry generated now."""
        trip = self._get_trip_model(trip_id)
        recommendations = Recommendations.model_validate_json(trip.recommendations)
        now = datetime.utcnow()

        for rec_type, data in results.items():
            entry = getattr(recommendations, RecommendationType(rec_type).value)
            entry.data = data
            entry.generated = True
            entry.generated_at = now

        trip.recommendations = recommendations.model_dump_json()
        trip.updated_at = now
        self.db.commit()
        self.db.refresh(trip)
        return self._trip_to_schema(trip)

    def reset(self) -> None:
        """Wipe every trip and user."""
        self.db.query(TripModel).delete()
        self.db.query(UserModel).delete()
        self.db.commit()
        logger.warning("Database reset: all users and trips cleared")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_user_model(self, user_id: str) -> UserModel:
        user = self.db.query(UserModel).filter(UserModel.id == user_id).first()
        if not user:
            raise RecordNotFound("User", user_id)
        return user

    def _get_trip_model(self, trip_id: str) -> TripModel:
        trip = self.db.query(TripModel).filter(TripModel.id == trip_id).first()
        if not trip:
            raise RecordNotFound("Trip", trip_id)
        return trip

    def _user_to_schema(self, user: UserModel) -> User:
        return User(
            id=user.id,
            name=user.name,
            age_range=user.age_range,
            travel_style=user.travel_style,
            budget_range=user.budget_range,
            group_type=user.group_type,
            energy_level=user.energy_level,
            dietary_restrictions=json.loads(user.dietary_restrictions or "[]"),
            interests=json.loads(user.interests or "[]"),
            accommodation_preferences=json.loads(user.accommodation_preferences or "[]"),
            location_preferences=json.loads(user.location_preferences or "[]"),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def _trip_to_schema(self, trip: TripModel) -> Trip:
        return Trip(
            id=trip.id,
            user_id=trip.user_id,
            destination=trip.destination,
            start_date=trip.start_date,
            end_date=trip.end_date,
            duration=trip.duration,
            party_size=trip.party_size,
            status=trip.status,
            recommendations=Recommendations.model_validate_json(trip.recommendations),
            created_at=trip.created_at,
            updated_at=trip.updated_at,
        )
