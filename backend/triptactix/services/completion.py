"""
TripTactix - Onboarding Completion
Turns a finished onboarding draft into a saved profile and trip
"""

import logging
from datetime import date, timedelta
from typing import Any, Callable, Optional

from ..models.schemas import CompletionResult
from .collaborators import CollaboratorError, PersistenceCollaborator
from .session import OnboardingSession
from .validation import parse_date_answer

logger = logging.getLogger(__name__)

DEFAULT_DESTINATION = "Paris, France"
DEFAULT_TRIP_LENGTH_DAYS = 7

PROFILE_DEFAULTS: dict[str, Any] = {
    "name": "User",
    "age_range": "26-35",
    "travel_style": "mixed",
    "budget_range": "mid-range",
    "group_type": "solo",
    "energy_level": "moderate",
}

RETRY_INSTRUCTIONS = (
    "You can type 'retry' to try again, or 'restart' to start over with a fresh conversation."
)


def trip_duration(start: Optional[date], end: Optional[date]) -> int:
    """Whole days between the two dates (at least 1); 1 when either is missing."""
    if start is None or end is None:
        return 1
    return max(abs((end - start).days), 1)


def build_profile(draft: dict[str, Any]) -> dict[str, Any]:
    profile = {key: draft.get(key) or default for key, default in PROFILE_DEFAULTS.items()}

    interests = draft.get("interests")
    dietary = draft.get("dietary_restrictions")
    profile["interests"] = list(interests) if isinstance(interests, list) and interests else ["culture"]
    profile["dietary_restrictions"] = list(dietary) if isinstance(dietary, list) else []
    profile["accommodation_preferences"] = []
    profile["location_preferences"] = []
    return profile


def build_trip(draft: dict[str, Any], profile_id: str, today: date) -> dict[str, Any]:
    start = parse_date_answer(draft["start_date"]) if draft.get("start_date") else None
    end = parse_date_answer(draft["end_date"]) if draft.get("end_date") else None
    duration = trip_duration(start, end)

    start = start or today
    end = end or today + timedelta(days=DEFAULT_TRIP_LENGTH_DAYS)

    return {
        "user_id": profile_id,
        "destination": draft.get("destination") or DEFAULT_DESTINATION,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        "duration": duration,
        "party_size": draft.get("party_size") or 1,
    }


def failure_explanation(error_message: str) -> str:
    message = "I'm having trouble creating your trip right now. "
    if "network" in error_message:
        message += "It looks like there's a network issue. "
    elif "API" in error_message:
        message += "There seems to be an issue with our AI service. "
    else:
        message += "This might be a temporary issue. "
    return message + "Would you like to try again?"


class CompletionHandler:
    """Creates the profile, then the trip, and reports back into the transcript."""

    def __init__(
        self,
        persistence: PersistenceCollaborator,
        redirect_delay_seconds: float = 2.0,
        today: Callable[[], date] = date.today,
    ):
        self.persistence = persistence
        self.redirect_delay_seconds = redirect_delay_seconds
        self.today = today

    async def complete(self, session: OnboardingSession) -> CompletionResult:
        draft = session.draft

        try:
            profile = await self.persistence.create_profile(build_profile(draft))
            profile_id = profile.get("id")
            if not profile_id:
                raise CollaboratorError("Failed to create user")
            session.profile_id = profile_id

            trip = await self.persistence.create_trip(build_trip(draft, profile_id, self.today()))
            trip_id = trip.get("id")
            if not trip_id:
                raise CollaboratorError("Failed to create trip")
        except Exception as e:
            error_message = str(e) or "An unexpected error occurred"
            logger.error(f"Onboarding completion failed for session {session.id}: {error_message}")

            session.last_error = error_message
            session.add_assistant_message(failure_explanation(error_message))
            session.add_assistant_message(RETRY_INSTRUCTIONS)
            session.is_complete = False
            return CompletionResult(success=False, profile_id=session.profile_id, error=error_message)

        session.trip_id = trip_id
        session.last_error = None
        destination = draft.get("destination") or "your destination"
        session.add_assistant_message(
            f"Perfect! 🎉 I've got everything I need to create your personalized trip to "
            f"{destination}. Let me generate some amazing recommendations for you!"
        )
        logger.info(f"Onboarding session {session.id} created trip {trip_id}")

        return CompletionResult(
            success=True,
            profile_id=profile_id,
            trip_id=trip_id,
            redirect_to=f"/trip/{trip_id}",
            redirect_delay_seconds=self.redirect_delay_seconds,
        )
