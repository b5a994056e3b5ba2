"""
TripTactix - Destination Suggestions
Side flow of the destination question: ask the advisory service where to go
"""

import logging
from typing import Any

from pydantic import ValidationError

from ..models.schemas import DestinationSuggestion
from .collaborators import AdvisoryCollaborator, PersistenceCollaborator
from .session import OnboardingSession

logger = logging.getLogger(__name__)

PROVISIONAL_PROFILE_DEFAULTS: dict[str, Any] = {
    "name": "User",
    "age_range": "26-35",
    "travel_style": "mixed",
    "budget_range": "mid-range",
    "group_type": "couple",
    "energy_level": "moderate",
}

SUGGESTIONS_READY = (
    "Here are some destination suggestions based on your preferences! Click on any "
    "destination to select it, or you can type your own destination below."
)
SUGGESTIONS_UNAVAILABLE = (
    "Sorry, I couldn't get destination suggestions right now. "
    "Please type your destination manually."
)


def provisional_profile(draft: dict[str, Any]) -> dict[str, Any]:
    """Profile from whatever has been answered so far."""
    profile = {
        key: draft.get(key) or default
        for key, default in PROVISIONAL_PROFILE_DEFAULTS.items()
    }
    profile["interests"] = draft.get("interests") or ["culture", "food"]
    profile["dietary_restrictions"] = draft.get("dietary_restrictions") or []
    return profile


def parse_suggestions(items: list[Any]) -> list[DestinationSuggestion]:
    """Valid suggestions only; a malformed item never hides the others."""
    suggestions = []
    for item in items:
        try:
            suggestions.append(DestinationSuggestion.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping malformed destination suggestion: {e}")
    return suggestions


class DestinationSuggestionFlow:
    def __init__(self, persistence: PersistenceCollaborator, advisory: AdvisoryCollaborator):
        self.persistence = persistence
        self.advisory = advisory

    async def offer(self, session: OnboardingSession) -> bool:
        """
        Fetch suggestions and attach them to the session.

        Never raises: any failure leaves an apology in the transcript and
        the user types a destination instead.
        """
        try:
            profile = await self.persistence.create_profile(provisional_profile(session.draft))
            payload = await self.advisory.generate_destinations(profile["id"])
            suggestions = parse_suggestions(payload["recommendations"])
            if not suggestions:
                raise ValueError("no destinations returned")
        except Exception as e:
            logger.warning(f"Destination suggestions failed for session {session.id}: {e}")
            session.add_assistant_message(SUGGESTIONS_UNAVAILABLE)
            return False

        session.suggestions = suggestions
        session.add_assistant_message(SUGGESTIONS_READY)
        return True
