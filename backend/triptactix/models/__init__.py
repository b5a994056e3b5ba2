"""TripTactix Models Package"""

from triptactix.models.schemas import (
    User,
    UserCreate,
    UserUpdate,
    Trip,
    TripCreate,
    TripUpdate,
    Recommendations,
    RecommendationType,
    DestinationSuggestion,
    TranscriptEntry,
    OnboardingSnapshot,
    SubmitOutcome,
)

__all__ = [
    "User",
    "UserCreate",
    "UserUpdate",
    "Trip",
    "TripCreate",
    "TripUpdate",
    "Recommendations",
    "RecommendationType",
    "DestinationSuggestion",
    "TranscriptEntry",
    "OnboardingSnapshot",
    "SubmitOutcome",
]
