"""TripTactix Services"""

from triptactix.services.store import TravelStore, RecordNotFound
from triptactix.services.advisory import AdvisoryService
from triptactix.services.dialogue import DialogueEngine
from triptactix.services.onboarding import OnboardingService

__all__ = ["TravelStore", "RecordNotFound", "AdvisoryService", "DialogueEngine", "OnboardingService"]
