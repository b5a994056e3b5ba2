"""
TripTactix - Pydantic Schemas
Data validation and serialization for API requests/responses
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class AgeRange(str, Enum):
    AGE_18_25 = "18-25"
    AGE_26_35 = "26-35"
    AGE_36_50 = "36-50"
    AGE_51_65 = "51-65"
    AGE_65_PLUS = "65+"


class TravelStyle(str, Enum):
    ADVENTURE = "adventure"
    RELAXATION = "relaxation"
    CULTURAL = "cultural"
    MIXED = "mixed"


class BudgetRange(str, Enum):
    BUDGET = "budget"
    MID_RANGE = "mid-range"
    LUXURY = "luxury"


class GroupType(str, Enum):
    SOLO = "solo"
    COUPLE = "couple"
    FAMILY = "family"
    FRIENDS = "friends"


class EnergyLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class DietaryRestriction(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten-free"
    HALAL = "halal"
    KOSHER = "kosher"
    DAIRY_FREE = "dairy-free"
    NUT_FREE = "nut-free"
    NONE = "none"


class Interest(str, Enum):
    CULTURE = "culture"
    FOOD = "food"
    NATURE = "nature"
    NIGHTLIFE = "nightlife"
    HISTORY = "history"
    ART = "art"
    ADVENTURE = "adventure"
    SHOPPING = "shopping"
    BEACHES = "beaches"
    MUSEUMS = "museums"
    ARCHITECTURE = "architecture"
    FESTIVALS = "festivals"


class AccommodationPreference(str, Enum):
    HOTEL = "hotel"
    HOSTEL = "hostel"
    AIRBNB = "airbnb"
    RESORT = "resort"
    BOUTIQUE = "boutique"
    BUDGET = "budget"


class LocationPreference(str, Enum):
    CITY_CENTER = "city-center"
    QUIET_AREA = "quiet-area"
    BEACH_FRONT = "beach-front"
    MOUNTAIN = "mountain"
    HISTORIC_DISTRICT = "historic-district"


class TripStatus(str, Enum):
    PLANNING = "planning"
    BOOKED = "booked"
    COMPLETED = "completed"


class RecommendationType(str, Enum):
    ITINERARY = "itinerary"
    DESTINATIONS = "destinations"
    PACKING = "packing"
    CUISINE = "cuisine"
    ACCOMMODATION = "accommodation"


class InputKind(str, Enum):
    """How a conversation step expects its answer"""
    FREE_TEXT = "free_text"
    SINGLE_CHOICE = "single_choice"
    MULTI_CHOICE = "multi_choice"
    INTEGER = "integer"
    DATE = "date"


class DateFailure(str, Enum):
    """Why a date answer was refused"""
    MALFORMED = "malformed"
    INVALID = "invalid"
    PAST = "past"


class SubmitOutcome(str, Enum):
    """Result of feeding one user reply to the dialogue engine"""
    ADVANCED = "advanced"
    AWAITING_MORE = "awaiting_more"
    REJECTED = "rejected"
    COMPLETED = "completed"
    RESTARTED = "restarted"
    RETRIED = "retried"
    SUGGESTIONS_OFFERED = "suggestions_offered"
    DROPPED = "dropped"
    IGNORED = "ignored"


# =============================================================================
# User Profile Models
# =============================================================================

class UserBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    age_range: AgeRange
    travel_style: TravelStyle
    budget_range: BudgetRange
    group_type: GroupType
    energy_level: EnergyLevel = EnergyLevel.MODERATE
    dietary_restrictions: list[DietaryRestriction] = []
    interests: list[Interest] = []
    accommodation_preferences: list[AccommodationPreference] = []
    location_preferences: list[LocationPreference] = []

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class UserCreate(UserBase):
    pass


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    age_range: Optional[AgeRange] = None
    travel_style: Optional[TravelStyle] = None
    budget_range: Optional[BudgetRange] = None
    group_type: Optional[GroupType] = None
    energy_level: Optional[EnergyLevel] = None
    dietary_restrictions: Optional[list[DietaryRestriction]] = None
    interests: Optional[list[Interest]] = None
    accommodation_preferences: Optional[list[AccommodationPreference]] = None
    location_preferences: Optional[list[LocationPreference]] = None


class User(UserBase):
    id: str
    created_at: datetime
    updated_at: datetime


# =============================================================================
# Trip Models
# =============================================================================

class RecommendationEntry(BaseModel):
    generated: bool = False
    data: Optional[Any] = None
    generated_at: Optional[datetime] = None


class Recommendations(BaseModel):
    itinerary: RecommendationEntry = Field(default_factory=RecommendationEntry)
    destinations: RecommendationEntry = Field(default_factory=RecommendationEntry)
    packing: RecommendationEntry = Field(default_factory=RecommendationEntry)
    cuisine: RecommendationEntry = Field(default_factory=RecommendationEntry)
    accommodation: RecommendationEntry = Field(default_factory=RecommendationEntry)


class TripBase(BaseModel):
    destination: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    duration: int = Field(..., ge=0)  # days
    party_size: int = Field(..., ge=1, le=20)

    @field_validator("destination", mode="before")
    @classmethod
    def strip_destination(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class TripCreate(TripBase):
    user_id: str


class TripUpdate(BaseModel):
    destination: Optional[str] = Field(None, min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration: Optional[int] = Field(None, ge=0)
    party_size: Optional[int] = Field(None, ge=1, le=20)
    status: Optional[TripStatus] = None


class Trip(TripBase):
    id: str
    user_id: str
    status: TripStatus = TripStatus.PLANNING
    recommendations: Recommendations = Field(default_factory=Recommendations)
    created_at: datetime
    updated_at: datetime


class RecommendationUpdateRequest(BaseModel):
    type: str
    data: Any


# =============================================================================
# Advisory Models
# =============================================================================

class DestinationSuggestion(BaseModel):
    """One destination proposed by the advisory service"""
    model_config = ConfigDict(populate_by_name=True)

    destination: str
    match_score: int = Field(0, ge=0, le=100, alias="matchScore")
    why_recommended: str = Field("", alias="whyRecommended")
    best_time_to_visit: str = Field("", alias="bestTimeToVisit")
    estimated_budget: str = Field("", alias="estimatedBudget")
    highlights: list[str] = []
    travel_tips: list[str] = Field([], alias="travelTips")

    @field_validator("match_score", mode="before")
    @classmethod
    def round_score(cls, v: Any) -> Any:
        if isinstance(v, str):
            try:
                v = float(v.strip().rstrip("%"))
            except ValueError:
                return 0
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return min(max(int(round(v)), 0), 100)
        return v


# =============================================================================
# Conversation Script Models
# =============================================================================

class _StepBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt_template: str
    field_key: str
    quick_replies: tuple[str, ...] = ()


class FreeTextStep(_StepBase):
    kind: Literal[InputKind.FREE_TEXT] = InputKind.FREE_TEXT
    # Quick reply that opens the destination-suggestion flow instead of answering
    suggest_affordance: Optional[str] = None


class SingleChoiceStep(_StepBase):
    kind: Literal[InputKind.SINGLE_CHOICE] = InputKind.SINGLE_CHOICE


class MultiChoiceStep(_StepBase):
    kind: Literal[InputKind.MULTI_CHOICE] = InputKind.MULTI_CHOICE


class IntegerStep(_StepBase):
    kind: Literal[InputKind.INTEGER] = InputKind.INTEGER
    minimum: int = 1
    maximum: int = 20


class DateStep(_StepBase):
    kind: Literal[InputKind.DATE] = InputKind.DATE


ConversationStep = Annotated[
    Union[FreeTextStep, SingleChoiceStep, MultiChoiceStep, IntegerStep, DateStep],
    Field(discriminator="kind"),
]


# =============================================================================
# Onboarding Session Models
# =============================================================================

class TranscriptEntry(BaseModel):
    """A message in the onboarding transcript"""
    id: str
    text: str
    is_from_assistant: bool
    submitted_at: datetime


class CompletionResult(BaseModel):
    """Outcome of turning a finished draft into a profile and a trip"""
    success: bool
    profile_id: Optional[str] = None
    trip_id: Optional[str] = None
    redirect_to: Optional[str] = None
    redirect_delay_seconds: Optional[float] = None
    error: Optional[str] = None


class SubmitResult(BaseModel):
    outcome: SubmitOutcome
    completion: Optional[CompletionResult] = None
    suggestions: list[DestinationSuggestion] = []


class OnboardingSnapshot(BaseModel):
    """Render-ready view of an onboarding session"""
    session_id: str
    transcript: list[TranscriptEntry]
    draft: dict[str, Any]
    cursor: int
    total_steps: int
    current_prompt: Optional[str] = None
    quick_replies: list[str] = []
    placeholder_hint: str
    is_awaiting_completion: bool = False
    suggestions: list[DestinationSuggestion] = []
    profile_id: Optional[str] = None
    trip_id: Optional[str] = None
    last_error: Optional[str] = None


class OnboardingMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)

    @field_validator("message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        # Kept as typed so the engine can report its own trimming
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class OnboardingMessageResponse(BaseModel):
    outcome: SubmitOutcome
    snapshot: OnboardingSnapshot
    redirect_to: Optional[str] = None
    redirect_delay_seconds: Optional[float] = None


# =============================================================================
# Health Check
# =============================================================================

class HealthCheck(BaseModel):
    status: str = "healthy"
    version: str
    timestamp: datetime
