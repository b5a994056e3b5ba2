"""
TripTactix - Travel Advisory Service
Builds prompts, calls the LLM and extracts JSON recommendations
"""

import re
import copy
import json
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from openai import AsyncOpenAI

from ..config import get_settings
from ..models.schemas import RecommendationType, Trip, User

logger = logging.getLogger(__name__)


class LLMNotConfigured(RuntimeError):
    """Raised when no LLM API key is available."""


# =============================================================================
# Response parsing
# =============================================================================

@dataclass(frozen=True)
class ParsedJSON:
    data: dict


@dataclass(frozen=True)
class FallbackUsed:
    reason: str


ParseResult = Union[ParsedJSON, FallbackUsed]


def parse_json_response(response: str) -> ParseResult:
    """Pull the outermost {...} object out of free-form model output."""
    json_match = re.search(r"\{[\s\S]*\}", response or "")
    if not json_match:
        return FallbackUsed("Could not parse AI response")
    try:
        data = json.loads(json_match.group())
    except json.JSONDecodeError:
        return FallbackUsed("Invalid JSON in AI response")
    if not isinstance(data, dict):
        return FallbackUsed("AI response is not a JSON object")
    return ParsedJSON(data)


# =============================================================================
# Static fallbacks
# =============================================================================

FALLBACK_DESTINATIONS = {
    "recommendations": [
        {
            "destination": "Paris, France",
            "matchScore": 85,
            "whyRecommended": "Classic destination with something for everyone",
            "bestTimeToVisit": "April-June, September-October",
            "estimatedBudget": "$100-200 per day",
            "highlights": ["Eiffel Tower", "Louvre Museum", "Local Cuisine", "Historic Architecture"],
            "travelTips": ["Learn basic French phrases", "Book museum tickets in advance"],
        }
    ]
}

FALLBACK_PACKING = {
    "categories": [
        {
            "category": "Essentials",
            "items": [
                {"item": "Passport", "quantity": "1", "essential": True, "notes": "Required for travel"},
                {"item": "Phone charger", "quantity": "1", "essential": True, "notes": "Stay connected"},
            ],
        }
    ],
    "weatherConsiderations": "Check weather forecast before packing",
    "travelTips": ["Pack light", "Leave room for souvenirs"],
    "prohibited": ["Check airline restrictions"],
}

FALLBACK_CUISINE = {
    "mustTryDishes": [
        {
            "dish": "Local specialty",
            "description": "Ask locals for recommendations",
            "whereToFind": "Local restaurants",
            "dietaryNotes": "Check ingredients",
        }
    ],
    "restaurants": [
        {
            "name": "Local restaurants",
            "cuisine": "Regional",
            "priceRange": "Varies",
            "specialties": ["Local dishes"],
            "dietaryOptions": ["Ask server"],
        }
    ],
    "foodMarkets": ["Visit local markets"],
    "diningEtiquette": ["Respect local customs"],
    "foodSafety": ["Drink bottled water if unsure"],
}

FALLBACK_ACCOMMODATION = {
    "recommendations": [
        {
            "type": "Hotel",
            "area": "City Center",
            "priceRange": "$50-150 per night",
            "pros": ["Central location", "Easy access to attractions"],
            "cons": ["Can be noisy"],
            "bestFor": "First-time visitors",
            "amenities": ["WiFi", "Breakfast"],
        }
    ],
    "neighborhoods": [
        {
            "name": "City Center",
            "description": "Heart of the city",
            "pros": ["Walking distance to attractions"],
            "bestFor": "Tourists",
        }
    ],
    "bookingTips": ["Book in advance", "Read reviews"],
    "whatToAvoid": ["Avoid areas far from transport"],
}


def fallback_itinerary(trip: Trip) -> dict:
    """Single arrival day; the only fallback that depends on the trip."""
    return {
        "summary": f"{trip.duration}-day itinerary for {trip.destination}",
        "days": [
            {
                "day": 1,
                "date": trip.start_date.isoformat(),
                "theme": "Arrival & Exploration",
                "activities": [
                    {
                        "time": "10:00 AM",
                        "activity": "Arrival and Check-in",
                        "description": "Arrive at destination and check into accommodation",
                        "duration": "2 hours",
                        "cost": "Included",
                        "tips": "Leave luggage if room not ready",
                    }
                ],
            }
        ],
        "tips": ["This is a fallback itinerary. Please try again for AI-generated recommendations."],
    }


# =============================================================================
# Prompts
# =============================================================================

def _join(values: list, empty: str = "") -> str:
    text = ", ".join(getattr(v, "value", v) for v in values)
    return text or empty


def _dates(trip: Trip) -> str:
    return f"{trip.start_date.strftime('%a %b %d %Y')} to {trip.end_date.strftime('%a %b %d %Y')}"


def itinerary_prompt(user: User, trip: Trip) -> str:
    return f"""
Create a detailed day-by-day itinerary for a {trip.duration}-day trip to {trip.destination}.

User Profile:
- Age: {user.age_range.value}
- Travel Style: {user.travel_style.value}
- Budget: {user.budget_range.value}
- Group: {user.group_type.value} ({trip.party_size} people)
- Interests: {_join(user.interests)}
- Energy Level: {user.energy_level.value}

Trip Details:
- Dates: {_dates(trip)}
- Duration: {trip.duration} days

Please provide a JSON response with the following structure:
{{
  "summary": "Brief overview of the itinerary",
  "days": [
    {{
      "day": 1,
      "date": "YYYY-MM-DD",
      "theme": "Day theme (e.g., 'Arrival & City Center')",
      "activities": [
        {{
          "time": "9:00 AM",
          "activity": "Activity name",
          "description": "Brief description",
          "duration": "2 hours",
          "cost": "Estimated cost range",
          "tips": "Helpful tips"
        }}
      ]
    }}
  ],
  "tips": ["General trip tips"]
}}

Focus on activities that match their interests and energy level. Consider travel time between activities and budget constraints."""


def destinations_prompt(user: User) -> str:
    return f"""
Recommend 5 travel destinations for someone with the following profile:

User Profile:
- Age: {user.age_range.value}
- Travel Style: {user.travel_style.value}
- Budget: {user.budget_range.value}
- Group: {user.group_type.value}
- Interests: {_join(user.interests)}

Please provide a JSON response with the following structure:
{{
  "recommendations": [
    {{
      "destination": "City, Country",
      "matchScore": 95,
      "whyRecommended": "Explanation of why this fits their profile",
      "bestTimeToVisit": "Season/months",
      "estimatedBudget": "Budget range per person",
      "highlights": ["Top 3-4 highlights"],
      "travelTips": ["2-3 practical tips"]
    }}
  ]
}}

Ensure recommendations match their budget, interests, and travel style."""


def packing_prompt(user: User, trip: Trip) -> str:
    return f"""
Create a comprehensive packing checklist for a {trip.duration}-day trip to {trip.destination}.

User & Trip Info:
- Destination: {trip.destination}
- Duration: {trip.duration} days
- Dates: {_dates(trip)}
- Travel Style: {user.travel_style.value}
- Group: {user.group_type.value}
- Accommodation Preferences: {_join(user.accommodation_preferences)}

Please provide a JSON response with the following structure:
{{
  "categories": [
    {{
      "category": "Clothing",
      "items": [
        {{
          "item": "Item name",
          "quantity": "1-2",
          "essential": true,
          "notes": "When/why to bring this"
        }}
      ]
    }}
  ],
  "weatherConsiderations": "Weather-specific advice",
  "travelTips": ["Packing tips"],
  "prohibited": ["Items to avoid bringing"]
}}

Consider the season, activities, and destination-specific requirements."""


def cuisine_prompt(user: User, trip: Trip) -> str:
    return f"""
Recommend local food experiences for a trip to {trip.destination}.

User Profile:
- Dietary Restrictions: {_join(user.dietary_restrictions, empty="None")}
- Budget: {user.budget_range.value}
- Group: {user.group_type.value}
- Interests: {_join(user.interests)}

Please provide a JSON response with the following structure:
{{
  "mustTryDishes": [
    {{
      "dish": "Dish name",
      "description": "What it is",
      "whereToFind": "Type of place to find it",
      "dietaryNotes": "Any dietary considerations"
    }}
  ],
  "restaurants": [
    {{
      "name": "Restaurant type/area",
      "cuisine": "Cuisine type",
      "priceRange": "Budget range",
      "specialties": ["What they're known for"],
      "dietaryOptions": ["Available dietary accommodations"]
    }}
  ],
  "foodMarkets": ["Local markets to visit"],
  "diningEtiquette": ["Cultural dining tips"],
  "foodSafety": ["Food safety tips for the destination"]
}}

Focus on authentic local experiences that match their dietary needs and budget."""


def accommodation_prompt(user: User, trip: Trip) -> str:
    return f"""
Recommend accommodation options for a {trip.duration}-day trip to {trip.destination}.

Trip Details:
- Destination: {trip.destination}
- Group Size: {trip.party_size} people
- Budget: {user.budget_range.value}
- Accommodation Preferences: {_join(user.accommodation_preferences)}
- Location Preferences: {_join(user.location_preferences)}
- Travel Style: {user.travel_style.value}

Please provide a JSON response with the following structure:
{{
  "recommendations": [
    {{
      "type": "Hotel/Hostel/Airbnb/etc",
      "area": "Neighborhood/Area",
      "priceRange": "Price range per night",
      "pros": ["Advantages"],
      "cons": ["Disadvantages"],
      "bestFor": "Who this is best for",
      "amenities": ["Key amenities"]
    }}
  ],
  "neighborhoods": [
    {{
      "name": "Neighborhood name",
      "description": "What it's like",
      "pros": ["Advantages of staying here"],
      "bestFor": "Type of traveler"
    }}
  ],
  "bookingTips": ["Advice for booking"],
  "whatToAvoid": ["Areas or situations to avoid"]
}}

Consider their budget, group size, and preferences for location and amenities."""


# =============================================================================
# Service
# =============================================================================

class AdvisoryService:
    """Generates travel recommendations with an OpenAI-compatible LLM"""

    def __init__(self, llm_client: Optional[AsyncOpenAI] = None):
        self.settings = get_settings()
        if llm_client is None and self.settings.llm_api_key:
            llm_client = AsyncOpenAI(
                api_key=self.settings.llm_api_key,
                base_url=self.settings.llm_base_url,
            )
        elif llm_client is None:
            logger.warning("LLM API key not set; advisory will serve fallback content")
        self.llm_client = llm_client

    async def generate_content(self, prompt: str) -> str:
        """Single-turn completion for a prompt."""
        if self.llm_client is None:
            raise LLMNotConfigured(
                "LLM API not configured. Please set LLM_API_KEY in environment variables."
            )

        response = await self.llm_client.chat.completions.create(
            model=self.settings.llm_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.settings.llm_temperature,
        )
        return response.choices[0].message.content or ""

    async def generate_itinerary(self, user: User, trip: Trip) -> dict:
        return await self._generate(
            RecommendationType.ITINERARY,
            itinerary_prompt(user, trip),
            fallback_itinerary(trip),
        )

    async def generate_destinations(self, user: User) -> dict:
        return await self._generate(
            RecommendationType.DESTINATIONS,
            destinations_prompt(user),
            FALLBACK_DESTINATIONS,
        )

    async def generate_packing_list(self, user: User, trip: Trip) -> dict:
        return await self._generate(
            RecommendationType.PACKING,
            packing_prompt(user, trip),
            FALLBACK_PACKING,
        )

    async def generate_cuisine(self, user: User, trip: Trip) -> dict:
        return await self._generate(
            RecommendationType.CUISINE,
            cuisine_prompt(user, trip),
            FALLBACK_CUISINE,
        )

    async def generate_accommodation(self, user: User, trip: Trip) -> dict:
        return await self._generate(
            RecommendationType.ACCOMMODATION,
            accommodation_prompt(user, trip),
            FALLBACK_ACCOMMODATION,
        )

    async def generate_all(
        self, user: User, trip: Trip
    ) -> tuple[dict[RecommendationType, dict], dict[RecommendationType, str]]:
        """
        Run the four trip-scoped generators concurrently.

        Returns (results, failures); one failing generator never
        discards the others.
        """
        generators = {
            RecommendationType.ITINERARY: self.generate_itinerary(user, trip),
            RecommendationType.PACKING: self.generate_packing_list(user, trip),
            RecommendationType.CUISINE: self.generate_cuisine(user, trip),
            RecommendationType.ACCOMMODATION: self.generate_accommodation(user, trip),
        }
        outcomes = await asyncio.gather(*generators.values(), return_exceptions=True)

        results: dict[RecommendationType, dict] = {}
        failures: dict[RecommendationType, str] = {}
        for rec_type, outcome in zip(generators, outcomes):
            if isinstance(outcome, Exception):
                logger.error(f"{rec_type.value} generation failed: {outcome}")
                failures[rec_type] = str(outcome)
            else:
                results[rec_type] = outcome
        return results, failures

    async def _generate(self, rec_type: RecommendationType, prompt: str, fallback: dict) -> dict:
        try:
            response = await self.generate_content(prompt)
        except Exception as e:
            logger.error(f"LLM error generating {rec_type.value}: {e}")
            return copy.deepcopy(fallback)

        parsed = parse_json_response(response)
        if isinstance(parsed, FallbackUsed):
            logger.warning(f"Using fallback {rec_type.value}: {parsed.reason}")
            return copy.deepcopy(fallback)
        return parsed.data


# Singleton instance
_advisory_service: Optional[AdvisoryService] = None


def get_advisory_service() -> AdvisoryService:
    """Get or create advisory service instance"""
    global _advisory_service
    if _advisory_service is None:
        _advisory_service = AdvisoryService()
    return _advisory_service
