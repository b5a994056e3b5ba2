"""
TripTactix - Onboarding Conversation Script
The fixed sequence of questions asked by the onboarding assistant
"""

import re
from typing import Any, Optional

from ..models.schemas import (
    ConversationStep,
    DateStep,
    FreeTextStep,
    InputKind,
    IntegerStep,
    MultiChoiceStep,
    SingleChoiceStep,
)

SUGGEST_DESTINATIONS = "Suggest destinations for me"

# Replies that close a multi-choice step
MULTI_CHOICE_DONE = "done"
MULTI_CHOICE_CLEAR = ("none", "skip")

CONVERSATION_SCRIPT: tuple[ConversationStep, ...] = (
    FreeTextStep(
        prompt_template=(
            "Hi there! 👋 I'm your TripTactix assistant. I'd love to help you plan "
            "an amazing trip! What's your name?"
        ),
        field_key="name",
    ),
    SingleChoiceStep(
        prompt_template=(
            "Nice to meet you, {name}! 😊 How old are you? "
            "This helps me suggest age-appropriate activities."
        ),
        field_key="age_range",
        quick_replies=("18-25", "26-35", "36-50", "51-65", "65+"),
    ),
    SingleChoiceStep(
        prompt_template="Great! What kind of travel experience are you looking for?",
        field_key="travel_style",
        quick_replies=(
            "Adventure & Active",
            "Relaxation & Leisure",
            "Cultural & Historical",
            "Mix of Everything",
        ),
    ),
    SingleChoiceStep(
        prompt_template="Perfect! What's your budget range for this trip?",
        field_key="budget_range",
        quick_replies=("Budget ($100/day)", "Mid-range ($100-250/day)", "Luxury ($250+/day)"),
    ),
    SingleChoiceStep(
        prompt_template="Who are you traveling with?",
        field_key="group_type",
        quick_replies=("Solo Travel", "Couple", "Family", "Friends Group"),
    ),
    IntegerStep(
        prompt_template="How many people will be traveling?",
        field_key="party_size",
        quick_replies=("1", "2", "3", "4", "5+"),
    ),
    SingleChoiceStep(
        prompt_template="What pace do you prefer for your travels?",
        field_key="energy_level",
        quick_replies=("Relaxed pace", "Moderate pace", "Action-packed"),
    ),
    MultiChoiceStep(
        prompt_template=(
            "What interests you most when traveling? "
            "(You can select multiple - type 'done' when finished)"
        ),
        field_key="interests",
        quick_replies=(
            "Culture", "Food", "Nature", "Nightlife", "History", "Art",
            "Adventure", "Shopping", "Beaches", "Museums", "Architecture", "Festivals",
        ),
    ),
    MultiChoiceStep(
        prompt_template=(
            "Any dietary restrictions I should know about? "
            "(Optional - you can skip this or type 'done' when finished)"
        ),
        field_key="dietary_restrictions",
        quick_replies=(
            "Vegetarian", "Vegan", "Gluten-free", "Halal",
            "Kosher", "Dairy-free", "Nut-free", "None",
        ),
    ),
    DateStep(
        prompt_template="When are you planning to travel?",
        field_key="start_date",
    ),
    DateStep(
        prompt_template="And when do you plan to return?",
        field_key="end_date",
    ),
    FreeTextStep(
        prompt_template="Excellent! Now let's talk about your trip. Where would you like to go?",
        field_key="destination",
        quick_replies=(SUGGEST_DESTINATIONS,),
        suggest_affordance=SUGGEST_DESTINATIONS,
    ),
)

# Display label -> stored token for single-choice answers
CHOICE_TOKENS: dict[str, Optional[str]] = {
    "Adventure & Active": "adventure",
    "Relaxation & Leisure": "relaxation",
    "Cultural & Historical": "cultural",
    "Mix of Everything": "mixed",
    "Budget ($100/day)": "budget",
    "Mid-range ($100-250/day)": "mid-range",
    "Luxury ($250+/day)": "luxury",
    "Solo Travel": "solo",
    "Couple": "couple",
    "Family": "family",
    "Friends Group": "friends",
    "Relaxed pace": "low",
    "Moderate pace": "moderate",
    "Action-packed": "high",
    "None": None,
}

PLACEHOLDER_HINTS: dict[InputKind, str] = {
    InputKind.FREE_TEXT: "Type your answer...",
    InputKind.SINGLE_CHOICE: "Select an option or type your answer...",
    InputKind.MULTI_CHOICE: "Select options or type 'done' when finished...",
    InputKind.INTEGER: "Enter a number...",
    InputKind.DATE: "Enter date in format: Month DD, YYYY (e.g., December 25, 2024)...",
}

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def interpolate(template: str, draft: dict[str, Any]) -> str:
    """Fill {field} placeholders from the draft, leaving unknown ones as-is."""

    def _replace(match: re.Match) -> str:
        value = draft.get(match.group(1))
        if value is None or value == "" or value == []:
            return match.group(0)
        if isinstance(value, list):
            return ", ".join(str(v) for v in value)
        return str(value)

    return _PLACEHOLDER_RE.sub(_replace, template)


def to_choice_token(label: str) -> Optional[str]:
    if label in CHOICE_TOKENS:
        return CHOICE_TOKENS[label]
    return label.lower()


def to_multi_token(label: str) -> str:
    return re.sub(r"\s+", "-", label.strip().lower())


def placeholder_hint(step: Optional[ConversationStep]) -> str:
    if step is None:
        return "Type your message..."
    return PLACEHOLDER_HINTS[step.kind]
