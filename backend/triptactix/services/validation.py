"""
TripTactix - Onboarding Answer Validation
Per-input-kind normalization of chat replies
"""

import re
from datetime import date
from typing import Callable, Optional, Union

from ..models.schemas import ConversationStep, DateFailure, InputKind

MONTHS = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)

DATE_PATTERN = re.compile(
    r"^(" + "|".join(MONTHS) + r")\s+(\d{1,2}),\s+(\d{4})$",
    re.IGNORECASE,
)

PARTY_SIZE_MIN = 1
PARTY_SIZE_MAX = 20

ValidationResult = Union[str, int, DateFailure]


def validate_date(raw: str, today: Optional[date] = None) -> Union[str, DateFailure]:
    """
    Accept "<Month> <D|DD>, <YYYY>" on or after today.

    Returns the trimmed input unchanged on success.
    """
    text = (raw or "").strip()
    match = DATE_PATTERN.match(text)
    if not match:
        return DateFailure.MALFORMED

    month_name, day, year = match.groups()
    try:
        parsed = date(int(year), MONTHS.index(month_name.lower()) + 1, int(day))
    except ValueError:
        return DateFailure.INVALID

    if parsed < (today or date.today()):
        return DateFailure.PAST

    return text


def parse_date_answer(text: str) -> date:
    """Convert an already-accepted date answer to a date."""
    month_name, day, year = DATE_PATTERN.match(text.strip()).groups()
    return date(int(year), MONTHS.index(month_name.lower()) + 1, int(day))


def validate_integer(
    raw: str,
    minimum: int = PARTY_SIZE_MIN,
    maximum: int = PARTY_SIZE_MAX,
) -> int:
    """Leading integer clamped to [minimum, maximum]; unparseable -> minimum."""
    match = re.match(r"^\s*([+-]?\d+)", raw or "")
    if not match:
        return minimum
    value = int(match.group(1))
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def validate_free_text(raw: str) -> str:
    return (raw or "").strip()


_VALIDATORS: dict[InputKind, Callable[[ConversationStep, str, Optional[date]], ValidationResult]] = {
    InputKind.FREE_TEXT: lambda step, raw, today: validate_free_text(raw),
    InputKind.SINGLE_CHOICE: lambda step, raw, today: validate_free_text(raw),
    InputKind.MULTI_CHOICE: lambda step, raw, today: validate_free_text(raw),
    InputKind.INTEGER: lambda step, raw, today: validate_integer(raw, step.minimum, step.maximum),
    InputKind.DATE: lambda step, raw, today: validate_date(raw, today),
}


def validate(step: ConversationStep, raw: str, today: Optional[date] = None) -> ValidationResult:
    """Dispatch on the step's input kind."""
    return _VALIDATORS[step.kind](step, raw, today)


def failure_message(raw: str, failure: DateFailure) -> str:
    """Corrective chat message for a refused date."""
    if failure == DateFailure.MALFORMED:
        return (
            '❌ Please enter the date in the exact format: "Month DD, YYYY" '
            f'(e.g., "December 25, 2024"). You entered: "{raw}"'
        )
    if failure == DateFailure.INVALID:
        return f'❌ The date "{raw}" is not valid. Please enter a valid date in format "Month DD, YYYY".'
    return f'❌ The date "{raw}" is in the past. Please enter a future date for your trip.'


def correction_notice(raw: str, value: ValidationResult, kind: InputKind) -> Optional[str]:
    """Informational note when an answer was silently corrected, else None."""
    if kind == InputKind.INTEGER and str(value) != raw:
        return f"✅ I've set the number to {value} (was \"{raw}\")."
    if kind == InputKind.FREE_TEXT and value != raw:
        return f"✅ I've cleaned up your input: \"{value}\"."
    return None
