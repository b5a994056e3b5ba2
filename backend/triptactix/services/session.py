"""
TripTactix - Onboarding Session Context
Transcript, draft answers and cursor for one onboarding conversation
"""

import uuid
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr

from ..models.schemas import DestinationSuggestion, TranscriptEntry


class OnboardingSession(BaseModel):
    """Full state of one onboarding conversation"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    transcript: list[TranscriptEntry] = []
    draft: dict[str, Any] = {}
    cursor: int = 0

    # True from script exhaustion until a completion attempt fails
    is_complete: bool = False
    last_error: Optional[str] = None

    suggestions: list[DestinationSuggestion] = []
    profile_id: Optional[str] = None
    trip_id: Optional[str] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # Token of the submission currently being processed
    _slot: Optional[str] = PrivateAttr(default=None)

    def try_acquire(self) -> Optional[str]:
        """Claim the single submission slot; None when it is already taken."""
        if self._slot is not None:
            return None
        self._slot = str(uuid.uuid4())
        return self._slot

    def release(self, token: str) -> None:
        if self._slot == token:
            self._slot = None

    @property
    def is_busy(self) -> bool:
        return self._slot is not None

    def add_user_message(self, text: str) -> None:
        self._append(text, is_from_assistant=False)

    def add_assistant_message(self, text: str) -> None:
        """Append an assistant message unless it repeats the previous entry."""
        if self.transcript:
            last = self.transcript[-1]
            if last.is_from_assistant and last.text == text:
                return
        self._append(text, is_from_assistant=True)

    def reset(self) -> None:
        """Back to an empty conversation, keeping the session id."""
        self.transcript = []
        self.draft = {}
        self.cursor = 0
        self.is_complete = False
        self.last_error = None
        self.suggestions = []
        self.profile_id = None
        self.trip_id = None

    def _append(self, text: str, is_from_assistant: bool) -> None:
        self.transcript.append(
            TranscriptEntry(
                id=str(uuid.uuid4()),
                text=text,
                is_from_assistant=is_from_assistant,
                submitted_at=datetime.utcnow(),
            )
        )
