"""
TripTactix - Onboarding Service
Keeps onboarding sessions in memory and routes replies to the dialogue engine
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..config import get_settings
from ..models.schemas import OnboardingMessageResponse, OnboardingSnapshot
from .collaborators import get_collaborators
from .dialogue import DialogueEngine
from .session import OnboardingSession

logger = logging.getLogger(__name__)


class OnboardingService:
    """Session registry in front of a shared DialogueEngine"""

    def __init__(self, engine: Optional[DialogueEngine] = None):
        self.settings = get_settings()

        if engine is None:
            collaborators = get_collaborators()
            engine = DialogueEngine(
                persistence=collaborators,
                advisory=collaborators,
                step_delay_seconds=self.settings.onboarding_step_delay_seconds,
                typing_delay_seconds=self.settings.onboarding_typing_delay_seconds,
                redirect_delay_seconds=self.settings.onboarding_redirect_delay_seconds,
            )
        self.engine = engine
        self.ttl = timedelta(hours=self.settings.onboarding_session_ttl_hours)

        # In-memory session storage
        self._sessions: dict[str, OnboardingSession] = {}

    def start_session(self) -> OnboardingSnapshot:
        self._purge_expired()
        session = self.engine.start()
        self._sessions[session.id] = session
        logger.info(f"Started onboarding session {session.id}")
        return self.engine.snapshot(session)

    def get_session(self, session_id: str) -> Optional[OnboardingSession]:
        session = self._sessions.get(session_id)
        if session and self._is_expired(session) and not session.is_busy:
            del self._sessions[session_id]
            return None
        return session

    def get_snapshot(self, session_id: str) -> Optional[OnboardingSnapshot]:
        session = self.get_session(session_id)
        return self.engine.snapshot(session) if session else None

    async def submit(self, session_id: str, message: str) -> Optional[OnboardingMessageResponse]:
        session = self.get_session(session_id)
        if not session:
            return None
        result = await self.engine.submit(session, message)
        return self._respond(session, result)

    async def select_suggestion(
        self, session_id: str, index: int
    ) -> Optional[OnboardingMessageResponse]:
        session = self.get_session(session_id)
        if not session:
            return None
        result = await self.engine.select_suggestion(session, index)
        return self._respond(session, result)

    def _respond(self, session: OnboardingSession, result) -> OnboardingMessageResponse:
        completion = result.completion
        return OnboardingMessageResponse(
            outcome=result.outcome,
            snapshot=self.engine.snapshot(session),
            redirect_to=completion.redirect_to if completion else None,
            redirect_delay_seconds=completion.redirect_delay_seconds if completion else None,
        )

    def _is_expired(self, session: OnboardingSession) -> bool:
        return datetime.utcnow() - session.updated_at > self.ttl

    def _purge_expired(self) -> None:
        expired = [sid for sid, s in self._sessions.items() if self._is_expired(s) and not s.is_busy]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired onboarding sessions")


# Singleton instance
_onboarding_service: Optional[OnboardingService] = None


def get_onboarding_service() -> OnboardingService:
    """Get or create onboarding service instance"""
    global _onboarding_service
    if _onboarding_service is None:
        _onboarding_service = OnboardingService()
    return _onboarding_service
