"""
TripTactix - Onboarding Dialogue Engine
Walks the conversation script, validating and storing each reply
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..models.schemas import (
    ConversationStep,
    DateFailure,
    InputKind,
    OnboardingSnapshot,
    SubmitOutcome,
    SubmitResult,
    TranscriptEntry,
)
from .collaborators import AdvisoryCollaborator, PersistenceCollaborator
from .completion import CompletionHandler
from .conversation_script import (
    CONVERSATION_SCRIPT,
    MULTI_CHOICE_CLEAR,
    MULTI_CHOICE_DONE,
    interpolate,
    placeholder_hint,
    to_choice_token,
    to_multi_token,
)
from .destination_suggestions import DestinationSuggestionFlow
from .session import OnboardingSession
from .validation import correction_notice, failure_message, validate

logger = logging.getLogger(__name__)

RESTART_COMMAND = "restart"
RETRY_COMMAND = "retry"

NOTHING_TO_RETRY = (
    "There's nothing to retry right now. Just answer the question above, "
    "or type 'restart' to start over."
)


class DialogueEngine:
    """
    Drives one onboarding conversation at a time per session.

    At most one submission per session is processed at once; a reply
    arriving while another is in flight is dropped, not queued.
    """

    def __init__(
        self,
        persistence: PersistenceCollaborator,
        advisory: AdvisoryCollaborator,
        script: Sequence[ConversationStep] = CONVERSATION_SCRIPT,
        step_delay_seconds: float = 0.0,
        typing_delay_seconds: float = 0.0,
        redirect_delay_seconds: float = 2.0,
        today: Callable[[], date] = date.today,
    ):
        self.script = tuple(script)
        self.step_delay_seconds = step_delay_seconds
        self.typing_delay_seconds = typing_delay_seconds
        self.today = today
        self.completion = CompletionHandler(persistence, redirect_delay_seconds, today)
        self.destination_flow = DestinationSuggestionFlow(persistence, advisory)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start(self) -> OnboardingSession:
        session = OnboardingSession()
        self._emit_first_prompt(session)
        return session

    async def submit(self, session: OnboardingSession, raw_input: str) -> SubmitResult:
        token = session.try_acquire()
        if token is None:
            logger.debug(f"Dropped reply for busy session {session.id}")
            return SubmitResult(outcome=SubmitOutcome.DROPPED)

        try:
            return await self._process(session, raw_input)
        finally:
            session.release(token)
            session.updated_at = datetime.utcnow()

    async def select_suggestion(self, session: OnboardingSession, index: int) -> SubmitResult:
        """Answer the destination question with one of the offered suggestions."""
        if not 0 <= index < len(session.suggestions):
            raise IndexError(f"No destination suggestion at position {index}")
        destination = session.suggestions[index].destination
        result = await self.submit(session, destination)
        if result.outcome != SubmitOutcome.DROPPED:
            session.suggestions = []
        return result

    # ------------------------------------------------------------------
    # UI-facing view
    # ------------------------------------------------------------------

    def current_step(self, session: OnboardingSession) -> Optional[ConversationStep]:
        if session.cursor < len(self.script):
            return self.script[session.cursor]
        return None

    def current_prompt(self, session: OnboardingSession) -> Optional[str]:
        step = self.current_step(session)
        if step is None:
            return None
        return interpolate(step.prompt_template, session.draft)

    def current_quick_replies(self, session: OnboardingSession) -> list[str]:
        if self._awaiting_retry(session):
            return ["Retry", "Restart"]

        step = self.current_step(session)
        if step is None:
            return []

        options = list(step.quick_replies)
        if step.kind == InputKind.MULTI_CHOICE and session.draft.get(step.field_key):
            options.append("Done")
        return options

    def current_placeholder_hint(self, session: OnboardingSession) -> str:
        if self._awaiting_retry(session):
            return "Type 'retry' or 'restart'..."
        return placeholder_hint(self.current_step(session))

    def transcript(self, session: OnboardingSession) -> list[TranscriptEntry]:
        return list(session.transcript)

    def is_awaiting_completion(self, session: OnboardingSession) -> bool:
        return session.is_complete

    def snapshot(self, session: OnboardingSession) -> OnboardingSnapshot:
        return OnboardingSnapshot(
            session_id=session.id,
            transcript=self.transcript(session),
            draft=dict(session.draft),
            cursor=session.cursor,
            total_steps=len(self.script),
            current_prompt=self.current_prompt(session),
            quick_replies=self.current_quick_replies(session),
            placeholder_hint=self.current_placeholder_hint(session),
            is_awaiting_completion=self.is_awaiting_completion(session),
            suggestions=list(session.suggestions),
            profile_id=session.profile_id,
            trip_id=session.trip_id,
            last_error=session.last_error,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _process(self, session: OnboardingSession, raw_input: str) -> SubmitResult:
        command = raw_input.strip().lower()

        if command == RESTART_COMMAND:
            session.reset()
            self._emit_first_prompt(session)
            return SubmitResult(outcome=SubmitOutcome.RESTARTED)

        if command == RETRY_COMMAND:
            return await self._retry(session)

        step = self.current_step(session)
        if step is None:
            return SubmitResult(outcome=SubmitOutcome.IGNORED)

        if step.kind == InputKind.MULTI_CHOICE and command == MULTI_CHOICE_DONE:
            return await self._advance(session)

        session.add_user_message(raw_input)

        value = validate(step, raw_input, self.today())
        if isinstance(value, DateFailure):
            session.add_assistant_message(failure_message(raw_input, value))
            return SubmitResult(outcome=SubmitOutcome.REJECTED)

        notice = correction_notice(raw_input, value, step.kind)
        if notice:
            session.add_assistant_message(notice)

        if (
            step.kind == InputKind.FREE_TEXT
            and step.suggest_affordance
            and value.lower() == step.suggest_affordance.lower()
        ):
            if await self.destination_flow.offer(session):
                return SubmitResult(
                    outcome=SubmitOutcome.SUGGESTIONS_OFFERED,
                    suggestions=list(session.suggestions),
                )
            return SubmitResult(outcome=SubmitOutcome.REJECTED)

        if step.kind == InputKind.SINGLE_CHOICE:
            session.draft[step.field_key] = to_choice_token(value)
        elif step.kind == InputKind.MULTI_CHOICE:
            if value.lower() in MULTI_CHOICE_CLEAR:
                session.draft[step.field_key] = []
            else:
                self._toggle(session, step.field_key, to_multi_token(value))
                return SubmitResult(outcome=SubmitOutcome.AWAITING_MORE)
        else:
            session.draft[step.field_key] = value
            if step.kind == InputKind.FREE_TEXT and step.suggest_affordance:
                # A typed destination supersedes any offered ones
                session.suggestions = []

        return await self._advance(session)

    async def _advance(self, session: OnboardingSession) -> SubmitResult:
        delay = self.step_delay_seconds + self.typing_delay_seconds
        if delay > 0:
            await asyncio.sleep(delay)

        session.cursor += 1
        step = self.current_step(session)
        if step is not None:
            session.add_assistant_message(interpolate(step.prompt_template, session.draft))
            return SubmitResult(outcome=SubmitOutcome.ADVANCED)

        session.is_complete = True
        completion = await self.completion.complete(session)
        return SubmitResult(outcome=SubmitOutcome.COMPLETED, completion=completion)

    async def _retry(self, session: OnboardingSession) -> SubmitResult:
        if not self._awaiting_retry(session):
            session.add_assistant_message(NOTHING_TO_RETRY)
            return SubmitResult(outcome=SubmitOutcome.REJECTED)

        session.is_complete = True
        completion = await self.completion.complete(session)
        return SubmitResult(outcome=SubmitOutcome.RETRIED, completion=completion)

    def _awaiting_retry(self, session: OnboardingSession) -> bool:
        return (
            session.cursor >= len(self.script)
            and not session.is_complete
            and session.last_error is not None
        )

    def _emit_first_prompt(self, session: OnboardingSession) -> None:
        if self.script:
            session.add_assistant_message(interpolate(self.script[0].prompt_template, session.draft))

    @staticmethod
    def _toggle(session: OnboardingSession, field_key: str, token: str) -> None:
        selected = list(session.draft.get(field_key) or [])
        if token in selected:
            selected.remove(token)
        else:
            selected.append(token)
        session.draft[field_key] = selected
