"""
TripTactix Onboarding Router
Scripted chat that collects preferences and creates the first trip
"""

from fastapi import APIRouter, Depends, HTTPException, status

from triptactix.models.schemas import (
    OnboardingMessageRequest,
    OnboardingMessageResponse,
    OnboardingSnapshot,
)
from triptactix.services.onboarding import OnboardingService, get_onboarding_service

router = APIRouter()


def _not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Onboarding session not found",
    )


@router.post("/sessions", response_model=OnboardingSnapshot, status_code=status.HTTP_201_CREATED)
async def start_session(service: OnboardingService = Depends(get_onboarding_service)):
    """Start a new onboarding conversation; the first question is already in the transcript."""
    return service.start_session()


@router.get("/sessions/{session_id}", response_model=OnboardingSnapshot)
async def get_session(
    session_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
):
    """
    Get the current state of an onboarding conversation.

    Use this to resume a conversation after a reload.
    """
    snapshot = service.get_snapshot(session_id)
    if not snapshot:
        raise _not_found()
    return snapshot


@router.post("/sessions/{session_id}/messages", response_model=OnboardingMessageResponse)
async def send_message(
    session_id: str,
    request: OnboardingMessageRequest,
    service: OnboardingService = Depends(get_onboarding_service),
):
    """
    Answer the current question.

    'restart' and 'retry' are accepted at any point. A reply sent while
    the previous one is still being processed is dropped.
    """
    response = await service.submit(session_id, request.message)
    if not response:
        raise _not_found()
    return response


@router.post(
    "/sessions/{session_id}/suggestions/{index}",
    response_model=OnboardingMessageResponse,
)
async def select_suggestion(
    session_id: str,
    index: int,
    service: OnboardingService = Depends(get_onboarding_service),
):
    """Pick one of the offered destination suggestions as the destination."""
    try:
        response = await service.select_suggestion(session_id, index)
    except IndexError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if not response:
        raise _not_found()
    return response
