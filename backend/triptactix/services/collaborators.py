"""
TripTactix - Onboarding Collaborators
Persistence and advisory back-ends used by the onboarding flow, either
in-process or over the REST API
"""

import logging
from typing import Any, Callable, Optional, Protocol, Union

import httpx
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..config import get_settings
from ..models.database import SessionLocal
from ..models.schemas import TripCreate, UserCreate
from .advisory import AdvisoryService, get_advisory_service
from .store import RecordNotFound, TravelStore

logger = logging.getLogger(__name__)


class CollaboratorError(Exception):
    """A collaborator call failed; the message is human readable."""


class PersistenceCollaborator(Protocol):
    async def create_profile(self, fields: dict[str, Any]) -> dict[str, Any]: ...

    async def create_trip(self, fields: dict[str, Any]) -> dict[str, Any]: ...

    async def get_trip(self, trip_id: str) -> dict[str, Any]: ...


class AdvisoryCollaborator(Protocol):
    async def generate_destinations(self, profile_id: str) -> dict[str, Any]: ...


class LocalCollaborators:
    """Serve collaborator calls from this process's database and LLM client."""

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        advisory: Optional[AdvisoryService] = None,
    ):
        self.session_factory = session_factory
        self.advisory = advisory or get_advisory_service()

    async def create_profile(self, fields: dict[str, Any]) -> dict[str, Any]:
        try:
            data = UserCreate.model_validate(fields)
        except ValidationError as e:
            raise CollaboratorError(f"Failed to create user: {e}") from e

        with self.session_factory() as db:
            user = TravelStore(db).create_user(data)
        return user.model_dump(mode="json")

    async def create_trip(self, fields: dict[str, Any]) -> dict[str, Any]:
        try:
            data = TripCreate.model_validate(fields)
        except ValidationError as e:
            raise CollaboratorError(f"Failed to create trip: {e}") from e

        with self.session_factory() as db:
            try:
                trip = TravelStore(db).create_trip(data)
            except RecordNotFound as e:
                raise CollaboratorError(f"Failed to create trip: {e}") from e
        return trip.model_dump(mode="json")

    async def get_trip(self, trip_id: str) -> dict[str, Any]:
        with self.session_factory() as db:
            try:
                trip = TravelStore(db).get_trip(trip_id)
            except RecordNotFound as e:
                raise CollaboratorError(str(e)) from e
        return trip.model_dump(mode="json")

    async def generate_destinations(self, profile_id: str) -> dict[str, Any]:
        with self.session_factory() as db:
            try:
                user = TravelStore(db).get_user(profile_id)
            except RecordNotFound as e:
                raise CollaboratorError(str(e)) from e
        return await self.advisory.generate_destinations(user)


class HttpCollaborators:
    """Call a remote TripTactix REST API speaking the success envelope."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def create_profile(self, fields: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("POST", "/api/users", fields)
        return body["user"]

    async def create_trip(self, fields: dict[str, Any]) -> dict[str, Any]:
        body = await self._request("POST", "/api/trips", fields)
        return body["trip"]

    async def get_trip(self, trip_id: str) -> dict[str, Any]:
        body = await self._request("GET", f"/api/trips/{trip_id}")
        return body["trip"]

    async def generate_destinations(self, profile_id: str) -> dict[str, Any]:
        body = await self._request("POST", f"/api/advisory/destinations/{profile_id}")
        return body["recommendations"]

    async def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"

        async with httpx.AsyncClient(transport=self.transport) as client:
            try:
                response = await client.request(method, url, json=payload, timeout=self.timeout)
            except httpx.TransportError as e:
                logger.error(f"{method} {url} failed: {e}")
                raise CollaboratorError(f"network error: {e}") from e

        try:
            body = response.json()
        except ValueError as e:
            raise CollaboratorError(
                f"API error: {method} {path} returned non-JSON ({response.status_code})"
            ) from e

        if response.is_error or not body.get("success", False):
            message = body.get("message") or f"HTTP {response.status_code}"
            logger.error(f"{method} {url} rejected: {message}")
            raise CollaboratorError(f"API error: {message}")

        return body


def get_collaborators() -> Union[LocalCollaborators, HttpCollaborators]:
    """Pick HTTP collaborators when a base URL is configured."""
    settings = get_settings()
    if settings.collaborator_base_url:
        return HttpCollaborators(
            settings.collaborator_base_url,
            timeout=settings.collaborator_timeout_seconds,
        )
    return LocalCollaborators()
