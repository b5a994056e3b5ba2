"""
TripTactix Trips Router
CRUD operations for trip management
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from triptactix.models.database import get_db
from triptactix.models.schemas import (
    RecommendationType,
    RecommendationUpdateRequest,
    TripCreate,
    TripUpdate,
)
from triptactix.services.store import RecordNotFound, TravelStore

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_trip(request: TripCreate, db: Session = Depends(get_db)):
    """Create a new trip for an existing user."""
    try:
        trip = TravelStore(db).create_trip(request)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "success": True,
        "message": "Trip created successfully",
        "trip": trip.model_dump(mode="json"),
    }


@router.get("/user/{user_id}")
async def list_user_trips(user_id: str, db: Session = Depends(get_db)):
    """List a user's trips, newest first."""
    trips = TravelStore(db).list_user_trips(user_id)
    return {
        "success": True,
        "count": len(trips),
        "trips": [t.model_dump(mode="json") for t in trips],
    }


@router.get("/{trip_id}")
async def get_trip(trip_id: str, db: Session = Depends(get_db)):
    """Get a specific trip by ID, including its recommendations."""
    try:
        trip = TravelStore(db).get_trip(trip_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"success": True, "trip": trip.model_dump(mode="json")}


@router.put("/{trip_id}")
async def update_trip(trip_id: str, request: TripUpdate, db: Session = Depends(get_db)):
    """Update an existing trip."""
    try:
        trip = TravelStore(db).update_trip(trip_id, request)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "success": True,
        "message": "Trip updated successfully",
        "trip": trip.model_dump(mode="json"),
    }


@router.delete("/{trip_id}")
async def delete_trip(trip_id: str, db: Session = Depends(get_db)):
    """Delete a trip."""
    try:
        TravelStore(db).delete_trip(trip_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"success": True, "message": "Trip deleted successfully"}


@router.put("/{trip_id}/recommendations")
async def update_recommendations(
    trip_id: str,
    request: RecommendationUpdateRequest,
    db: Session = Depends(get_db),
):
    """Store one type of generated recommendations on the trip."""
    try:
        rec_type = RecommendationType(request.type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid recommendation type",
        )

    try:
        trip = TravelStore(db).save_recommendations(trip_id, {rec_type: request.data})
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "success": True,
        "message": f"{rec_type.value} recommendations updated successfully",
        "trip": trip.model_dump(mode="json"),
    }
