"""
TripTactix Advisory Router
LLM-generated itinerary, destination, packing, cuisine and accommodation advice
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from triptactix.models.database import get_db
from triptactix.models.schemas import RecommendationType, Trip, User
from triptactix.services.advisory import AdvisoryService, get_advisory_service
from triptactix.services.store import RecordNotFound, TravelStore

router = APIRouter()


def _load_trip(store: TravelStore, trip_id: str) -> tuple[User, Trip]:
    try:
        trip = store.get_trip(trip_id)
        user = store.get_user(trip.user_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return user, trip


async def _generate_for_trip(
    rec_type: RecommendationType,
    trip_id: str,
    db: Session,
    advisory: AdvisoryService,
) -> dict:
    store = TravelStore(db)
    user, trip = _load_trip(store, trip_id)

    generators = {
        RecommendationType.ITINERARY: advisory.generate_itinerary,
        RecommendationType.PACKING: advisory.generate_packing_list,
        RecommendationType.CUISINE: advisory.generate_cuisine,
        RecommendationType.ACCOMMODATION: advisory.generate_accommodation,
    }
    recommendations = await generators[rec_type](user, trip)
    store.save_recommendations(trip_id, {rec_type: recommendations})

    return {
        "success": True,
        "type": rec_type.value,
        "recommendations": recommendations,
    }


@router.post("/itinerary/{trip_id}")
async def generate_itinerary(
    trip_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """Generate and store a day-by-day itinerary."""
    return await _generate_for_trip(RecommendationType.ITINERARY, trip_id, db, advisory)


@router.post("/destinations/{user_id}")
async def generate_destinations(
    user_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """
    Recommend destinations for a profile.

    Independent of any trip, so nothing is stored.
    """
    try:
        user = TravelStore(db).get_user(user_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    recommendations = await advisory.generate_destinations(user)
    return {
        "success": True,
        "type": RecommendationType.DESTINATIONS.value,
        "recommendations": recommendations,
    }


@router.post("/packing/{trip_id}")
async def generate_packing(
    trip_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """Generate and store a packing checklist."""
    return await _generate_for_trip(RecommendationType.PACKING, trip_id, db, advisory)


@router.post("/cuisine/{trip_id}")
async def generate_cuisine(
    trip_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """Generate and store local food recommendations."""
    return await _generate_for_trip(RecommendationType.CUISINE, trip_id, db, advisory)


@router.post("/accommodation/{trip_id}")
async def generate_accommodation(
    trip_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """Generate and store accommodation recommendations."""
    return await _generate_for_trip(RecommendationType.ACCOMMODATION, trip_id, db, advisory)


@router.post("/all/{trip_id}")
async def generate_all_recommendations(
    trip_id: str,
    db: Session = Depends(get_db),
    advisory: AdvisoryService = Depends(get_advisory_service),
):
    """
    Generate every trip-scoped recommendation concurrently.

    Whatever succeeds is stored; failures are reported alongside.
    """
    store = TravelStore(db)
    user, trip = _load_trip(store, trip_id)

    results, failures = await advisory.generate_all(user, trip)
    if results:
        store.save_recommendations(trip_id, results)

    return {
        "success": True,
        "message": "All recommendations generated successfully"
        if not failures
        else f"Generated {len(results)} of {len(results) + len(failures)} recommendations",
        "recommendations": {rec_type.value: data for rec_type, data in results.items()},
        "failed": {rec_type.value: error for rec_type, error in failures.items()},
    }
