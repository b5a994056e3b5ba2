"""
TripTactix Users Router
CRUD operations for traveler profiles
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from triptactix.models.database import get_db
from triptactix.models.schemas import UserCreate, UserUpdate
from triptactix.services.store import RecordNotFound, TravelStore

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, db: Session = Depends(get_db)):
    """Create a new user with travel preferences."""
    user = TravelStore(db).create_user(request)
    return {
        "success": True,
        "message": "User created successfully",
        "user": user.model_dump(mode="json"),
    }


@router.get("")
async def list_users(db: Session = Depends(get_db)):
    """List all users (development/admin)."""
    users = TravelStore(db).list_users()
    return {
        "success": True,
        "count": len(users),
        "users": [u.model_dump(mode="json") for u in users],
    }


@router.get("/{user_id}")
async def get_user(user_id: str, db: Session = Depends(get_db)):
    """Get a specific user by ID."""
    try:
        user = TravelStore(db).get_user(user_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"success": True, "user": user.model_dump(mode="json")}


@router.put("/{user_id}")
async def update_user(user_id: str, request: UserUpdate, db: Session = Depends(get_db)):
    """Update user preferences."""
    try:
        user = TravelStore(db).update_user(user_id, request)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {
        "success": True,
        "message": "User updated successfully",
        "user": user.model_dump(mode="json"),
    }


@router.delete("/{user_id}")
async def delete_user(user_id: str, db: Session = Depends(get_db)):
    """Delete a user."""
    try:
        TravelStore(db).delete_user(user_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return {"success": True, "message": "User deleted successfully"}
