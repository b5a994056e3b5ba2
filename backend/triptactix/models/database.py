"""
TripTactix Database Setup
SQLAlchemy ORM models and database connection
"""

from datetime import datetime
from typing import Generator

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from triptactix.config import get_settings

# Get settings
settings = get_settings()

# Create engine
engine = create_engine(
    settings.database_url,
    connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create base class for models
Base = declarative_base()


# =============================================================================
# ORM Models
# =============================================================================


class UserModel(Base):
    """Traveler profile ORM model."""

    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    age_range = Column(String(10), nullable=False)
    travel_style = Column(String(20), nullable=False)
    budget_range = Column(String(20), nullable=False)
    group_type = Column(String(20), nullable=False)
    energy_level = Column(String(20), default="moderate")
    # Multi-valued preferences, JSON lists stored as text
    dietary_restrictions = Column(Text, default="[]")
    interests = Column(Text, default="[]")
    accommodation_preferences = Column(Text, default="[]")
    location_preferences = Column(Text, default="[]")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class TripModel(Base):
    """Trip ORM model."""

    __tablename__ = "trips"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    destination = Column(String(200), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    duration = Column(Integer, nullable=False)  # days
    party_size = Column(Integer, nullable=False)
    status = Column(String(20), default="planning")
    recommendations = Column(Text, nullable=False)  # JSON stored as text
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# =============================================================================
# Database Functions
# =============================================================================


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
