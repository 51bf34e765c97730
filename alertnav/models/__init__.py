"""SQLAlchemy Models"""
from alertnav.models.user import User
from alertnav.models.location_reading import LocationReading

__all__ = [
    "User",
    "LocationReading"
]
