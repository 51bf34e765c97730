"""
Location Reading Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List


class LatestLocation(BaseModel):
    """Most recent reading of one device, as drawn on the map"""
    id: int
    device_id: str
    latitude: float
    longitude: float
    event: Optional[str] = None
    timestamp: int = Field(..., description="Unix epoch seconds")

    class Config:
        from_attributes = True


class LatestLocationListResponse(BaseModel):
    data: List[LatestLocation]


class LocationReadingDetail(BaseModel):
    """Full stored reading"""
    id: int
    device_id: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    event: Optional[str] = None
    group: Optional[str] = None
    timestamp: int

    class Config:
        from_attributes = True


class LocationReadingUpdated(LocationReadingDetail):
    """Row returned after an edit"""
    user_email: Optional[str] = None


class LocationReadingUpdate(BaseModel):
    """Editable fields. Anything else in the body is ignored."""
    event: str
    group: str


class LocationReadingDetailResponse(BaseModel):
    data: LocationReadingDetail


class LocationReadingUpdatedResponse(BaseModel):
    data: LocationReadingUpdated
