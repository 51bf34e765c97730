"""Pydantic Schemas"""
from alertnav.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserSummary,
    UserResponse,
    CurrentUserResponse
)
from alertnav.schemas.location import (
    LatestLocation,
    LatestLocationListResponse,
    LocationReadingDetail,
    LocationReadingDetailResponse,
    LocationReadingUpdate,
    LocationReadingUpdated,
    LocationReadingUpdatedResponse
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "UserSummary",
    "UserResponse",
    "CurrentUserResponse",
    # Location schemas
    "LatestLocation",
    "LatestLocationListResponse",
    "LocationReadingDetail",
    "LocationReadingDetailResponse",
    "LocationReadingUpdate",
    "LocationReadingUpdated",
    "LocationReadingUpdatedResponse"
]
