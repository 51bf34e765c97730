"""Authentication Schemas. Datetime serialized as UTC with Z for API."""
from pydantic import BaseModel, field_serializer
from typing import Optional
from datetime import datetime

from alertnav.utils.datetime_utils import serialize_datetime_utc


class LoginRequest(BaseModel):
    """Login body. Email format is checked by the handler so a bad address is a 400."""
    email: Optional[str] = None


class UserSummary(BaseModel):
    """User fields returned on login"""
    id: int
    email: str

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    success: bool = True
    user: UserSummary


class LogoutResponse(BaseModel):
    success: bool = True


class UserResponse(UserSummary):
    """Stored user record"""
    created_at: datetime
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_serializer("created_at", "last_login")
    def _serialize_timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return serialize_datetime_utc(value) if value is not None else None


class CurrentUserResponse(BaseModel):
    user: UserResponse
