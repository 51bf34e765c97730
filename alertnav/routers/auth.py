"""Authentication API Routes"""
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alertnav.database import get_db
from alertnav.exceptions import (
    AuthenticationException,
    DatabaseException,
    NotFoundException,
    ValidationException,
)
from alertnav.models import User
from alertnav.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserSummary,
    UserResponse,
    CurrentUserResponse,
)
from alertnav.utils.datetime_utils import utc_now
from alertnav.utils.metrics import record_db_error, record_login
from alertnav.utils.session_token import (
    clear_session_cookie,
    get_session_email,
    set_session_cookie,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_email(email) -> str:
    """Lowercase an email after a superficial format check"""
    if not isinstance(email, str) or not email or "@" not in email:
        raise ValidationException("Valid email is required")
    return email.lower()


async def _find_user(db: AsyncSession, email: str):
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def _record_login(db: AsyncSession, email: str):
    """Create the user or bump last_login; returns (user, is_new_user)"""
    user = await _find_user(db, email)

    now = utc_now()
    is_new_user = user is None
    if is_new_user:
        user = User(email=email, created_at=now, last_login=now)
        db.add(user)
    else:
        user.last_login = now

    await db.commit()
    await db.refresh(user)
    return user, is_new_user


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """Sign in by email, creating the user on first login"""
    email = normalize_email(body.email)

    try:
        try:
            user, is_new_user = await _record_login(db, email)
        except IntegrityError:
            # A concurrent first login inserted the same email
            await db.rollback()
            user, is_new_user = await _record_login(db, email)
    except SQLAlchemyError as e:
        await db.rollback()
        record_db_error("login", type(e).__name__)
        logger.exception("Login error")
        raise DatabaseException("Failed to login")

    record_login(is_new_user)
    logger.info(f"Login for {email} ({'new' if is_new_user else 'returning'} user)")

    payload = LoginResponse(success=True, user=UserSummary.model_validate(user))
    response = JSONResponse(content=payload.model_dump())
    set_session_cookie(response, user.email, request.app.state.settings)
    return response


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: Request):
    """Clear the session cookie"""
    response = JSONResponse(content=LogoutResponse().model_dump())
    clear_session_cookie(response, request.app.state.settings)
    return response


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(request: Request, db: AsyncSession = Depends(get_db)):
    """Resolve the session cookie to the stored user"""
    email = get_session_email(request)
    if email is None:
        raise AuthenticationException()

    try:
        user = await _find_user(db, email)
    except SQLAlchemyError as e:
        record_db_error("get_current_user", type(e).__name__)
        logger.exception("Auth check error")
        raise DatabaseException("Failed to check authentication")

    if not user:
        raise NotFoundException("User", email)

    return CurrentUserResponse(user=UserResponse.model_validate(user))
