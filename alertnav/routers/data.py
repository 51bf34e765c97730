"""
Location Data API Routes
Latest reading per device for the map, plus detail and edit of a single reading
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy import Float, cast, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from alertnav.database import get_db
from alertnav.exceptions import AuthenticationException, DatabaseException, NotFoundException
from alertnav.models import LocationReading
from alertnav.schemas.location import (
    LatestLocation,
    LatestLocationListResponse,
    LocationReadingDetail,
    LocationReadingDetailResponse,
    LocationReadingUpdate,
    LocationReadingUpdated,
    LocationReadingUpdatedResponse,
)
from alertnav.utils.metrics import record_db_error, record_location_operation
from alertnav.utils.session_token import get_session_email

logger = logging.getLogger(__name__)

router = APIRouter()


def latest_locations_query(owner_email: Optional[str] = None):
    """
    Select the newest reading of each device.

    Readings without coordinates are dropped before ranking, so a device whose
    newest row lacks a position is still shown at its last known position.
    When owner_email is given only that user's readings are considered.
    """
    ranked = select(
        LocationReading.id,
        LocationReading.device_id,
        LocationReading.lat.label("latitude"),
        LocationReading.lon.label("longitude"),
        LocationReading.event,
        LocationReading.timestamp,
        func.row_number().over(
            partition_by=LocationReading.device_id,
            order_by=(LocationReading.timestamp.desc(), LocationReading.id.desc())
        ).label("rn")
    ).where(
        LocationReading.lat.is_not(None),
        LocationReading.lon.is_not(None)
    )

    if owner_email is not None:
        ranked = ranked.where(LocationReading.user_email == owner_email)

    ranked = ranked.subquery("ranked_data")

    return select(
        ranked.c.id,
        ranked.c.device_id,
        cast(ranked.c.latitude, Float).label("latitude"),
        cast(ranked.c.longitude, Float).label("longitude"),
        ranked.c.event,
        ranked.c.timestamp
    ).where(ranked.c.rn == 1)


@router.get("", response_model=LatestLocationListResponse)
async def list_latest_locations(request: Request, db: AsyncSession = Depends(get_db)):
    """Latest position of every device, scoped to the signed-in user unless configured otherwise"""
    owner_email = None
    if request.app.state.settings.scope_locations_to_owner:
        owner_email = get_session_email(request)
        if owner_email is None:
            raise AuthenticationException()

    try:
        result = await db.execute(latest_locations_query(owner_email))
        rows = result.all()
    except SQLAlchemyError as e:
        record_db_error("list_latest_locations", type(e).__name__)
        logger.exception("Database error while listing locations")
        raise DatabaseException("Failed to fetch data")

    record_location_operation("list", len(rows))
    return LatestLocationListResponse(
        data=[LatestLocation.model_validate(row) for row in rows]
    )


async def _get_reading(db: AsyncSession, reading_id: int) -> Optional[LocationReading]:
    result = await db.execute(
        select(LocationReading).where(LocationReading.id == reading_id)
    )
    return result.scalar_one_or_none()


@router.get("/{reading_id}", response_model=LocationReadingDetailResponse)
async def get_location_reading(reading_id: int, db: AsyncSession = Depends(get_db)):
    """Get a single reading"""
    try:
        reading = await _get_reading(db, reading_id)
    except SQLAlchemyError as e:
        record_db_error("get_location_reading", type(e).__name__)
        logger.exception(f"Database error while fetching reading {reading_id}")
        raise DatabaseException("Failed to fetch data")

    if not reading:
        raise NotFoundException("Device", reading_id)

    record_location_operation("get")
    return LocationReadingDetailResponse(data=LocationReadingDetail.model_validate(reading))


@router.put("/{reading_id}", response_model=LocationReadingUpdatedResponse)
async def update_location_reading(
    reading_id: int,
    updates: LocationReadingUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update event and group of a reading; position, device and time stay as ingested"""
    try:
        reading = await _get_reading(db, reading_id)
        if not reading:
            raise NotFoundException("Device", reading_id)

        reading.event = updates.event
        reading.group = updates.group

        await db.commit()
        await db.refresh(reading)
    except SQLAlchemyError as e:
        await db.rollback()
        record_db_error("update_location_reading", type(e).__name__)
        logger.exception(f"Database error while updating reading {reading_id}")
        raise DatabaseException("Failed to update data")

    record_location_operation("update")
    logger.info(f"Reading {reading_id} updated: event={updates.event!r} group={updates.group!r}")
    return LocationReadingUpdatedResponse(data=LocationReadingUpdated.model_validate(reading))
