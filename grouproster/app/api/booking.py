"""Booking creation and lookup endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, sessionmaker

from grouproster.app.core.errors import internal_error
from grouproster.app.core.settings import get_settings
from grouproster.app.core.urls import manage_url, member_edit_url
from grouproster.app.db.session import get_db, get_session_factory
from grouproster.app.schemas.booking import (
    BookingCreate,
    BookingCreateResponse,
    BookingLookup,
    BookingLookupResponse,
)
from grouproster.app.services import booking_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/booking", tags=["booking"])


@router.post("/create", response_model=BookingCreateResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    settings = get_settings()
    try:
        result = booking_service.create_booking(
            session_factory,
            payload,
            utc_offset_hours=settings.class_utc_offset_hours,
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Booking create failed", extra={"request_path": "/api/booking/create"})
        raise internal_error()

    return BookingCreateResponse(
        group_id=result.group_id,
        slot_id=result.slot_id,
        manage_token=result.manage_token,
        manage_url=manage_url(settings.base_url, result.manage_token),
        initial_member_created=result.leader_edit_token is not None,
        leader_edit_token=result.leader_edit_token,
        leader_edit_url=(
            member_edit_url(settings.base_url, result.leader_edit_token) if result.leader_edit_token else None
        ),
    )


@router.post("/lookup", response_model=BookingLookupResponse)
def lookup_booking(payload: BookingLookup, db: Session = Depends(get_db)):
    settings = get_settings()
    try:
        result = booking_service.lookup_booking(db, payload, utc_offset_hours=settings.class_utc_offset_hours)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Booking lookup failed", extra={"request_path": "/api/booking/lookup"})
        raise internal_error()

    return BookingLookupResponse(
        group_id=result.group_id,
        slot_id=result.slot_id,
        status=result.status,
        roster_status=result.roster_status,
        manage_token=result.manage_token,
        manage_url=manage_url(settings.base_url, result.manage_token),
        leader_edit_token=result.leader_edit_token,
        leader_edit_url=(
            member_edit_url(settings.base_url, result.leader_edit_token) if result.leader_edit_token else None
        ),
    )
