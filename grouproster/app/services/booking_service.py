"""
Booking creation and lookup.

Creating a booking resolves (or creates) the class slot, upserts the leader
parent, opens a GroupPass and mints the leader's manage link. When the leader
also enters their own child, the first roster entry is created in the same
transaction. Nothing here claims a contested token, so it runs in a plain
all-or-nothing transaction without the serializable retry loop.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from fastapi import status
from sqlalchemy.orm import Session, sessionmaker

from grouproster.app.core.errors import BOOKING_NOT_FOUND, INVALID_SCHEDULE, ApiStatusError
from grouproster.app.core.ids import new_uuid
from grouproster.app.core.phone import normalize_digits
from grouproster.app.core.time import class_start_at
from grouproster.app.db.transaction import transactional_session
from grouproster.app.models.child import Child
from grouproster.app.models.group_member import MEMBER_STATUS_COMPLETED, GroupMember
from grouproster.app.models.group_pass import (
    GROUP_STATUS_PENDING_INFO,
    ROSTER_STATUS_COLLECTING,
    ROSTER_STATUS_DRAFT,
    GroupPass,
)
from grouproster.app.models.invite_link import PURPOSE_LEADER_ONLY, InviteLink
from grouproster.app.models.reservation_slot import SLOT_STATUS_OPEN, ReservationSlot
from grouproster.app.schemas.booking import BookingCreate, BookingLookup
from grouproster.app.services.guards import assert_booking_slot_exists
from grouproster.app.services.invite_tokens import UseLimit, create_invite_link
from grouproster.app.services.parent_service import get_parent_by_phone, upsert_parent

logger = logging.getLogger(__name__)

DEFAULT_CLASS_DURATION_MINUTES = 120
SLOT_MATCH_WINDOW = timedelta(seconds=30)


@dataclass
class BookingResult:
    group_id: str
    slot_id: str
    manage_token: str
    leader_edit_token: Optional[str] = None


@dataclass
class BookingLookupResult:
    group_id: str
    slot_id: str
    status: str
    roster_status: str
    manage_token: str
    leader_edit_token: Optional[str] = None


def find_slot_by_schedule(db: Session, instructor_id: str, start_at: datetime) -> Optional[ReservationSlot]:
    return (
        db.query(ReservationSlot)
        .filter(
            ReservationSlot.instructor_id == instructor_id,
            ReservationSlot.start_at >= start_at - SLOT_MATCH_WINDOW,
            ReservationSlot.start_at <= start_at + SLOT_MATCH_WINDOW,
        )
        .order_by(ReservationSlot.start_at.asc())
        .first()
    )


def resolve_slot(
    db: Session,
    *,
    slot_id: Optional[str],
    start_at: Optional[datetime],
    instructor_id: Optional[str],
) -> ReservationSlot:
    if slot_id:
        slot = db.query(ReservationSlot).filter(ReservationSlot.id == slot_id).first()
        assert_booking_slot_exists(slot)
        return slot

    slot = find_slot_by_schedule(db, instructor_id, start_at)
    if slot:
        return slot

    slot = ReservationSlot(
        start_at=start_at,
        end_at=start_at + timedelta(minutes=DEFAULT_CLASS_DURATION_MINUTES),
        instructor_id=instructor_id,
        status=SLOT_STATUS_OPEN,
    )
    db.add(slot)
    db.flush()
    return slot


def build_group_memo(location: Optional[str], acquisition_channel: Optional[str]) -> Optional[str]:
    lines = []
    if location:
        lines.append(f"Location: {location}")
    if acquisition_channel:
        lines.append(f"Acquisition channel: {acquisition_channel}")
    return "\n".join(lines) if lines else None


def create_booking(session_factory: sessionmaker, booking: BookingCreate, *, utc_offset_hours: int) -> BookingResult:
    leader_phone = normalize_digits(booking.leader_phone)
    instructor_id = booking.instructor_name.strip() if booking.instructor_name else None

    start_at = None
    if booking.slot_id is None:
        start_at = class_start_at(booking.class_date, booking.class_time, utc_offset_hours)
        if start_at is None:
            raise ApiStatusError(status.HTTP_400_BAD_REQUEST, INVALID_SCHEDULE)

    with transactional_session(session_factory) as db:
        slot = resolve_slot(
            db,
            slot_id=str(booking.slot_id) if booking.slot_id else None,
            start_at=start_at,
            instructor_id=instructor_id,
        )

        parent = upsert_parent(
            db,
            name=booking.leader_name,
            phone=leader_phone,
            cash_receipt_number=booking.cash_receipt_number,
        )

        group = GroupPass(
            slot_id=slot.id,
            leader_parent_id=parent.id,
            headcount_declared=booking.headcount_declared,
            status=GROUP_STATUS_PENDING_INFO,
            roster_status=ROSTER_STATUS_COLLECTING if booking.child_name else ROSTER_STATUS_DRAFT,
            memo_to_instructor=build_group_memo(booking.location, booking.acquisition_channel),
        )
        db.add(group)
        db.flush()

        manage_link = create_invite_link(
            db,
            group_id=group.id,
            purpose=PURPOSE_LEADER_ONLY,
            limit=UseLimit.unlimited(),
        )

        leader_edit_token = None
        if booking.child_name:
            child = Child(
                name=booking.child_name,
                prior_student_attended=bool(booking.prior_student_attended),
                siblings_prior_attended=bool(booking.siblings_prior_attended),
                parent_prior_attended=bool(booking.parent_prior_attended),
            )
            db.add(child)
            db.flush()

            leader_edit_token = new_uuid()
            db.add(
                GroupMember(
                    group_id=group.id,
                    child_id=child.id,
                    parent_name=booking.leader_name,
                    parent_phone=leader_phone,
                    note_to_instructor=booking.note_to_instructor or None,
                    edit_token=leader_edit_token,
                    status=MEMBER_STATUS_COMPLETED,
                )
            )

        result = BookingResult(
            group_id=group.id,
            slot_id=slot.id,
            manage_token=manage_link.token,
            leader_edit_token=leader_edit_token,
        )

    logger.info(
        "Booking created",
        extra={"group_id": result.group_id, "token_purpose": PURPOSE_LEADER_ONLY},
    )
    return result


def lookup_booking(db: Session, lookup: BookingLookup, *, utc_offset_hours: int) -> BookingLookupResult:
    """Find the leader's group for a schedule + phone and return its manage token."""
    start_at = class_start_at(lookup.class_date, lookup.class_time, utc_offset_hours)
    if start_at is None:
        raise ApiStatusError(status.HTTP_400_BAD_REQUEST, INVALID_SCHEDULE)

    leader_phone = normalize_digits(lookup.leader_phone)
    not_found = ApiStatusError(status.HTTP_404_NOT_FOUND, BOOKING_NOT_FOUND)

    slot = find_slot_by_schedule(db, lookup.instructor_name.strip(), start_at)
    if slot is None:
        raise not_found

    parent = get_parent_by_phone(db, leader_phone)
    if parent is None:
        raise not_found

    group = (
        db.query(GroupPass)
        .filter(GroupPass.slot_id == slot.id, GroupPass.leader_parent_id == parent.id)
        .order_by(GroupPass.created_at.desc())
        .first()
    )
    if group is None:
        raise not_found

    manage_link = (
        db.query(InviteLink)
        .filter(InviteLink.group_id == group.id, InviteLink.purpose == PURPOSE_LEADER_ONLY)
        .order_by(InviteLink.created_at.desc())
        .first()
    )
    if manage_link is None:
        raise not_found

    leader_member = (
        db.query(GroupMember)
        .filter(
            GroupMember.group_id == group.id,
            GroupMember.parent_phone == leader_phone,
            GroupMember.edit_token.isnot(None),
        )
        .order_by(GroupMember.created_at.desc())
        .first()
    )

    return BookingLookupResult(
        group_id=group.id,
        slot_id=slot.id,
        status=group.status,
        roster_status=group.roster_status,
        manage_token=manage_link.token,
        leader_edit_token=leader_member.edit_token if leader_member else None,
    )
