"""Booking schemas."""

from typing import Optional
from uuid import UUID

from pydantic import Field, model_validator

from grouproster.app.schemas.base import CamelModel

DATE_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"
TIME_PATTERN = r"^[0-9]{2}:[0-9]{2}$"
LEADER_PHONE_PATTERN = r"^[0-9-]{10,13}$"


class BookingCreate(CamelModel):
    slot_id: Optional[UUID] = None
    class_date: Optional[str] = Field(default=None, pattern=DATE_PATTERN)
    class_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    instructor_name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = Field(default=None, min_length=1)
    leader_name: str = Field(min_length=1)
    leader_phone: str = Field(pattern=LEADER_PHONE_PATTERN)
    cash_receipt_number: Optional[str] = None
    headcount_declared: int = Field(default=2, ge=2, le=6)
    child_name: Optional[str] = Field(default=None, min_length=1)
    prior_student_attended: Optional[bool] = None
    siblings_prior_attended: Optional[bool] = None
    parent_prior_attended: Optional[bool] = None
    note_to_instructor: Optional[str] = None
    acquisition_channel: Optional[str] = None

    @model_validator(mode="after")
    def require_slot_or_schedule(self):
        if self.slot_id is None and not (self.class_date and self.class_time and self.instructor_name):
            raise ValueError("slotId or classDate/classTime/instructorName is required")
        return self


class BookingCreateResponse(CamelModel):
    success: bool = True
    group_id: str
    slot_id: str
    manage_token: str
    manage_url: str
    initial_member_created: bool
    leader_edit_token: Optional[str] = None
    leader_edit_url: Optional[str] = None


class BookingLookup(CamelModel):
    class_date: str = Field(pattern=DATE_PATTERN)
    class_time: str = Field(pattern=TIME_PATTERN)
    instructor_name: str = Field(min_length=1)
    leader_phone: str = Field(pattern=LEADER_PHONE_PATTERN)


class BookingLookupResponse(CamelModel):
    success: bool = True
    group_id: str
    slot_id: str
    status: str
    roster_status: str
    manage_token: str
    manage_url: str
    leader_edit_token: Optional[str] = None
    leader_edit_url: Optional[str] = None
