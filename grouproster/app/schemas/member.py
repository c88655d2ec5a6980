"""Group member schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from grouproster.app.core.phone import is_valid_optional_phone
from grouproster.app.schemas.base import CamelModel


class MemberUpdate(CamelModel):
    """Partial update: only fields present in the request body are written, and none may be null."""

    edit_token: str = Field(min_length=1)
    child_name: Optional[str] = Field(default=None, min_length=1)
    child_grade: Optional[str] = None
    prior_student_attended: Optional[bool] = None
    siblings_prior_attended: Optional[bool] = None
    parent_prior_attended: Optional[bool] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    note_to_instructor: Optional[str] = None

    @field_validator(
        "child_name",
        "child_grade",
        "prior_student_attended",
        "siblings_prior_attended",
        "parent_prior_attended",
        "parent_name",
        "parent_phone",
        "note_to_instructor",
        mode="before",
    )
    @classmethod
    def reject_explicit_null(cls, value):
        if value is None:
            raise ValueError("Omit the field instead of sending null")
        return value

    @field_validator("parent_phone")
    @classmethod
    def validate_parent_phone(cls, value: str) -> str:
        value = value.strip()
        if not is_valid_optional_phone(value):
            raise ValueError("parentPhone must contain 10 to 11 digits")
        return value


class MemberUpdateResponse(CamelModel):
    success: bool = True
    group_member_id: str
    message: str = "Updated successfully"


class MemberDetail(CamelModel):
    child_name: str
    child_grade: Optional[str] = None
    prior_student_attended: bool
    siblings_prior_attended: bool
    parent_prior_attended: bool
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    note_to_instructor: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class MemberView(CamelModel):
    success: bool = True
    group_id: str
    group_member_id: str
    roster_status: str
    is_locked: bool
    member: MemberDetail
