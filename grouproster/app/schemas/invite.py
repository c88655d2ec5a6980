"""Invite link and roster submission schemas."""

from typing import Optional

from pydantic import Field, field_validator

from grouproster.app.core.phone import is_valid_optional_phone
from grouproster.app.schemas.base import CamelModel


class InviteCreate(CamelModel):
    leader_token: str = Field(min_length=1)
    # Only honoured by the single-use policy; a shared link is always one link.
    count: int = Field(default=1, ge=1, le=6)
    expires_in_days: int = Field(default=14, ge=1, le=90)


class InviteCreateResponse(CamelModel):
    success: bool = True
    group_id: str
    created_count: int
    invite_url: str
    invite_urls: list[str]
    reused_existing: bool


class StudentInput(CamelModel):
    child_name: str = Field(min_length=1)
    child_grade: Optional[str] = None
    prior_student_attended: Optional[bool] = None
    siblings_prior_attended: Optional[bool] = None
    parent_prior_attended: Optional[bool] = None


class InviteSubmit(CamelModel):
    token: str = Field(min_length=1)
    students: list[StudentInput] = Field(min_length=1, max_length=2)
    parent_name: Optional[str] = None
    parent_phone: str
    note_to_instructor: Optional[str] = None

    @field_validator("parent_phone")
    @classmethod
    def validate_parent_phone(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("parentPhone is required")
        if not is_valid_optional_phone(value):
            raise ValueError("parentPhone must contain 10 to 11 digits")
        return value


class InviteSubmitResponse(CamelModel):
    success: bool = True
    group_id: str
    submitted_student_count: int
    group_member_ids: list[str]
    current_member_count: int
    edit_tokens: list[str]
    edit_urls: list[str]
    # single-student fields kept for older clients
    group_member_id: str
    edit_token: str
    edit_url: str
