"""Leader management view schemas."""

from datetime import datetime
from typing import Optional

from grouproster.app.schemas.base import CamelModel


class RosterMember(CamelModel):
    group_member_id: str
    child_id: str
    child_name: str
    child_grade: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    note_to_instructor: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: datetime


class RosterCounts(CamelModel):
    total: int
    completed: int
    pending: int


class RosterInviteLink(CamelModel):
    invite_url: str
    max_uses: Optional[int] = None
    used_count: int
    expires_at: Optional[datetime] = None
    state: str


class ManageView(CamelModel):
    success: bool = True
    group_id: str
    status: str
    roster_status: str
    headcount_declared: Optional[int] = None
    headcount_final: Optional[int] = None
    counts: RosterCounts
    members: list[RosterMember]
    invite_links: list[RosterInviteLink]
