"""
Roster aggregate rules: lock barrier, draft->collecting transition, headcount.

The lock is enforced inside the same transaction as the write it protects,
either by a pre-check on the group row already loaded in this attempt or by a
conditional write whose zero-row result means the roster was locked.
"""

from datetime import datetime
from typing import Iterable, Optional

from fastapi import status
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from grouproster.app.core.errors import GROUP_ROSTER_LOCKED, HEADCOUNT_EXCEEDED, ApiStatusError
from grouproster.app.models.group_member import MEMBER_STATUS_REMOVED, GroupMember
from grouproster.app.models.group_pass import (
    ROSTER_STATUS_COLLECTING,
    ROSTER_STATUS_DRAFT,
    ROSTER_STATUS_LOCKED,
    GroupPass,
)


def ensure_roster_unlocked(group: GroupPass, detail: str = GROUP_ROSTER_LOCKED) -> None:
    if group.is_locked:
        raise ApiStatusError(status.HTTP_409_CONFLICT, detail)


def touch_unlocked_group(db: Session, group_id: str, now: datetime, detail: str = GROUP_ROSTER_LOCKED) -> None:
    """
    Conditionally bump the group row; zero rows means the roster is locked.

    Run before inserting rows under a group. It also makes concurrent writers
    to the same group contend on one row.
    """
    touched = (
        db.query(GroupPass)
        .filter(GroupPass.id == group_id, GroupPass.roster_status != ROSTER_STATUS_LOCKED)
        .update({GroupPass.updated_at: now}, synchronize_session=False)
    )
    if touched == 0:
        raise ApiStatusError(status.HTTP_409_CONFLICT, detail)


def update_member_if_unlocked(db: Session, member_id: str, values: dict) -> int:
    """Apply ``values`` to the member only while its group is not locked; returns the rowcount."""
    unlocked_groups = select(GroupPass.id).where(GroupPass.roster_status != ROSTER_STATUS_LOCKED)
    return (
        db.query(GroupMember)
        .filter(GroupMember.id == member_id, GroupMember.group_id.in_(unlocked_groups))
        .update(values, synchronize_session=False)
    )


def mark_collecting(db: Session, group_id: str) -> bool:
    """Move a draft roster to collecting; a no-op once the roster is past draft."""
    moved = (
        db.query(GroupPass)
        .filter(GroupPass.id == group_id, GroupPass.roster_status == ROSTER_STATUS_DRAFT)
        .update({GroupPass.roster_status: ROSTER_STATUS_COLLECTING}, synchronize_session=False)
    )
    return moved > 0


def count_active_members(db: Session, group_id: str) -> int:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.status != MEMBER_STATUS_REMOVED)
        .count()
    )


def find_active_members_for_phone(db: Session, group_id: str, parent_phone: str) -> list[GroupMember]:
    return (
        db.query(GroupMember)
        .options(joinedload(GroupMember.child))
        .filter(
            GroupMember.group_id == group_id,
            GroupMember.parent_phone == parent_phone,
            GroupMember.status != MEMBER_STATUS_REMOVED,
        )
        .order_by(GroupMember.created_at.asc())
        .all()
    )


def project_headcount(current_active: int, existing_for_parent: int, submitted: int) -> int:
    return current_active - existing_for_parent + submitted


def ensure_headcount_available(headcount_declared: Optional[int], projected: int) -> None:
    if headcount_declared is not None and projected > headcount_declared:
        raise ApiStatusError(status.HTTP_409_CONFLICT, HEADCOUNT_EXCEEDED)


def remove_members(db: Session, member_ids: Iterable[str]) -> int:
    member_ids = list(member_ids)
    if not member_ids:
        return 0
    return (
        db.query(GroupMember)
        .filter(GroupMember.id.in_(member_ids))
        .update({GroupMember.status: MEMBER_STATUS_REMOVED}, synchronize_session=False)
    )
