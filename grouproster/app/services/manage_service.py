"""Read-only leader view over a group's roster."""

from datetime import datetime

from fastapi import status
from sqlalchemy.orm import Session, joinedload

from grouproster.app.core.errors import INVALID_TOKEN, NOT_A_LEADER_TOKEN, TOKEN_EXPIRED, ApiStatusError
from grouproster.app.core.urls import invite_url
from grouproster.app.models.group_member import (
    MEMBER_STATUS_COMPLETED,
    MEMBER_STATUS_PENDING,
    MEMBER_STATUS_REMOVED,
    GroupMember,
)
from grouproster.app.models.group_pass import GroupPass
from grouproster.app.models.invite_link import PURPOSE_LEADER_ONLY, PURPOSE_ROSTER_ENTRY, InviteLink
from grouproster.app.services.invite_tokens import is_expired, link_state


def get_manage_view(db: Session, leader_token: str, *, base_url: str, now: datetime) -> dict:
    leader_link = (
        db.query(InviteLink)
        .options(joinedload(InviteLink.group))
        .filter(InviteLink.token == leader_token)
        .first()
    )
    if leader_link is None:
        raise ApiStatusError(status.HTTP_404_NOT_FOUND, INVALID_TOKEN)
    if leader_link.purpose != PURPOSE_LEADER_ONLY:
        raise ApiStatusError(status.HTTP_403_FORBIDDEN, NOT_A_LEADER_TOKEN)
    if is_expired(leader_link, now):
        raise ApiStatusError(status.HTTP_410_GONE, TOKEN_EXPIRED)

    group: GroupPass = leader_link.group
    members = (
        db.query(GroupMember)
        .options(joinedload(GroupMember.child))
        .filter(GroupMember.group_id == group.id, GroupMember.status != MEMBER_STATUS_REMOVED)
        .order_by(GroupMember.created_at.asc())
        .all()
    )
    roster_links = (
        db.query(InviteLink)
        .filter(InviteLink.group_id == group.id, InviteLink.purpose == PURPOSE_ROSTER_ENTRY)
        .order_by(InviteLink.created_at.desc())
        .all()
    )

    return {
        "group_id": group.id,
        "status": group.status,
        "roster_status": group.roster_status,
        "headcount_declared": group.headcount_declared,
        "headcount_final": group.headcount_final,
        "counts": {
            "total": len(members),
            "completed": sum(1 for m in members if m.status == MEMBER_STATUS_COMPLETED),
            "pending": sum(1 for m in members if m.status == MEMBER_STATUS_PENDING),
        },
        "members": [
            {
                "group_member_id": m.id,
                "child_id": m.child_id,
                "child_name": m.child.name,
                "child_grade": m.child.grade,
                "parent_name": m.parent_name,
                "parent_phone": m.parent_phone,
                "note_to_instructor": m.note_to_instructor,
                "status": m.status,
                "created_at": m.created_at,
                "updated_at": m.updated_at,
            }
            for m in members
        ],
        "invite_links": [
            {
                "invite_url": invite_url(base_url, link.token),
                "max_uses": link.max_uses,
                "used_count": link.used_count,
                "expires_at": link.expires_at,
                "state": link_state(link, now),
            }
            for link in roster_links
        ],
    }
