"""
Invite link lifecycle: creation, validation and atomic claiming.

A link is ``active`` while it has uses left, has not expired and its group is
not locked. Claiming increments ``used_count``; a limited link becomes
``exhausted`` once ``used_count`` reaches ``max_uses``. ``expired`` and
``group_locked`` are derived at read time and never stored.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from fastapi import status
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from grouproster.app.core.errors import (
    GROUP_ROSTER_LOCKED,
    INVALID_TOKEN,
    INVALID_TOKEN_PURPOSE,
    TOKEN_EXPIRED,
    ApiStatusError,
)
from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import ensure_utc
from grouproster.app.models.invite_link import PURPOSE_ROSTER_ENTRY, InviteLink
from grouproster.app.services.guards import assert_invite_token_claimed

LINK_STATE_ACTIVE = "active"
LINK_STATE_EXHAUSTED = "exhausted"
LINK_STATE_EXPIRED = "expired"
LINK_STATE_GROUP_LOCKED = "group_locked"


@dataclass(frozen=True)
class UseLimit:
    """How many times a link may be claimed; ``max_uses=None`` is unlimited."""

    max_uses: Optional[int] = None

    @classmethod
    def unlimited(cls) -> "UseLimit":
        return cls(None)

    @classmethod
    def limited(cls, max_uses: int) -> "UseLimit":
        if max_uses < 1:
            raise ValueError("max_uses must be at least 1")
        return cls(max_uses)

    @property
    def is_unlimited(self) -> bool:
        return self.max_uses is None

    def allows(self, used_count: int) -> bool:
        return self.max_uses is None or used_count < self.max_uses


def is_expired(link: InviteLink, now: datetime) -> bool:
    expires_at = ensure_utc(link.expires_at)
    return expires_at is not None and not expires_at > now


def link_state(link: InviteLink, now: datetime) -> str:
    if link.group is not None and link.group.is_locked:
        return LINK_STATE_GROUP_LOCKED
    if is_expired(link, now):
        return LINK_STATE_EXPIRED
    if not UseLimit(link.max_uses).allows(link.used_count or 0):
        return LINK_STATE_EXHAUSTED
    return LINK_STATE_ACTIVE


def create_invite_link(
    db: Session,
    *,
    group_id: str,
    purpose: str,
    limit: UseLimit,
    expires_at: Optional[datetime] = None,
) -> InviteLink:
    link = InviteLink(
        group_id=group_id,
        token=new_uuid(),
        purpose=purpose,
        max_uses=limit.max_uses,
        used_count=0,
        expires_at=expires_at,
    )
    db.add(link)
    db.flush()
    return link


def load_valid_link(
    db: Session,
    token: str,
    purpose: str,
    now: datetime,
    *,
    forbidden_detail: str = INVALID_TOKEN_PURPOSE,
    locked_detail: str = GROUP_ROSTER_LOCKED,
) -> InviteLink:
    """Run the read-side checks in order: existence, purpose, expiry, group lock."""
    link = (
        db.query(InviteLink)
        .options(joinedload(InviteLink.group))
        .filter(InviteLink.token == token)
        .first()
    )
    if link is None:
        raise ApiStatusError(status.HTTP_404_NOT_FOUND, INVALID_TOKEN)
    if link.purpose != purpose:
        raise ApiStatusError(status.HTTP_403_FORBIDDEN, forbidden_detail)
    if is_expired(link, now):
        raise ApiStatusError(status.HTTP_410_GONE, TOKEN_EXPIRED)
    if link.group.is_locked:
        raise ApiStatusError(status.HTTP_409_CONFLICT, locked_detail)
    return link


def claim_invite_token(
    db: Session,
    token: str,
    purpose: str,
    *,
    used_by: str,
    now: datetime,
) -> InviteLink:
    """
    Validate ``token`` and consume one use of it.

    The increment is a single conditional UPDATE filtered on remaining uses and
    expiry, so two concurrent claims of the last use cannot both succeed.
    """
    link = load_valid_link(db, token, purpose, now)

    claimed = (
        db.query(InviteLink)
        .filter(
            InviteLink.id == link.id,
            or_(InviteLink.max_uses.is_(None), InviteLink.used_count < InviteLink.max_uses),
            or_(InviteLink.expires_at.is_(None), InviteLink.expires_at > now),
        )
        .update(
            {
                InviteLink.used_count: InviteLink.used_count + 1,
                InviteLink.used_at: now,
                InviteLink.used_by: used_by,
            },
            synchronize_session=False,
        )
    )
    assert_invite_token_claimed(claimed)
    return link


def find_reusable_shared_link(db: Session, group_id: str, now: datetime) -> Optional[InviteLink]:
    """Newest unexpired unlimited roster-entry link of the group, if any."""
    return (
        db.query(InviteLink)
        .filter(
            InviteLink.group_id == group_id,
            InviteLink.purpose == PURPOSE_ROSTER_ENTRY,
            InviteLink.max_uses.is_(None),
            or_(InviteLink.expires_at.is_(None), InviteLink.expires_at > now),
        )
        .order_by(InviteLink.created_at.desc())
        .first()
    )
