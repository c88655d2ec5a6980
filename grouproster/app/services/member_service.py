"""Self-service member edits and reads through the per-member edit token."""

import logging
from dataclasses import dataclass

from fastapi import status
from sqlalchemy.orm import Session, joinedload, sessionmaker

from grouproster.app.core.errors import INVALID_EDIT_TOKEN, ROSTER_LOCKED_MODIFICATION, ApiStatusError
from grouproster.app.core.phone import normalize_nullable_phone
from grouproster.app.core.time import utc_now
from grouproster.app.db.transaction import run_serializable
from grouproster.app.models.child import Child
from grouproster.app.models.group_member import GroupMember
from grouproster.app.schemas.member import MemberUpdate
from grouproster.app.services.guards import assert_member_update_applied
from grouproster.app.services.roster import ensure_roster_unlocked, update_member_if_unlocked

logger = logging.getLogger(__name__)

# request field -> Child column
_CHILD_FIELDS = {
    "child_name": "name",
    "child_grade": "grade",
    "prior_student_attended": "prior_student_attended",
    "siblings_prior_attended": "siblings_prior_attended",
    "parent_prior_attended": "parent_prior_attended",
}


@dataclass
class MemberSnapshot:
    group_id: str
    group_member_id: str
    roster_status: str
    is_locked: bool
    member: dict


def _get_member_by_edit_token(db: Session, edit_token: str) -> GroupMember:
    member = (
        db.query(GroupMember)
        .options(joinedload(GroupMember.group), joinedload(GroupMember.child))
        .filter(GroupMember.edit_token == edit_token)
        .first()
    )
    if member is None:
        raise ApiStatusError(status.HTTP_404_NOT_FOUND, INVALID_EDIT_TOKEN)
    return member


def _split_update(update: MemberUpdate) -> tuple[dict, dict]:
    provided = update.model_dump(include=update.model_fields_set - {"edit_token"})

    child_values = {
        column: provided[field_name] for field_name, column in _CHILD_FIELDS.items() if field_name in provided
    }

    member_values = {}
    if "parent_name" in provided:
        member_values[GroupMember.parent_name] = provided["parent_name"]
    if "parent_phone" in provided:
        member_values[GroupMember.parent_phone] = normalize_nullable_phone(provided["parent_phone"])
    if "note_to_instructor" in provided:
        member_values[GroupMember.note_to_instructor] = provided["note_to_instructor"]

    return child_values, member_values


def update_member(session_factory: sessionmaker, update: MemberUpdate) -> str:
    """
    Apply a partial edit to a member and its child.

    The member row is written first with a conditional update scoped to an
    unlocked group; its rowcount is the authoritative lock signal. The child
    row is only written after that succeeded, inside the same attempt.
    """
    child_values, member_values = _split_update(update)

    def work(db: Session) -> str:
        now = utc_now()
        member = _get_member_by_edit_token(db, update.edit_token)
        ensure_roster_unlocked(member.group, detail=ROSTER_LOCKED_MODIFICATION)

        values = dict(member_values)
        values[GroupMember.updated_at] = now
        updated = update_member_if_unlocked(db, member.id, values)
        assert_member_update_applied(updated)

        if child_values:
            db.query(Child).filter(Child.id == member.child_id).update(child_values, synchronize_session=False)

        return member.id

    group_member_id = run_serializable(session_factory, work, label="member update")
    logger.info(f"Member {group_member_id} updated")
    return group_member_id


def get_member_snapshot(db: Session, edit_token: str) -> MemberSnapshot:
    member = _get_member_by_edit_token(db, edit_token)
    child = member.child
    return MemberSnapshot(
        group_id=member.group.id,
        group_member_id=member.id,
        roster_status=member.group.roster_status,
        is_locked=member.group.is_locked,
        member={
            "child_name": child.name,
            "child_grade": child.grade,
            "prior_student_attended": child.prior_student_attended,
            "siblings_prior_attended": child.siblings_prior_attended,
            "parent_prior_attended": child.parent_prior_attended,
            "parent_name": member.parent_name,
            "parent_phone": member.parent_phone,
            "note_to_instructor": member.note_to_instructor,
            "status": member.status,
            "created_at": member.created_at,
            "updated_at": member.updated_at,
        },
    )
