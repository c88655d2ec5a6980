"""
Leader-invoked invite creation and member roster submission.

Both workflows run through ``run_serializable``: they race against other
submissions, other invite creations and a concurrent roster lock, and the
datastore aborts the loser, which is then replayed from scratch.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session, sessionmaker

from grouproster.app.core.errors import NOT_A_LEADER_TOKEN, ROSTER_LOCKED
from grouproster.app.core.ids import new_uuid
from grouproster.app.core.phone import normalize_digits
from grouproster.app.core.time import utc_now
from grouproster.app.db.transaction import run_serializable
from grouproster.app.models.child import Child
from grouproster.app.models.group_member import MEMBER_STATUS_COMPLETED, GroupMember
from grouproster.app.models.invite_link import PURPOSE_LEADER_ONLY, PURPOSE_ROSTER_ENTRY
from grouproster.app.schemas.invite import InviteSubmit, StudentInput
from grouproster.app.services.invite_tokens import (
    UseLimit,
    claim_invite_token,
    create_invite_link,
    find_reusable_shared_link,
    load_valid_link,
)
from grouproster.app.services.roster import (
    count_active_members,
    ensure_headcount_available,
    find_active_members_for_phone,
    mark_collecting,
    project_headcount,
    remove_members,
    touch_unlocked_group,
)

logger = logging.getLogger(__name__)

INVITE_POLICY_SHARED = "shared"
INVITE_POLICY_SINGLE_USE = "single_use"
INVITE_POLICIES = (INVITE_POLICY_SHARED, INVITE_POLICY_SINGLE_USE)


@dataclass
class InviteResult:
    group_id: str
    tokens: list[str]
    reused_existing: bool
    created_count: int


@dataclass
class SubmissionResult:
    group_id: str
    submitted_student_count: int
    current_member_count: int
    group_member_ids: list[str] = field(default_factory=list)
    edit_tokens: list[str] = field(default_factory=list)


def create_invite(
    session_factory: sessionmaker,
    *,
    leader_token: str,
    expires_in_days: int = 14,
    count: int = 1,
    policy: str = INVITE_POLICY_SHARED,
) -> InviteResult:
    """
    Hand out roster-entry links for the leader's group.

    Under the shared policy an existing unexpired shared link is returned
    instead of minting a duplicate. The single-use policy mints ``count``
    links that can each be claimed once.
    """
    if policy not in INVITE_POLICIES:
        raise ValueError(f"Unknown invite policy: {policy}")

    def work(db: Session) -> InviteResult:
        now = utc_now()
        leader_link = load_valid_link(
            db,
            leader_token,
            PURPOSE_LEADER_ONLY,
            now,
            forbidden_detail=NOT_A_LEADER_TOKEN,
            locked_detail=ROSTER_LOCKED,
        )
        group_id = leader_link.group_id
        touch_unlocked_group(db, group_id, now, detail=ROSTER_LOCKED)

        if policy == INVITE_POLICY_SHARED:
            existing = find_reusable_shared_link(db, group_id, now)
            if existing is not None:
                return InviteResult(group_id=group_id, tokens=[existing.token], reused_existing=True, created_count=0)
            links = [
                create_invite_link(
                    db,
                    group_id=group_id,
                    purpose=PURPOSE_ROSTER_ENTRY,
                    limit=UseLimit.unlimited(),
                    expires_at=now + timedelta(days=expires_in_days),
                )
            ]
        else:
            links = [
                create_invite_link(
                    db,
                    group_id=group_id,
                    purpose=PURPOSE_ROSTER_ENTRY,
                    limit=UseLimit.limited(1),
                    expires_at=now + timedelta(days=expires_in_days),
                )
                for _ in range(count)
            ]

        return InviteResult(
            group_id=group_id,
            tokens=[link.token for link in links],
            reused_existing=False,
            created_count=len(links),
        )

    result = run_serializable(session_factory, work, label="invite creation")
    logger.info(
        f"Invite links ready (created={result.created_count}, reused={result.reused_existing})",
        extra={"group_id": result.group_id, "token_purpose": PURPOSE_ROSTER_ENTRY},
    )
    return result


# optional student field -> Child column; omitted fields keep the stored value on resubmission
_OPTIONAL_CHILD_FIELDS = {
    "child_grade": "grade",
    "prior_student_attended": "prior_student_attended",
    "siblings_prior_attended": "siblings_prior_attended",
    "parent_prior_attended": "parent_prior_attended",
}


def _child_values(student: StudentInput) -> dict:
    values = {"name": student.child_name}
    for field_name, column in _OPTIONAL_CHILD_FIELDS.items():
        value = getattr(student, field_name)
        if value is not None:
            values[column] = value
    return values


def submit_roster_entry(session_factory: sessionmaker, submission: InviteSubmit) -> SubmissionResult:
    """
    Claim the invite token and write one family's students into the roster.

    A resubmission from a phone that already has active members overwrites
    those members in order (keeping their edit tokens); members beyond the
    new student count are soft-removed.
    """
    parent_phone = normalize_digits(submission.parent_phone)
    parent_name = (submission.parent_name or "").strip() or None
    note_to_instructor = (submission.note_to_instructor or "").strip() or None
    students = submission.students

    def work(db: Session) -> SubmissionResult:
        now = utc_now()
        invite = claim_invite_token(
            db,
            submission.token,
            PURPOSE_ROSTER_ENTRY,
            used_by=f"ParentPhone:{parent_phone}",
            now=now,
        )
        group = invite.group
        touch_unlocked_group(db, group.id, now)

        existing_members = find_active_members_for_phone(db, group.id, parent_phone)
        current_active = count_active_members(db, group.id)
        projected = project_headcount(current_active, len(existing_members), len(students))
        ensure_headcount_available(group.headcount_declared, projected)

        written: list[GroupMember] = []
        for index, student in enumerate(students):
            child_values = _child_values(student)
            existing = existing_members[index] if index < len(existing_members) else None

            if existing is not None:
                for key, value in child_values.items():
                    setattr(existing.child, key, value)
                existing.parent_name = parent_name
                existing.parent_phone = parent_phone
                existing.note_to_instructor = note_to_instructor
                existing.edit_token = existing.edit_token or new_uuid()
                existing.status = MEMBER_STATUS_COMPLETED
                written.append(existing)
                continue

            child = Child(**child_values)
            db.add(child)
            db.flush()

            member = GroupMember(
                group_id=group.id,
                child_id=child.id,
                parent_name=parent_name,
                parent_phone=parent_phone,
                note_to_instructor=note_to_instructor,
                edit_token=new_uuid(),
                status=MEMBER_STATUS_COMPLETED,
            )
            db.add(member)
            db.flush()
            written.append(member)

        db.flush()
        remove_members(db, [member.id for member in existing_members[len(students):]])
        mark_collecting(db, group.id)

        return SubmissionResult(
            group_id=group.id,
            submitted_student_count=len(students),
            current_member_count=count_active_members(db, group.id),
            group_member_ids=[member.id for member in written],
            edit_tokens=[member.edit_token for member in written],
        )

    result = run_serializable(session_factory, work, label="roster submission")
    logger.info(
        f"Roster entry submitted ({result.submitted_student_count} students)",
        extra={"group_id": result.group_id, "token_purpose": PURPOSE_ROSTER_ENTRY},
    )
    return result


def resolve_invite_policy(policy: Optional[str]) -> str:
    """Normalize the configured policy name, defaulting to the shared link."""
    if not policy:
        return INVITE_POLICY_SHARED
    policy = policy.strip().lower()
    if policy not in INVITE_POLICIES:
        raise ValueError(f"Unknown invite policy: {policy}")
    return policy
