"""Member self-service endpoints keyed by edit token."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from grouproster.app.core.errors import internal_error
from grouproster.app.db.session import get_db, get_session_factory
from grouproster.app.schemas.member import MemberUpdate, MemberUpdateResponse, MemberView
from grouproster.app.services import member_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/member", tags=["member"])


@router.patch("/update", response_model=MemberUpdateResponse)
def update_member(
    payload: MemberUpdate,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    try:
        group_member_id = member_service.update_member(session_factory, payload)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Member update failed", extra={"request_path": "/api/member/update"})
        raise internal_error()
    return MemberUpdateResponse(group_member_id=group_member_id)


@router.get("/{edit_token}", response_model=MemberView)
def get_member(edit_token: str, db: Session = Depends(get_db)):
    try:
        snapshot = member_service.get_member_snapshot(db, edit_token)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Member fetch failed", extra={"request_path": "/api/member"})
        raise internal_error()
    return MemberView(
        group_id=snapshot.group_id,
        group_member_id=snapshot.group_member_id,
        roster_status=snapshot.roster_status,
        is_locked=snapshot.is_locked,
        member=snapshot.member,
    )
