"""Invite link endpoints: leader creates links, member parents submit through them."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import sessionmaker

from grouproster.app.core.errors import internal_error
from grouproster.app.core.settings import get_settings
from grouproster.app.core.urls import invite_url, member_edit_url
from grouproster.app.db.session import get_session_factory
from grouproster.app.schemas.invite import (
    InviteCreate,
    InviteCreateResponse,
    InviteSubmit,
    InviteSubmitResponse,
)
from grouproster.app.services import invite_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invite", tags=["invite"])


@router.post("/create", response_model=InviteCreateResponse, status_code=status.HTTP_201_CREATED)
def create_invite(
    payload: InviteCreate,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    settings = get_settings()
    try:
        result = invite_service.create_invite(
            session_factory,
            leader_token=payload.leader_token,
            expires_in_days=payload.expires_in_days,
            count=payload.count,
            policy=invite_service.resolve_invite_policy(settings.invite_link_policy),
        )
    except HTTPException:
        raise
    except Exception:
        logger.exception("Invite create failed", extra={"request_path": "/api/invite/create"})
        raise internal_error()

    invite_urls = [invite_url(settings.base_url, token) for token in result.tokens]
    return InviteCreateResponse(
        group_id=result.group_id,
        created_count=result.created_count,
        invite_url=invite_urls[0],
        invite_urls=invite_urls,
        reused_existing=result.reused_existing,
    )


@router.post("/submit", response_model=InviteSubmitResponse, status_code=status.HTTP_201_CREATED)
def submit_invite(
    payload: InviteSubmit,
    session_factory: sessionmaker = Depends(get_session_factory),
):
    settings = get_settings()
    try:
        result = invite_service.submit_roster_entry(session_factory, payload)
    except HTTPException:
        raise
    except Exception:
        logger.exception("Invite submit failed", extra={"request_path": "/api/invite/submit"})
        raise internal_error()

    edit_urls = [member_edit_url(settings.base_url, token) for token in result.edit_tokens]
    return InviteSubmitResponse(
        group_id=result.group_id,
        submitted_student_count=result.submitted_student_count,
        group_member_ids=result.group_member_ids,
        current_member_count=result.current_member_count,
        edit_tokens=result.edit_tokens,
        edit_urls=edit_urls,
        group_member_id=result.group_member_ids[0],
        edit_token=result.edit_tokens[0],
        edit_url=edit_urls[0],
    )
