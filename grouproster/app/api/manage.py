"""Leader management view."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from grouproster.app.core.errors import internal_error
from grouproster.app.core.settings import get_settings
from grouproster.app.core.time import utc_now
from grouproster.app.db.session import get_db
from grouproster.app.schemas.manage import ManageView
from grouproster.app.services.manage_service import get_manage_view

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/manage", tags=["manage"])


@router.get("/{leader_token}", response_model=ManageView)
def get_manage(leader_token: str, db: Session = Depends(get_db)):
    settings = get_settings()
    try:
        view = get_manage_view(db, leader_token, base_url=settings.base_url, now=utc_now())
    except HTTPException:
        raise
    except Exception:
        logger.exception("Manage fetch failed", extra={"request_path": "/api/manage"})
        raise internal_error()
    return ManageView(**view)
