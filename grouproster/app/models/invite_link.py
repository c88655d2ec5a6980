"""InviteLink: a capability token granting leader or roster-entry access."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base

PURPOSE_LEADER_ONLY = "leader_only"
PURPOSE_ROSTER_ENTRY = "roster_entry"


class InviteLink(Base):
    __tablename__ = "invite_links"

    id = Column(String(36), primary_key=True, default=new_uuid)
    group_id = Column(String(36), ForeignKey("group_passes.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(36), nullable=False, unique=True, index=True)
    purpose = Column(String(20), nullable=False)
    # NULL means unlimited uses
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    used_at = Column(DateTime(timezone=True), nullable=True)
    used_by = Column(String(100), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    group = relationship("GroupPass", back_populates="invite_links")
