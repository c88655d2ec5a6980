"""GroupMember: one roster entry linking a child to a group."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base

MEMBER_STATUS_PENDING = "pending"
MEMBER_STATUS_COMPLETED = "completed"
MEMBER_STATUS_REMOVED = "removed"


class GroupMember(Base):
    __tablename__ = "group_members"

    id = Column(String(36), primary_key=True, default=new_uuid)
    group_id = Column(String(36), ForeignKey("group_passes.id", ondelete="CASCADE"), nullable=False, index=True)
    child_id = Column(String(36), ForeignKey("children.id", ondelete="CASCADE"), nullable=False, unique=True)
    parent_name = Column(String(100), nullable=True)
    parent_phone = Column(String(20), nullable=True, index=True)
    note_to_instructor = Column(Text, nullable=True)
    edit_token = Column(String(36), nullable=True, unique=True, index=True)
    status = Column(String(20), nullable=False, default=MEMBER_STATUS_PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    group = relationship("GroupPass", back_populates="members")
    child = relationship("Child", back_populates="member", cascade="all, delete-orphan", single_parent=True)
