"""GroupPass: the reservation group aggregate."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base

GROUP_STATUS_PENDING_INFO = "pending_info"

ROSTER_STATUS_DRAFT = "draft"
ROSTER_STATUS_COLLECTING = "collecting"
ROSTER_STATUS_LOCKED = "locked"


class GroupPass(Base):
    __tablename__ = "group_passes"

    id = Column(String(36), primary_key=True, default=new_uuid)
    slot_id = Column(String(36), ForeignKey("reservation_slots.id"), nullable=False, index=True)
    leader_parent_id = Column(String(36), ForeignKey("parents.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=GROUP_STATUS_PENDING_INFO)
    roster_status = Column(String(20), nullable=False, default=ROSTER_STATUS_DRAFT)
    headcount_declared = Column(Integer, nullable=True)
    headcount_final = Column(Integer, nullable=True)
    memo_to_instructor = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    slot = relationship("ReservationSlot", back_populates="groups")
    leader_parent = relationship("Parent", foreign_keys=[leader_parent_id])
    invite_links = relationship("InviteLink", back_populates="group", cascade="all, delete-orphan")
    members = relationship(
        "GroupMember",
        back_populates="group",
        cascade="all, delete-orphan",
        order_by="GroupMember.created_at",
    )

    @property
    def is_locked(self) -> bool:
        return self.roster_status == ROSTER_STATUS_LOCKED
