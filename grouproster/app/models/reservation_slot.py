"""Reservation slot model: one class occurrence shared by many groups."""

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base

SLOT_STATUS_OPEN = "open"


class ReservationSlot(Base):
    __tablename__ = "reservation_slots"

    id = Column(String(36), primary_key=True, default=new_uuid)
    start_at = Column(DateTime(timezone=True), nullable=False, index=True)
    end_at = Column(DateTime(timezone=True), nullable=False)
    instructor_id = Column(String(100), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=SLOT_STATUS_OPEN)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    groups = relationship("GroupPass", back_populates="slot")
