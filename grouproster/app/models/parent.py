"""Parent (guardian) model keyed by normalized phone."""

from sqlalchemy import Column, DateTime, String

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base


class Parent(Base):
    __tablename__ = "parents"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=False, unique=True, index=True)
    cash_receipt_number = Column(String(50), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)
