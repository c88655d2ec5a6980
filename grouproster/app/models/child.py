"""Child (student) record, owned by exactly one group member."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.orm import relationship

from grouproster.app.core.ids import new_uuid
from grouproster.app.core.time import utc_now
from grouproster.app.db.base_class import Base


class Child(Base):
    __tablename__ = "children"

    id = Column(String(36), primary_key=True, default=new_uuid)
    name = Column(String(100), nullable=False)
    grade = Column(String(50), nullable=True)
    prior_student_attended = Column(Boolean, nullable=False, default=False)
    siblings_prior_attended = Column(Boolean, nullable=False, default=False)
    parent_prior_attended = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    member = relationship("GroupMember", back_populates="child", uselist=False)
