"""Time slot model definitions."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Integer,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.branch import Branch


class TimeSlot(Base):
    """Represents a bookable slot with a finite number of seats.

    ``booked_count`` and ``available`` cache the confirmed appointment
    count; only the booking service writes them.
    """
    __tablename__ = "time_slots"
    __table_args__ = (
        UniqueConstraint("branch_id", "slot_date", "start_time", name="uq_time_slots_branch_date_start"),
        CheckConstraint("capacity > 0", name="ck_time_slots_capacity_positive"),
        CheckConstraint("booked_count >= 0", name="ck_time_slots_booked_count_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=False)
    slot_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    capacity = Column(Integer, nullable=False)
    booked_count = Column(Integer, nullable=False, default=0)
    available = Column(Boolean, nullable=False, default=True)
    version_id = Column(Integer, nullable=False)

    branch = relationship(Branch)

    __mapper_args__ = {"version_id_col": version_id}
