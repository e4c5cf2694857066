"""Appointment model definitions."""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.time_slot import TimeSlot

STATUS_CONFIRMED = "CONFIRMED"
STATUS_CANCELLED = "CANCELLED"


class Appointment(Base):
    """Represents a customer's reservation of one time slot."""
    __tablename__ = "appointments"
    __table_args__ = (
        UniqueConstraint("booking_reference", name="uq_appointments_booking_reference"),
    )

    id = Column(Integer, primary_key=True)
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String)
    time_slot_id = Column(Integer, ForeignKey("time_slots.id"), nullable=False)
    booking_reference = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_CONFIRMED)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    cancelled_at = Column(DateTime)
    version_id = Column(Integer, nullable=False)

    time_slot = relationship(TimeSlot)

    __mapper_args__ = {"version_id_col": version_id}
