"""Appointment store: lookups and the authoritative confirmed count."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.models.appointment import STATUS_CANCELLED, STATUS_CONFIRMED, Appointment
from backend.models.time_slot import TimeSlot


class AppointmentRepository:

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_reference(self, booking_reference: str, lock: bool = False) -> Appointment | None:
        query = self.db.query(Appointment).filter(Appointment.booking_reference == booking_reference)
        if lock:
            query = query.with_for_update()
        return query.one_or_none()

    def find_by_customer_email(self, customer_email: str) -> list[Appointment]:
        return (
            self.db.query(Appointment)
            .join(TimeSlot, Appointment.time_slot_id == TimeSlot.id)
            .filter(Appointment.customer_email == customer_email)
            .order_by(TimeSlot.slot_date.asc(), TimeSlot.start_time.asc(), Appointment.id.asc())
            .all()
        )

    def count_confirmed_for_slot(self, slot_id: int) -> int:
        count = self.db.query(func.count(Appointment.id)).filter(
            Appointment.time_slot_id == slot_id,
            Appointment.status != STATUS_CANCELLED,
        ).scalar()
        return count or 0

    def exists_confirmed_for_slot_and_customer(self, slot_id: int, customer_email: str) -> bool:
        match = self.db.query(Appointment.id).filter(
            Appointment.time_slot_id == slot_id,
            Appointment.customer_email == customer_email,
            Appointment.status == STATUS_CONFIRMED,
        ).first()
        return match is not None

    def save(self, appointment: Appointment) -> Appointment:
        self.db.add(appointment)
        self.db.flush()
        return appointment
