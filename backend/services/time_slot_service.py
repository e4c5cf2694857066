from datetime import date

from sqlalchemy.orm import Session

from backend.models.time_slot import TimeSlot
from backend.repositories.time_slot_repository import TimeSlotRepository
from backend.schemas.time_slot import TimeSlotResponse


def to_time_slot_response(slot: TimeSlot) -> TimeSlotResponse:
    return TimeSlotResponse(
        id=slot.id,
        branch_id=slot.branch_id,
        branch_name=slot.branch.name,
        slot_date=slot.slot_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        capacity=slot.capacity,
        booked_count=slot.booked_count,
        available=slot.available,
    )


class TimeSlotService:

    def __init__(self, db: Session, time_slots: TimeSlotRepository | None = None) -> None:
        self.time_slots = time_slots or TimeSlotRepository(db)

    def get_available_time_slots(self, branch_id: int, slot_date: date) -> list[TimeSlotResponse]:
        slots = self.time_slots.find_available_for_branch_and_date(branch_id, slot_date)
        return [to_time_slot_response(slot) for slot in slots]
