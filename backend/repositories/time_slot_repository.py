"""Slot store: reads and writes of time slot capacity state."""

from datetime import date, time

from sqlalchemy.orm import Session, joinedload
from sqlalchemy.orm.attributes import flag_modified

from backend.models.time_slot import TimeSlot


class TimeSlotRepository:

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_slot(self, branch_id: int, slot_date: date, start_time: time) -> TimeSlot | None:
        return self.db.query(TimeSlot).filter(
            TimeSlot.branch_id == branch_id,
            TimeSlot.slot_date == slot_date,
            TimeSlot.start_time == start_time,
        ).one_or_none()

    def find_available_slot(
        self,
        branch_id: int,
        slot_date: date,
        start_time: time,
        lock: bool = False,
    ) -> TimeSlot | None:
        query = self.db.query(TimeSlot).filter(
            TimeSlot.branch_id == branch_id,
            TimeSlot.slot_date == slot_date,
            TimeSlot.start_time == start_time,
            TimeSlot.available.is_(True),
        )
        if lock:
            query = query.with_for_update()
        return query.one_or_none()

    def get_for_update(self, slot_id: int) -> TimeSlot | None:
        return self.db.query(TimeSlot).filter(TimeSlot.id == slot_id).with_for_update().one_or_none()

    def find_available_for_branch_and_date(self, branch_id: int, slot_date: date) -> list[TimeSlot]:
        return (
            self.db.query(TimeSlot)
            .options(joinedload(TimeSlot.branch))
            .filter(
                TimeSlot.branch_id == branch_id,
                TimeSlot.slot_date == slot_date,
                TimeSlot.available.is_(True),
            )
            .order_by(TimeSlot.start_time.asc())
            .all()
        )

    def save(self, slot: TimeSlot) -> TimeSlot:
        """Flush the slot with a versioned UPDATE.

        The UPDATE is forced even when the cached count already matches, so a
        writer that committed in between always surfaces as ``StaleDataError``.
        """
        flag_modified(slot, "booked_count")
        self.db.add(slot)
        self.db.flush()
        return slot
