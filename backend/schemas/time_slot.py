from datetime import date, time

from pydantic import BaseModel


class TimeSlotResponse(BaseModel):
    id: int
    branch_id: int
    branch_name: str
    slot_date: date
    start_time: time
    end_time: time
    capacity: int
    booked_count: int
    available: bool
