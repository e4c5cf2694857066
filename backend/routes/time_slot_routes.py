from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.routes.common import database_unavailable, ensure_database_ready
from backend.schemas.time_slot import TimeSlotResponse
from backend.services.time_slot_service import TimeSlotService

router = APIRouter(tags=['timeslots'])


@router.get('/available', response_model=list[TimeSlotResponse])
def list_available_time_slots(
    branch_id: int = Query(...),
    slot_date: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return TimeSlotService(db).get_available_time_slots(branch_id, slot_date)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc
