from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.auth.dependencies import get_current_customer_email
from backend.core.exceptions import BookingError
from backend.database import get_db
from backend.routes.common import booking_error_to_http, database_unavailable, ensure_database_ready
from backend.schemas.appointment import AppointmentRequest, AppointmentResponse
from backend.services.appointment_service import AppointmentService

router = APIRouter(tags=['appointments'])


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(data: AppointmentRequest, db: Session = Depends(get_db)):
    ensure_database_ready()

    try:
        return AppointmentService(db).create_appointment(data)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc


@router.get('/my-appointments', response_model=list[AppointmentResponse])
def list_my_appointments(
    customer_email: str = Depends(get_current_customer_email),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).list_by_customer(customer_email)
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.get('/{booking_reference}', response_model=AppointmentResponse)
def get_appointment(
    booking_reference: str,
    customer_email: str = Depends(get_current_customer_email),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        return AppointmentService(db).get_by_reference(booking_reference.strip(), customer_email)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        raise database_unavailable() from exc


@router.delete('/{booking_reference}', status_code=status.HTTP_204_NO_CONTENT)
def cancel_appointment(
    booking_reference: str,
    customer_email: str = Depends(get_current_customer_email),
    db: Session = Depends(get_db),
):
    ensure_database_ready()

    try:
        AppointmentService(db).cancel_appointment(booking_reference.strip(), customer_email)
    except BookingError as exc:
        raise booking_error_to_http(exc) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_unavailable() from exc
