"""Booking engine.

Create and cancel run their read-decide-write sequence inside one
transaction per slot: the slot row is locked where the database supports
``SELECT ... FOR UPDATE`` and every slot write is version-checked, so a
concurrent writer that committed first makes this attempt fail with
``StaleDataError``. Such conflicts are retried from fresh reads a bounded
number of times. Notifications go out only after commit.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from backend.core import config
from backend.core.exceptions import (
    AppointmentAlreadyCancelledError,
    AppointmentNotFoundError,
    BookingConflictError,
    BookingError,
    DoubleBookingError,
    SlotNotAvailableError,
)
from backend.models.appointment import STATUS_CANCELLED, STATUS_CONFIRMED, Appointment
from backend.repositories.appointment_repository import AppointmentRepository
from backend.repositories.time_slot_repository import TimeSlotRepository
from backend.schemas.appointment import AppointmentRequest, AppointmentResponse
from backend.services.booking_reference import BookingReferenceGenerator
from backend.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

T = TypeVar('T')

RETRYABLE_SQLSTATES = {'40001', '40P01'}


def is_retryable_conflict(exc: SQLAlchemyError) -> bool:
    if isinstance(exc, StaleDataError):
        return True
    if isinstance(exc, IntegrityError):
        # Reference collision; the next attempt draws a new one.
        return 'booking_reference' in str(exc.orig)
    if isinstance(exc, OperationalError):
        orig = getattr(exc, 'orig', None)
        sqlstate = getattr(orig, 'pgcode', None) or getattr(orig, 'sqlstate', None)
        if sqlstate in RETRYABLE_SQLSTATES:
            return True
        message = str(exc).lower()
        return 'database is locked' in message or 'deadlock detected' in message
    return False


def _belongs_to(appointment: Appointment | None, customer_email: str | None) -> bool:
    # Other customers' bookings are reported as missing rather than forbidden.
    if appointment is None:
        return False
    return customer_email is None or appointment.customer_email == customer_email.strip().lower()


def to_appointment_response(appointment: Appointment) -> AppointmentResponse:
    slot = appointment.time_slot
    return AppointmentResponse(
        id=appointment.id,
        customer_name=appointment.customer_name,
        customer_email=appointment.customer_email,
        customer_phone=appointment.customer_phone,
        booking_reference=appointment.booking_reference,
        status=appointment.status,
        appointment_date=slot.slot_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        branch_name=slot.branch.name,
        branch_address=slot.branch.address,
    )


class AppointmentService:

    def __init__(
        self,
        db: Session,
        time_slots: TimeSlotRepository | None = None,
        appointments: AppointmentRepository | None = None,
        reference_generator: BookingReferenceGenerator | None = None,
        notifier: NotificationService | None = None,
        max_attempts: int | None = None,
    ) -> None:
        self.db = db
        self.time_slots = time_slots or TimeSlotRepository(db)
        self.appointments = appointments or AppointmentRepository(db)
        self.reference_generator = reference_generator or BookingReferenceGenerator()
        self.notifier = notifier or NotificationService()
        self.max_attempts = max_attempts or config.BOOKING_MAX_ATTEMPTS

    def create_appointment(self, request: AppointmentRequest) -> AppointmentResponse:
        logger.info(
            'Starting appointment creation for customer: %s at branch: %s on %s at %s',
            request.customer_email,
            request.branch_id,
            request.appointment_date,
            request.start_time,
        )

        response = self._run_atomically('create', lambda: self._book_slot(request))

        self._notify(self.notifier.send_confirmation, response)
        logger.info(
            'Appointment created successfully. Reference: %s, Customer: %s',
            response.booking_reference,
            response.customer_email,
        )
        return response

    def cancel_appointment(self, booking_reference: str, customer_email: str | None = None) -> AppointmentResponse:
        logger.info('Starting cancellation for appointment: %s', booking_reference)

        response = self._run_atomically(
            'cancel',
            lambda: self._cancel_booking(booking_reference, customer_email),
        )

        self._notify(self.notifier.send_cancellation, response)
        logger.info(
            'Appointment cancelled successfully. Reference: %s, Customer: %s',
            booking_reference,
            response.customer_email,
        )
        return response

    def get_by_reference(self, booking_reference: str, customer_email: str | None = None) -> AppointmentResponse:
        appointment = self.appointments.find_by_reference(booking_reference)
        if not _belongs_to(appointment, customer_email):
            raise AppointmentNotFoundError('Appointment not found')
        return to_appointment_response(appointment)

    def list_by_customer(self, customer_email: str) -> list[AppointmentResponse]:
        normalized_email = customer_email.strip().lower()
        appointments = self.appointments.find_by_customer_email(normalized_email)
        logger.debug('Found %s appointments for customer: %s', len(appointments), normalized_email)
        return [to_appointment_response(appointment) for appointment in appointments]

    def _book_slot(self, request: AppointmentRequest) -> AppointmentResponse:
        slot = self.time_slots.find_available_slot(
            request.branch_id,
            request.appointment_date,
            request.start_time,
            lock=True,
        )
        if slot is None:
            raise self._unavailable_slot_error(request)

        if self.appointments.exists_confirmed_for_slot_and_customer(slot.id, request.customer_email):
            raise DoubleBookingError('Customer already has an appointment for this time slot')

        confirmed_count = self.appointments.count_confirmed_for_slot(slot.id)
        logger.debug('Current booked count for time slot %s: %s/%s', slot.id, confirmed_count, slot.capacity)

        if confirmed_count >= slot.capacity:
            logger.warning(
                'Time slot %s is fully booked. Capacity: %s, Current: %s',
                slot.id,
                slot.capacity,
                confirmed_count,
            )
            slot.booked_count = confirmed_count
            slot.available = False
            self.time_slots.save(slot)
            raise SlotNotAvailableError('Time slot is fully booked')

        appointment = Appointment(
            customer_name=request.customer_name,
            customer_email=request.customer_email,
            customer_phone=request.customer_phone,
            time_slot=slot,
            booking_reference=self.reference_generator.generate(),
            status=STATUS_CONFIRMED,
        )
        self.appointments.save(appointment)

        new_count = confirmed_count + 1
        slot.booked_count = new_count
        slot.available = new_count < slot.capacity
        self.time_slots.save(slot)
        if not slot.available:
            logger.info('Time slot %s is now fully booked. Marking as unavailable.', slot.id)

        return to_appointment_response(appointment)

    def _unavailable_slot_error(self, request: AppointmentRequest) -> BookingError:
        # Someone retrying a booking they already hold hears about the duplicate, not the full slot.
        slot = self.time_slots.find_slot(request.branch_id, request.appointment_date, request.start_time)
        if slot is not None and self.appointments.exists_confirmed_for_slot_and_customer(
            slot.id,
            request.customer_email,
        ):
            return DoubleBookingError('Customer already has an appointment for this time slot')
        return SlotNotAvailableError('Time slot not available')

    def _cancel_booking(self, booking_reference: str, customer_email: str | None) -> AppointmentResponse:
        appointment = self.appointments.find_by_reference(booking_reference, lock=True)
        if not _belongs_to(appointment, customer_email):
            raise AppointmentNotFoundError('Appointment not found')

        if appointment.status == STATUS_CANCELLED:
            raise AppointmentAlreadyCancelledError('Appointment is already cancelled')

        slot = self.time_slots.get_for_update(appointment.time_slot_id)

        appointment.status = STATUS_CANCELLED
        appointment.cancelled_at = datetime.now()
        self.appointments.save(appointment)

        confirmed_count = self.appointments.count_confirmed_for_slot(slot.id)
        slot.booked_count = confirmed_count
        slot.available = confirmed_count < slot.capacity
        self.time_slots.save(slot)
        logger.debug('Time slot %s now at %s/%s', slot.id, confirmed_count, slot.capacity)

        return to_appointment_response(appointment)

    def _run_atomically(self, operation: str, work: Callable[[], T]) -> T:
        for attempt in range(1, self.max_attempts + 1):
            rejection = None
            try:
                try:
                    result = work()
                except BookingError as exc:
                    # A rejected booking still commits the availability correction it flushed.
                    rejection = exc
                self.db.commit()
            except SQLAlchemyError as exc:
                self.db.rollback()
                if not is_retryable_conflict(exc):
                    raise
                logger.warning(
                    'Concurrent update during appointment %s (attempt %s/%s): %s',
                    operation,
                    attempt,
                    self.max_attempts,
                    exc.__class__.__name__,
                )
                continue

            if rejection is not None:
                raise rejection
            return result

        raise BookingConflictError(
            f'Could not {operation} the appointment because of concurrent updates. Please try again.'
        )

    def _notify(self, send: Callable[[AppointmentResponse], object], appointment: AppointmentResponse) -> None:
        try:
            send(appointment)
        except Exception:
            logger.exception('Failed to send notification for appointment: %s', appointment.booking_reference)
