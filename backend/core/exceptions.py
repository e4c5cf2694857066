"""Booking error taxonomy.

Every error carries the HTTP status the routes answer with, so the
translation to ``HTTPException`` stays in one place.
"""


class BookingError(Exception):
    """Base class for rejected booking operations."""

    status_code = 400


class SlotNotAvailableError(BookingError):
    """The slot does not exist, is flagged unavailable, or is fully booked."""

    status_code = 400


class DoubleBookingError(BookingError):
    """The customer already holds a confirmed appointment for the slot."""

    status_code = 409


class AppointmentNotFoundError(BookingError):
    status_code = 404


class AppointmentAlreadyCancelledError(BookingError):
    status_code = 409


class BookingConflictError(BookingError):
    """Concurrent writers kept winning until the retry budget ran out."""

    status_code = 503
