import logging
from dataclasses import dataclass

from backend.core import config
from backend.schemas.appointment import AppointmentResponse

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationMessage:
    recipient: str
    subject: str
    body: str


class NotificationService:
    """Composes customer messages and hands them to the log.

    There is no mail transport; delivery is the log record.
    """

    def __init__(self, enabled: bool | None = None, sender: str | None = None) -> None:
        self.enabled = config.NOTIFICATIONS_ENABLED if enabled is None else enabled
        self.sender = sender or config.NOTIFICATION_SENDER

    def send_confirmation(self, appointment: AppointmentResponse) -> NotificationMessage | None:
        message = NotificationMessage(
            recipient=appointment.customer_email,
            subject=f'Appointment Confirmation - Reference: {appointment.booking_reference}',
            body=(
                f'Dear {appointment.customer_name}, your appointment at {appointment.branch_name} '
                f'on {appointment.appointment_date.isoformat()} from '
                f'{appointment.start_time.strftime("%H:%M")} to {appointment.end_time.strftime("%H:%M")} '
                'has been confirmed.'
            ),
        )
        return self._deliver(message)

    def send_cancellation(self, appointment: AppointmentResponse) -> NotificationMessage | None:
        message = NotificationMessage(
            recipient=appointment.customer_email,
            subject=f'Appointment Cancelled - Reference: {appointment.booking_reference}',
            body=(
                f'Dear {appointment.customer_name}, your appointment at {appointment.branch_name} '
                f'on {appointment.appointment_date.isoformat()} at '
                f'{appointment.start_time.strftime("%H:%M")} has been cancelled.'
            ),
        )
        return self._deliver(message)

    def _deliver(self, message: NotificationMessage) -> NotificationMessage | None:
        if not self.enabled:
            logger.debug('Notifications disabled, dropping message to %s', message.recipient)
            return None

        logger.info(
            'Sending email from %s to %s: %s | %s',
            self.sender,
            message.recipient,
            message.subject,
            message.body,
        )
        return message
