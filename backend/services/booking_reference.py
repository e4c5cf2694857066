import secrets
import string
from collections.abc import Callable
from datetime import date

from backend.core import config

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_CODE_LENGTH = 6


class BookingReferenceGenerator:
    """Builds references like ``APT-20260105-7QK2ZD``.

    The date stamp is the day the booking was made, not the appointment day.
    """

    def __init__(self, prefix: str | None = None, today: Callable[[], date] = date.today) -> None:
        self.prefix = prefix or config.BOOKING_REFERENCE_PREFIX
        self.today = today

    def generate(self) -> str:
        datestamp = self.today().strftime('%Y%m%d')
        code = ''.join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_CODE_LENGTH))
        return f'{self.prefix}-{datestamp}-{code}'
