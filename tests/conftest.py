import os
from datetime import date, datetime, time, timedelta, timezone

import jwt
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from backend.core import config  # noqa: E402
from backend.database import Base  # noqa: E402
from backend.models.appointment import Appointment  # noqa: E402
from backend.models.branch import Branch  # noqa: E402
from backend.models.time_slot import TimeSlot  # noqa: E402
from backend.schemas.appointment import AppointmentRequest, AppointmentResponse  # noqa: E402

SLOT_DATE = date(2026, 1, 5)


class RecordingNotifier:
    def __init__(self) -> None:
        self.confirmations: list[AppointmentResponse] = []
        self.cancellations: list[AppointmentResponse] = []

    def send_confirmation(self, appointment: AppointmentResponse) -> None:
        self.confirmations.append(appointment)

    def send_cancellation(self, appointment: AppointmentResponse) -> None:
        self.cancellations.append(appointment)


@pytest.fixture
def booking_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine, tables=[Branch.__table__, TimeSlot.__table__, Appointment.__table__])

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine, tables=[Appointment.__table__, TimeSlot.__table__, Branch.__table__])


@pytest.fixture
def branch(booking_db) -> Branch:
    downtown = Branch(
        name='Downtown Branch',
        address='123 Main St, Downtown',
        phone='+27-11-555-0101',
        email='downtown@company.com',
        operating_hours='9:00 AM - 6:00 PM',
    )
    booking_db.add(downtown)
    booking_db.commit()
    booking_db.refresh(downtown)
    return downtown


@pytest.fixture
def make_slot(booking_db, branch):
    def _make_slot(
        capacity: int = 3,
        start_time: time = time(9, 0),
        end_time: time | None = None,
        slot_date: date = SLOT_DATE,
        booked_count: int = 0,
        available: bool = True,
        slot_branch: Branch | None = None,
    ) -> TimeSlot:
        slot = TimeSlot(
            branch_id=(slot_branch or branch).id,
            slot_date=slot_date,
            start_time=start_time,
            end_time=end_time or (datetime.combine(slot_date, start_time) + timedelta(minutes=30)).time(),
            capacity=capacity,
            booked_count=booked_count,
            available=available,
        )
        booking_db.add(slot)
        booking_db.commit()
        booking_db.refresh(slot)
        return slot

    return _make_slot


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def build_request():
    def _build_request(slot: TimeSlot, email: str, name: str = 'Peter Test') -> AppointmentRequest:
        return AppointmentRequest(
            customer_name=name,
            customer_email=email,
            customer_phone='+27-82-555-0199',
            branch_id=slot.branch_id,
            appointment_date=slot.slot_date,
            start_time=slot.start_time,
        )

    return _build_request


@pytest.fixture
def issue_token():
    def _issue_token(subject: str, expires_minutes: int = 60) -> str:
        issued_at = datetime.now(timezone.utc)
        payload = {'sub': subject, 'exp': issued_at + timedelta(minutes=expires_minutes), 'iat': issued_at}
        return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)

    return _issue_token
