import os
from dotenv import load_dotenv
from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./booking.db")

SQLITE_BUSY_TIMEOUT_SECONDS = 30


def build_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # Request threads share the file; writers wait on each other instead of failing fast.
        connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT_SECONDS}
    return create_engine(url, connect_args=connect_args)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_checked_tables: set[str] = set()

TIME_SLOT_MIGRATION_STEPS = [
    ('version_id', 'ALTER TABLE time_slots ADD COLUMN version_id INTEGER NOT NULL DEFAULT 1'),
]
TIME_SLOT_INDEXES = [
    'CREATE INDEX IF NOT EXISTS idx_time_slots_branch_date ON time_slots(branch_id, slot_date)',
    'CREATE INDEX IF NOT EXISTS idx_time_slots_available_date ON time_slots(available, slot_date)',
]

APPOINTMENT_MIGRATION_STEPS = [
    ('version_id', 'ALTER TABLE appointments ADD COLUMN version_id INTEGER NOT NULL DEFAULT 1'),
    ('cancelled_at', 'ALTER TABLE appointments ADD COLUMN cancelled_at TIMESTAMP'),
]
APPOINTMENT_INDEXES = [
    'CREATE INDEX IF NOT EXISTS idx_appointments_slot_status ON appointments(time_slot_id, status)',
    'CREATE INDEX IF NOT EXISTS idx_appointments_customer_email ON appointments(customer_email)',
]


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _ensure_table_schema(
    bind: Engine,
    table_name: str,
    migration_steps: list[tuple[str, str]],
    index_statements: list[str],
) -> None:
    if table_name in _checked_tables:
        return

    with _schema_lock:
        if table_name in _checked_tables:
            return

        inspector = inspect(bind)

        if table_name not in inspector.get_table_names():
            _checked_tables.add(table_name)
            return

        existing_columns = {column['name'] for column in inspector.get_columns(table_name)}

        with bind.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            for statement in index_statements:
                connection.execute(text(statement))

        _checked_tables.add(table_name)


def ensure_booking_schema(bind: Engine | None = None) -> None:
    """Bring tables created by older releases up to the current columns and indexes."""
    bind = bind or engine
    _ensure_table_schema(bind, 'time_slots', TIME_SLOT_MIGRATION_STEPS, TIME_SLOT_INDEXES)
    _ensure_table_schema(bind, 'appointments', APPOINTMENT_MIGRATION_STEPS, APPOINTMENT_INDEXES)


def reset_schema_checks() -> None:
    with _schema_lock:
        _checked_tables.clear()
