"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for candidates, hour-log entries and work
records.
"""

import uuid
from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, DateTime, Float, Integer, Text, ForeignKey
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class SerializableMixin:
    """Row to plain dict, the shape the billing functions consume."""

    def to_dict(self) -> dict:
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


class Candidate(SerializableMixin, Base):
    """Candidate with its cumulative hour/set counters."""

    __tablename__ = "candidates"

    id = Column(String, primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    client_id = Column(String, nullable=True, index=True)
    status = Column(String, nullable=False, default="Pending")
    rate_per_hour = Column(Float, nullable=False, default=0)
    active_hours = Column(Float, nullable=False, default=0)
    number_of_sets = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class HourLogEntry(SerializableMixin, Base):
    """One logged work session for a candidate."""

    __tablename__ = "hour_log_entries"

    id = Column(String, primary_key=True, default=_new_id)
    candidate_id = Column(String, ForeignKey("candidates.id"), nullable=False, index=True)
    entry_date = Column(DateTime, nullable=False, default=datetime.now)
    hours_added = Column(Float, nullable=False, default=0)
    rate_per_hour = Column(Float, nullable=False, default=0)
    active_hours = Column(Float, nullable=False, default=0)  # cumulative after this entry
    number_of_sets = Column(Integer, nullable=False, default=0)  # cumulative after this entry
    sets_added = Column(Integer, nullable=False, default=0)
    balance_paid = Column(Float, nullable=False, default=0)
    break_hours = Column(Float, nullable=False, default=0)
    meetings_hours = Column(Float, nullable=False, default=0)
    notes = Column(Text, nullable=True)


class WorkRecord(SerializableMixin, Base):
    """Client-facing billing record; time fields are stored as minutes."""

    __tablename__ = "work_records"

    id = Column(String, primary_key=True, default=_new_id)
    employee_id = Column(String, nullable=False, index=True)
    client_id = Column(String, nullable=True, index=True)
    date = Column(DateTime, nullable=False, default=datetime.now)
    talk_time = Column(Float, nullable=False, default=0)
    wait_time = Column(Float, nullable=False, default=0)
    break_minutes = Column(Float, nullable=False, default=0)
    meeting_minutes = Column(Float, nullable=False, default=0)
    rate_per_hour = Column(Float, nullable=False, default=0)
    sets_added = Column(Integer, nullable=False, default=0)
    moes_total = Column(Float, nullable=False, default=0)
    payment_status = Column(String, nullable=False, default="pending")
    payment_batch_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


TABLES = {
    Candidate.__tablename__: Candidate,
    HourLogEntry.__tablename__: HourLogEntry,
    WorkRecord.__tablename__: WorkRecord,
}

OWNER_COLUMNS = {
    Candidate.__tablename__: "client_id",
    HourLogEntry.__tablename__: "candidate_id",
    WorkRecord.__tablename__: "employee_id",
}


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
