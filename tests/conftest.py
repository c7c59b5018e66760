"""
Pytest configuration and shared fixtures.
"""

import copy
from datetime import datetime
from typing import Any, Dict, List

import pytest

from talentledger.logger import get_logger, reset_logger
from talentledger.storage import RecordStore


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path):
    """Route the global logger to a temp dir with console output off."""
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_console=False)
    yield logger
    for handler in logger.logger.handlers:
        handler.close()
    reset_logger()


@pytest.fixture
def fixed_now() -> datetime:
    """Fallback 'now' well outside January 2025."""
    return datetime(2030, 6, 1, 12, 0, 0)


@pytest.fixture
def work_records() -> List[Dict[str, Any]]:
    """Work records for January 2025 plus a few outliers."""
    return [
        {
            "id": "r1", "employee_id": "e1", "date": "2025-01-20",
            "talk_time": "01:30:00", "wait_time": 0, "break_minutes": 0, "meeting_minutes": 0,
            "rate_per_hour": 15, "sets_added": 2, "moes_total": 10,
            "payment_status": "pending", "payment_batch_id": None,
        },
        {
            "id": "r2", "employee_id": "e1", "date": "2025-01-21T09:00:00",
            "talk_time": 60, "wait_time": "00:30:00", "break_minutes": 15, "meeting_minutes": 15,
            "rate_per_hour": 10, "sets_added": 1, "moes_total": 0,
            "payment_status": "unpaid", "payment_batch_id": None,
        },
        {
            "id": "r3", "employee_id": "e2", "date": "2025-01-22",
            "talk_time": 120, "wait_time": 0, "break_minutes": 0, "meeting_minutes": 0,
            "rate_per_hour": 20, "sets_added": 0, "moes_total": 5,
            "payment_status": "paid", "payment_batch_id": None,
        },
        {
            "id": "r4", "employee_id": "e2", "date": "2025-01-10",
            "talk_time": 60, "wait_time": 0, "break_minutes": 0, "meeting_minutes": 0,
            "rate_per_hour": 20, "sets_added": 0, "moes_total": 0,
            "payment_status": "archived", "payment_batch_id": None,
        },
        {
            "id": "r5", "employee_id": "e3", "date": "2025-01-20",
            "talk_time": 60, "wait_time": 0, "break_minutes": 0, "meeting_minutes": 0,
            "rate_per_hour": 100, "sets_added": 0, "moes_total": 0,
            "payment_status": "pending", "payment_batch_id": None,
        },
        {
            "id": "r6", "employee_id": "e1", "date": "2025-02-03",
            "talk_time": 60, "wait_time": 0, "break_minutes": 0, "meeting_minutes": 0,
            "rate_per_hour": 15, "sets_added": 0, "moes_total": 0,
            "payment_status": "pending", "payment_batch_id": None,
        },
    ]


@pytest.fixture
def hour_log_entries() -> List[Dict[str, Any]]:
    """Hour-log entries for two candidates."""
    return [
        {
            "id": "h1", "candidate_id": "c1", "entry_date": "2025-01-20",
            "hours_added": 2, "break_hours": 0.5, "meetings_hours": 0,
            "rate_per_hour": 10, "sets_added": 3, "balance_paid": 0,
        },
        {
            "id": "h2", "candidate_id": "c1", "entry_date": "2025-01-21",
            "hours_added": 1, "break_hours": 0, "meetings_hours": 0,
            "rate_per_hour": 10, "sets_added": 0, "balance_paid": 5,
        },
        {
            "id": "h3", "candidate_id": "c2", "entry_date": "2025-01-20",
            "hours_added": 4, "break_hours": 0, "meetings_hours": 0,
            "rate_per_hour": 12.5, "sets_added": 1, "balance_paid": 0,
        },
        {
            "id": "h4", "candidate_id": "c2", "entry_date": "2025-02-05",
            "hours_added": 1, "break_hours": 0, "meetings_hours": 0,
            "rate_per_hour": 12.5, "sets_added": 0, "balance_paid": 0,
        },
    ]


@pytest.fixture
def candidates() -> List[Dict[str, Any]]:
    return [
        {"id": "c1", "name": "Ana Lopez", "client_id": "acme", "status": "Training",
         "rate_per_hour": 10, "active_hours": 10, "number_of_sets": 4},
        {"id": "c2", "name": "Ben Okafor", "client_id": "acme", "status": "Pending",
         "rate_per_hour": 12.5, "active_hours": 5, "number_of_sets": 1},
        {"id": "c3", "name": "Chi Nguyen", "client_id": "beta", "status": "Probation",
         "rate_per_hour": 9, "active_hours": 0, "number_of_sets": 0},
    ]


@pytest.fixture
def store(tmp_path) -> RecordStore:
    """Empty record store in a temp SQLite database."""
    return RecordStore(tmp_path / "ledger.db")


@pytest.fixture
def seeded_store(store, candidates) -> RecordStore:
    """Record store holding the sample candidates."""
    for candidate in candidates:
        store.insert_one("candidates", candidate)
    return store


@pytest.fixture
def export_data(candidates, hour_log_entries, work_records) -> Dict[str, Any]:
    """JSON-style export with employees e1/e2 as acme candidates."""
    employees = [
        {"id": "e1", "name": "Eve Adams", "client_id": "acme", "status": "Training", "rate_per_hour": 15},
        {"id": "e2", "name": "Raj Patel", "client_id": "acme", "status": "Training", "rate_per_hour": 20},
    ]
    return {
        "candidates": copy.deepcopy(candidates) + employees,
        "hour_log_entries": copy.deepcopy(hour_log_entries),
        "work_records": copy.deepcopy(work_records),
    }
