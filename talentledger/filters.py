"""
Record selection by owner, period and payment status.

Dirty data is tolerated: unreadable dates fall back to "now" (and so
usually drop out of historical periods) and unknown payment statuses are
read as pending.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .logger import get_logger
from .periods import Period


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    ARCHIVED = "archived"


# Spellings that all mean "not yet paid"
PENDING_SYNS = {"pending", "unpaid", ""}


def normalize_payment_status(value: Any) -> PaymentStatus:
    """Fold the accepted status spellings into a PaymentStatus."""
    if isinstance(value, PaymentStatus):
        return value
    if value is None:
        return PaymentStatus.PENDING
    status = str(value).strip().lower()
    if status == PaymentStatus.PAID.value:
        return PaymentStatus.PAID
    if status == PaymentStatus.ARCHIVED.value:
        return PaymentStatus.ARCHIVED
    if status not in PENDING_SYNS:
        get_logger().debug("Unknown payment status read as pending", status=value)
    return PaymentStatus.PENDING


def safe_parse_date(value: Any, now: Optional[datetime] = None) -> datetime:
    """
    Parse a record date into a naive local datetime.

    Accepts datetime, date, and ISO-8601 strings (a trailing 'Z' is
    allowed). Aware values are converted to local time. Anything else
    returns `now` (current time if not given).
    """
    fallback = now if now is not None else datetime.now()
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            get_logger().debug("Unparseable record date, using fallback", value=value)
            return fallback
    else:
        return fallback

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _status_matches(record: Dict[str, Any], want_paid: Optional[bool]) -> bool:
    if want_paid is None:
        return True
    status = normalize_payment_status(record.get("payment_status"))
    if want_paid:
        return status is PaymentStatus.PAID
    return status is PaymentStatus.PENDING


def filter_records(
    records: Iterable[Dict[str, Any]],
    owner_ids: Iterable[str],
    period: Period,
    want_paid: Optional[bool],
    owner_key: str = "employee_id",
    date_key: str = "date",
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """
    Select records owned by `owner_ids`, dated inside `period`, in the
    requested payment view.

    Args:
        records: Record dicts
        owner_ids: Owner ids to keep; empty keeps nothing
        period: Inclusive date range
        want_paid: True for paid history, False for not-yet-paid,
            None to skip the status check
        owner_key: Field holding the owner id
        date_key: Field holding the record date
        now: Fallback for unparseable dates

    Returns:
        Matching records, in input order
    """
    owners = set(owner_ids)
    if not owners:
        return []

    fallback = now if now is not None else datetime.now()
    selected = []
    for record in records:
        if record.get(owner_key) not in owners:
            continue
        if not period.contains(safe_parse_date(record.get(date_key), fallback)):
            continue
        if not _status_matches(record, want_paid):
            continue
        selected.append(record)
    return selected


def filter_by_period(
    records: Iterable[Dict[str, Any]],
    period: Period,
    date_key: str = "date",
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Select records dated inside `period`, regardless of owner or status."""
    fallback = now if now is not None else datetime.now()
    return [
        r for r in records
        if period.contains(safe_parse_date(r.get(date_key), fallback))
    ]
