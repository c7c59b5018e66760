"""
Payment bookkeeping.

Responsibilities:
- Expand work-record ids through shared payment batches before marking
  them paid.
- Spread a client payment over hour-log entries, oldest first.

Non-Responsibilities:
- No store access; callers persist the returned plans.

Invariant:
Nothing is planned for a rejected request.
"""

from typing import Any, Dict, Iterable, List, Tuple

from .config import PER_SET_BONUS_SUMMARY
from .earnings import hour_log_entry_total, to_number
from .errors import ValidationError
from .filters import safe_parse_date
from .schema import validate_payment_amount


def expand_payment_batch(record_ids: Iterable[str], all_records: Iterable[Dict[str, Any]]) -> List[str]:
    """
    Add every record sharing a payment_batch_id with a requested record.

    Expansion is one level deep and keeps first-seen order.
    """
    requested = list(dict.fromkeys(record_ids))
    wanted = set(requested)
    records = list(all_records)

    batch_ids = {
        r.get("payment_batch_id")
        for r in records
        if r.get("id") in wanted and r.get("payment_batch_id")
    }
    if not batch_ids:
        return requested

    batch_members = [r.get("id") for r in records if r.get("payment_batch_id") in batch_ids]
    return list(dict.fromkeys(requested + batch_members))


def mark_as_paid(record_ids: Iterable[str], all_records: Iterable[Dict[str, Any]]) -> List[str]:
    """
    Work out which records a mark-as-paid request touches.

    Records already paid are still listed; the caller only needs every
    listed record to end up paid.

    Raises:
        ValidationError: if no record ids are given
    """
    record_ids = list(record_ids)
    if not record_ids:
        raise ValidationError("No records to mark as paid")
    return expand_payment_batch(record_ids, all_records)


def entry_amount_owed(entry: Dict[str, Any], per_set_bonus: float = PER_SET_BONUS_SUMMARY) -> float:
    owed = hour_log_entry_total(entry, per_set_bonus)
    return max(0, owed - to_number(entry.get("balance_paid")))


def amount_owed(entries: Iterable[Dict[str, Any]], per_set_bonus: float = PER_SET_BONUS_SUMMARY) -> float:
    return sum(entry_amount_owed(e, per_set_bonus) for e in entries)


def distribute_payment(
    entries: Iterable[Dict[str, Any]],
    amount: Any,
    per_set_bonus: float = PER_SET_BONUS_SUMMARY,
) -> List[Tuple[str, float]]:
    """
    Plan balance_paid updates for a client payment.

    Entries are paid oldest first, each up to what it still owes, until
    the payment runs out.

    Args:
        entries: Hour-log entries the payment covers
        amount: Payment amount
        per_set_bonus: Set bonus used to price each entry

    Returns:
        List of (entry_id, new_balance_paid)

    Raises:
        ValidationError: no entries, or the amount is not positive or
            exceeds the amount owed
    """
    entries = list(entries)
    if not entries:
        raise ValidationError("No entries found to record payment")

    owed = amount_owed(entries, per_set_bonus)
    errors = validate_payment_amount(amount, owed)
    if errors:
        raise ValidationError(errors)

    remaining = float(amount)
    ordered = sorted(entries, key=lambda e: safe_parse_date(e.get("entry_date")))
    updates = []
    for entry in ordered:
        if remaining <= 0:
            break
        outstanding = entry_amount_owed(entry, per_set_bonus)
        if outstanding <= 0:
            continue
        paying = min(remaining, outstanding)
        updates.append((entry["id"], to_number(entry.get("balance_paid")) + paying))
        remaining -= paying
    return updates
