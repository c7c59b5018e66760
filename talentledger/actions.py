"""
User-triggered write paths.

Each action validates, plans with the pure billing functions, then issues
sequential single-record writes to the record store. Writes are not
atomic across records: an hour-log entry is written before its
candidate's counters, and a failure of the counter write after the entry
write is raised as PartialWriteError so the caller can retry just that
update. Callers re-fetch after every action.
"""

from typing import Any, Dict, Iterable, List, Optional

from .config import PER_SET_BONUS_ENTRY_CREATION
from .counters import apply_entry_create, apply_entry_delete, apply_entry_edit, counter_update
from .earnings import hour_log_entry_total, to_number
from .errors import PartialWriteError, PersistenceError, ValidationError
from .filters import filter_records, normalize_payment_status, safe_parse_date
from .logger import get_logger
from .payments import distribute_payment, mark_as_paid
from .periods import resolve_period
from .schema import validate_entry_changes, validate_hour_log_entry, validate_work_record
from .storage import RecordStore
from .timeparse import normalize_to_minutes

CANDIDATES = "candidates"
HOUR_LOG_ENTRIES = "hour_log_entries"
WORK_RECORDS = "work_records"

WORK_TIME_COLUMNS = ("talk_time", "wait_time", "break_minutes", "meeting_minutes")


def _write_candidate_counters(
    store: RecordStore,
    entry_id: Optional[str],
    candidate_id: str,
    plan,
) -> Dict[str, Any]:
    """
    Second write of an hour-log action. `plan(candidate) -> update fields`.
    Any failure here surfaces as PartialWriteError.
    """
    logger = get_logger()
    pending: Dict[str, Any] = {}
    try:
        candidate = store.get_by_id(CANDIDATES, candidate_id)
        pending = plan(candidate)
        return store.update_fields(CANDIDATES, candidate_id, pending)
    except PersistenceError as e:
        logger.error(
            "Candidate counter update failed after entry write",
            entry_id=entry_id,
            candidate_id=candidate_id,
            pending_update=pending,
            error=str(e),
        )
        raise PartialWriteError(
            f"Entry {entry_id} was saved but candidate {candidate_id} totals were not updated: {e}",
            entry_id=entry_id,
            candidate_id=candidate_id,
            pending_update=pending,
        ) from e


def add_hour_log_entry(store: RecordStore, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Log hours for a candidate and push the deltas onto its counters.

    Args:
        store: Record store
        fields: candidate_id, hours_added, and optionally entry_date,
            rate_per_hour (defaults to the candidate's rate), sets_added,
            break_hours, meetings_hours, balance_paid, notes

    Returns:
        dict with entry, candidate and entry_total (entry-screen pricing)
    """
    errors = validate_hour_log_entry(fields)
    if errors:
        raise ValidationError(errors)

    logger = get_logger()
    candidate = store.get_by_id(CANDIDATES, fields["candidate_id"])

    rate = fields.get("rate_per_hour")
    if rate is None:
        rate = candidate.get("rate_per_hour")

    entry = {
        "candidate_id": candidate["id"],
        "entry_date": safe_parse_date(fields.get("entry_date")),
        "hours_added": to_number(fields.get("hours_added")),
        "rate_per_hour": to_number(rate),
        "sets_added": int(to_number(fields.get("sets_added"))),
        "balance_paid": to_number(fields.get("balance_paid")),
        "break_hours": to_number(fields.get("break_hours")),
        "meetings_hours": to_number(fields.get("meetings_hours")),
        "notes": fields.get("notes"),
    }
    after = apply_entry_create(candidate, entry)
    # Snapshots may be overridden by hand; the mismatch is display-only
    entry["active_hours"] = to_number(fields.get("active_hours", after["active_hours"]))
    entry["number_of_sets"] = int(to_number(fields.get("number_of_sets", after["number_of_sets"])))

    saved = store.insert_one(HOUR_LOG_ENTRIES, entry)

    def plan(current):
        update = counter_update(apply_entry_create(current, entry))
        update["number_of_sets"] = int(update["number_of_sets"])
        update["rate_per_hour"] = entry["rate_per_hour"]
        return update

    updated_candidate = _write_candidate_counters(store, saved["id"], candidate["id"], plan)

    total = hour_log_entry_total(saved, PER_SET_BONUS_ENTRY_CREATION)
    logger.record_entry_logged()
    logger.info(
        "Hour entry logged",
        entry_id=saved["id"],
        candidate_id=candidate["id"],
        hours_added=saved["hours_added"],
        sets_added=saved["sets_added"],
        entry_total=round(total, 2),
    )
    return {"entry": saved, "candidate": updated_candidate, "entry_total": total}


def update_hour_log_entry(store: RecordStore, entry_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    """
    Edit an hour-log entry and apply the signed hours/sets difference to
    its candidate. The candidate is only rewritten when hours, sets or
    rate change.
    """
    errors = validate_entry_changes(changes)
    if errors:
        raise ValidationError(errors)

    old_entry = store.get_by_id(HOUR_LOG_ENTRIES, entry_id)
    # A blank rate keeps the current one
    payload = {k: v for k, v in changes.items() if not (k == "rate_per_hour" and v is None)}
    if "entry_date" in payload:
        payload["entry_date"] = safe_parse_date(payload["entry_date"], old_entry["entry_date"])
    new_entry = {**old_entry, **payload}

    saved = store.update_fields(HOUR_LOG_ENTRIES, entry_id, payload)

    hours_changed = to_number(new_entry.get("hours_added")) != to_number(old_entry.get("hours_added"))
    sets_changed = to_number(new_entry.get("sets_added")) != to_number(old_entry.get("sets_added"))
    rate_changed = "rate_per_hour" in payload

    candidate = None
    if hours_changed or sets_changed or rate_changed:
        def plan(current):
            update = counter_update(apply_entry_edit(current, old_entry, new_entry))
            update["number_of_sets"] = int(update["number_of_sets"])
            if rate_changed:
                update["rate_per_hour"] = to_number(payload["rate_per_hour"])
            return update

        candidate = _write_candidate_counters(store, entry_id, old_entry["candidate_id"], plan)

    get_logger().info(
        "Hour entry updated",
        entry_id=entry_id,
        fields=sorted(changes),
        entry_total=round(hour_log_entry_total(saved, PER_SET_BONUS_ENTRY_CREATION), 2),
    )
    return {"entry": saved, "candidate": candidate}


def delete_hour_log_entry(store: RecordStore, entry_id: str) -> Dict[str, Any]:
    """Delete an hour-log entry and take its hours/sets off the candidate."""
    old_entry = store.get_by_id(HOUR_LOG_ENTRIES, entry_id)
    store.delete_by_id(HOUR_LOG_ENTRIES, entry_id)

    def plan(current):
        update = counter_update(apply_entry_delete(current, old_entry))
        update["number_of_sets"] = int(update["number_of_sets"])
        return update

    candidate = _write_candidate_counters(store, entry_id, old_entry["candidate_id"], plan)
    get_logger().info("Hour entry deleted", entry_id=entry_id, candidate_id=old_entry["candidate_id"])
    return {"entry": old_entry, "candidate": candidate}


def mark_records_as_paid(store: RecordStore, record_ids: Iterable[str]) -> List[str]:
    """
    Mark work records, and every record sharing their payment batch, as
    paid. Ids with no stored record are skipped before any write. Writes
    go one record at a time; on failure the records already written stay
    paid and the error names how far it got.
    """
    logger = get_logger()
    all_records = store.select_all(WORK_RECORDS)
    known = {r["id"] for r in all_records}
    requested = mark_as_paid(record_ids, all_records)
    ids = [record_id for record_id in requested if record_id in known]
    if len(ids) < len(requested):
        logger.warning(
            "Skipping unknown work records",
            record_ids=[record_id for record_id in requested if record_id not in known],
        )
    logger.info("Marking records as paid", count=len(ids), record_ids=ids)

    done = 0
    for record_id in ids:
        try:
            store.update_fields(WORK_RECORDS, record_id, {"payment_status": "paid"})
        except PersistenceError as e:
            logger.error("Mark-as-paid stopped", record_id=record_id, updated=done, total=len(ids), error=str(e))
            raise PersistenceError(
                f"Marked {done} of {len(ids)} records as paid before failing on {record_id}: {e}"
            ) from e
        done += 1

    logger.record_marked_paid(done)
    return ids


def mark_period_as_paid(
    store: RecordStore,
    owner_ids: Iterable[str],
    kind: str,
    reference_date,
) -> List[str]:
    """Mark every not-yet-paid record of the owners in a period as paid."""
    period = resolve_period(kind, reference_date)
    pending = filter_records(store.select_all(WORK_RECORDS), owner_ids, period, want_paid=False)
    if not pending:
        raise ValidationError("No pending records found for this period")
    return mark_records_as_paid(store, [r["id"] for r in pending])


def record_client_payment(store: RecordStore, entry_ids: Iterable[str], amount: Any) -> List[Dict[str, Any]]:
    """
    Record a client payment against hour-log entries, oldest first.

    Returns:
        List of {id, balance_paid} written
    """
    wanted = set(entry_ids)
    entries = [e for e in store.select_all(HOUR_LOG_ENTRIES) if e["id"] in wanted]
    updates = distribute_payment(entries, amount)

    logger = get_logger()
    written = []
    for entry_id, new_balance in updates:
        store.update_fields(HOUR_LOG_ENTRIES, entry_id, {"balance_paid": new_balance})
        written.append({"id": entry_id, "balance_paid": new_balance})

    logger.record_payment()
    logger.info("Client payment recorded", amount=float(amount), entries=len(written))
    return written


def clear_payments_for_entries(store: RecordStore, entry_ids: Iterable[str]) -> List[str]:
    """Reset balance_paid to 0 on the given entries."""
    wanted = set(entry_ids)
    cleared = []
    for entry in store.select_all(HOUR_LOG_ENTRIES):
        if entry["id"] not in wanted:
            continue
        store.update_fields(HOUR_LOG_ENTRIES, entry["id"], {"balance_paid": 0})
        cleared.append(entry["id"])
    get_logger().info("Payments cleared", entries=len(cleared))
    return cleared


def prepare_work_record(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize an incoming work record for storage: time fields to minutes,
    status spellings to a single value, dates to datetimes.
    """
    record = dict(data)
    for column in WORK_TIME_COLUMNS:
        record[column] = normalize_to_minutes(record.get(column))
    record["payment_status"] = normalize_payment_status(record.get("payment_status")).value
    record["date"] = safe_parse_date(record.get("date"))
    if "created_at" in record:
        record["created_at"] = safe_parse_date(record["created_at"])
    if not record.get("payment_batch_id"):
        record["payment_batch_id"] = None
    for column in ("rate_per_hour", "moes_total"):
        record[column] = to_number(record.get(column))
    record["sets_added"] = int(to_number(record.get("sets_added")))
    return record


def import_records(store: RecordStore, data: Dict[str, Any]) -> Dict[str, int]:
    """
    Load candidates, hour-log entries and work records from an export.

    Hour-log entries are stored as given (their snapshots included); the
    candidates' counters are not recomputed. Invalid records are skipped.

    Returns:
        Counts of imported and skipped records
    """
    logger = get_logger()
    counts = {"candidates": 0, "hour_log_entries": 0, "work_records": 0, "skipped": 0}

    for candidate in data.get("candidates", []):
        if not candidate.get("name"):
            logger.warning("Skipping candidate without name", candidate_id=candidate.get("id"))
            counts["skipped"] += 1
            continue
        fields = dict(candidate)
        if "created_at" in fields:
            fields["created_at"] = safe_parse_date(fields["created_at"])
        store.insert_one(CANDIDATES, fields)
        counts["candidates"] += 1

    for entry in data.get("hour_log_entries", []):
        errors = validate_hour_log_entry(entry)
        if errors:
            logger.warning("Skipping invalid hour entry", entry_id=entry.get("id"), errors=errors)
            counts["skipped"] += 1
            continue
        fields = dict(entry)
        fields["entry_date"] = safe_parse_date(fields.get("entry_date"))
        store.insert_one(HOUR_LOG_ENTRIES, fields)
        counts["hour_log_entries"] += 1

    for record in data.get("work_records", []):
        errors = validate_work_record(record)
        if errors:
            logger.warning("Skipping invalid work record", record_id=record.get("id"), errors=errors)
            counts["skipped"] += 1
            continue
        store.insert_one(WORK_RECORDS, prepare_work_record(record))
        counts["work_records"] += 1

    logger.info("Import complete", **counts)
    return counts
