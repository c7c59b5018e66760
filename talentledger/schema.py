from typing import Any, Dict, List

REQUIRED_ID_FIELDS = ["candidate_id"]
NON_NEGATIVE_NUMBER_FIELDS = [
    "hours_added",
    "rate_per_hour",
    "break_hours",
    "meetings_hours",
    "balance_paid",
]
NON_NEGATIVE_INT_FIELDS = ["sets_added"]
EDITABLE_ENTRY_FIELDS = {
    "hours_added",
    "sets_added",
    "rate_per_hour",
    "break_hours",
    "meetings_hours",
    "balance_paid",
    "notes",
    "entry_date",
    "active_hours",
    "number_of_sets",
}
WORK_RECORD_NUMBER_FIELDS = ["rate_per_hour", "moes_total"]
PAYMENT_STATUSES = {"pending", "unpaid", "paid", "archived"}


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and v == v


def _check_non_negative(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f not in data or data[f] is None:
            continue
        if not _is_number(data[f]):
            errors.append(f"Field '{f}' must be a number")
        elif data[f] < 0:
            errors.append(f"Field '{f}' must not be negative")


def _check_non_negative_int(data: Dict[str, Any], fields: List[str], errors: List[str]) -> None:
    for f in fields:
        if f not in data or data[f] is None:
            continue
        v = data[f]
        if not _is_number(v) or int(v) != v:
            errors.append(f"Field '{f}' must be a whole number")
        elif v < 0:
            errors.append(f"Field '{f}' must not be negative")


def validate_hour_log_entry(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a new hour-log entry.
    Empty list means valid.
    """
    errors: List[str] = []

    for f in REQUIRED_ID_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if "hours_added" not in data:
        errors.append("Missing required field: hours_added")

    _check_non_negative(data, NON_NEGATIVE_NUMBER_FIELDS, errors)
    _check_non_negative_int(data, NON_NEGATIVE_INT_FIELDS, errors)

    if "notes" in data and data["notes"] is not None and not isinstance(data["notes"], str):
        errors.append("Field 'notes' must be a string if provided")

    return errors


def validate_entry_changes(changes: Dict[str, Any]) -> List[str]:
    """Validate a partial update to an existing hour-log entry."""
    errors: List[str] = []
    for f in sorted(changes):
        if f not in EDITABLE_ENTRY_FIELDS:
            errors.append(f"Field '{f}' cannot be changed")
    _check_non_negative(changes, NON_NEGATIVE_NUMBER_FIELDS, errors)
    _check_non_negative_int(changes, NON_NEGATIVE_INT_FIELDS, errors)
    return errors


def validate_work_record(data: Dict[str, Any]) -> List[str]:
    """
    Validate a work record arriving from the external producer.

    Time fields are not checked; unreadable values count as zero minutes.
    """
    errors: List[str] = []
    if not _is_non_empty_str(data.get("employee_id")):
        errors.append("Field 'employee_id' must be a non-empty string")
    _check_non_negative(data, WORK_RECORD_NUMBER_FIELDS, errors)
    _check_non_negative_int(data, ["sets_added"], errors)
    status = data.get("payment_status")
    if status is not None and str(status).strip().lower() not in PAYMENT_STATUSES:
        errors.append(f"Field 'payment_status' must be one of {sorted(PAYMENT_STATUSES)}")
    return errors


def validate_payment_amount(amount: Any, total_owed: float) -> List[str]:
    """A payment must be a positive number no larger than what is owed."""
    errors: List[str] = []
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return ["Please enter a valid amount"]
    if value != value or value <= 0:
        errors.append("Please enter a valid amount")
    elif round(value, 2) > round(total_owed, 2):
        errors.append(
            f"Payment amount ({value:.2f}) cannot exceed total owed ({total_owed:.2f})"
        )
    return errors
