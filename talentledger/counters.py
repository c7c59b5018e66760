"""
Candidate cumulative counters.

A candidate's active_hours and number_of_sets are running totals over its
hour-log entries. Each write path is a pure delta application returning a
new candidate dict; `recompute_counters` folds the same deltas over a full
entry history.
"""

from functools import reduce
from typing import Any, Dict, Iterable, Optional

from .earnings import to_number

COUNTER_FIELDS = ("active_hours", "number_of_sets")


def _with_counters(candidate: Dict[str, Any], active_hours: float, number_of_sets: float) -> Dict[str, Any]:
    updated = dict(candidate)
    updated["active_hours"] = active_hours
    updated["number_of_sets"] = number_of_sets
    return updated


def apply_entry_create(candidate: Dict[str, Any], entry: Dict[str, Any]) -> Dict[str, Any]:
    """Add an entry's hours (work + break + meetings) and sets."""
    added_hours = (
        to_number(entry.get("hours_added"))
        + to_number(entry.get("break_hours"))
        + to_number(entry.get("meetings_hours"))
    )
    return _with_counters(
        candidate,
        to_number(candidate.get("active_hours")) + added_hours,
        to_number(candidate.get("number_of_sets")) + to_number(entry.get("sets_added")),
    )


def apply_entry_edit(
    candidate: Dict[str, Any],
    old_entry: Dict[str, Any],
    new_entry: Dict[str, Any],
) -> Dict[str, Any]:
    """Apply the signed hours_added/sets_added difference, floored at 0."""
    delta_hours = to_number(new_entry.get("hours_added")) - to_number(old_entry.get("hours_added"))
    delta_sets = to_number(new_entry.get("sets_added")) - to_number(old_entry.get("sets_added"))
    return _with_counters(
        candidate,
        max(0, to_number(candidate.get("active_hours")) + delta_hours),
        max(0, to_number(candidate.get("number_of_sets")) + delta_sets),
    )


def apply_entry_delete(candidate: Dict[str, Any], entry: Dict[str, Any]) -> Dict[str, Any]:
    """Remove an entry's hours_added and sets_added, floored at 0."""
    return _with_counters(
        candidate,
        max(0, to_number(candidate.get("active_hours")) - to_number(entry.get("hours_added"))),
        max(0, to_number(candidate.get("number_of_sets")) - to_number(entry.get("sets_added"))),
    )


def recompute_counters(
    entries: Iterable[Dict[str, Any]],
    base: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Fold entry creation over `entries`, starting from zero counters."""
    start = _with_counters(base or {}, 0, 0)
    return reduce(apply_entry_create, entries, start)


def counter_update(candidate: Dict[str, Any]) -> Dict[str, Any]:
    """Just the counter fields, as written back to the store."""
    return {field: candidate[field] for field in COUNTER_FIELDS}
