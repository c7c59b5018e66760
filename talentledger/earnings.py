"""
Earnings formulas and period summaries.

Three formulas live here and are deliberately not unified:

- hour-log entries: (hours + break + meetings) * rate + sets * bonus,
  where the bonus is $5 on entry screens and $20 in summaries;
- work records: (talk + wait + break + meeting hours) * rate + sets * $20,
  plus the record's own moes_total for the client's combined figure;
- Moe's summary: billable hours * $2 + sets * $5 over a filtered set.

Amounts are summed unrounded; format with `format_money` for display.
"""

from collections import OrderedDict
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from .config import (
    MOES_HOURLY_RATE,
    MOES_SET_BONUS,
    PER_SET_BONUS_ENTRY_CREATION,
    PER_SET_BONUS_SUMMARY,
    STATS_CANDIDATE_STATUSES,
    WORK_RECORD_SET_BONUS,
)
from .filters import filter_by_period, filter_records
from .periods import period_label, resolve_period
from .timeparse import format_minutes_as_time, normalize_to_minutes

WORK_TIME_FIELDS = OrderedDict([
    ("talk", "talk_time"),
    ("wait", "wait_time"),
    ("break", "break_minutes"),
    ("meeting", "meeting_minutes"),
])

TOP_PERFORMERS = 3


def to_number(value: Any) -> float:
    """Numeric field value, or 0 for missing/non-numeric input."""
    if isinstance(value, bool) or value is None:
        return 0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0
    if result != result:  # NaN
        return 0
    return result


def format_money(amount: float) -> str:
    return f"${amount:,.2f}"


def average_per_owner(total: float, owner_count: int) -> float:
    return total / max(1, owner_count)


def _top(rows: List[Dict[str, Any]], key: Callable[[Dict[str, Any]], float]) -> List[Dict[str, Any]]:
    return sorted(rows, key=key, reverse=True)[:TOP_PERFORMERS]


# Hour-log entries

def hour_log_entry_hours(entry: Mapping[str, Any]) -> float:
    return (
        to_number(entry.get("hours_added"))
        + to_number(entry.get("break_hours"))
        + to_number(entry.get("meetings_hours"))
    )


def hour_log_entry_total(
    entry: Mapping[str, Any],
    per_set_bonus: float = PER_SET_BONUS_ENTRY_CREATION,
) -> float:
    """
    Amount earned by one hour-log entry.

    Args:
        entry: Hour-log entry dict
        per_set_bonus: PER_SET_BONUS_ENTRY_CREATION on entry screens,
            PER_SET_BONUS_SUMMARY in summary views
    """
    rate = to_number(entry.get("rate_per_hour"))
    sets = to_number(entry.get("sets_added"))
    return hour_log_entry_hours(entry) * rate + sets * per_set_bonus


# Work records

def work_record_minutes(record: Mapping[str, Any]) -> Dict[str, float]:
    return {
        category: normalize_to_minutes(record.get(field))
        for category, field in WORK_TIME_FIELDS.items()
    }


def work_record_hours(record: Mapping[str, Any]) -> float:
    return sum(work_record_minutes(record).values()) / 60


def work_record_total(
    record: Mapping[str, Any],
    per_set_bonus: float = WORK_RECORD_SET_BONUS,
) -> float:
    rate = to_number(record.get("rate_per_hour"))
    sets = to_number(record.get("sets_added"))
    return work_record_hours(record) * rate + sets * per_set_bonus


def combined_total(record: Mapping[str, Any]) -> float:
    """Work-record total plus the separately tracked moes_total."""
    return work_record_total(record) + to_number(record.get("moes_total"))


def moes_summary_total(total_billable_hours: float, total_sets: float) -> float:
    return total_billable_hours * MOES_HOURLY_RATE + total_sets * MOES_SET_BONUS


# Summaries

def summarize_work_records(
    records: Iterable[Dict[str, Any]],
    owner_ids: Iterable[str],
    kind: str,
    reference_date,
    want_paid: bool = False,
    names: Optional[Mapping[str, str]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Client payment summary over work records.

    Filters to the client's employees, the resolved period and the
    requested payment view, then totals time per category, sets,
    earnings, moes_total and the combined figure.

    Returns:
        dict with total_minutes_by_category, total_sets, total_earnings,
        moes_total, combined_total, per_owner_breakdown, period_label,
        record_count, average_earnings_per_owner, top_by_earnings,
        top_by_hours
    """
    names = names or {}
    period = resolve_period(kind, reference_date)
    selected = filter_records(records, owner_ids, period, want_paid, now=now)

    minutes_by_category = {category: 0 for category in WORK_TIME_FIELDS}
    total_sets = 0
    total_earnings = 0
    moes_total = 0
    by_owner: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    for record in selected:
        minutes = work_record_minutes(record)
        for category, value in minutes.items():
            minutes_by_category[category] += value
        sets = to_number(record.get("sets_added"))
        earned = work_record_total(record)
        total_sets += sets
        total_earnings += earned
        moes_total += to_number(record.get("moes_total"))

        owner_id = record.get("employee_id")
        row = by_owner.get(owner_id)
        if row is None:
            row = by_owner[owner_id] = {
                "owner_id": owner_id,
                "name": names.get(owner_id) or f"Employee {owner_id}",
                "minutes_by_category": {category: 0 for category in WORK_TIME_FIELDS},
                "hours": 0,
                "sets": 0,
                "rate": 0,
                "earnings": 0,
                "entry_count": 0,
            }
        for category, value in minutes.items():
            row["minutes_by_category"][category] += value
        row["hours"] += sum(minutes.values()) / 60
        row["sets"] += sets
        # Latest record's rate is the one shown
        row["rate"] = to_number(record.get("rate_per_hour"))
        row["earnings"] += earned
        row["entry_count"] += 1

    breakdown = list(by_owner.values())
    return {
        "total_minutes_by_category": minutes_by_category,
        "total_sets": total_sets,
        "total_earnings": total_earnings,
        "moes_total": moes_total,
        "combined_total": total_earnings + moes_total,
        "per_owner_breakdown": breakdown,
        "period_label": period_label(kind, reference_date),
        "record_count": len(selected),
        "average_earnings_per_owner": average_per_owner(total_earnings, len(breakdown)),
        "top_by_earnings": _top(breakdown, lambda r: r["earnings"]),
        "top_by_hours": _top(breakdown, lambda r: r["hours"]),
    }


def summarize_hour_log(
    entries: Iterable[Dict[str, Any]],
    kind: str,
    reference_date,
    owner_ids: Optional[Iterable[str]] = None,
    names: Optional[Mapping[str, str]] = None,
    per_set_bonus: float = PER_SET_BONUS_SUMMARY,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Hours summary over hour-log entries in a period.

    Args:
        entries: Hour-log entry dicts
        kind: Period kind
        reference_date: Date the period is resolved around
        owner_ids: Restrict to these candidates; None keeps every candidate
        names: candidate_id -> display name
        per_set_bonus: Set bonus for this view (summary convention by default)
        now: Fallback for unparseable dates
    """
    names = names or {}
    period = resolve_period(kind, reference_date)
    if owner_ids is None:
        selected = filter_by_period(entries, period, date_key="entry_date", now=now)
    else:
        selected = filter_records(
            entries, owner_ids, period, None,
            owner_key="candidate_id", date_key="entry_date", now=now,
        )

    minutes_by_category = {"hours": 0, "break": 0, "meetings": 0}
    total_sets = 0
    total_earnings = 0
    total_balance_paid = 0
    by_owner: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    for entry in selected:
        hours = to_number(entry.get("hours_added"))
        break_hours = to_number(entry.get("break_hours"))
        meetings_hours = to_number(entry.get("meetings_hours"))
        minutes_by_category["hours"] += hours * 60
        minutes_by_category["break"] += break_hours * 60
        minutes_by_category["meetings"] += meetings_hours * 60
        sets = to_number(entry.get("sets_added"))
        earned = hour_log_entry_total(entry, per_set_bonus)
        balance_paid = to_number(entry.get("balance_paid"))
        total_sets += sets
        total_earnings += earned
        total_balance_paid += balance_paid

        owner_id = entry.get("candidate_id")
        row = by_owner.get(owner_id)
        if row is None:
            row = by_owner[owner_id] = {
                "owner_id": owner_id,
                "name": names.get(owner_id) or entry.get("candidate_name") or "Unknown",
                "hours": 0,
                "break_hours": 0,
                "meetings_hours": 0,
                "sets": 0,
                "rate": 0,
                "earnings": 0,
                "balance_paid": 0,
                "entry_count": 0,
            }
        row["hours"] += hours
        row["break_hours"] += break_hours
        row["meetings_hours"] += meetings_hours
        row["sets"] += sets
        row["rate"] = to_number(entry.get("rate_per_hour"))
        row["earnings"] += earned
        row["balance_paid"] += balance_paid
        row["entry_count"] += 1

    return {
        "total_minutes_by_category": minutes_by_category,
        "total_sets": total_sets,
        "total_earnings": total_earnings,
        "total_balance_paid": total_balance_paid,
        "remaining_balance": max(0, total_earnings - total_balance_paid),
        "per_owner_breakdown": list(by_owner.values()),
        "period_label": period_label(kind, reference_date),
        "record_count": len(selected),
    }


def summarize_moes_hours(
    records: Iterable[Dict[str, Any]],
    kind: str,
    reference_date,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Moe's summary: every work record in the period, billed at
    MOES_HOURLY_RATE per billable hour plus MOES_SET_BONUS per set.

    This total has nothing to do with the per-record moes_total field.
    """
    period = resolve_period(kind, reference_date)
    selected = filter_by_period(records, period, date_key="date", now=now)

    minutes_by_category = {category: 0 for category in WORK_TIME_FIELDS}
    total_sets = 0
    by_owner: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for record in selected:
        minutes = work_record_minutes(record)
        for category, value in minutes.items():
            minutes_by_category[category] += value
        sets = to_number(record.get("sets_added"))
        total_sets += sets

        owner_id = record.get("employee_id")
        row = by_owner.setdefault(owner_id, {
            "owner_id": owner_id,
            "name": f"Employee {owner_id}",
            "hours": 0,
            "sets": 0,
            "rate": MOES_HOURLY_RATE,
            "earnings": 0,
            "entry_count": 0,
        })
        row["hours"] += sum(minutes.values()) / 60
        row["sets"] += sets
        row["entry_count"] += 1

    for row in by_owner.values():
        row["earnings"] = moes_summary_total(row["hours"], row["sets"])

    total_billable_hours = sum(minutes_by_category.values()) / 60
    moes_total = moes_summary_total(total_billable_hours, total_sets)
    return {
        "total_minutes_by_category": minutes_by_category,
        "formatted_times": {
            category: format_minutes_as_time(value)
            for category, value in minutes_by_category.items()
        },
        "total_billable_hours": total_billable_hours,
        "total_sets": total_sets,
        "total_earnings": moes_total,
        "moes_total": moes_total,
        "per_owner_breakdown": list(by_owner.values()),
        "period_label": period_label(kind, reference_date),
        "record_count": len(selected),
    }


def hour_log_stats(
    entries: List[Dict[str, Any]],
    candidates: Iterable[Dict[str, Any]],
    per_set_bonus: float = PER_SET_BONUS_ENTRY_CREATION,
    statuses=STATS_CANDIDATE_STATUSES,
) -> Dict[str, Any]:
    """
    All-time admin statistics over hour-log entries.

    Totals cover every entry; the per-candidate rows and the average cover
    only candidates whose status is in `statuses` (Training and Probation
    by default).
    """
    total_hours = sum(to_number(e.get("hours_added")) for e in entries)
    total_breaks = sum(to_number(e.get("break_hours")) for e in entries)
    total_meetings = sum(to_number(e.get("meetings_hours")) for e in entries)
    total_sets = sum(to_number(e.get("sets_added")) for e in entries)
    total_payment = sum(hour_log_entry_total(e, per_set_bonus) for e in entries)
    total_balance_paid = sum(to_number(e.get("balance_paid")) for e in entries)

    rows = []
    for candidate in candidates:
        if candidate.get("status") not in statuses:
            continue
        own = [e for e in entries if e.get("candidate_id") == candidate.get("id")]
        rows.append({
            "owner_id": candidate.get("id"),
            "name": candidate.get("name"),
            "hours": sum(to_number(e.get("hours_added")) for e in own),
            "break_hours": sum(to_number(e.get("break_hours")) for e in own),
            "meetings_hours": sum(to_number(e.get("meetings_hours")) for e in own),
            "sets": sum(to_number(e.get("sets_added")) for e in own),
            "rate": to_number(candidate.get("rate_per_hour")),
            "earnings": sum(hour_log_entry_total(e, per_set_bonus) for e in own),
            "entry_count": len(own),
        })

    return {
        "total_hours": total_hours,
        "total_break_hours": total_breaks,
        "total_meetings_hours": total_meetings,
        "total_sets": total_sets,
        "total_earnings": total_payment,
        "total_balance_paid": total_balance_paid,
        "remaining_to_collect": max(0, total_payment - total_balance_paid),
        "average_earnings_per_candidate": average_per_owner(sum(r["earnings"] for r in rows), len(rows)),
        "per_owner_breakdown": rows,
        "top_by_earnings": _top(rows, lambda r: r["earnings"]),
        "top_by_hours": _top(rows, lambda r: r["hours"] + r["break_hours"] + r["meetings_hours"]),
    }
