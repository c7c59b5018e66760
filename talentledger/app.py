import argparse
import json
from datetime import date
from pathlib import Path

from . import __version__
from .actions import (
    CANDIDATES,
    HOUR_LOG_ENTRIES,
    WORK_RECORDS,
    add_hour_log_entry,
    clear_payments_for_entries,
    delete_hour_log_entry,
    import_records,
    mark_period_as_paid,
    mark_records_as_paid,
    record_client_payment,
    update_hour_log_entry,
)
from .config import get_db_path, get_log_dir, get_log_level
from .earnings import (
    format_money,
    hour_log_stats,
    summarize_hour_log,
    summarize_moes_hours,
    summarize_work_records,
)
from .env import load_env
from .errors import LedgerError, PartialWriteError
from .logger import get_logger
from .periods import PeriodKind
from .storage import RecordStore
from .timeparse import format_minutes_as_time

PERIOD_CHOICES = [k.value for k in PeriodKind]


def _split_ids(value: str) -> list:
    return [v.strip() for v in value.split(",") if v.strip()] if value else []


def _reference_date(args: argparse.Namespace) -> date:
    if not args.date:
        return date.today()
    try:
        return date.fromisoformat(args.date)
    except ValueError:
        raise SystemExit(f"Invalid --date (expected YYYY-MM-DD): {args.date}")


def _store(args: argparse.Namespace) -> RecordStore:
    return RecordStore(Path(args.db))


def _owner_ids(store: RecordStore, args: argparse.Namespace) -> list:
    if args.employees:
        return _split_ids(args.employees)
    if args.client:
        return [c["id"] for c in store.select_by_owner(CANDIDATES, args.client)]
    raise SystemExit("Provide --client or --employees")


def _print_breakdown(rows: list) -> None:
    for row in rows:
        print(
            f"  {row['name']}: {row['hours']:.2f}h, {row['sets']:g} sets, "
            f"rate {format_money(row['rate'])}, earned {format_money(row['earnings'])} "
            f"({row['entry_count']} entries)"
        )


def cmd_init_db(args: argparse.Namespace) -> None:
    _store(args)
    print(f"Database ready: {args.db}")


def cmd_import(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    counts = import_records(_store(args), data)
    print(
        f"Done. candidates={counts['candidates']} hour_log_entries={counts['hour_log_entries']} "
        f"work_records={counts['work_records']} skipped={counts['skipped']}"
    )


def cmd_log_hours(args: argparse.Namespace) -> None:
    fields = {
        "candidate_id": args.candidate,
        "hours_added": args.hours,
        "break_hours": args.break_hours,
        "meetings_hours": args.meetings_hours,
        "sets_added": args.sets,
        "notes": args.notes,
    }
    if args.rate is not None:
        fields["rate_per_hour"] = args.rate
    if args.date:
        fields["entry_date"] = args.date
    outcome = add_hour_log_entry(_store(args), fields)
    entry = outcome["entry"]
    print(f"Entry: {entry['id']}")
    print(f"Total: {format_money(outcome['entry_total'])}")
    print(f"Active hours: {entry['active_hours']:.2f}  Sets: {entry['number_of_sets']}")


def cmd_edit_entry(args: argparse.Namespace) -> None:
    changes = {}
    if args.hours is not None:
        changes["hours_added"] = args.hours
    if args.sets is not None:
        changes["sets_added"] = args.sets
    if args.rate is not None:
        changes["rate_per_hour"] = args.rate
    if args.notes is not None:
        changes["notes"] = args.notes
    if args.date:
        changes["entry_date"] = args.date
    if not changes:
        raise SystemExit("Nothing to change.")
    outcome = update_hour_log_entry(_store(args), args.id, changes)
    print(f"Updated: {outcome['entry']['id']}")


def cmd_delete_entry(args: argparse.Namespace) -> None:
    outcome = delete_hour_log_entry(_store(args), args.id)
    print(f"Deleted: {outcome['entry']['id']}")


def cmd_summary(args: argparse.Namespace) -> None:
    store = _store(args)
    owners = _owner_ids(store, args)
    names = {c["id"]: c["name"] for c in store.select_all(CANDIDATES)}
    summary = summarize_work_records(
        store.select_all(WORK_RECORDS),
        owners,
        args.period,
        _reference_date(args),
        want_paid=args.paid,
        names=names,
    )
    view = "Paid history" if args.paid else "Pending"
    print(f"{summary['period_label']} ({view}, {summary['record_count']} records)")
    for category, minutes in summary["total_minutes_by_category"].items():
        print(f"  {category.capitalize()} time: {format_minutes_as_time(minutes)}")
    print(f"  Sets: {summary['total_sets']:g}")
    print(f"Total: {format_money(summary['total_earnings'])}")
    print(f"Moes total: {format_money(summary['moes_total'])}")
    print(f"Combined: {format_money(summary['combined_total'])}")
    _print_breakdown(summary["per_owner_breakdown"])


def cmd_hours_summary(args: argparse.Namespace) -> None:
    store = _store(args)
    owners = _owner_ids(store, args) if (args.client or args.employees) else None
    names = {c["id"]: c["name"] for c in store.select_all(CANDIDATES)}
    summary = summarize_hour_log(
        store.select_all(HOUR_LOG_ENTRIES),
        args.period,
        _reference_date(args),
        owner_ids=owners,
        names=names,
    )
    print(f"{summary['period_label']} ({summary['record_count']} entries)")
    print(f"Total: {format_money(summary['total_earnings'])}")
    print(f"Balance paid: {format_money(summary['total_balance_paid'])}")
    print(f"Remaining: {format_money(summary['remaining_balance'])}")
    _print_breakdown(summary["per_owner_breakdown"])


def cmd_moes_summary(args: argparse.Namespace) -> None:
    store = _store(args)
    summary = summarize_moes_hours(store.select_all(WORK_RECORDS), args.period, _reference_date(args))
    print(f"{summary['period_label']} ({summary['record_count']} records)")
    for category, text in summary["formatted_times"].items():
        print(f"  {category.capitalize()} time: {text}")
    print(f"Billable hours: {summary['total_billable_hours']:.2f}")
    print(f"Sets: {summary['total_sets']:g}")
    print(f"Moe's total: {format_money(summary['moes_total'])}")


def cmd_stats(args: argparse.Namespace) -> None:
    store = _store(args)
    stats = hour_log_stats(store.select_all(HOUR_LOG_ENTRIES), store.select_all(CANDIDATES))
    print(f"Total: {format_money(stats['total_earnings'])}")
    print(f"Balance paid: {format_money(stats['total_balance_paid'])}")
    print(f"Remaining to collect: {format_money(stats['remaining_to_collect'])}")
    print(f"Average per candidate: {format_money(stats['average_earnings_per_candidate'])}")
    if stats["top_by_earnings"]:
        print("Top by earnings:")
        _print_breakdown(stats["top_by_earnings"])


def cmd_mark_paid(args: argparse.Namespace) -> None:
    store = _store(args)
    if args.ids:
        ids = mark_records_as_paid(store, _split_ids(args.ids))
    else:
        ids = mark_period_as_paid(store, _owner_ids(store, args), args.period, _reference_date(args))
    print(f"Marked {len(ids)} records as paid.")


def cmd_record_payment(args: argparse.Namespace) -> None:
    written = record_client_payment(_store(args), _split_ids(args.entries), args.amount)
    for update in written:
        print(f"[paid] {update['id']} balance={format_money(update['balance_paid'])}")
    print(f"Done. entries={len(written)}")


def cmd_clear_payments(args: argparse.Namespace) -> None:
    cleared = clear_payments_for_entries(_store(args), _split_ids(args.entries))
    print(f"Cleared {len(cleared)} entries.")


def _add_period_args(p: argparse.ArgumentParser, default: str) -> None:
    p.add_argument("--period", choices=PERIOD_CHOICES, default=default, help=f"Period kind (default: {default})")
    p.add_argument("--date", help="Reference date YYYY-MM-DD (default: today)")


def _add_owner_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--client", help="Client id; covers all of its candidates")
    p.add_argument("--employees", help="Comma-separated employee/candidate ids")


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="talentledger", description="Recruiting portal billing ledger")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=str(get_db_path()), help="Path to SQLite database (default: TALENTLEDGER_DB_PATH or data/ledger.db)")

    subparsers = parser.add_subparsers(dest="command")
    init = subparsers.add_parser("init-db", help="Create the database tables")
    init.set_defaults(func=cmd_init_db)

    imp = subparsers.add_parser("import", help="Import candidates, hour entries and work records from JSON")
    imp.add_argument("--input", required=True, help="Path to JSON export")
    imp.set_defaults(func=cmd_import)

    log = subparsers.add_parser("log-hours", help="Log hours for a candidate")
    log.add_argument("--candidate", required=True, help="Candidate id")
    log.add_argument("--hours", type=float, required=True, help="Hours worked (decimal)")
    log.add_argument("--break-hours", type=float, default=0, help="Break hours (decimal)")
    log.add_argument("--meetings-hours", type=float, default=0, help="Meeting hours (decimal)")
    log.add_argument("--sets", type=int, default=0, help="Sets added in this entry")
    log.add_argument("--rate", type=float, help="Rate per hour (default: candidate's rate)")
    log.add_argument("--date", help="Entry date YYYY-MM-DD (default: now)")
    log.add_argument("--notes", help="Optional notes")
    log.set_defaults(func=cmd_log_hours)

    edit = subparsers.add_parser("edit-entry", help="Edit an hour entry")
    edit.add_argument("--id", required=True, help="Entry id")
    edit.add_argument("--hours", type=float, help="New hours_added")
    edit.add_argument("--sets", type=int, help="New sets_added")
    edit.add_argument("--rate", type=float, help="New rate per hour")
    edit.add_argument("--date", help="New entry date YYYY-MM-DD")
    edit.add_argument("--notes", help="New notes")
    edit.set_defaults(func=cmd_edit_entry)

    dele = subparsers.add_parser("delete-entry", help="Delete an hour entry")
    dele.add_argument("--id", required=True, help="Entry id")
    dele.set_defaults(func=cmd_delete_entry)

    summ = subparsers.add_parser("summary", help="Client payment summary over work records")
    _add_owner_args(summ)
    _add_period_args(summ, "month")
    summ.add_argument("--paid", action="store_true", help="Show paid history instead of pending")
    summ.set_defaults(func=cmd_summary)

    hrs = subparsers.add_parser("hours-summary", help="Hours summary over hour entries")
    _add_owner_args(hrs)
    _add_period_args(hrs, "day")
    hrs.set_defaults(func=cmd_hours_summary)

    moes = subparsers.add_parser("moes-summary", help="Moe's hours summary over work records")
    _add_period_args(moes, "month")
    moes.set_defaults(func=cmd_moes_summary)

    stats = subparsers.add_parser("stats", help="All-time hour entry statistics")
    stats.set_defaults(func=cmd_stats)

    paid = subparsers.add_parser("mark-paid", help="Mark work records as paid")
    paid.add_argument("--ids", help="Comma-separated record ids (batch members are included)")
    _add_owner_args(paid)
    _add_period_args(paid, "month")
    paid.set_defaults(func=cmd_mark_paid)

    pay = subparsers.add_parser("record-payment", help="Record a client payment against hour entries")
    pay.add_argument("--entries", required=True, help="Comma-separated entry ids")
    pay.add_argument("--amount", required=True, help="Payment amount")
    pay.set_defaults(func=cmd_record_payment)

    clr = subparsers.add_parser("clear-payments", help="Reset balance paid on hour entries")
    clr.add_argument("--entries", required=True, help="Comma-separated entry ids")
    clr.set_defaults(func=cmd_clear_payments)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    get_logger(level=get_log_level(), log_dir=get_log_dir())

    if hasattr(args, "func"):
        try:
            args.func(args)
        except PartialWriteError as e:
            raise SystemExit(f"Partial write: {e}. Pending candidate update: {e.pending_update}")
        except LedgerError as e:
            raise SystemExit(str(e))
        return

    parser.print_help()


if __name__ == "__main__":
    main()
