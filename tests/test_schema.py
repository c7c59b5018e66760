"""
Tests for input validation.
"""

from talentledger.schema import (
    validate_entry_changes,
    validate_hour_log_entry,
    validate_payment_amount,
    validate_work_record,
)


class TestValidateHourLogEntry:
    """Test new hour entry validation."""

    def test_valid_entry(self):
        """Valid entry should have no errors."""
        errors = validate_hour_log_entry({"candidate_id": "c1", "hours_added": 2, "sets_added": 1})
        assert errors == []

    def test_missing_candidate(self):
        """Missing candidate_id should error."""
        errors = validate_hour_log_entry({"hours_added": 2})
        assert any("candidate_id" in err for err in errors)

    def test_blank_candidate(self):
        """Blank candidate_id should error."""
        errors = validate_hour_log_entry({"candidate_id": "  ", "hours_added": 2})
        assert len(errors) == 1

    def test_missing_hours(self):
        """Missing hours_added should error."""
        errors = validate_hour_log_entry({"candidate_id": "c1"})
        assert any("hours_added" in err for err in errors)

    def test_negative_values(self):
        """Negative numbers should error per field."""
        errors = validate_hour_log_entry({"candidate_id": "c1", "hours_added": -1, "rate_per_hour": -5})
        assert len(errors) == 2
        assert all("negative" in err for err in errors)

    def test_non_numeric_hours(self):
        """Non-numeric hours should error."""
        errors = validate_hour_log_entry({"candidate_id": "c1", "hours_added": "two"})
        assert any("must be a number" in err for err in errors)

    def test_fractional_sets(self):
        """Sets must be whole numbers."""
        errors = validate_hour_log_entry({"candidate_id": "c1", "hours_added": 1, "sets_added": 1.5})
        assert any("whole number" in err for err in errors)

    def test_notes_must_be_string(self):
        """Notes must be a string when given."""
        errors = validate_hour_log_entry({"candidate_id": "c1", "hours_added": 1, "notes": 42})
        assert any("notes" in err for err in errors)


class TestValidateEntryChanges:
    """Test hour entry edit validation."""

    def test_valid_changes(self):
        """Editable fields with valid values pass."""
        assert validate_entry_changes({"hours_added": 3, "notes": "fixed"}) == []

    def test_owner_cannot_change(self):
        """candidate_id cannot be edited."""
        errors = validate_entry_changes({"candidate_id": "c2"})
        assert errors == ["Field 'candidate_id' cannot be changed"]


    def test_unknown_fields_rejected(self):
        """Fields outside the editable set, like the primary key, are refused."""
        errors = validate_entry_changes({"id": "other", "created_at": "2025-01-01"})
        assert errors == [
            "Field 'created_at' cannot be changed",
            "Field 'id' cannot be changed",
        ]

    def test_every_editable_field_accepted(self):
        """All user-editable entry fields pass validation."""
        changes = {
            "hours_added": 1, "sets_added": 2, "rate_per_hour": 10, "break_hours": 0.5,
            "meetings_hours": 0.25, "balance_paid": 5, "notes": "ok", "entry_date": "2025-01-20",
            "active_hours": 12, "number_of_sets": 3,
        }
        assert validate_entry_changes(changes) == []


class TestValidateWorkRecord:
    """Test incoming work record validation."""

    def test_valid_record(self, work_records):
        """Sample work records should all be valid."""
        for record in work_records:
            assert validate_work_record(record) == []

    def test_missing_employee(self):
        """Missing employee_id should error."""
        assert validate_work_record({"talk_time": 10}) != []

    def test_bad_status(self):
        """Unknown payment status should error."""
        errors = validate_work_record({"employee_id": "e1", "payment_status": "refunded"})
        assert any("payment_status" in err for err in errors)


class TestValidatePaymentAmount:
    """Test payment amount validation."""

    def test_valid(self):
        """Positive amounts within what is owed pass."""
        assert validate_payment_amount(50, 100) == []
        assert validate_payment_amount("100", 100) == []

    def test_cent_rounding_tolerated(self):
        """Float noise below a cent is ignored."""
        assert validate_payment_amount(62.5, 62.499999999) == []

    def test_not_positive(self):
        """Zero should be rejected."""
        assert validate_payment_amount(0, 100) == ["Please enter a valid amount"]

    def test_not_a_number(self):
        """Text and NaN should be rejected."""
        assert validate_payment_amount("ten", 100) == ["Please enter a valid amount"]
        assert validate_payment_amount(float("nan"), 100) == ["Please enter a valid amount"]

    def test_exceeds_owed(self):
        """Amounts above what is owed should error."""
        errors = validate_payment_amount(150, 100)
        assert errors == ["Payment amount (150.00) cannot exceed total owed (100.00)"]
