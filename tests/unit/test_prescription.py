"""
Unit Tests for the prescription due evaluator.
"""
import pytest
from datetime import timedelta

from app.core.priority import Patient, is_prescription_active


class TestIsPrescriptionActive:

    def test_not_needed(self, now):
        patient = Patient(id="p", needs_prescription=False, next_prescription_due=now)
        assert is_prescription_active(patient, now) is False

    def test_needed_without_due_date(self, now):
        patient = Patient(id="p", needs_prescription=True)
        assert is_prescription_active(patient, now) is True

    @pytest.mark.parametrize("days_ahead, expected", [
        (0, True),
        (3, True),
        (7, True),
        (8, False),
        (30, False),
    ])
    def test_window(self, now, days_ahead, expected):
        patient = Patient(
            id="p", needs_prescription=True,
            next_prescription_due=now + timedelta(days=days_ahead),
        )
        assert is_prescription_active(patient, now) is expected

    @pytest.mark.parametrize("days_overdue", [1, 8, 365])
    def test_overdue_is_active(self, now, days_overdue):
        patient = Patient(
            id="p", needs_prescription=True,
            next_prescription_due=now - timedelta(days=days_overdue),
        )
        assert is_prescription_active(patient, now) is True
