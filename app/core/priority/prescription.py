"""
Prescription Due Evaluator

A patient who needs prescriptions shows the renewal alert when no next
due date is known, when the due date has passed, or when it is at most
PRESCRIPTION_ALERT_DAYS away.
"""
from __future__ import annotations

from typing import Any, Optional

from .base import Patient
from .dates import current_time, days_between, to_datetime

PRESCRIPTION_ALERT_DAYS = 7


def is_prescription_active(patient: Patient, now: Optional[Any] = None) -> bool:
    if not patient.needs_prescription:
        return False
    if patient.next_prescription_due is None:
        return True

    due = to_datetime(patient.next_prescription_due, field="next_prescription_due")
    current = to_datetime(now, field="now") if now is not None else current_time()

    # Negative when overdue, which also satisfies the window
    days_until_due = days_between(due, current)
    return days_until_due <= PRESCRIPTION_ALERT_DAYS
