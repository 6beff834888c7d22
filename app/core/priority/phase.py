"""
Admission Phase Rules

Buckets a patient by days since admission and states how many visits each
phase requires.

  Phase            Days      Required   Counted over
  RECENT           0–6       2          today
  SECOND_WEEK      7–13      1          today
  AFTER_TWO_WEEKS  14+       1          this week
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from .base import AdmissionPhase, Patient, VisitCounts
from .dates import days_between, to_datetime

# ── Thresholds (days since admission) ────────────────────────────────────────
RECENT_MAX_DAYS      = 7    # < 7  → RECENT
SECOND_WEEK_MAX_DAYS = 14   # < 14 → SECOND_WEEK


@dataclass(frozen=True)
class CadenceRequirement:
    phase: AdmissionPhase
    required: int
    per_week: bool   # False: counted over today's visits

    def is_met(self, counts: VisitCounts) -> bool:
        done = counts.visits_this_week if self.per_week else counts.visits_today
        return done >= self.required

    @property
    def indicator_rows(self) -> int:
        """Rows of dots in the weekly visit indicator (one per daily visit due)."""
        return 1 if self.per_week else self.required


_REQUIREMENTS = {
    AdmissionPhase.RECENT:          CadenceRequirement(AdmissionPhase.RECENT, 2, per_week=False),
    AdmissionPhase.SECOND_WEEK:     CadenceRequirement(AdmissionPhase.SECOND_WEEK, 1, per_week=False),
    AdmissionPhase.AFTER_TWO_WEEKS: CadenceRequirement(AdmissionPhase.AFTER_TWO_WEEKS, 1, per_week=True),
}


def resolve_admission_ref(patient: Patient) -> Optional[datetime]:
    """Admission date when recorded, else record creation date, else None."""
    ref = patient.admission_date if patient.admission_date is not None else patient.created_at
    if ref is None:
        return None
    return to_datetime(ref, field="admission_date" if patient.admission_date is not None else "created_at")


def classify_phase(admission_ref: Any, now: Any) -> AdmissionPhase:
    """Phase for a patient admitted at `admission_ref`, evaluated at `now`."""
    ref = to_datetime(admission_ref, field="admission_ref")
    current = to_datetime(now, field="now")

    days = days_between(current, ref)
    if days < RECENT_MAX_DAYS:
        return AdmissionPhase.RECENT
    if days < SECOND_WEEK_MAX_DAYS:
        return AdmissionPhase.SECOND_WEEK
    return AdmissionPhase.AFTER_TWO_WEEKS


def cadence_requirement(phase: AdmissionPhase) -> CadenceRequirement:
    return _REQUIREMENTS[phase]
