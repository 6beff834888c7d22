"""
Patient Priority Core

Admission-phase cadence rules, weekly visit accounting, prescription
renewal alerts and the priority score that orders the team's patient list.

Usage:
    from app.core.priority import PriorityScoringEngine, Patient

    engine = PriorityScoringEngine()
    priority = engine.score(patient, now=now, visit_counts=counts)
    print(priority.priority_score, priority.reasons)
"""
from .base import (
    AdmissionPhase,
    Comorbidity,
    Patient,
    PatientPriority,
    PriorityLevel,
    PriorityReason,
    ProfessionalType,
    ReasonCode,
    Visit,
    VisitCounts,
    ZONES,
    professional_type_label,
)
from .cadence import aggregate, counts_by_patient
from .dates import current_time, days_between, to_datetime, week_bounds
from .engine import COMORBIDITY_WEIGHTS, PriorityScoringEngine
from .phase import CadenceRequirement, cadence_requirement, classify_phase, resolve_admission_ref
from .prescription import is_prescription_active

__all__ = [
    "AdmissionPhase",
    "CadenceRequirement",
    "Comorbidity",
    "COMORBIDITY_WEIGHTS",
    "Patient",
    "PatientPriority",
    "PriorityLevel",
    "PriorityReason",
    "PriorityScoringEngine",
    "ProfessionalType",
    "ReasonCode",
    "Visit",
    "VisitCounts",
    "ZONES",
    "aggregate",
    "cadence_requirement",
    "classify_phase",
    "counts_by_patient",
    "current_time",
    "days_between",
    "is_prescription_active",
    "professional_type_label",
    "resolve_admission_ref",
    "to_datetime",
    "week_bounds",
]
