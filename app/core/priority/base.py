"""
Priority Core: Base Types

Snapshots consumed from the document store (Patient, Visit), the derived
visit counts, and the PatientPriority produced by the scoring engine.
Everything here is immutable: the core reads snapshots and returns new
values, it never writes back.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.utils import HomeCareError
from .dates import to_datetime


class AdmissionPhase(str, Enum):
    """
    Cadence phase since admission.

    RECENT          – fewer than 7 days since admission
    SECOND_WEEK     – 7 to 13 days
    AFTER_TWO_WEEKS – 14 days or more
    """
    RECENT          = "recent"
    SECOND_WEEK     = "second_week"
    AFTER_TWO_WEEKS = "after_two_weeks"


class Comorbidity(str, Enum):
    """Comorbidity kinds known to the scorer. Any other label is OTHER."""
    TERMINAL              = "Terminal"
    MECHANICAL_VENTILATION = "Ventilação Mecânica"
    ONCOLOGIC             = "Oncológico"
    OTHER                 = "other"

    @classmethod
    def from_label(cls, label: str) -> "Comorbidity":
        for member in cls:
            if member is not cls.OTHER and member.value == label:
                return member
        return cls.OTHER


class ProfessionalType(str, Enum):
    MEDICO             = "Medico"
    FISIOTERAPEUTA     = "Fisioterapeuta"
    FONOAUDIOLOGO      = "Fonoaudiólogo"
    ENFERMEIRO         = "Enfermeiro"
    PSICOLOGO          = "Psicologo"
    ASSISTENTE_SOCIAL  = "AssistenteSocial"
    TECNICO_ENFERMAGEM = "TecnicoEnfermagem"

    @property
    def label(self) -> str:
        return _PROFESSIONAL_LABELS[self]


_PROFESSIONAL_LABELS = {
    ProfessionalType.MEDICO:             "Médico",
    ProfessionalType.FISIOTERAPEUTA:     "Fisioterapeuta",
    ProfessionalType.FONOAUDIOLOGO:      "Fonoaudiólogo",
    ProfessionalType.ENFERMEIRO:         "Enfermeiro",
    ProfessionalType.PSICOLOGO:          "Psicólogo",
    ProfessionalType.ASSISTENTE_SOCIAL:  "Assistente Social",
    ProfessionalType.TECNICO_ENFERMAGEM: "Técnico de Enfermagem",
}


def professional_type_label(value: Optional[str]) -> str:
    """Display label for a stored professional type; unknown values echo back."""
    if value is None:
        return ""
    try:
        return ProfessionalType(value).label
    except ValueError:
        return value


ZONES = ("Zona Norte", "Zona Leste", "Zona Sul", "Zona Oeste")


class ReasonCode(str, Enum):
    CADENCE_MET      = "CADENCE_MET"
    RECENT_ADMISSION = "RECENT_ADMISSION"
    COMORBIDITY      = "COMORBIDITY"
    NO_VISIT_TODAY   = "NO_VISIT_TODAY"
    VISITS_TODAY     = "VISITS_TODAY"


class PriorityLevel(str, Enum):
    """Display band of a priority score (badge colour in the patient list)."""
    HIGH   = "high"     # >= 50
    MEDIUM = "medium"   # >= 25
    LOW    = "low"

    @classmethod
    def for_score(cls, score: int) -> "PriorityLevel":
        if score >= 50:
            return cls.HIGH
        if score >= 25:
            return cls.MEDIUM
        return cls.LOW


def _optional_date(data: Mapping[str, Any], key: str) -> Optional[datetime]:
    # Empty strings from cleared form fields count as "not entered"
    value = data.get(key)
    if value is None or value == "":
        return None
    return to_datetime(value, field=key)


@dataclass(frozen=True)
class Visit:
    """One registered visit. Created once, never edited."""
    id: str
    patient_id: str
    date: datetime
    professional_type: Optional[str] = None
    professional_id: Optional[str] = None
    notes: Optional[str] = None
    visit_request_id: Optional[str] = None
    prescription_delivered: Optional[bool] = None
    next_prescription_due: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Visit":
        """Build a Visit from a store record (camelCase keys)."""
        # A visit without a date cannot be placed in any week: to_datetime raises
        return cls(
            id=doc_id,
            patient_id=data.get("patientId", ""),
            date=to_datetime(data.get("date"), field="date"),
            professional_type=data.get("professionalType"),
            professional_id=data.get("professionalId"),
            notes=data.get("notes") or None,
            visit_request_id=data.get("visitRequestId") or None,
            prescription_delivered=data.get("prescriptionDelivered"),
            next_prescription_due=_optional_date(data, "nextPrescriptionDue"),
        )


@dataclass(frozen=True)
class Patient:
    """
    Patient snapshot as read from the store.

    `admission_date` is the specific admission reference; `created_at` is
    the record creation date, used as a proxy when no admission date was
    entered.
    """
    id: str
    name: str = ""
    age: Optional[int] = None
    address: Optional[str] = None
    zone: Optional[str] = None
    comorbidities: Tuple[str, ...] = ()
    needs_prescription: bool = False
    next_prescription_due: Optional[datetime] = None
    admission_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_visit: Optional[datetime] = None
    last_visit_by: Optional[str] = None
    visit_ids: Tuple[str, ...] = ()
    visit_request_ids: Tuple[str, ...] = ()

    def __post_init__(self):
        # Lists from callers are stored as tuples
        for name in ("comorbidities", "visit_ids", "visit_request_ids"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value or ()))

    @classmethod
    def from_document(cls, doc_id: str, data: Mapping[str, Any]) -> "Patient":
        """Build a Patient from a store record (camelCase keys)."""
        return cls(
            id=doc_id,
            name=data.get("name") or "",
            age=data.get("age"),
            address=data.get("address"),
            zone=data.get("zone"),
            comorbidities=tuple(data.get("comorbidities") or ()),
            needs_prescription=bool(data.get("needsPrescription") or False),
            next_prescription_due=_optional_date(data, "nextPrescriptionDue"),
            admission_date=_optional_date(data, "admissionDate"),
            created_at=_optional_date(data, "createdAt"),
            updated_at=_optional_date(data, "updatedAt"),
            last_visit=_optional_date(data, "lastVisit"),
            last_visit_by=data.get("lastVisitBy"),
            visit_ids=tuple(data.get("visits") or ()),
            visit_request_ids=tuple(data.get("visitRequests") or ()),
        )

    def with_visit(self, visit: Visit) -> "Patient":
        """
        Snapshot after registering `visit`.

        Records last visit date and professional, appends the visit id,
        drops the fulfilled visit request and, when a prescription was
        delivered with a next due date, moves `next_prescription_due`.
        """
        if visit.patient_id != self.id:
            raise HomeCareError(
                f"Visit {visit.id} belongs to patient {visit.patient_id}, not {self.id}",
                code="PATIENT_MISMATCH",
                details={"patient_id": self.id, "visit_patient_id": visit.patient_id},
            )

        changes: Dict[str, Any] = {
            "last_visit": visit.date,
            "last_visit_by": visit.professional_type,
            "visit_ids": self.visit_ids + (visit.id,),
            "updated_at": visit.date,
        }
        if visit.prescription_delivered and visit.next_prescription_due is not None:
            changes["next_prescription_due"] = visit.next_prescription_due
        if visit.visit_request_id:
            changes["visit_request_ids"] = tuple(
                rid for rid in self.visit_request_ids if rid != visit.visit_request_id
            )
        return replace(self, **changes)


@dataclass(frozen=True)
class VisitCounts:
    """Visit tallies for one patient over one Monday–Sunday week."""
    visits_today: int = 0
    visits_this_week: int = 0
    # weekday index (Monday = 0) -> visits that day; read-only once built
    by_weekday: Mapping[int, int] = field(
        default_factory=lambda: {d: 0 for d in range(7)}, hash=False
    )

    def __post_init__(self):
        object.__setattr__(self, "by_weekday", MappingProxyType(dict(self.by_weekday)))

    def to_dict(self) -> dict:
        return {
            "visits_today": self.visits_today,
            "visits_this_week": self.visits_this_week,
            "by_weekday": dict(self.by_weekday),
        }


@dataclass(frozen=True)
class PriorityReason:
    """One scoring contribution: a stable code plus the text shown to users."""
    code: ReasonCode
    text: str


@dataclass(frozen=True)
class PatientPriority:
    """Score of one patient at one instant, with the reasons behind it."""
    patient: Patient
    priority_score: int
    reason_entries: Tuple[PriorityReason, ...] = ()
    # Prescription alert badge; does not feed the score
    prescription_due: bool = False

    @property
    def reasons(self) -> List[str]:
        return [r.text for r in self.reason_entries]

    @property
    def reason_codes(self) -> List[ReasonCode]:
        return [r.code for r in self.reason_entries]

    @property
    def level(self) -> PriorityLevel:
        return PriorityLevel.for_score(self.priority_score)

    def to_dict(self) -> dict:
        return {
            "patient_id": self.patient.id,
            "patient_name": self.patient.name,
            "priority_score": self.priority_score,
            "level": self.level.value,
            "reasons": self.reasons,
            "reason_codes": [c.value for c in self.reason_codes],
            "prescription_due": self.prescription_due,
        }
