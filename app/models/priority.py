"""
API request/response schemas for priority scoring.

Request bodies carry records the client already fetched from the document
store; `to_domain()` turns them into the core's immutable snapshots.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from app.core.priority import Patient, Visit


class PatientInput(BaseModel):
    """Patient record as sent by the client."""
    id: str = Field(..., min_length=1)
    name: str = ""
    age: Optional[int] = Field(default=None, ge=0)
    address: Optional[str] = None
    zone: Optional[str] = None
    comorbidities: List[str] = Field(default_factory=list)
    needs_prescription: bool = False
    next_prescription_due: Optional[datetime] = None
    admission_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_visit: Optional[datetime] = None
    last_visit_by: Optional[str] = None

    def to_domain(self) -> Patient:
        return Patient(
            id=self.id,
            name=self.name,
            age=self.age,
            address=self.address,
            zone=self.zone,
            comorbidities=tuple(self.comorbidities),
            needs_prescription=self.needs_prescription,
            next_prescription_due=self.next_prescription_due,
            admission_date=self.admission_date,
            created_at=self.created_at,
            last_visit=self.last_visit,
            last_visit_by=self.last_visit_by,
        )


class VisitInput(BaseModel):
    """Visit record as sent by the client."""
    id: str
    patient_id: str
    date: datetime
    professional_type: Optional[str] = None
    professional_id: Optional[str] = None
    notes: Optional[str] = None
    visit_request_id: Optional[str] = None
    prescription_delivered: Optional[bool] = None
    next_prescription_due: Optional[datetime] = None

    def to_domain(self) -> Visit:
        return Visit(
            id=self.id,
            patient_id=self.patient_id,
            date=self.date,
            professional_type=self.professional_type,
            professional_id=self.professional_id,
            notes=self.notes,
            visit_request_id=self.visit_request_id,
            prescription_delivered=self.prescription_delivered,
            next_prescription_due=self.next_prescription_due,
        )


class ScoreRequest(BaseModel):
    patient: PatientInput
    visits: Optional[List[VisitInput]] = Field(
        default=None,
        description="Visits of the current week; omit to score without cadence rules",
    )
    now: Optional[datetime] = None


class RankRequest(BaseModel):
    patients: List[PatientInput]
    visits: Optional[List[VisitInput]] = None
    now: Optional[datetime] = None


class CadenceRequest(BaseModel):
    patient: PatientInput
    visits: List[VisitInput] = Field(default_factory=list)
    now: Optional[datetime] = None


class PriorityResponse(BaseModel):
    patient_id: str
    patient_name: str
    priority_score: int = Field(ge=0, le=100)
    level: str
    reasons: List[str]
    reason_codes: List[str]
    prescription_due: bool


class RankResponse(BaseModel):
    total_patients: int
    high_count: int
    medium_count: int
    low_count: int
    prescription_alerts: List[str]
    patients: List[PriorityResponse]
    evaluated_at: str


class CadenceResponse(BaseModel):
    patient_id: str
    week_start: str
    week_end: str
    visits_today: int
    visits_this_week: int
    by_weekday: Dict[int, int]
    phase: Optional[str] = None
    required_visits: Optional[int] = None
    per_week: Optional[bool] = None
    requirement_met: Optional[bool] = None
    indicator_rows: int = 1


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
    timestamp: str
    timezone: str
