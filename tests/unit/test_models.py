"""
Unit Tests for patient/visit snapshots and their store mappings.
"""
import pytest
from datetime import datetime, timedelta, timezone

from app.core.priority import (
    Comorbidity,
    Patient,
    PriorityLevel,
    ProfessionalType,
    Visit,
    VisitCounts,
    professional_type_label,
)
from app.utils import HomeCareError, InvalidDateError


class TestPatientFromDocument:
    """Mapping of store records (camelCase) to snapshots."""

    def test_full_record(self):
        patient = Patient.from_document("abc", {
            "name": "Maria",
            "age": 81,
            "zone": "Zona Sul",
            "comorbidities": ["Terminal", "Diabetes"],
            "needsPrescription": True,
            "nextPrescriptionDue": "2026-10-20T12:00:00Z",
            "admissionDate": datetime(2026, 10, 1, 9, 0, tzinfo=timezone.utc),
            "createdAt": "2026-09-30T10:00:00Z",
            "visits": ["v1"],
            "visitRequests": ["r1", "r2"],
        })
        assert patient.id == "abc"
        assert patient.comorbidities == ("Terminal", "Diabetes")
        assert patient.needs_prescription is True
        assert patient.next_prescription_due.tzinfo is not None
        assert patient.admission_date.hour == 6   # São Paulo local time
        assert patient.visit_request_ids == ("r1", "r2")

    def test_sparse_record_defaults(self):
        patient = Patient.from_document("x", {"name": "João"})
        assert patient.comorbidities == ()
        assert patient.needs_prescription is False
        assert patient.admission_date is None
        assert patient.created_at is None
        assert patient.visit_ids == ()

    def test_empty_date_strings_are_absent(self):
        patient = Patient.from_document("x", {"admissionDate": "", "createdAt": ""})
        assert patient.admission_date is None
        assert patient.created_at is None

    def test_invalid_date_raises(self):
        with pytest.raises(InvalidDateError) as exc_info:
            Patient.from_document("x", {"admissionDate": "ontem"})
        assert exc_info.value.field == "admissionDate"

    def test_lists_become_tuples(self):
        patient = Patient(id="p", comorbidities=["Terminal"])
        assert patient.comorbidities == ("Terminal",)


class TestVisitFromDocument:

    def test_maps_fields(self):
        visit = Visit.from_document("v1", {
            "patientId": "p",
            "professionalType": "Fisioterapeuta",
            "date": "2026-10-14T13:00:00-03:00",
            "notes": "",
            "prescriptionDelivered": True,
            "nextPrescriptionDue": "2026-11-14",
        })
        assert visit.patient_id == "p"
        assert visit.date.hour == 13
        assert visit.notes is None
        assert visit.next_prescription_due.day == 14

    def test_missing_date_raises(self):
        with pytest.raises(InvalidDateError):
            Visit.from_document("v1", {"patientId": "p"})


class TestWithVisit:
    """Snapshot after registering a visit."""

    def test_updates_last_visit_and_ids(self, now):
        patient = Patient(id="p", visit_ids=("v0",), visit_request_ids=("r1", "r2"))
        visit = Visit(id="v1", patient_id="p", date=now, professional_type="Enfermeiro",
                      visit_request_id="r1")
        updated = patient.with_visit(visit)
        assert updated.last_visit == now
        assert updated.last_visit_by == "Enfermeiro"
        assert updated.visit_ids == ("v0", "v1")
        assert updated.visit_request_ids == ("r2",)
        # Original snapshot untouched
        assert patient.visit_ids == ("v0",)

    def test_propagates_next_prescription_due(self, now):
        patient = Patient(id="p", needs_prescription=True, next_prescription_due=now)
        due = now + timedelta(days=30)
        visit = Visit(id="v1", patient_id="p", date=now,
                      prescription_delivered=True, next_prescription_due=due)
        assert patient.with_visit(visit).next_prescription_due == due

    def test_due_date_kept_without_delivery(self, now):
        patient = Patient(id="p", next_prescription_due=now)
        visit = Visit(id="v1", patient_id="p", date=now,
                      next_prescription_due=now + timedelta(days=30))
        assert patient.with_visit(visit).next_prescription_due == now

    def test_other_patient_rejected(self, now):
        with pytest.raises(HomeCareError) as exc_info:
            Patient(id="p").with_visit(Visit(id="v", patient_id="q", date=now))
        assert exc_info.value.code == "PATIENT_MISMATCH"


class TestVisitCounts:

    def test_hashable(self):
        counts = VisitCounts(visits_today=1, visits_this_week=2)
        assert hash(counts) == hash(VisitCounts(visits_today=1, visits_this_week=2))
        assert len({counts, VisitCounts(visits_today=1, visits_this_week=2)}) == 1

    def test_by_weekday_is_read_only(self):
        source = {d: 0 for d in range(7)}
        counts = VisitCounts(by_weekday=source)
        with pytest.raises(TypeError):
            counts.by_weekday[0] = 5
        source[0] = 5
        assert counts.by_weekday[0] == 0
        assert counts.to_dict()["by_weekday"] == {d: 0 for d in range(7)}


class TestEnums:

    def test_comorbidity_from_label(self):
        assert Comorbidity.from_label("Terminal") is Comorbidity.TERMINAL
        assert Comorbidity.from_label("Ventilação Mecânica") is Comorbidity.MECHANICAL_VENTILATION
        assert Comorbidity.from_label("Oncológico") is Comorbidity.ONCOLOGIC
        assert Comorbidity.from_label("other") is Comorbidity.OTHER
        assert Comorbidity.from_label("Asma") is Comorbidity.OTHER

    def test_professional_labels(self):
        assert ProfessionalType.TECNICO_ENFERMAGEM.label == "Técnico de Enfermagem"
        assert professional_type_label("Psicologo") == "Psicólogo"
        assert professional_type_label("medico") == "medico"
        assert professional_type_label(None) == ""

    @pytest.mark.parametrize("score, level", [
        (0, PriorityLevel.LOW), (24, PriorityLevel.LOW),
        (25, PriorityLevel.MEDIUM), (49, PriorityLevel.MEDIUM),
        (50, PriorityLevel.HIGH), (100, PriorityLevel.HIGH),
    ])
    def test_priority_level_bands(self, score, level):
        assert PriorityLevel.for_score(score) is level
