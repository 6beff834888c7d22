"""
Pytest Configuration and Fixtures

Shared fixtures for the priority core tests. All instants are naive clinic
wall-clock times; the core localises them to the configured timezone.
"""
import pytest
from datetime import datetime, timedelta
from pathlib import Path
import sys

# Add app to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.priority import Patient, Visit, VisitCounts


@pytest.fixture
def now() -> datetime:
    """Wednesday 2026-10-14, 15:00."""
    return datetime(2026, 10, 14, 15, 0)


@pytest.fixture
def make_patient(now):
    """Factory for patients admitted `days_ago` days before `now`."""
    def _make(pid: str = "p-1", days_ago=0, **kwargs) -> Patient:
        if days_ago is not None and "admission_date" not in kwargs:
            kwargs["admission_date"] = now - timedelta(days=days_ago)
        return Patient(id=pid, name=kwargs.pop("name", f"Paciente {pid}"), **kwargs)
    return _make


@pytest.fixture
def make_visit(now):
    """Factory for visits at `now` shifted by `delta`."""
    counter = {"n": 0}

    def _make(patient_id: str = "p-1", delta: timedelta = timedelta(0), **kwargs) -> Visit:
        counter["n"] += 1
        return Visit(
            id=kwargs.pop("id", f"v-{counter['n']}"),
            patient_id=patient_id,
            date=kwargs.pop("date", now + delta),
            professional_type=kwargs.pop("professional_type", "Medico"),
            **kwargs,
        )
    return _make


@pytest.fixture
def no_visits() -> VisitCounts:
    return VisitCounts(visits_today=0, visits_this_week=0)
