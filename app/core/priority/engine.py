"""
Priority Scoring Engine

Scores each patient 0–100 so the team list shows who needs a visit most.

Rules, evaluated in this order (reasons are emitted in the same order):
    1. Cadence met for the admission phase  → score 0, stop
    2. Recently admitted (< 1 week)         → +40
    3. Comorbidities, in stored order       → Terminal +30,
                                              Ventilação Mecânica +20,
                                              Oncológico +10
    4. No visit today                       → +70
       n visits today                       → −25 × n
    5. Clamp to [0, 100]

The +70 outweighs every comorbidity combined (60), so a patient nobody
has seen today always ranks above one who has been seen, unless rule 1
already zeroed them.

Usage:
    from app.core.priority import PriorityScoringEngine

    engine = PriorityScoringEngine()
    ranked = engine.rank_with_visits(patients, week_visits, now=now)
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from app.utils import get_logger
from .base import (
    AdmissionPhase,
    Comorbidity,
    Patient,
    PatientPriority,
    PriorityLevel,
    PriorityReason,
    ReasonCode,
    Visit,
    VisitCounts,
)
from .cadence import counts_by_patient
from .dates import current_time, to_datetime
from .phase import cadence_requirement, classify_phase, resolve_admission_ref
from .prescription import is_prescription_active

logger = get_logger(__name__)

# ── Weights ──────────────────────────────────────────────────────────────────
MAX_SCORE             = 100
MIN_SCORE             = 0
RECENT_ADMISSION_BONUS = 40
NO_VISIT_TODAY_BONUS  = 70
VISIT_TODAY_PENALTY   = 25

COMORBIDITY_WEIGHTS = {
    Comorbidity.TERMINAL:               30,
    Comorbidity.MECHANICAL_VENTILATION: 20,
    Comorbidity.ONCOLOGIC:              10,
    Comorbidity.OTHER:                  0,
}

CADENCE_MET_TEXT      = "Atendimentos do dia concluídos"
RECENT_ADMISSION_TEXT = "Recém admitido (< 1 semana)"
NO_VISIT_TODAY_TEXT   = "Sem atendimento no dia"


def _visits_today_text(count: int) -> str:
    return f"{count} visita(s) hoje"


class PriorityScoringEngine:
    """
    Turns patient snapshots (and optionally this week's visit counts) into
    PatientPriority records.

    Stateless and free of I/O; safe to share between requests.
    """

    def score(
        self,
        patient: Patient,
        now: Optional[Any] = None,
        visit_counts: Optional[VisitCounts] = None,
    ) -> PatientPriority:
        """
        Score a single patient.

        Args:
            patient:      Snapshot to score.
            now:          Evaluation instant; defaults to the clinic wall clock.
            visit_counts: This week's counts for the patient. Without them the
                          cadence override and the visit-today term are skipped
                          and the score reflects admission and comorbidities only.

        Returns:
            PatientPriority with the clamped score and ordered reasons.
        """
        current = to_datetime(now, field="now") if now is not None else current_time()
        admission_ref = resolve_admission_ref(patient)
        phase: Optional[AdmissionPhase] = (
            classify_phase(admission_ref, current) if admission_ref is not None else None
        )
        prescription_due = is_prescription_active(patient, current)

        # 1. Cadence satisfied → nothing left to do for this patient today
        if visit_counts is not None and phase is not None:
            if cadence_requirement(phase).is_met(visit_counts):
                logger.debug(f"Priority [{patient.id}]: cadence met for {phase.value}")
                return PatientPriority(
                    patient=patient,
                    priority_score=0,
                    reason_entries=(PriorityReason(ReasonCode.CADENCE_MET, CADENCE_MET_TEXT),),
                    prescription_due=prescription_due,
                )

        score = 0
        reasons: List[PriorityReason] = []

        # 2. Admission bonus
        if phase is AdmissionPhase.RECENT:
            score += RECENT_ADMISSION_BONUS
            reasons.append(PriorityReason(ReasonCode.RECENT_ADMISSION, RECENT_ADMISSION_TEXT))

        # 3. Comorbidities
        for label in patient.comorbidities:
            kind = Comorbidity.from_label(label)
            if kind is Comorbidity.OTHER:
                logger.debug(f"Priority [{patient.id}]: unweighted comorbidity '{label}'")
                continue
            score += COMORBIDITY_WEIGHTS[kind]
            reasons.append(PriorityReason(ReasonCode.COMORBIDITY, label))

        # 4. Visits today
        if visit_counts is not None:
            if visit_counts.visits_today == 0:
                score += NO_VISIT_TODAY_BONUS
                reasons.append(PriorityReason(ReasonCode.NO_VISIT_TODAY, NO_VISIT_TODAY_TEXT))
            else:
                score -= visit_counts.visits_today * VISIT_TODAY_PENALTY
                reasons.append(PriorityReason(
                    ReasonCode.VISITS_TODAY, _visits_today_text(visit_counts.visits_today)
                ))

        # 5. Clamp
        clamped = int(round(min(MAX_SCORE, max(MIN_SCORE, score))))

        logger.debug(
            f"Priority [{patient.id}]: raw={score} score={clamped} "
            f"phase={phase.value if phase else 'unknown'}"
        )
        return PatientPriority(
            patient=patient,
            priority_score=clamped,
            reason_entries=tuple(reasons),
            prescription_due=prescription_due,
        )

    def rank(
        self,
        patients: Sequence[Patient],
        now: Optional[Any] = None,
        visit_counts: Optional[Mapping[str, VisitCounts]] = None,
    ) -> List[PatientPriority]:
        """
        Score every patient and sort by score, highest first.

        Equal scores keep their input order. When `visit_counts` is given,
        a patient missing from it had no visits in the window and is scored
        with zero counts.
        """
        current = to_datetime(now, field="now") if now is not None else current_time()

        priorities = []
        for patient in patients:
            counts = None
            if visit_counts is not None:
                counts = visit_counts.get(patient.id) or VisitCounts()
            priorities.append(self.score(patient, current, counts))

        # sorted() is stable, reverse=True included
        ranked = sorted(priorities, key=lambda p: p.priority_score, reverse=True)

        if ranked:
            logger.info(
                f"PriorityScoringEngine: ranked {len(ranked)} patient(s), "
                f"top={ranked[0].patient.id} ({ranked[0].priority_score})"
            )
        return ranked

    def rank_with_visits(
        self,
        patients: Sequence[Patient],
        visits: Sequence[Visit],
        now: Optional[Any] = None,
    ) -> List[PatientPriority]:
        """Aggregate the current week's `visits` per patient, then rank."""
        current = to_datetime(now, field="now") if now is not None else current_time()
        counts = counts_by_patient(visits, [p.id for p in patients], current)
        return self.rank(patients, current, counts)

    @staticmethod
    def summarise(priorities: Sequence[PatientPriority], now: Optional[datetime] = None) -> Dict:
        """
        Compact summary dict for JSON responses.

        Example output:
        {
            "total_patients": 3,
            "high_count": 1,
            "medium_count": 1,
            "low_count": 1,
            "prescription_alerts": ["p-2"],
            "patients": [{...}, {...}, {...}]
        }
        """
        levels = [p.level for p in priorities]
        summary = {
            "total_patients": len(priorities),
            "high_count":     levels.count(PriorityLevel.HIGH),
            "medium_count":   levels.count(PriorityLevel.MEDIUM),
            "low_count":      levels.count(PriorityLevel.LOW),
            "prescription_alerts": [p.patient.id for p in priorities if p.prescription_due],
            "patients":       [p.to_dict() for p in priorities],
        }
        if now is not None:
            summary["evaluated_at"] = now.isoformat()
        return summary
