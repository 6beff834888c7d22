"""
Home Care Visit Tracker - FastAPI Application

Stateless scoring API for the team's patient list. Clients post patients and
visits they already loaded from the document store; nothing is stored here.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.priority import (
    COMORBIDITY_WEIGHTS,
    Comorbidity,
    PriorityScoringEngine,
    ProfessionalType,
    ZONES,
    aggregate,
    cadence_requirement,
    classify_phase,
    counts_by_patient,
    current_time,
    resolve_admission_ref,
    to_datetime,
    week_bounds,
)
from app.models import (
    CadenceRequest,
    CadenceResponse,
    HealthResponse,
    PriorityResponse,
    RankRequest,
    RankResponse,
    ScoreRequest,
)
from app.utils import HomeCareError, get_logger, setup_logging

logger = get_logger(__name__)

_engine = PriorityScoringEngine()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)
    logger.info(
        f"{settings.app_name} {settings.app_version} starting "
        f"(environment={settings.environment}, timezone={settings.timezone})"
    )
    yield
    logger.info(f"{settings.app_name} shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Visit priority scoring for multidisciplinary home-care teams",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HomeCareError)
async def homecare_error_handler(request: Request, exc: HomeCareError):
    logger.warning(f"{request.url.path}: {exc.code} {exc.message}")
    return JSONResponse(status_code=422, content=exc.to_dict())


# ---- Utility Functions ----

def _resolve_now(now: Optional[datetime]) -> datetime:
    return to_datetime(now, field="now") if now is not None else current_time()


def _health() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        app=settings.app_name,
        version=settings.app_version,
        timestamp=current_time().isoformat(),
        timezone=settings.timezone,
    )


# ---- API Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return _health()


@app.post("/api/v1/priority/score", response_model=PriorityResponse, tags=["Priority"])
async def score_patient(request: ScoreRequest):
    """
    Score one patient.

    When `visits` is sent, the patient's counts for the week containing
    `now` are derived from it and the cadence rules apply.
    """
    now = _resolve_now(request.now)
    patient = request.patient.to_domain()

    counts = None
    if request.visits is not None:
        visits = [v.to_domain() for v in request.visits]
        counts = counts_by_patient(visits, [patient.id], now)[patient.id]

    priority = _engine.score(patient, now, counts)
    return PriorityResponse(**priority.to_dict())


@app.post("/api/v1/priority/rank", response_model=RankResponse, tags=["Priority"])
async def rank_patients(request: RankRequest):
    """
    Rank patients by priority, highest first (ties keep request order).
    """
    now = _resolve_now(request.now)
    patients = [p.to_domain() for p in request.patients]

    if request.visits is None:
        ranked = _engine.rank(patients, now)
    else:
        ranked = _engine.rank_with_visits(patients, [v.to_domain() for v in request.visits], now)

    return RankResponse(**_engine.summarise(ranked, now))


@app.post("/api/v1/visits/cadence", response_model=CadenceResponse, tags=["Visits"])
async def visit_cadence(request: CadenceRequest):
    """
    Weekly visit counts for one patient, with the admission-phase requirement.
    """
    now = _resolve_now(request.now)
    patient = request.patient.to_domain()
    week_start, week_end = week_bounds(now)

    counts = aggregate(
        [v.to_domain() for v in request.visits], patient.id, week_start, week_end, now
    )
    response = CadenceResponse(
        patient_id=patient.id,
        week_start=week_start.isoformat(),
        week_end=week_end.isoformat(),
        **counts.to_dict(),
    )

    admission_ref = resolve_admission_ref(patient)
    if admission_ref is not None:
        phase = classify_phase(admission_ref, now)
        requirement = cadence_requirement(phase)
        response.phase = phase.value
        response.required_visits = requirement.required
        response.per_week = requirement.per_week
        response.requirement_met = requirement.is_met(counts)
        response.indicator_rows = requirement.indicator_rows

    return response


@app.get("/api/v1/reference/comorbidities", tags=["Reference"])
async def list_comorbidities():
    """Comorbidity labels that carry priority weight."""
    return {
        "comorbidities": [
            {"label": kind.value, "weight": COMORBIDITY_WEIGHTS[kind]}
            for kind in Comorbidity
            if kind is not Comorbidity.OTHER
        ]
    }


@app.get("/api/v1/reference/professional-types", tags=["Reference"])
async def list_professional_types():
    """Professional types and their display labels."""
    return {
        "professional_types": [
            {"value": p.value, "label": p.label} for p in ProfessionalType
        ]
    }


@app.get("/api/v1/reference/zones", tags=["Reference"])
async def list_zones():
    """Service zones a patient can be assigned to."""
    return {"zones": list(ZONES)}


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
