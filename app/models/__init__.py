"""
API Schemas
"""
from .priority import (
    PatientInput,
    VisitInput,
    ScoreRequest,
    RankRequest,
    CadenceRequest,
    PriorityResponse,
    RankResponse,
    CadenceResponse,
    HealthResponse,
)

__all__ = [
    "PatientInput",
    "VisitInput",
    "ScoreRequest",
    "RankRequest",
    "CadenceRequest",
    "PriorityResponse",
    "RankResponse",
    "CadenceResponse",
    "HealthResponse",
]
