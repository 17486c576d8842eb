"""
API Schemas — Request and Response Models

Pydantic models for the GroundCheck API.
"""

from __future__ import annotations

from typing import Any, Optional
from pydantic import BaseModel, Field

from groundcheck.config import settings


# ============================================================
# DETECT
# ============================================================

class DetectRequest(BaseModel):
    """POST /detect request body."""
    text: str = Field(..., min_length=1, max_length=settings.MAX_TEXT_CHARS,
                      description="Narrative text to audit.")

    model_config = {"json_schema_extra": {"examples": [
        {"text": "The build probably fails because the cache is stale."},
    ]}}


class MatchResponse(BaseModel):
    kind: str
    evidence: str


class DetectResponse(BaseModel):
    """POST /detect response body."""
    matches: list[MatchResponse]
    kinds: list[str]
    blocked: bool
    core_version: str


# ============================================================
# SCORE
# ============================================================

class ScoreRequest(BaseModel):
    """POST /score request body."""
    text: str = Field(..., min_length=1, max_length=settings.MAX_TEXT_CHARS)
    # Any JSON values are accepted; invalid ones fall back to the default per key.
    weights: Optional[dict[str, Any]] = Field(
        None, description="Partial category weight overrides.",
    )


class SentenceResultResponse(BaseModel):
    sentence: str
    index: int
    total: int
    scores: dict[str, int]
    aggregate_score: float
    label: str


class ScoreResponse(BaseModel):
    """POST /score response body."""
    results: list[SentenceResultResponse]
    total: int
    worst_label: str
    weights: dict[str, float]
    core_version: str


# ============================================================
# META
# ============================================================

class WeightsResponse(BaseModel):
    weights: dict[str, float]
    defaults: dict[str, float]


class HealthResponse(BaseModel):
    status: str
    version: str
    core_version: str
