"""POST /v1/health/score and GET /v1/avatar/{user_id} - financial health avatar"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from finavatar.api.v1.schemas import SnapshotRequest, HealthScoreResponse, HealthMetricsSchema, AvatarStateResponse
from finavatar.api.dependencies import get_request_id
from finavatar.infrastructure.database.session import get_db
from finavatar.infrastructure.database.repositories import AvatarStateRepository
from finavatar.domain.health import score, advise_on, calculate_financial_score, overall_health_percent
from finavatar.infrastructure.observability.metrics import record_health_score
from finavatar.infrastructure.observability.logging import log_health_score
from finavatar.utils.date_utils import ensure_utc

router = APIRouter()


@router.post("/health/score", response_model=HealthScoreResponse)
def create_health_score(
    request_body: SnapshotRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    """
    Score a monthly snapshot and store it as the user's avatar state.

    Flow:
    1. Compute health metrics and body archetype
    2. Collect rule-based advice
    3. Upsert the avatar state
    4. Return metrics, score and advice
    """
    start_time = time.time()
    request_id = get_request_id(request)
    snapshot = request_body.to_snapshot()

    try:
        metrics = score(snapshot)
        financial_score = calculate_financial_score(snapshot)
        advice = advise_on(snapshot)

        AvatarStateRepository(db).upsert(request_body.user_id, metrics, financial_score)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_health_score(metrics.body_archetype, metrics.happiness_level)
    log_health_score(request_id, request_body.user_id, metrics.body_archetype, financial_score, duration_ms)

    return HealthScoreResponse(
        user_id=request_body.user_id,
        metrics=HealthMetricsSchema(
            fitness_level=metrics.fitness_level,
            weight_level=metrics.weight_level,
            stress_level=metrics.stress_level,
            happiness_level=metrics.happiness_level,
            body_archetype=metrics.body_archetype,
        ),
        financial_score=financial_score,
        overall_health_percent=overall_health_percent(metrics),
        advice=advice,
    )


@router.get("/avatar/{user_id}", response_model=AvatarStateResponse)
def get_avatar_state(user_id: str, db: Session = Depends(get_db)):
    """Retrieve the most recently scored avatar state for a user"""
    state = AvatarStateRepository(db).get(user_id)

    if not state:
        raise HTTPException(status_code=404, detail="Avatar state not found")

    return AvatarStateResponse(
        user_id=state.user_id,
        metrics=HealthMetricsSchema(
            fitness_level=state.fitness_level,
            weight_level=state.weight_level,
            stress_level=state.stress_level,
            happiness_level=state.happiness_level,
            body_archetype=state.body_archetype,
        ),
        financial_score=state.financial_score,
        updated_at=ensure_utc(state.updated_at).isoformat(),
    )
