"""/v1/habits - habit CRUD, patterns and spending insights"""

import logging
from datetime import datetime
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.orm import Session

from finavatar.api.v1.schemas import (
    HabitCreate,
    HabitUpdate,
    HabitSchema,
    HabitListResponse,
    HabitPatternSchema,
    PatternsResponse,
    InsightsResponse,
)
from finavatar.api.dependencies import get_request_id
from finavatar.infrastructure.database.session import get_db
from finavatar.infrastructure.database.repositories import HabitRepository
from finavatar.domain.habits import HabitAnalytics
from finavatar.domain.exceptions import HabitNotFoundError, InvalidHabitUpdateError
from finavatar.infrastructure.observability.metrics import record_habit_mutation
from finavatar.infrastructure.observability.logging import log_habit_mutation

router = APIRouter()


def load_analytics(db: Session, user_id: str) -> Tuple[HabitRepository, HabitAnalytics]:
    """Build an analytics engine over the user's persisted habits"""
    repo = HabitRepository(db)
    return repo, HabitAnalytics(repo.list_by_owner(user_id))


@router.post("/habits", response_model=HabitSchema, status_code=201)
def create_habit(
    request_body: HabitCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Record a new spending habit"""
    request_id = get_request_id(request)
    repo, analytics = load_analytics(db, request_body.user_id)

    try:
        habit = analytics.add_habit(
            owner_id=request_body.user_id,
            category=request_body.category,
            amount=request_body.amount,
            frequency=request_body.frequency,
            description=request_body.description,
            is_recurring=request_body.is_recurring,
        )
        repo.add(habit)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_habit_mutation("add")
    log_habit_mutation(request_id, request_body.user_id, "add", habit.id)
    return HabitSchema.from_domain(habit)


@router.get("/habits", response_model=HabitListResponse)
def list_habits(
    user_id: str = Query(..., description="User identifier"),
    category: Optional[str] = Query(None, description="Case-insensitive category filter"),
    start: Optional[datetime] = Query(None, description="Earliest creation time (inclusive)"),
    end: Optional[datetime] = Query(None, description="Latest creation time (inclusive)"),
    db: Session = Depends(get_db),
):
    """List a user's habits, optionally filtered by category and creation window"""
    _, analytics = load_analytics(db, user_id)

    habits = analytics.habits_by_category(category) if category else analytics.habits
    if start or end:
        in_range = analytics.habits_in_range(start or datetime.min, end or datetime.max)
        in_range_ids = {h.id for h in in_range}
        habits = [h for h in habits if h.id in in_range_ids]

    return HabitListResponse(user_id=user_id, habits=[HabitSchema.from_domain(h) for h in habits])


@router.get("/habits/patterns", response_model=PatternsResponse)
def get_patterns(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Per-category spending patterns"""
    _, analytics = load_analytics(db, user_id)

    patterns = [
        HabitPatternSchema(
            category=p.category,
            average_amount=p.average_amount,
            frequency=p.frequency,
            total_spent=p.total_spent,
            trend=p.trend,
        )
        for p in analytics.patterns
    ]
    return PatternsResponse(user_id=user_id, patterns=patterns)


@router.get("/habits/insights", response_model=InsightsResponse)
def get_insights(
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Top categories, recurring cost, daily spend and rule-based recommendations"""
    _, analytics = load_analytics(db, user_id)
    insights = analytics.spending_insights()

    return InsightsResponse(
        user_id=user_id,
        top_categories=insights.top_categories,
        total_recurring_monthly_cost=insights.total_recurring_monthly_cost,
        average_daily_spending=insights.average_daily_spending,
        recommendations=insights.recommendations,
    )


@router.get("/habits/{habit_id}", response_model=HabitSchema)
def get_habit(
    habit_id: str,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    _, analytics = load_analytics(db, user_id)
    habit = analytics.get_habit(habit_id)

    if not habit:
        raise HTTPException(status_code=404, detail="Habit not found")

    return HabitSchema.from_domain(habit)


@router.patch("/habits/{habit_id}", response_model=HabitSchema)
def update_habit(
    habit_id: str,
    request_body: HabitUpdate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Replace only the supplied fields of a habit"""
    request_id = get_request_id(request)
    repo, analytics = load_analytics(db, request_body.user_id)
    changes = {
        k: v
        for k, v in request_body.model_dump(exclude_unset=True, exclude={"user_id"}).items()
        if v is not None
    }

    try:
        habit = analytics.update_habit(habit_id, **changes)
        if habit is None:
            raise HabitNotFoundError(f"Habit {habit_id} not found")

        repo.save(habit)
        db.commit()

    except HabitNotFoundError as e:
        db.rollback()
        logging.warning(f"Habit not found: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail="Habit not found")

    except InvalidHabitUpdateError as e:
        db.rollback()
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_habit_mutation("update")
    log_habit_mutation(request_id, request_body.user_id, "update", habit_id)
    return HabitSchema.from_domain(habit)


@router.delete("/habits/{habit_id}", status_code=204)
def delete_habit(
    habit_id: str,
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
):
    """Hard-delete a habit"""
    request_id = get_request_id(request)
    repo, analytics = load_analytics(db, user_id)

    if not analytics.delete_habit(habit_id):
        raise HTTPException(status_code=404, detail="Habit not found")

    try:
        repo.delete(habit_id)
        db.commit()

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    record_habit_mutation("delete")
    log_habit_mutation(request_id, user_id, "delete", habit_id)
    return Response(status_code=204)
