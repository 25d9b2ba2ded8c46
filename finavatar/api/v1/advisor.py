"""/v1/advisor - generative AI recommendations, voice commands and Q&A"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from finavatar.api.v1.schemas import (
    RecommendationRequest,
    RecommendationResponse,
    VoiceRequest,
    VoiceResponse,
    QuestionRequest,
    AnswerResponse,
    HabitSchema,
)
from finavatar.api.v1.habits import load_analytics
from finavatar.api.dependencies import get_advisor_client, get_request_id
from finavatar.infrastructure.database.session import get_db
from finavatar.infrastructure.clients.advisor import AdvisorClient
from finavatar.domain.exceptions import AdvisorAPIError
from finavatar.domain.recommendations import habit_from_voice, unrecognized_voice_analysis
from finavatar.infrastructure.observability.metrics import record_advisor_call, record_habit_mutation
from finavatar.infrastructure.observability.logging import log_advisor_call, log_habit_mutation

router = APIRouter()

UNAVAILABLE_NOTICE = "The AI advisor is unavailable right now. Please try again later."
EMPTY_NOTICE = "The AI advisor did not return any usable recommendations."
FALLBACK_ANSWER = "I'm sorry, I'm having trouble answering your question. Please try again."
FALLBACK_TIP = "Keep tracking your expenses to build better financial habits!"


def _finish(request_id: str, user_id: str, operation: str, outcome: str, start_time: float) -> None:
    record_advisor_call(operation, outcome)
    log_advisor_call(request_id, user_id, operation, outcome, (time.time() - start_time) * 1000)


@router.post("/advisor/recommendations", response_model=RecommendationResponse, response_model_by_alias=False)
async def create_recommendations(
    request_body: RecommendationRequest,
    request: Request,
    db: Session = Depends(get_db),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    """
    Ask the AI advisor for budgeting recommendations.

    Service failures and unusable replies both come back as an empty list
    with a notice instead of an error status.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    _, analytics = load_analytics(db, request_body.user_id)

    try:
        recommendations = await advisor.generate_recommendations(
            analytics.habits,
            request_body.monthly_income,
            request_body.monthly_expenses,
            request_body.financial_goals,
        )
    except AdvisorAPIError as e:
        logging.error(f"Advisor API error: {e}", extra={"request_id": request_id})
        _finish(request_id, request_body.user_id, "recommendations", "unavailable", start_time)
        return RecommendationResponse(user_id=request_body.user_id, recommendations=[], notice=UNAVAILABLE_NOTICE)

    outcome = "ok" if recommendations else "empty"
    _finish(request_id, request_body.user_id, "recommendations", outcome, start_time)

    return RecommendationResponse(
        user_id=request_body.user_id,
        recommendations=recommendations,
        notice=None if recommendations else EMPTY_NOTICE,
    )


@router.post("/advisor/voice", response_model=VoiceResponse, response_model_by_alias=False)
async def analyze_voice(
    request_body: VoiceRequest,
    request: Request,
    db: Session = Depends(get_db),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    """
    Interpret a voice transcript.

    Spoken expenses with an amount are recorded as habits when
    record_expense is set.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    repo, analytics = load_analytics(db, request_body.user_id)

    try:
        analysis = await advisor.analyze_voice_transcript(
            request_body.transcript,
            request_body.monthly_income,
            request_body.monthly_expenses,
            analytics.habits[-5:],
        )
    except AdvisorAPIError as e:
        logging.error(f"Advisor API error: {e}", extra={"request_id": request_id})
        _finish(request_id, request_body.user_id, "voice", "unavailable", start_time)
        return VoiceResponse(
            user_id=request_body.user_id,
            analysis=unrecognized_voice_analysis(
                "I'm having trouble processing your request. Please try again."
            ),
            notice=UNAVAILABLE_NOTICE,
        )

    recorded = None
    fields = habit_from_voice(analysis, request_body.transcript) if request_body.record_expense else None
    if fields:
        try:
            habit = analytics.add_habit(owner_id=request_body.user_id, **fields)
            repo.add(habit)
            db.commit()
        except Exception as e:
            db.rollback()
            logging.error(f"Could not record spoken expense: {e}", extra={"request_id": request_id})
            raise HTTPException(status_code=500, detail="Internal server error")
        else:
            recorded = HabitSchema.from_domain(habit)
            record_habit_mutation("add")
            log_habit_mutation(request_id, request_body.user_id, "add", habit.id)

    outcome = "empty" if analysis.intent == "unknown" else "ok"
    _finish(request_id, request_body.user_id, "voice", outcome, start_time)

    return VoiceResponse(user_id=request_body.user_id, analysis=analysis, recorded_habit=recorded)


@router.post("/advisor/question", response_model=AnswerResponse)
async def answer_question(
    request_body: QuestionRequest,
    request: Request,
    db: Session = Depends(get_db),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    """Free-form financial question answered by the AI advisor"""
    start_time = time.time()
    request_id = get_request_id(request)
    _, analytics = load_analytics(db, request_body.user_id)

    try:
        answer = await advisor.answer_question(
            request_body.question,
            request_body.monthly_income,
            request_body.monthly_expenses,
            len(analytics.habits),
        )
    except AdvisorAPIError as e:
        logging.error(f"Advisor API error: {e}", extra={"request_id": request_id})
        _finish(request_id, request_body.user_id, "question", "unavailable", start_time)
        return AnswerResponse(user_id=request_body.user_id, answer=FALLBACK_ANSWER, notice=UNAVAILABLE_NOTICE)

    _finish(request_id, request_body.user_id, "question", "ok" if answer else "empty", start_time)
    return AnswerResponse(user_id=request_body.user_id, answer=answer or FALLBACK_ANSWER)


@router.get("/advisor/coaching-tip", response_model=AnswerResponse)
async def get_coaching_tip(
    request: Request,
    user_id: str = Query(..., description="User identifier"),
    db: Session = Depends(get_db),
    advisor: AdvisorClient = Depends(get_advisor_client),
):
    """Short coaching tip based on the user's latest habits"""
    start_time = time.time()
    request_id = get_request_id(request)
    _, analytics = load_analytics(db, user_id)

    try:
        tip = await advisor.coaching_tip(analytics.habits)
    except AdvisorAPIError as e:
        logging.error(f"Advisor API error: {e}", extra={"request_id": request_id})
        _finish(request_id, user_id, "coaching_tip", "unavailable", start_time)
        return AnswerResponse(user_id=user_id, answer=FALLBACK_TIP, notice=UNAVAILABLE_NOTICE)

    _finish(request_id, user_id, "coaching_tip", "ok" if tip else "empty", start_time)
    return AnswerResponse(user_id=user_id, answer=tip or FALLBACK_TIP)
