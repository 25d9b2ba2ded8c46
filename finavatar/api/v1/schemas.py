"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, Field
from finavatar.domain.models import FinancialSnapshot, Habit
from finavatar.domain.recommendations import Recommendation, VoiceAnalysis

FrequencyField = Literal["daily", "weekly", "monthly", "yearly"]


class SnapshotRequest(BaseModel):
    """Request body for POST /v1/health/score"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    monthly_income: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)
    savings: float = Field(0, ge=0)
    debt: float = Field(0, ge=0)
    investments: float = Field(0, ge=0)
    goal_profile: Literal["conservative", "moderate", "aggressive"] = "moderate"

    def to_snapshot(self) -> FinancialSnapshot:
        return FinancialSnapshot(
            monthly_income=self.monthly_income,
            monthly_expenses=self.monthly_expenses,
            savings=self.savings,
            debt=self.debt,
            investments=self.investments,
            goal_profile=self.goal_profile,
        )


class HealthMetricsSchema(BaseModel):
    fitness_level: float
    weight_level: float
    stress_level: float
    happiness_level: float
    body_archetype: str


class HealthScoreResponse(BaseModel):
    """Response for POST /v1/health/score"""

    user_id: str
    metrics: HealthMetricsSchema
    financial_score: float
    overall_health_percent: int
    advice: List[str]


class AvatarStateResponse(BaseModel):
    """Response for GET /v1/avatar/{user_id}"""

    user_id: str
    metrics: HealthMetricsSchema
    financial_score: Optional[float] = None
    updated_at: str


class HabitCreate(BaseModel):
    """Request body for POST /v1/habits"""

    user_id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    frequency: FrequencyField = "monthly"
    description: str = ""
    is_recurring: bool = False


class HabitUpdate(BaseModel):
    """Request body for PATCH /v1/habits/{habit_id}; only set fields are applied"""

    user_id: str = Field(..., min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    amount: Optional[float] = Field(None, gt=0)
    frequency: Optional[FrequencyField] = None
    description: Optional[str] = None
    is_recurring: Optional[bool] = None


class HabitSchema(BaseModel):
    id: str
    owner_id: str
    category: str
    amount: float
    frequency: str
    description: str
    is_recurring: bool
    created_at: datetime

    @classmethod
    def from_domain(cls, habit: Habit) -> "HabitSchema":
        return cls(
            id=habit.id,
            owner_id=habit.owner_id,
            category=habit.category,
            amount=habit.amount,
            frequency=habit.frequency,
            description=habit.description,
            is_recurring=habit.is_recurring,
            created_at=habit.created_at,
        )


class HabitListResponse(BaseModel):
    user_id: str
    habits: List[HabitSchema]


class HabitPatternSchema(BaseModel):
    category: str
    average_amount: float
    frequency: int
    total_spent: float
    trend: str


class PatternsResponse(BaseModel):
    user_id: str
    patterns: List[HabitPatternSchema]


class InsightsResponse(BaseModel):
    """Response for GET /v1/habits/insights"""

    user_id: str
    top_categories: List[str]
    total_recurring_monthly_cost: float
    average_daily_spending: float
    recommendations: List[str]


class RecommendationRequest(BaseModel):
    """Request body for POST /v1/advisor/recommendations"""

    user_id: str = Field(..., min_length=1)
    monthly_income: float = Field(..., ge=0)
    monthly_expenses: float = Field(..., ge=0)
    financial_goals: Optional[str] = None


class RecommendationResponse(BaseModel):
    user_id: str
    recommendations: List[Recommendation]
    notice: Optional[str] = None


class VoiceRequest(BaseModel):
    """Request body for POST /v1/advisor/voice"""

    user_id: str = Field(..., min_length=1)
    transcript: str = Field(..., min_length=1)
    monthly_income: Optional[float] = Field(None, ge=0)
    monthly_expenses: Optional[float] = Field(None, ge=0)
    record_expense: bool = True


class VoiceResponse(BaseModel):
    user_id: str
    analysis: VoiceAnalysis
    recorded_habit: Optional[HabitSchema] = None
    notice: Optional[str] = None


class QuestionRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    question: str = Field(..., min_length=1)
    monthly_income: Optional[float] = Field(None, ge=0)
    monthly_expenses: Optional[float] = Field(None, ge=0)


class AnswerResponse(BaseModel):
    user_id: str
    answer: str
    notice: Optional[str] = None
