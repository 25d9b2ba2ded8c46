"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Literal

GoalProfile = Literal["conservative", "moderate", "aggressive"]
BodyArchetype = Literal["average", "fit", "heavy"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]
Trend = Literal["increasing", "decreasing", "stable"]


@dataclass(frozen=True)
class FinancialSnapshot:
    """One month of a user's finances, as entered on the profile form"""

    monthly_income: float
    monthly_expenses: float
    savings: float
    debt: float
    investments: float
    goal_profile: GoalProfile = "moderate"


@dataclass(frozen=True)
class FinancialRatios:
    """Snapshot values divided by monthly income (0 when income is 0)"""

    savings_rate: float
    debt_to_income_ratio: float
    expense_ratio: float
    investment_ratio: float


@dataclass
class HealthMetrics:
    """Avatar attributes, each in [0, 1]"""

    fitness_level: float
    weight_level: float
    stress_level: float
    happiness_level: float
    body_archetype: BodyArchetype


@dataclass
class Habit:
    """Recorded recurring or one-off spending event"""

    id: str
    owner_id: str
    category: str
    amount: float
    frequency: Frequency
    description: str
    is_recurring: bool
    created_at: datetime


@dataclass
class HabitPattern:
    """Per-category aggregate derived from the habit collection"""

    category: str
    average_amount: float
    frequency: int  # number of habit records in the category
    total_spent: float
    trend: Trend


@dataclass
class SpendingInsights:
    """Aggregate view over all habits and patterns"""

    top_categories: List[str]
    total_recurring_monthly_cost: float
    average_daily_spending: float
    recommendations: List[str] = field(default_factory=list)


@dataclass
class CategorySpend:
    """Monthly-normalized spend for one category"""

    category: str
    amount: float
    percentage: float  # share of monthly expenses, 0-100


@dataclass
class FinancialAnalytics:
    """Numeric summary attached to recommendation prompts"""

    savings_rate_percent: float
    expense_to_income_percent: float
    discretionary_spending: float
    financial_health_score: int
    risk_level: Literal["low", "medium", "high"]
    top_spending_categories: List[CategorySpend]
    monthly_trend: Literal["improving", "stable", "declining"]
    recommendations: List[str] = field(default_factory=list)
