"""Financial analytics summary sent alongside recommendation prompts"""

from typing import Dict, List
from finavatar.domain.models import Habit, CategorySpend, FinancialAnalytics
from finavatar.domain.habits import monthly_amount


def _spend_by_category(habits: List[Habit]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for habit in habits:
        totals[habit.category] = totals.get(habit.category, 0.0) + monthly_amount(habit)
    return totals


def _health_score(savings_rate: float, expense_share: float, discretionary: float, income: float) -> int:
    """
    Start from 50 and adjust.

    - Savings rate: >20% +20, >10% +10, <5% -15
    - Expense share of income: <30% +15, >50% -20
    - Discretionary spend: <20% of income +10, >40% -10
    """
    score = 50.0

    if savings_rate > 20:
        score += 20
    elif savings_rate > 10:
        score += 10
    elif savings_rate < 5:
        score -= 15

    if expense_share < 30:
        score += 15
    elif expense_share > 50:
        score -= 20

    if discretionary < income * 0.2:
        score += 10
    elif discretionary > income * 0.4:
        score -= 10

    return round(max(0.0, min(100.0, score)))


def calculate_financial_analytics(
    habits: List[Habit],
    monthly_income: float,
    monthly_expenses: float,
) -> FinancialAnalytics:
    """
    Summarize habits against declared monthly income and expenses.

    All habit amounts are normalized to monthly equivalents. Percentages
    are 0 when their denominator is 0.
    """
    totals = _spend_by_category(habits)
    total_recurring = sum(monthly_amount(h) for h in habits if h.is_recurring)

    top_categories = sorted(
        (
            CategorySpend(
                category=category,
                amount=amount,
                percentage=(amount / monthly_expenses) * 100 if monthly_expenses > 0 else 0.0,
            )
            for category, amount in totals.items()
        ),
        key=lambda c: c.amount,
        reverse=True,
    )[:5]

    if monthly_income > 0:
        savings_rate = (monthly_income - monthly_expenses) / monthly_income * 100
        expense_share = monthly_expenses / monthly_income * 100
    else:
        savings_rate = 0.0
        expense_share = 0.0

    discretionary = monthly_expenses - total_recurring
    health_score = _health_score(savings_rate, expense_share, discretionary, monthly_income)

    if health_score > 70:
        risk_level = "low"
    elif health_score < 30:
        risk_level = "high"
    else:
        risk_level = "medium"

    if savings_rate > 15:
        monthly_trend = "improving"
    elif savings_rate > 5:
        monthly_trend = "stable"
    else:
        monthly_trend = "declining"

    recommendations = []
    if savings_rate < 10:
        recommendations.append("Increase your savings rate to at least 10% of income")
    if expense_share > 40:
        recommendations.append("Reduce your expenses below 40% of income")
    if discretionary > monthly_income * 0.3:
        recommendations.append("Reduce discretionary spending to free up more money for savings")
    for cat in top_categories:
        if cat.percentage > 25:
            recommendations.append(
                f"Consider reducing spending in {cat.category} which represents {cat.percentage:.1f}% of expenses"
            )

    return FinancialAnalytics(
        savings_rate_percent=savings_rate,
        expense_to_income_percent=expense_share,
        discretionary_spending=discretionary,
        financial_health_score=health_score,
        risk_level=risk_level,
        top_spending_categories=top_categories,
        monthly_trend=monthly_trend,
        recommendations=recommendations,
    )
