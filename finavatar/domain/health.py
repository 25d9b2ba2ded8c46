"""Financial health scoring - maps a monthly snapshot to avatar metrics"""

import math
from typing import List
from finavatar.domain.models import FinancialSnapshot, FinancialRatios, HealthMetrics, BodyArchetype

# Points awarded for the declared goal profile; anything else scores as conservative
GOAL_PROFILE_POINTS = {"aggressive": 10.0, "moderate": 7.0, "conservative": 5.0}


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def compute_ratios(snapshot: FinancialSnapshot) -> FinancialRatios:
    """Divide each snapshot figure by monthly income (avoid division by zero)"""
    income = snapshot.monthly_income
    if income <= 0:
        return FinancialRatios(0.0, 0.0, 0.0, 0.0)

    return FinancialRatios(
        savings_rate=snapshot.savings / income,
        debt_to_income_ratio=snapshot.debt / income,
        expense_ratio=snapshot.monthly_expenses / income,
        investment_ratio=snapshot.investments / income,
    )


def _savings_points(savings_rate: float) -> float:
    if savings_rate >= 0.20:
        return 30.0
    elif savings_rate >= 0.15:
        return 25.0
    elif savings_rate >= 0.10:
        return 20.0
    elif savings_rate >= 0.05:
        return 15.0
    # Below 5% the score scales linearly up to the 15-point step
    return savings_rate * 300


def _debt_points(debt_ratio: float) -> float:
    if debt_ratio <= 0.10:
        return 25.0
    elif debt_ratio <= 0.20:
        return 20.0
    elif debt_ratio <= 0.30:
        return 15.0
    elif debt_ratio <= 0.40:
        return 10.0
    elif debt_ratio <= 0.50:
        return 5.0
    return 0.0


def _expense_points(expense_ratio: float) -> float:
    if expense_ratio <= 0.60:
        return 20.0
    elif expense_ratio <= 0.70:
        return 15.0
    elif expense_ratio <= 0.80:
        return 10.0
    elif expense_ratio <= 0.90:
        return 5.0
    return 0.0


def _investment_points(investment_ratio: float) -> float:
    if investment_ratio >= 0.15:
        return 15.0
    elif investment_ratio >= 0.10:
        return 12.0
    elif investment_ratio >= 0.05:
        return 8.0
    elif investment_ratio >= 0.02:
        return 4.0
    return 0.0


def calculate_financial_score(snapshot: FinancialSnapshot) -> float:
    """
    Weighted composite score from 0 to 100.

    Bands:
    - 30 pts: Savings rate (20%+ earns full marks)
    - 25 pts: Debt-to-income (10% or less earns full marks)
    - 20 pts: Expense ratio (60% or less earns full marks)
    - 15 pts: Investment ratio (15%+ earns full marks)
    - 10 pts: Goal profile (aggressive 10, moderate 7, conservative 5)
    """
    ratios = compute_ratios(snapshot)

    total = (
        _savings_points(ratios.savings_rate)
        + _debt_points(ratios.debt_to_income_ratio)
        + _expense_points(ratios.expense_ratio)
        + _investment_points(ratios.investment_ratio)
        + GOAL_PROFILE_POINTS.get(snapshot.goal_profile, GOAL_PROFILE_POINTS["conservative"])
    )

    return _clamp(total, 0.0, 100.0)


def determine_body_archetype(fitness_level: float, weight_level: float, stress_level: float) -> BodyArchetype:
    """
    Pick the avatar body shape.

    - fit:   fitness > 0.7 and stress < 0.3
    - heavy: weight > 0.7 or stress > 0.6
    - average otherwise
    """
    if fitness_level > 0.7 and stress_level < 0.3:
        return "fit"
    elif weight_level > 0.7 or stress_level > 0.6:
        return "heavy"
    else:
        return "average"


def score(snapshot: FinancialSnapshot) -> HealthMetrics:
    """
    Main entry point: turn a snapshot into avatar health metrics.

    Mapping:
    - fitness:   savings and investments make the avatar fitter
    - weight:    expenses make it heavier
    - stress:    debt, plus spending beyond 70% of income
    - happiness: overall financial score, boosted by 20%
    """
    ratios = compute_ratios(snapshot)
    normalized_score = calculate_financial_score(snapshot) / 100

    fitness = _clamp(min(1.0, ratios.savings_rate * 3 + ratios.investment_ratio * 2))
    weight = _clamp(min(1.0, ratios.expense_ratio))
    stress = _clamp(min(1.0, ratios.debt_to_income_ratio * 2 + max(0.0, ratios.expense_ratio - 0.7) * 2))
    happiness = _clamp(min(1.0, normalized_score * 1.2))

    return HealthMetrics(
        fitness_level=fitness,
        weight_level=weight,
        stress_level=stress,
        happiness_level=happiness,
        body_archetype=determine_body_archetype(fitness, weight, stress),
    )


def advise_on(snapshot: FinancialSnapshot) -> List[str]:
    """Rule-based advice; every matching rule is included, in fixed order"""
    ratios = compute_ratios(snapshot)
    advice = []

    if ratios.savings_rate < 0.10:
        advice.append("Consider increasing your savings rate to at least 10% of your income")

    if ratios.debt_to_income_ratio > 0.30:
        advice.append("Your debt-to-income ratio is high. Focus on debt reduction strategies")

    if ratios.expense_ratio > 0.80:
        advice.append("Your expenses are consuming too much of your income. Review your spending habits")

    if ratios.investment_ratio < 0.05:
        advice.append("Consider starting or increasing your investment contributions")

    if ratios.savings_rate >= 0.20 and ratios.debt_to_income_ratio <= 0.20 and ratios.expense_ratio <= 0.70:
        advice.append("Excellent financial health! Keep up the good work")

    return advice


def overall_health_percent(metrics: HealthMetrics) -> int:
    """Dashboard headline number: (fitness + happiness - stress) as a rounded percentage"""
    # Halves round up
    return math.floor((metrics.fitness_level + metrics.happiness_level - metrics.stress_level) * 100 / 3 + 0.5)
