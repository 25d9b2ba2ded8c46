"""Unit tests for financial health scoring"""

import pytest
from finavatar.domain.models import FinancialSnapshot, HealthMetrics
from finavatar.domain.health import (
    compute_ratios,
    calculate_financial_score,
    determine_body_archetype,
    score,
    advise_on,
    overall_health_percent,
)


def _snapshot(income=5000.0, expenses=0.0, savings=0.0, debt=0.0, investments=0.0, goal="conservative"):
    return FinancialSnapshot(
        monthly_income=income,
        monthly_expenses=expenses,
        savings=savings,
        debt=debt,
        investments=investments,
        goal_profile=goal,
    )


def test_compute_ratios_zero_income():
    """All ratios are 0 when there is no income"""
    ratios = compute_ratios(_snapshot(income=0, expenses=800, savings=100, debt=50, investments=10))

    assert ratios.savings_rate == 0
    assert ratios.debt_to_income_ratio == 0
    assert ratios.expense_ratio == 0
    assert ratios.investment_ratio == 0


def test_score_reference_example(healthy_snapshot: FinancialSnapshot):
    """5000 income, 3000 expenses, 1000 savings, 500 debt, 500 invested, moderate"""
    ratios = compute_ratios(healthy_snapshot)
    assert ratios.savings_rate == pytest.approx(0.2)
    assert ratios.debt_to_income_ratio == pytest.approx(0.1)
    assert ratios.expense_ratio == pytest.approx(0.6)
    assert ratios.investment_ratio == pytest.approx(0.1)

    # 30 savings + 25 debt + 20 expense + 12 investment + 7 goal
    assert calculate_financial_score(healthy_snapshot) == pytest.approx(94)

    metrics = score(healthy_snapshot)
    assert metrics.fitness_level == pytest.approx(0.8)
    assert metrics.weight_level == pytest.approx(0.6)
    assert metrics.stress_level == pytest.approx(0.2)
    assert metrics.happiness_level == 1.0  # 0.94 * 1.2 capped
    assert metrics.body_archetype == "fit"


@pytest.mark.parametrize("income", [1.0, 250.0, 5000.0, 1_000_000.0])
def test_score_income_only_floor(income: float):
    """Only debt, expense and goal bands score when everything else is 0"""
    metrics = score(_snapshot(income=income))

    assert metrics.fitness_level == 0
    assert metrics.weight_level == 0
    assert metrics.stress_level == 0
    # 25 debt + 20 expense + 5 conservative = 50
    assert metrics.happiness_level == pytest.approx(min(1.0, 0.5 * 1.2))


def test_savings_band_linear_below_five_percent():
    """Savings rate under 5% scores savings_rate * 300"""
    snapshot = _snapshot(income=1000, savings=30, expenses=1000)  # 3% savings, 100% expenses
    # 9 savings + 25 debt + 0 expense + 0 investment + 5 goal
    assert calculate_financial_score(snapshot) == pytest.approx(39)


def test_debt_and_expense_band_edges():
    """Thresholds are inclusive on the good side"""
    at_edges = _snapshot(income=1000, expenses=700, debt=300)  # expense 0.7, debt 0.3
    # 0 savings + 15 debt + 15 expense + 0 investment + 5 goal
    assert calculate_financial_score(at_edges) == pytest.approx(35)

    beyond = _snapshot(income=1000, expenses=950, debt=600)
    # 0 + 0 + 0 + 0 + 5
    assert calculate_financial_score(beyond) == pytest.approx(5)


def test_goal_profile_points():
    base = dict(income=1000, expenses=1000, debt=1000)
    assert calculate_financial_score(_snapshot(**base, goal="aggressive")) == 10
    assert calculate_financial_score(_snapshot(**base, goal="moderate")) == 7
    assert calculate_financial_score(_snapshot(**base, goal="conservative")) == 5


def test_metrics_clamped_for_extreme_inputs():
    """Massive debt and spending still produce values within [0, 1]"""
    metrics = score(_snapshot(income=100, expenses=10_000, savings=50_000, debt=90_000, investments=70_000))

    for value in (metrics.fitness_level, metrics.weight_level, metrics.stress_level, metrics.happiness_level):
        assert 0.0 <= value <= 1.0
    assert metrics.weight_level == 1.0
    assert metrics.stress_level == 1.0


def test_metrics_clamped_for_negative_inputs():
    """Negative figures are not rejected but outputs stay bounded"""
    metrics = score(_snapshot(income=1000, expenses=-500, savings=-200, debt=-100))

    for value in (metrics.fitness_level, metrics.weight_level, metrics.stress_level, metrics.happiness_level):
        assert 0.0 <= value <= 1.0


def test_score_is_deterministic(healthy_snapshot: FinancialSnapshot):
    assert score(healthy_snapshot) == score(healthy_snapshot)


def test_determine_body_archetype():
    assert determine_body_archetype(0.8, 0.5, 0.2) == "fit"
    # High fitness but stressed falls through to heavy
    assert determine_body_archetype(0.8, 0.5, 0.7) == "heavy"
    assert determine_body_archetype(0.3, 0.75, 0.1) == "heavy"
    assert determine_body_archetype(0.5, 0.5, 0.5) == "average"
    # Boundaries are strict
    assert determine_body_archetype(0.7, 0.7, 0.6) == "average"


def test_stress_includes_overspending():
    """Expense ratio above 0.7 adds stress even without debt"""
    metrics = score(_snapshot(income=1000, expenses=900))
    assert metrics.stress_level == pytest.approx(0.4)  # (0.9 - 0.7) * 2


def test_advise_on_all_warnings():
    advice = advise_on(_snapshot(income=1000, expenses=900, savings=50, debt=400, investments=10))

    assert advice == [
        "Consider increasing your savings rate to at least 10% of your income",
        "Your debt-to-income ratio is high. Focus on debt reduction strategies",
        "Your expenses are consuming too much of your income. Review your spending habits",
        "Consider starting or increasing your investment contributions",
    ]


def test_advise_on_positive_reinforcement(healthy_snapshot: FinancialSnapshot):
    assert advise_on(healthy_snapshot) == ["Excellent financial health! Keep up the good work"]


def test_advise_on_zero_income():
    """Zero income gives zero ratios: low savings and low investment rules fire"""
    advice = advise_on(_snapshot(income=0))

    assert advice == [
        "Consider increasing your savings rate to at least 10% of your income",
        "Consider starting or increasing your investment contributions",
    ]


def test_overall_health_percent():
    metrics = HealthMetrics(
        fitness_level=0.8,
        weight_level=0.6,
        stress_level=0.2,
        happiness_level=1.0,
        body_archetype="fit",
    )
    assert overall_health_percent(metrics) == 53  # (0.8 + 1.0 - 0.2) * 100 / 3


def test_overall_health_percent_rounds_halves_up():
    metrics = HealthMetrics(
        fitness_level=0.375,
        weight_level=0.0,
        stress_level=0.0,
        happiness_level=0.0,
        body_archetype="average",
    )
    assert overall_health_percent(metrics) == 13  # 12.5 rounds up, not to even
