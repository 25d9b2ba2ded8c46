"""Prompt templates for the generative AI advisor"""

from typing import List, Optional
from finavatar.domain.models import Habit, FinancialAnalytics

RECOMMENDATION_FORMAT = """Format as JSON:
{
  "recommendations": [
    {
      "id": "unique-id",
      "title": "Specific, actionable title",
      "description": "Detailed explanation with specific numbers, calculations, and reasoning",
      "category": "budgeting|savings|investment|debt|spending|emergency|optimization",
      "priority": "high|medium|low",
      "estimatedSavings": monthly_dollar_amount,
      "timeframe": "1 week|1 month|3 months|6 months|1 year",
      "impactScore": 1-10,
      "feasibilityScore": 1-10,
      "urgencyScore": 1-10,
      "relatedHabits": ["habit_category_1", "habit_category_2"],
      "implementationSteps": ["Step 1: specific action", "Step 2: specific action"],
      "monthlyImpact": estimated_monthly_savings_or_earnings
    }
  ]
}"""

VOICE_FORMAT = """Format as JSON:
{
  "intent": "expense|income|question|budget|savings|unknown",
  "confidence": 0.0-1.0,
  "extractedData": {
    "amount": number_or_null,
    "category": "string_or_null",
    "description": "string_or_null",
    "date": "YYYY-MM-DD_or_null",
    "merchant": "string_or_null",
    "paymentMethod": "string_or_null"
  },
  "response": "Helpful, contextual response",
  "followUpQuestions": ["question1", "question2"],
  "suggestedActions": ["action1", "action2"]
}"""


def _money(value: float) -> str:
    # 4000.0 -> "4000", 12.5 -> "12.5"
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _habit_line(habit: Habit) -> str:
    line = f"- {habit.category}: ${_money(habit.amount)} {habit.frequency} - {habit.description}"
    return line + " (Recurring)" if habit.is_recurring else line


def build_recommendation_prompt(
    habits: List[Habit],
    monthly_income: float,
    monthly_expenses: float,
    analytics: FinancialAnalytics,
    financial_goals: Optional[str] = None,
) -> str:
    """Overview, analytics, top categories and habit list, followed by the JSON contract"""
    categories = "\n".join(
        f"- {c.category}: ${c.amount:.2f} ({c.percentage:.1f}%)" for c in analytics.top_spending_categories
    ) or "- None"
    habit_lines = "\n".join(_habit_line(h) for h in habits) or "- None tracked"

    sections = [
        "Based on this comprehensive financial analysis:",
        f"""FINANCIAL OVERVIEW:
- Monthly Income: ${_money(monthly_income)}
- Monthly Expenses: ${_money(monthly_expenses)}
- Savings Rate: {analytics.savings_rate_percent:.1f}%
- Expenses as Share of Income: {analytics.expense_to_income_percent:.1f}%
- Financial Health Score: {analytics.financial_health_score}/100
- Risk Level: {analytics.risk_level}
- Monthly Trend: {analytics.monthly_trend}
- Discretionary Spending: ${analytics.discretionary_spending:.2f}""",
        f"TOP SPENDING CATEGORIES:\n{categories}",
        f"FINANCIAL HABITS:\n{habit_lines}",
    ]
    if financial_goals:
        sections.append(f"USER GOALS: {financial_goals}")

    sections.append(
        """Generate 5-7 highly specific, actionable financial recommendations that address:
1. Immediate quick wins (1-2 weeks)
2. Medium-term improvements (1-3 months)
3. Long-term strategies (6+ months)
4. Risk mitigation based on their risk level
5. Optimization of their top spending categories
6. Achievement of their stated goals

Each recommendation must include specific dollar amounts, implementation steps,
impact/feasibility/urgency scores (1-10), related habits and a monthly impact estimate."""
    )
    sections.append(RECOMMENDATION_FORMAT)

    return "\n\n".join(sections)


def build_voice_prompt(
    transcript: str,
    monthly_income: Optional[float] = None,
    monthly_expenses: Optional[float] = None,
    recent_habits: Optional[List[Habit]] = None,
) -> str:
    """Ask for intent classification and data extraction from a transcript"""
    sections = [f'Analyze this real-time voice transcript from a financial app user:\n"{transcript}"']

    if monthly_income is not None or monthly_expenses is not None or recent_habits:
        habits = ", ".join(f"{h.category}: ${_money(h.amount)}" for h in recent_habits or []) or "None"
        sections.append(
            f"""Context:
- Monthly Income: ${_money(monthly_income or 0)}
- Monthly Expenses: ${_money(monthly_expenses or 0)}
- Recent Habits: {habits}"""
        )

    sections.append(
        """Provide:
1. Intent classification (expense, income, question, budget, savings, unknown)
2. Confidence score (0-1)
3. Extracted financial data (amount, category, description, date, merchant, payment method)
4. Appropriate response
5. Follow-up questions if needed
6. Suggested actions"""
    )
    sections.append(VOICE_FORMAT)

    return "\n\n".join(sections)


def build_question_prompt(
    question: str,
    monthly_income: Optional[float] = None,
    monthly_expenses: Optional[float] = None,
    habit_count: Optional[int] = None,
) -> str:
    sections = [f'As an expert financial advisor, answer this question clearly and helpfully:\n"{question}"']

    if monthly_income is not None or monthly_expenses is not None or habit_count is not None:
        sections.append(
            f"""Context:
- Monthly Income: ${_money(monthly_income or 0)}
- Monthly Expenses: ${_money(monthly_expenses or 0)}
- Financial Habits: {habit_count or 0} tracked"""
        )

    sections.append(
        """Provide a concise, actionable response that includes a direct answer, specific
examples or calculations if relevant, and next steps that fit the user's context."""
    )
    return "\n\n".join(sections)


def build_coaching_prompt(habits: List[Habit]) -> str:
    # Only the five most recent habits
    recent = "\n".join(f"- {h.category}: ${_money(h.amount)} {h.description}" for h in habits[-5:]) or "- None"
    return f"""Based on these recent financial habits:
{recent}

Provide a brief, actionable financial coaching tip (1-2 sentences) that addresses a specific
pattern, offers immediate practical advice, and stays encouraging. Keep it conversational."""
