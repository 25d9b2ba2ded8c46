"""Habit analytics engine - owns the habit collection and its derived patterns"""

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional
from finavatar.domain.models import Habit, HabitPattern, SpendingInsights, Frequency, Trend
from finavatar.domain.exceptions import InvalidHabitUpdateError
from finavatar.utils.date_utils import utcnow, ensure_utc, window_start

RECENT_WINDOW_DAYS = 30

# Multipliers converting a habit amount to a monthly or daily equivalent
MONTHLY_FACTORS: Dict[str, float] = {"daily": 30.0, "weekly": 4.0, "monthly": 1.0, "yearly": 1 / 12}
DAILY_FACTORS: Dict[str, float] = {"daily": 1.0, "weekly": 1 / 7, "monthly": 1 / 30, "yearly": 1 / 365}

MUTABLE_FIELDS = {"owner_id", "category", "amount", "frequency", "description", "is_recurring"}
IMMUTABLE_FIELDS = {"id", "created_at"}


def monthly_amount(habit: Habit) -> float:
    """Habit amount expressed as a monthly cost"""
    return habit.amount * MONTHLY_FACTORS.get(habit.frequency, 1.0)


def daily_amount(habit: Habit) -> float:
    """Habit amount expressed as a daily cost"""
    return habit.amount * DAILY_FACTORS.get(habit.frequency, 1.0)


def _average(values: List[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def classify_trend(recent_avg: float, older_avg: float) -> Trend:
    """
    Compare recent vs older average spend with a 10% dead band.

    An empty half averages 0, so a category whose habits are all recent
    always reads as increasing.
    """
    if recent_avg > older_avg * 1.1:
        return "increasing"
    elif recent_avg < older_avg * 0.9:
        return "decreasing"
    return "stable"


class HabitAnalytics:
    """
    In-memory habit collection with eagerly recomputed patterns.

    Every mutation recomputes patterns before returning, so reads never see
    stale aggregates. Persistence is left to the caller.
    """

    def __init__(self, habits: Optional[Iterable[Habit]] = None, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utcnow
        self._habits: List[Habit] = list(habits or [])
        self._patterns: List[HabitPattern] = []
        self.recompute_patterns()

    @property
    def habits(self) -> List[Habit]:
        return list(self._habits)

    @property
    def patterns(self) -> List[HabitPattern]:
        return list(self._patterns)

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    def _find_index(self, habit_id: str) -> Optional[int]:
        for i, habit in enumerate(self._habits):
            if habit.id == habit_id:
                return i
        return None

    # Mutations

    def add_habit(
        self,
        owner_id: str,
        category: str,
        amount: float,
        frequency: Frequency,
        description: str = "",
        is_recurring: bool = False,
    ) -> Habit:
        """Record a new habit with a fresh id and the current timestamp"""
        habit = Habit(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            category=category,
            amount=amount,
            frequency=frequency,
            description=description,
            is_recurring=is_recurring,
            created_at=self._now(),
        )
        self._habits.append(habit)
        self.recompute_patterns()
        return habit

    def update_habit(self, habit_id: str, **changes) -> Optional[Habit]:
        """
        Replace only the supplied fields on a habit.

        id and created_at are immutable and silently ignored.

        Returns:
            The updated habit, or None if no habit has that id

        Raises:
            InvalidHabitUpdateError: If a change names an unknown field
        """
        unknown = set(changes) - MUTABLE_FIELDS - IMMUTABLE_FIELDS
        if unknown:
            raise InvalidHabitUpdateError(f"Unknown habit fields: {', '.join(sorted(unknown))}")

        index = self._find_index(habit_id)
        if index is None:
            return None

        updates = {k: v for k, v in changes.items() if k in MUTABLE_FIELDS}
        updated = replace(self._habits[index], **updates)
        self._habits[index] = updated
        self.recompute_patterns()
        return updated

    def delete_habit(self, habit_id: str) -> bool:
        """Remove a habit; returns False if it was not present"""
        index = self._find_index(habit_id)
        if index is None:
            return False

        del self._habits[index]
        self.recompute_patterns()
        return True

    # Queries

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        index = self._find_index(habit_id)
        return self._habits[index] if index is not None else None

    def habits_by_category(self, category: str) -> List[Habit]:
        """Case-insensitive exact match on category"""
        key = category.lower()
        return [h for h in self._habits if h.category.lower() == key]

    def habits_in_range(self, start: datetime, end: datetime) -> List[Habit]:
        """Habits created between start and end (inclusive)"""
        start, end = ensure_utc(start), ensure_utc(end)
        return [h for h in self._habits if start <= ensure_utc(h.created_at) <= end]

    # Derived data

    def recompute_patterns(self) -> List[HabitPattern]:
        """
        Regroup habits by exact category string and rebuild patterns.

        Grouping is case-sensitive ("Food" and "food" are two patterns),
        unlike habits_by_category.
        """
        groups: Dict[str, List[Habit]] = {}
        for habit in self._habits:
            groups.setdefault(habit.category, []).append(habit)

        cutoff = window_start(self._now(), RECENT_WINDOW_DAYS)
        patterns = []

        for category, members in groups.items():
            total_spent = sum(h.amount for h in members)
            recent = [h.amount for h in members if ensure_utc(h.created_at) > cutoff]
            older = [h.amount for h in members if ensure_utc(h.created_at) <= cutoff]

            patterns.append(
                HabitPattern(
                    category=category,
                    average_amount=total_spent / len(members),
                    frequency=len(members),
                    total_spent=total_spent,
                    trend=classify_trend(_average(recent), _average(older)),
                )
            )

        self._patterns = patterns
        return self.patterns

    def total_recurring_monthly_cost(self) -> float:
        return sum(monthly_amount(h) for h in self._habits if h.is_recurring)

    def average_daily_spending(self) -> float:
        """Daily-normalized spend of the last 30 days, divided by the window length"""
        cutoff = window_start(self._now(), RECENT_WINDOW_DAYS)
        recent_total = sum(daily_amount(h) for h in self._habits if ensure_utc(h.created_at) > cutoff)
        return recent_total / RECENT_WINDOW_DAYS

    def spending_insights(self) -> SpendingInsights:
        """
        Summarize current habits.

        Recommendations, in order:
        - per pattern, highest total first: increasing trend with more than 500 spent
        - recurring costs above 70% of the monthly spend rate
        - average daily spending above 100
        """
        ranked = sorted(self._patterns, key=lambda p: p.total_spent, reverse=True)
        top_categories = [p.category for p in ranked[:3]]

        total_recurring = self.total_recurring_monthly_cost()
        avg_daily = self.average_daily_spending()

        recommendations = [
            f"Consider reducing spending in {p.category} - it's been increasing lately"
            for p in ranked
            if p.trend == "increasing" and p.total_spent > 500
        ]

        if total_recurring > avg_daily * 30 * 0.7:
            recommendations.append(
                "A large portion of your spending is recurring - look for subscription services to cancel"
            )

        if avg_daily > 100:
            recommendations.append("Your daily spending is quite high - try setting daily spending limits")

        return SpendingInsights(
            top_categories=top_categories,
            total_recurring_monthly_cost=total_recurring,
            average_daily_spending=avg_daily,
            recommendations=recommendations,
        )
