"""Data access layer for habits and avatar state"""

from typing import List, Optional
from sqlalchemy.orm import Session
from finavatar.infrastructure.database.models import HabitRecord, AvatarStateRecord
from finavatar.domain.models import Habit, HealthMetrics
from finavatar.utils.date_utils import ensure_utc


def _to_domain(record: HabitRecord) -> Habit:
    return Habit(
        id=record.id,
        owner_id=record.owner_id,
        category=record.category,
        amount=record.amount,
        frequency=record.frequency,
        description=record.description,
        is_recurring=record.is_recurring,
        created_at=ensure_utc(record.created_at),
    )


class HabitRepository:
    """Repository for habits; loads and stores whole domain records"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_owner(self, owner_id: str) -> List[Habit]:
        """Fetch a user's habits in insertion order"""
        records = (
            self.db.query(HabitRecord)
            .filter(HabitRecord.owner_id == owner_id)
            .order_by(HabitRecord.created_at.asc())
            .all()
        )
        return [_to_domain(r) for r in records]

    def add(self, habit: Habit) -> None:
        """Persist a newly created habit"""
        self.db.add(
            HabitRecord(
                id=habit.id,
                owner_id=habit.owner_id,
                category=habit.category,
                amount=habit.amount,
                frequency=habit.frequency,
                description=habit.description,
                is_recurring=habit.is_recurring,
                created_at=habit.created_at,
            )
        )
        self.db.flush()

    def save(self, habit: Habit) -> None:
        """Write mutable fields of an existing habit back"""
        record = self.db.get(HabitRecord, habit.id)
        if record is None:
            self.add(habit)
            return

        record.owner_id = habit.owner_id
        record.category = habit.category
        record.amount = habit.amount
        record.frequency = habit.frequency
        record.description = habit.description
        record.is_recurring = habit.is_recurring
        self.db.flush()

    def delete(self, habit_id: str) -> None:
        record = self.db.get(HabitRecord, habit_id)
        if record is not None:
            self.db.delete(record)
            self.db.flush()


class AvatarStateRepository:
    """Repository for the per-user avatar state"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[AvatarStateRecord]:
        return self.db.get(AvatarStateRecord, user_id)

    def upsert(self, user_id: str, metrics: HealthMetrics, financial_score: float) -> AvatarStateRecord:
        """Replace the user's avatar state with freshly computed metrics"""
        record = self.get(user_id)
        if record is None:
            record = AvatarStateRecord(user_id=user_id)
            self.db.add(record)

        record.fitness_level = metrics.fitness_level
        record.weight_level = metrics.weight_level
        record.stress_level = metrics.stress_level
        record.happiness_level = metrics.happiness_level
        record.body_archetype = metrics.body_archetype
        record.financial_score = financial_score
        self.db.flush()
        return record
