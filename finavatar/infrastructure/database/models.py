"""SQLAlchemy ORM models for habits and avatar state"""

from sqlalchemy import Column, String, Boolean, Float, DateTime, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class HabitRecord(Base):
    """Persisted spending habit"""

    __tablename__ = "habit"

    id = Column(String(36), primary_key=True)
    owner_id = Column(Text, nullable=False, index=True)
    category = Column(Text, nullable=False)
    amount = Column(Float, nullable=False)
    frequency = Column(String(16), nullable=False)
    description = Column(Text, nullable=False, default="")
    is_recurring = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False)


class AvatarStateRecord(Base):
    """Latest avatar metrics for a user (one row per user)"""

    __tablename__ = "avatar_state"

    user_id = Column(Text, primary_key=True)
    fitness_level = Column(Float, nullable=False)
    weight_level = Column(Float, nullable=False)
    stress_level = Column(Float, nullable=False)
    happiness_level = Column(Float, nullable=False)
    body_archetype = Column(String(16), nullable=False)
    financial_score = Column(Float, nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
