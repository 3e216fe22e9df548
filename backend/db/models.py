from datetime import datetime
from sqlalchemy import (
    Column, Integer, Text, Float, Boolean, ForeignKey, Index,
    DateTime,
)
from sqlalchemy.orm import relationship
from db.database import Base


class DayPlan(Base):
    __tablename__ = "day_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Text, unique=True, nullable=False)  # YYYY-MM-DD, local calendar
    created_at = Column(DateTime, default=datetime.utcnow)

    goals = relationship(
        "Goal",
        back_populates="day_plan",
        cascade="all, delete-orphan",
        order_by="Goal.id",
    )


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    day_plan_id = Column(Integer, ForeignKey("day_plans.id"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text)
    category = Column(Text, nullable=False, default="personal_development")
    subcategory = Column(Text)
    time_slot = Column(Text)  # e.g. "before 09:00", "11:00-12:00"
    completed = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime)
    missed_reason = Column(Text)
    missed_notes = Column(Text)
    missed_at = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    day_plan = relationship("DayPlan", back_populates="goals")

    __table_args__ = (Index("ix_goals_day_plan", "day_plan_id"),)


class Reflection(Base):
    __tablename__ = "reflections"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Text, unique=True, nullable=False)  # YYYY-MM-DD, local calendar
    total_goals = Column(Integer, nullable=False, default=0)
    completed_goals = Column(Integer, nullable=False, default=0)
    completion_percentage = Column(Float, nullable=False, default=0.0)
    missed_goals = Column(Text)  # JSON object goal_id -> reason
    goal_feedback = Column(Text)  # JSON object goal_id -> feedback
    overall_feeling = Column(Integer)  # 1-5
    notes = Column(Text)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_modified = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
