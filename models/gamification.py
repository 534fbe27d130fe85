from sqlalchemy import Column, Integer, Date, DateTime, Boolean, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.sql import func
from database import Base
import enum

class AchievementType(enum.Enum):
    FIRST_PLAN = "first_plan"
    FIRST_EVALUATION = "first_evaluation"
    STREAK_3 = "streak_3"
    STREAK_7 = "streak_7"
    STREAK_30 = "streak_30"
    COMMUNICATION_MASTER = "communication_master"
    LISTENER_PRO = "listener_pro"
    PITCH_PERFECT = "pitch_perfect"
    GOAL_ACHIEVER = "goal_achiever"
    REPORT_GENERATOR = "report_generator"
    CONSISTENCY_KING = "consistency_king"

class GoalType(enum.Enum):
    BUSINESS_PLANS = "business_plans"
    EVALUATIONS = "evaluations"
    PITCH_SESSIONS = "pitch_sessions"
    LISTENING_EXERCISES = "listening_exercises"
    REPORTS_GENERATED = "reports_generated"

class UserStreak(Base):
    __tablename__ = "user_streaks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    longest_streak = Column(Integer, default=0, nullable=False)
    total_xp = Column(Integer, default=0, nullable=False)
    level = Column(Integer, default=1, nullable=False)
    last_activity_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_type", name="uniq_user_achievement"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    achievement_type = Column(Enum(AchievementType), nullable=False)
    earned_at = Column(DateTime(timezone=True), server_default=func.now())

class WeeklyGoal(Base):
    __tablename__ = "weekly_goals"
    __table_args__ = (
        UniqueConstraint("user_id", "goal_type", "week_start", name="uniq_weekly_goal"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    goal_type = Column(Enum(GoalType), nullable=False)
    target_value = Column(Integer, default=1, nullable=False)
    current_value = Column(Integer, default=0, nullable=False)
    week_start = Column(Date, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
