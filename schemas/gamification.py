from pydantic import BaseModel
from typing import List, Optional
from datetime import date, datetime

class UnlockedAchievement(BaseModel):
    type: str
    title: str
    description: str
    xp: int

class LevelProgress(BaseModel):
    level: int
    total_xp: int
    current_level_xp: int
    next_level_xp: int
    xp_to_next_level: int
    progress: float

class UserStats(BaseModel):
    current_streak: int
    longest_streak: int
    total_xp: int
    level: int
    achievement_count: int
    level_progress: LevelProgress
    level_consistent: bool

class WeeklyGoalResponse(BaseModel):
    id: int
    goal_type: str
    label: str
    target_value: int
    current_value: int
    completed: bool
    progress: float

class WeeklyGoalsResponse(BaseModel):
    week_start: date
    goals: List[WeeklyGoalResponse]
    completed_count: int
    total_progress: float

class AchievementEntry(BaseModel):
    type: str
    title: str
    description: str
    xp: int
    icon: str
    unlocked: bool
    earned_at: Optional[datetime] = None

class AchievementGallery(BaseModel):
    achievements: List[AchievementEntry]
    unlocked_count: int
    total_count: int
