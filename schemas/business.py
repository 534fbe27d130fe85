from pydantic import BaseModel, field_validator
from typing import List, Optional
from datetime import datetime
from models.business import BusinessCategory, BudgetTier
from schemas.gamification import UnlockedAchievement

class BusinessPlanRequest(BaseModel):
    business_interest: BusinessCategory
    budget: BudgetTier
    location: str
    goals: str

    @field_validator("business_interest", "budget", mode="before")
    @classmethod
    def lowercase_choice(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

class Recommendation(BaseModel):
    business_idea: str
    startup_cost: str
    roadmap: List[str]
    resources: List[str]

class BusinessPlanResult(BaseModel):
    id: int
    recommendation: Recommendation
    achievements_unlocked: List[UnlockedAchievement] = []

class BusinessInputResponse(BaseModel):
    id: int
    business_interest: BusinessCategory
    budget: BudgetTier
    location: str
    goals: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
