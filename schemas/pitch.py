from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from schemas.gamification import UnlockedAchievement

class Scenario(BaseModel):
    id: str
    title: str
    description: str
    prompt: str
    tips: List[str]
    sample_response: str
    duration: str

class PitchRequest(BaseModel):
    scenario_type: str
    user_response: str

class PitchResult(BaseModel):
    id: int
    score: int
    feedback: str
    achievements_unlocked: List[UnlockedAchievement] = []

class PitchSessionResponse(BaseModel):
    id: int
    scenario_type: str
    user_response: str
    ai_feedback: Optional[str] = None
    score: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
