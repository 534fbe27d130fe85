from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from schemas.gamification import UnlockedAchievement

class EvaluationRequest(BaseModel):
    input_text: str

class EvaluationResult(BaseModel):
    id: Optional[int] = None
    fluency_score: int
    grammar_score: int
    pronunciation_score: int
    listening_score: int
    overall_score: int
    feedback: str
    strengths: List[str]
    improvements: List[str]
    achievements_unlocked: List[UnlockedAchievement] = []

class EvaluationResponse(BaseModel):
    id: int
    input_text: str
    fluency_score: int
    grammar_score: int
    pronunciation_score: int
    listening_score: int
    overall_score: int
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
