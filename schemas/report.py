from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from models.report import ReportType

class RadarPoint(BaseModel):
    subject: str
    score: int

class ProgressPoint(BaseModel):
    name: str
    score: int

class ProgressSummary(BaseModel):
    business_plan_count: int
    evaluation_count: int
    average_communication: int
    readiness: str
    radar: List[RadarPoint]
    progress: List[ProgressPoint]

class SavedReportResponse(BaseModel):
    id: int
    report_name: str
    report_type: ReportType
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
