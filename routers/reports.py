import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user
from models.user import User
from schemas.report import ProgressSummary, SavedReportResponse
from services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["reports"])

def _report_result(result: dict) -> dict:
    return {
        "report": SavedReportResponse.model_validate(result["report"]).model_dump(mode="json"),
        "achievements_unlocked": result["achievements_unlocked"]
    }

@router.get("/summary", response_model=ProgressSummary)
async def get_summary(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return ReportService.get_progress_summary(db, current_user.id)
    except Exception as e:
        logger.error(f"Error building progress summary: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve progress summary")

@router.post("/communication/{evaluation_id}")
async def create_communication_report(
    evaluation_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return _report_result(ReportService.create_communication_report(db, current_user, evaluation_id))
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error generating communication report: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate report")

@router.post("/business-plans")
async def create_business_plan_report(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return _report_result(ReportService.create_business_plan_report(db, current_user))
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error generating business plan report: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate report")

@router.get("", response_model=List[SavedReportResponse])
async def get_reports(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return ReportService.list_reports(db, current_user.id)
    except Exception as e:
        logger.error(f"Error getting reports: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve reports")

@router.get("/{report_id}/download")
async def download_report(
    report_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    report = ReportService.get_report(db, current_user.id, report_id)
    filename = f"{report.report_type.value}_report_{report.id}.pdf"
    return FileResponse(report.file_path, media_type="application/pdf", filename=filename)
