import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user
from models.user import User
from schemas.gamification import UserStats, WeeklyGoalsResponse, AchievementGallery
from services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/gamification", tags=["gamification"])

@router.get("/stats", response_model=UserStats)
async def get_stats(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return GamificationService.get_stats(db, current_user.id)
    except Exception as e:
        logger.error(f"Error fetching stats: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve stats")

@router.get("/goals", response_model=WeeklyGoalsResponse)
async def get_weekly_goals(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """This week's goals; the four defaults are created on the first visit of the week."""
    try:
        return GamificationService.get_weekly_goals(db, current_user.id)
    except Exception as e:
        db.rollback()
        logger.error(f"Error fetching goals: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve weekly goals")

@router.get("/achievements", response_model=AchievementGallery)
async def get_achievements(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return GamificationService.get_achievement_gallery(db, current_user.id)
    except Exception as e:
        logger.error(f"Error fetching achievements: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve achievements")
