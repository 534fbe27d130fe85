import logging
import random
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user, get_rng
from models.user import User
from schemas.business import BusinessPlanRequest, BusinessPlanResult, BusinessInputResponse
from services.business_service import BusinessService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/business", tags=["business"])

@router.get("/options")
async def get_plan_options():
    """Categories and budget tiers accepted by the planner."""
    return BusinessService.get_options()

@router.post("/plans", response_model=BusinessPlanResult)
async def create_plan(
    plan: BusinessPlanRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_rng)
):
    try:
        return BusinessService.submit_plan(db, current_user.id, plan, rng)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error saving business plan: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to generate business plan")

@router.get("/plans", response_model=List[BusinessInputResponse])
async def get_plans(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return BusinessService.list_plans(db, current_user.id)
    except Exception as e:
        logger.error(f"Error getting business plans: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve business plans")
