import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user
from models.user import User
from schemas.pitch import Scenario, PitchRequest, PitchResult, PitchSessionResponse
from services.pitch_service import PitchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pitch", tags=["pitch"])

@router.get("/scenarios", response_model=List[Scenario])
async def get_scenarios():
    return PitchService.get_scenarios()

@router.get("/scenarios/{scenario_id}", response_model=Scenario)
async def get_scenario(scenario_id: str):
    return PitchService.get_scenario(scenario_id)

@router.post("/sessions", response_model=PitchResult)
async def submit_pitch(
    request: PitchRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return PitchService.submit_pitch(db, current_user.id, request.scenario_type, request.user_response)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error submitting pitch: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to submit pitch")

@router.get("/sessions", response_model=List[PitchSessionResponse])
async def get_sessions(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return PitchService.list_sessions(db, current_user.id)
    except Exception as e:
        logger.error(f"Error getting pitch sessions: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve pitch sessions")
