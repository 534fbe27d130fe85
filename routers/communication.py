import logging
import random
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user, get_rng
from models.user import User
from schemas.communication import EvaluationRequest, EvaluationResult, EvaluationResponse
from services.communication_service import CommunicationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/communication", tags=["communication"])

@router.post("/evaluations", response_model=EvaluationResult)
async def create_evaluation(
    request: EvaluationRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    rng: random.Random = Depends(get_rng)
):
    try:
        return CommunicationService.submit_evaluation(db, current_user.id, request.input_text, rng)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error evaluating communication: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to evaluate communication")

@router.get("/evaluations", response_model=List[EvaluationResponse])
async def get_evaluations(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        return CommunicationService.list_evaluations(db, current_user.id)
    except Exception as e:
        logger.error(f"Error getting evaluations: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to retrieve evaluations")
