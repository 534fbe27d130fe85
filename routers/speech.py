import logging
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database import get_db
from dependencies import get_current_active_user, get_speech_service
from models.user import User
from services.gamification_service import GamificationService
from services.pitch_service import PitchService
from services.speech_service import SpeechService, SpeechUnavailable, PlaybackInterrupted, narrators
from utils.file_handler import read_audio

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/speech", tags=["speech"])

@router.post("/scenarios/{scenario_id}/sample")
async def narrate_sample(
    scenario_id: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    speech: SpeechService = Depends(get_speech_service)
):
    """Read a scenario's sample response aloud; counts as a listening exercise."""
    scenario = PitchService.get_scenario(scenario_id)
    narrator = narrators.for_user(current_user.id)

    try:
        audio = await narrator.speak(scenario["sample_response"], speech.synthesize)
    except PlaybackInterrupted:
        raise HTTPException(status_code=409, detail="Playback was stopped or replaced")
    except SpeechUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))

    unlocked = []
    try:
        unlocked = GamificationService.record_listening_exercise(db, current_user.id)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error recording listening exercise: {str(e)}")

    # the body is audio, so unlocks travel in a header as a comma-separated list
    return Response(
        content=audio,
        media_type="audio/flac",
        headers={"X-Achievements-Unlocked": ",".join(a["type"] for a in unlocked)}
    )

@router.get("/playback")
async def get_playback(current_user: User = Depends(get_current_active_user)):
    narrator = narrators.for_user(current_user.id)
    return {"isPlaying": narrator.is_playing, "text": narrator.text}

@router.delete("/playback")
async def stop_playback(current_user: User = Depends(get_current_active_user)):
    stopped = narrators.for_user(current_user.id).stop()
    return {"stopped": stopped}

@router.post("/transcribe")
async def transcribe_audio(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_active_user),
    speech: SpeechService = Depends(get_speech_service)
):
    audio = await read_audio(file)
    try:
        transcript = await speech.transcribe(audio)
    except SpeechUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {"transcript": transcript}
