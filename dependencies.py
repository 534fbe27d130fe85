import random
from functools import lru_cache

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.user import User
from services.auth_service import AuthService
from services.speech_service import SpeechService
from utils.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login/oauth2")

credentials_exception = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Could not validate credentials",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> User:
    try:
        payload = decode_token(token)
    except jwt.PyJWTError:
        raise credentials_exception

    email = payload.get("sub")
    if not email or payload.get("type") != "access":
        raise credentials_exception

    user = AuthService.get_user_by_email(db, email)
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_rng() -> random.Random:
    """Random source for the scorers; seeded when SCORING_SEED is configured."""
    if settings.SCORING_SEED is not None:
        return random.Random(settings.SCORING_SEED)
    return random.Random()


@lru_cache
def get_speech_service() -> SpeechService:
    return SpeechService()
