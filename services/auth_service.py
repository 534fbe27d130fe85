import logging
from sqlalchemy.orm import Session
from models.user import User, Profile
from schemas.user import UserCreate
from utils.security import get_password_hash, verify_password
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

class AuthService:

    @staticmethod
    def create_user(db: Session, user_data: UserCreate) -> User:
        name = (user_data.name or "").strip()
        email = (user_data.email or "").strip().lower()

        if not name or not email or not (user_data.password or "").strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please fill in all fields"
            )

        if len(user_data.password) < MIN_PASSWORD_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Password must be at least 6 characters"
            )

        # Check if user already exists
        existing_user = AuthService.get_user_by_email(db, email)
        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        db_user = User(
            email=email,
            password_hash=get_password_hash(user_data.password)
        )
        db_user.profile = Profile(name=name, email=email)

        db.add(db_user)
        db.commit()
        db.refresh(db_user)

        logger.info(f"👤 Registered user {db_user.id}")
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        email = (email or "").strip().lower()
        user = AuthService.get_user_by_email(db, email)

        if not user:
            logger.info(f"Login failed: no user for {email}")
            return None

        if not verify_password(password, user.password_hash):
            logger.info(f"Login failed: wrong password for user {user.id}")
            return None

        return user

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> User:
        return db.query(User).filter(User.email == email).first()
