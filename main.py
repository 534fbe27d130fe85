# main.py - Entrepreneur-X API
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from database import engine, Base
from config import settings
from routers import auth, business, communication, pitch, gamification, reports, speech
from services.gamification_service import ACHIEVEMENTS
from services.pitch_service import SCENARIOS
import logging
import os
import time

# Import all models to ensure they're registered with SQLAlchemy
from models.user import User, Profile
from models.business import BusinessInput
from models.communication import CommunicationEvaluation
from models.pitch import PitchSession
from models.gamification import UserStreak, UserAchievement, WeeklyGoal
from models.report import SavedReport

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create tables
logger.info("Creating database tables...")
Base.metadata.create_all(bind=engine)
logger.info("Database tables created successfully!")

FEATURES = [
    {
        "title": "Business Planning",
        "description": "Turn your interests, budget and goals into a starter business idea with a 12-week roadmap."
    },
    {
        "title": "Communication Skills",
        "description": "Fluency, grammar, pronunciation and listening comprehension evaluation with feedback."
    },
    {
        "title": "Pitch Practice",
        "description": "Rehearse investor, client, partnership and elevator pitches and get instant scoring."
    },
    {
        "title": "Progress Reports",
        "description": "Track your scores over time and download PDF reports."
    },
]

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("🚀 Entrepreneur-X API Starting Up...")
    logger.info("=" * 50)

    logger.info(f"📁 Report Directory: {settings.REPORT_DIRECTORY}")
    logger.info(f"🗄️  Database URL: {settings.DATABASE_URL}")
    logger.info(f"🔊 Speech token: {'✓ Set' if settings.HUGGINGFACEHUB_API_TOKEN else '✗ Not Set'}")
    logger.info(f"🎲 Scoring seed: {settings.SCORING_SEED if settings.SCORING_SEED is not None else 'random'}")

    routes_by_tag = {}
    for route in app.routes:
        if hasattr(route, 'methods') and hasattr(route, 'path') and hasattr(route, 'tags'):
            methods = sorted(m for m in (route.methods or []) if m not in ('HEAD', 'OPTIONS'))
            tag = route.tags[0] if route.tags else 'general'
            routes_by_tag.setdefault(tag, []).append(f"  {', '.join(methods):>12} {route.path}")

    logger.info("📋 Registered API Routes:")
    for tag, routes in sorted(routes_by_tag.items()):
        logger.info(f"  [{tag.upper()}]")
        for route in sorted(routes):
            logger.info(route)
    logger.info("=" * 50)

    yield

    logger.info("🛑 Shutting down Entrepreneur-X API...")

app = FastAPI(
    title="Entrepreneur-X API",
    description="Business planning, communication practice and progress tracking for first-time entrepreneurs",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for directory in (settings.REPORT_DIRECTORY, settings.UPLOAD_DIRECTORY):
    os.makedirs(directory, exist_ok=True)

app.include_router(auth.router)
app.include_router(business.router)
app.include_router(communication.router)
app.include_router(pitch.router)
app.include_router(gamification.router)
app.include_router(reports.router)
app.include_router(speech.router)

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": "Entrepreneur-X API",
        "version": "1.0.0",
        "status": "running",
        "timestamp": time.time(),
        "endpoints": {
            "docs": "/docs",
            "health": "/health",
            "info": "/api/info",
            "api": {
                "auth": "/api/auth",
                "business": "/api/business",
                "communication": "/api/communication",
                "pitch": "/api/pitch",
                "gamification": "/api/gamification",
                "reports": "/api/reports",
                "speech": "/api/speech"
            }
        }
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": "1.0.0",
        "timestamp": time.time(),
        "database": "connected",
        "report_dir": "accessible" if os.path.exists(settings.REPORT_DIRECTORY) else "missing"
    }

@app.get("/api/info")
async def product_info():
    """Static product information shown on the landing pages"""
    return {
        "name": "ENTREPRENEUR-X",
        "tagline": "Plan your business launch and sharpen your communication skills",
        "features": FEATURES,
        "pitchScenarios": len(SCENARIOS),
        "achievements": len(ACHIEVEMENTS)
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
