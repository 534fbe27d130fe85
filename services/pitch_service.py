import logging
import re
from typing import Dict, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from config import FEEDBACK_MAX_LENGTH, RESPONSE_MAX_LENGTH
from models.gamification import AchievementType, GoalType
from models.pitch import PitchSession
from services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

BUSINESS_TERMS = ["problem", "solution", "market", "revenue", "customer", "growth", "value", "opportunity"]
CTA_TERMS = ["let's", "would you", "shall we", "next step", "contact", "schedule"]
DIGIT = re.compile(r"[0-9]")

PITCH_PERFECT_SCORE = 85

SCENARIOS = {
    "investor_pitch": {
        "id": "investor_pitch",
        "title": "Investor Pitch",
        "description": "Pitch your business idea to potential investors",
        "prompt": "You have 60 seconds to pitch your business idea to a group of angel investors. "
                  "They want to know: What problem do you solve? What's your solution? "
                  "What's your revenue model?",
        "tips": [
            "Start with a compelling hook or problem statement",
            "Clearly articulate your unique value proposition",
            "Mention your target market size and traction",
            "End with a clear ask (funding amount, next steps)",
        ],
        "sample_response": "Good morning investors. Did you know that 70% of small business owners waste "
                           "10+ hours weekly on manual scheduling? I'm here to change that. My company, "
                           "ScheduleX, is an AI-powered scheduling assistant that automates appointment "
                           "booking, reducing admin time by 80%. We charge $29/month per business and "
                           "already have 500 paying customers with 15% month-over-month growth. We're "
                           "raising $500,000 to expand our sales team and integrate with 10 more "
                           "platforms. Let's revolutionize how businesses manage their time.",
        "duration": "60 seconds",
    },
    "client_meeting": {
        "id": "client_meeting",
        "title": "Client Meeting",
        "description": "Present your services to a potential client",
        "prompt": "A potential client wants to understand how your product/service can help their "
                  "business. Explain your offering and how it addresses their specific needs.",
        "tips": [
            "Ask clarifying questions to understand their pain points",
            "Relate features to their specific business challenges",
            "Use concrete examples and case studies",
            "Provide clear next steps and timeline",
        ],
        "sample_response": "Thank you for meeting with me today. Based on our initial conversation, I "
                           "understand you're struggling with inventory management and losing sales due "
                           "to stockouts. Our inventory management system uses predictive analytics to "
                           "forecast demand and automate reordering. Similar businesses in your industry "
                           "have reduced stockouts by 45% within the first quarter. I'd like to propose "
                           "a 30-day pilot where we integrate with your existing POS system. Would next "
                           "Tuesday work for a deeper discovery session?",
        "duration": "90 seconds",
    },
    "partnership": {
        "id": "partnership",
        "title": "Partnership Proposal",
        "description": "Propose a strategic business partnership",
        "prompt": "You're meeting with a potential business partner. Present a mutually beneficial "
                  "partnership opportunity and outline how both parties can succeed together.",
        "tips": [
            "Highlight synergies between both businesses",
            "Propose specific collaboration mechanisms",
            "Address potential concerns proactively",
            "Suggest measurable success metrics",
        ],
        "sample_response": "I've been following your company's growth in the e-commerce space, and I "
                           "believe there's a powerful synergy between our businesses. Your platform "
                           "serves 50,000 online retailers, and our payment processing solution offers "
                           "the lowest transaction fees in the market. By integrating our API into your "
                           "platform, your merchants could save an average of 1.5% per transaction, "
                           "while we gain access to your established customer base. I propose a "
                           "revenue-sharing model where you receive 20% of all transaction fees from "
                           "referred merchants. Let's discuss how we can structure this for mutual "
                           "success.",
        "duration": "90 seconds",
    },
    "elevator_pitch": {
        "id": "elevator_pitch",
        "title": "Elevator Pitch",
        "description": "Quick 30-second business introduction",
        "prompt": "You're in an elevator with a potential customer or investor. You have 30 seconds "
                  "to explain what you do and why they should care.",
        "tips": [
            "Lead with the problem you solve",
            "Keep it simple and jargon-free",
            "Include a memorable fact or statistic",
            "End with a call to action",
        ],
        "sample_response": "Hi, I'm building the future of restaurant marketing. Did you know restaurants "
                           "spend $50,000 yearly on marketing with only 2% response rates? Our AI "
                           "platform analyzes customer data to send personalized offers at the perfect "
                           "moment, achieving 15% response rates. We've helped 200 restaurants double "
                           "their repeat customer visits. If you know any restaurant owners struggling "
                           "with customer retention, I'd love to connect.",
        "duration": "30 seconds",
    },
}


class PitchService:

    @staticmethod
    def get_scenarios() -> List[Dict]:
        return list(SCENARIOS.values())

    @staticmethod
    def get_scenario(scenario_id: str) -> Dict:
        scenario = SCENARIOS.get(scenario_id)
        if not scenario:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Scenario not found"
            )
        return scenario

    @staticmethod
    def analyze_pitch(text: str) -> Dict:
        """Rule-based pitch score (0-100) with one feedback line per rule."""
        score = 50
        feedback_points: List[str] = []
        lowered = text.lower()

        word_count = len(text.split())
        if word_count >= 50:
            score += 10
            feedback_points.append("✓ Good length and detail in your response")
        else:
            feedback_points.append("△ Consider adding more detail to your pitch")

        found_terms = [term for term in BUSINESS_TERMS if term in lowered]
        score += len(found_terms) * 5
        if len(found_terms) >= 3:
            feedback_points.append(f"✓ Strong use of business terminology ({', '.join(found_terms)})")
        else:
            feedback_points.append("△ Include more business-focused language")

        if DIGIT.search(text):
            score += 10
            feedback_points.append("✓ Good use of specific numbers and data")
        else:
            feedback_points.append("△ Add specific numbers to strengthen credibility")

        if "?" in text:
            score += 5
            feedback_points.append("✓ Engaging the audience with questions")
        else:
            feedback_points.append("△ Try a question to engage your audience")

        if any(term in lowered for term in CTA_TERMS):
            score += 10
            feedback_points.append("✓ Clear call to action")
        else:
            feedback_points.append("△ End with a stronger call to action")

        return {
            "score": max(0, min(100, score)),
            "feedback": "\n".join(feedback_points),
        }

    @staticmethod
    def submit_pitch(db: Session, user_id: int, scenario_type: str, user_response: str) -> Dict:
        if scenario_type not in SCENARIOS:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Unknown scenario"
            )
        response = (user_response or "").strip()
        if not response:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please provide your pitch response"
            )
        if len(response) > RESPONSE_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Response must be {RESPONSE_MAX_LENGTH} characters or less"
            )

        analysis = PitchService.analyze_pitch(response)

        db_session = PitchSession(
            user_id=user_id,
            scenario_type=scenario_type,
            user_response=response,
            ai_feedback=analysis["feedback"][:FEEDBACK_MAX_LENGTH],
            score=analysis["score"]
        )
        db.add(db_session)
        db.flush()

        unlocked = GamificationService.increment_goal(db, user_id, GoalType.PITCH_SESSIONS)
        if analysis["score"] >= PITCH_PERFECT_SCORE:
            achievement = GamificationService.award_achievement(
                db, user_id, AchievementType.PITCH_PERFECT
            )
            if achievement:
                unlocked.append(achievement)

        db.commit()
        db.refresh(db_session)
        logger.info(f"🎤 Pitch {db_session.id} ({scenario_type}) scored {analysis['score']} for user {user_id}")

        return {
            "id": db_session.id,
            "score": analysis["score"],
            "feedback": analysis["feedback"],
            "achievements_unlocked": unlocked,
        }

    @staticmethod
    def list_sessions(db: Session, user_id: int) -> List[PitchSession]:
        return db.query(PitchSession).filter(
            PitchSession.user_id == user_id
        ).order_by(PitchSession.created_at.desc(), PitchSession.id.desc()).all()
