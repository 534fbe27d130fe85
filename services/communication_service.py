import logging
import random
import re
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from config import EVALUATION_MIN_LENGTH, FEEDBACK_MAX_LENGTH, RESPONSE_MAX_LENGTH
from models.communication import CommunicationEvaluation
from models.gamification import AchievementType, GoalType
from services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

SENTENCE_SPLIT = re.compile(r"[.!?]+")
PUNCTUATION = re.compile(r"[.!?,;:]")
CAPITAL_LETTER = re.compile(r"[A-Z]")


def _round(value: float) -> int:
    """Half-up rounding; every score here is non-negative."""
    return int(value + 0.5)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class CommunicationService:

    @staticmethod
    def text_features(text: str) -> Dict:
        words = text.split()
        sentences = [s for s in SENTENCE_SPLIT.split(text) if s.strip()]
        word_count = len(words)
        avg_words_per_sentence = word_count / len(sentences) if sentences else 0
        return {
            "word_count": word_count,
            "sentence_count": len(sentences),
            "avg_words_per_sentence": avg_words_per_sentence,
        }

    @staticmethod
    def derive_feedback_points(fluency: int, grammar: int, word_count: int,
                               avg_words_per_sentence: float):
        """Split the fixed statement bank into strengths and improvements."""
        strengths: List[str] = []
        improvements: List[str] = []

        if fluency >= 70:
            strengths.append("Good sentence flow and coherence")
        else:
            improvements.append("Practice constructing longer, flowing sentences")

        if grammar >= 70:
            strengths.append("Proper use of punctuation and grammar")
        else:
            improvements.append("Focus on punctuation and sentence capitalization")

        if word_count >= 50:
            strengths.append("Detailed and comprehensive expression")
        else:
            improvements.append("Try to elaborate more on your ideas")

        if avg_words_per_sentence >= 8:
            strengths.append("Well-structured sentences")
        else:
            improvements.append("Develop more complex sentence structures")

        return strengths[:3], improvements[:3]

    @staticmethod
    def build_feedback(overall: int, strengths: List[str], improvements: List[str],
                       rng: random.Random) -> str:
        first = (
            f"Your communication shows {'good' if overall >= 70 else 'developing'} skills "
            f"with an overall score of {overall}%."
        )
        if strengths:
            first += f" Key strengths include {strengths[0].lower()}."
        if improvements:
            first += f" Consider working on {improvements[0].lower()}."

        if overall >= 75:
            band = "strong"
        elif overall >= 60:
            band = "moderate"
        else:
            band = "developing"
        second = f"Analysis complete. Your text demonstrates {band} communication abilities. "
        second += f"Focus area: {improvements[0]}" if improvements else "Keep up the good work!"

        return rng.choice([first, second])

    @staticmethod
    def evaluate_text(text: str, rng: Optional[random.Random] = None) -> Dict:
        """
        Score a speech sample with simple text heuristics.

        Fluency and grammar come from word/sentence counts and regex checks;
        pronunciation and listening cannot be measured from text and are
        drawn at random. Repeated calls on the same text differ unless a
        seeded `rng` is passed.
        """
        rng = rng or random.Random()
        features = CommunicationService.text_features(text)
        word_count = features["word_count"]
        avg = features["avg_words_per_sentence"]

        fluency = 60 + word_count / 5 + (15 if avg > 8 else 0) + rng.uniform(-5, 5)
        fluency_score = _round(_clamp(fluency, 40, 100))

        grammar = 50
        grammar += 20 if PUNCTUATION.search(text) else 0
        grammar += 15 if CAPITAL_LETTER.search(text) else 0
        grammar_score = _round(min(100, grammar + rng.uniform(0, 15)))

        pronunciation_score = _round(60 + rng.uniform(0, 30))
        listening_score = _round(55 + rng.uniform(0, 35))

        overall_score = _round(
            (fluency_score + grammar_score + pronunciation_score + listening_score) / 4
        )

        strengths, improvements = CommunicationService.derive_feedback_points(
            fluency_score, grammar_score, word_count, avg
        )
        feedback = CommunicationService.build_feedback(overall_score, strengths, improvements, rng)

        return {
            "fluency_score": fluency_score,
            "grammar_score": grammar_score,
            "pronunciation_score": pronunciation_score,
            "listening_score": listening_score,
            "overall_score": overall_score,
            "feedback": feedback,
            "strengths": strengths,
            "improvements": improvements,
            "word_count": word_count,
            "avg_words_per_sentence": avg,
        }

    @staticmethod
    def submit_evaluation(db: Session, user_id: int, input_text: str,
                          rng: Optional[random.Random] = None) -> Dict:
        text = (input_text or "").strip()
        if len(text) < EVALUATION_MIN_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please enter at least 20 characters for accurate evaluation"
            )
        if len(text) > RESPONSE_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Text must be {RESPONSE_MAX_LENGTH} characters or less"
            )

        result = CommunicationService.evaluate_text(text, rng)

        db_evaluation = CommunicationEvaluation(
            user_id=user_id,
            input_text=text,
            fluency_score=result["fluency_score"],
            grammar_score=result["grammar_score"],
            pronunciation_score=result["pronunciation_score"],
            listening_score=result["listening_score"],
            feedback=result["feedback"][:FEEDBACK_MAX_LENGTH]
        )
        db.add(db_evaluation)
        db.flush()

        unlocked = GamificationService.increment_goal(db, user_id, GoalType.EVALUATIONS)
        achievement = GamificationService.award_achievement(
            db, user_id, AchievementType.FIRST_EVALUATION
        )
        if achievement:
            unlocked.append(achievement)

        scores = (
            result["fluency_score"], result["grammar_score"],
            result["pronunciation_score"], result["listening_score"],
        )
        if all(score >= 90 for score in scores):
            achievement = GamificationService.award_achievement(
                db, user_id, AchievementType.COMMUNICATION_MASTER
            )
            if achievement:
                unlocked.append(achievement)

        db.commit()
        db.refresh(db_evaluation)
        logger.info(f"🗣️ Evaluation {db_evaluation.id} saved for user {user_id} "
                    f"(overall {result['overall_score']}%)")

        result["id"] = db_evaluation.id
        result["achievements_unlocked"] = unlocked
        return result

    @staticmethod
    def list_evaluations(db: Session, user_id: int) -> List[CommunicationEvaluation]:
        return db.query(CommunicationEvaluation).filter(
            CommunicationEvaluation.user_id == user_id
        ).order_by(CommunicationEvaluation.created_at.desc(), CommunicationEvaluation.id.desc()).all()

    @staticmethod
    def get_evaluation(db: Session, user_id: int, evaluation_id: int) -> CommunicationEvaluation:
        evaluation = db.query(CommunicationEvaluation).filter(
            CommunicationEvaluation.id == evaluation_id,
            CommunicationEvaluation.user_id == user_id
        ).first()
        if not evaluation:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Evaluation not found"
            )
        return evaluation
