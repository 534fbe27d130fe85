import io
import logging
import os
from datetime import datetime
from typing import Dict, List, Optional

from fastapi import HTTPException, status
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas
from sqlalchemy.orm import Session

from config import settings
from models.business import BusinessInput
from models.communication import CommunicationEvaluation
from models.gamification import AchievementType, GoalType
from models.report import ReportType, SavedReport
from models.user import User
from services.communication_service import CommunicationService
from services.gamification_service import GamificationService
from utils.file_handler import save_bytes

logger = logging.getLogger(__name__)

BRAND = "ENTREPRENEUR-X"
MAX_PLANS_PER_REPORT = 5
REPORTS_FOR_ACHIEVEMENT = 5

NAVY = (30, 41, 59)
AMBER = (245, 158, 11)
GREEN = (34, 197, 94)
ORANGE = (249, 115, 22)
TEXT = (60, 60, 60)
MUTED = (107, 114, 128)
FOOTER_TEXT = (156, 163, 175)


def score_color(score: int):
    if score >= 80:
        return GREEN
    if score >= 60:
        return AMBER
    return ORANGE


class _Page:
    """Canvas wrapper working in millimetres from the top-left corner."""

    def __init__(self, buffer):
        self.c = canvas.Canvas(buffer, pagesize=A4)
        self.width_pt, self.height_pt = A4
        self.width = self.width_pt / mm

    def _y(self, y: float) -> float:
        return self.height_pt - y * mm

    def fill(self, rgb):
        self.c.setFillColorRGB(rgb[0] / 255, rgb[1] / 255, rgb[2] / 255)

    def font(self, size: int, bold: bool = False):
        self.c.setFont("Helvetica-Bold" if bold else "Helvetica", size)

    def rect(self, x, y, w, h, rgb, radius: float = 0):
        self.fill(rgb)
        if radius:
            self.c.roundRect(x * mm, self._y(y + h), w * mm, h * mm, radius * mm, stroke=0, fill=1)
        else:
            self.c.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=0, fill=1)

    def text(self, x, y, value: str, align: str = "left"):
        if align == "center":
            self.c.drawCentredString(x * mm, self._y(y), value)
        else:
            self.c.drawString(x * mm, self._y(y), value)

    def wrap(self, value: str, size: int, width_mm: float, bold: bool = False) -> List[str]:
        return simpleSplit(value or "", "Helvetica-Bold" if bold else "Helvetica", size, width_mm * mm)

    def header(self, subtitle: str):
        self.rect(0, 0, self.width, 45, NAVY)
        self.fill((255, 255, 255))
        self.font(24, bold=True)
        self.text(20, 25, BRAND)
        self.font(12)
        self.text(20, 35, subtitle)

    def footer(self, note: str):
        self.rect(0, 280, self.width, 17, NAVY)
        self.fill(FOOTER_TEXT)
        self.font(8)
        self.text(self.width / 2, 289, f"{BRAND} | Academic Prototype | {note}", align="center")

    def new_page(self):
        self.c.showPage()

    def finish(self):
        self.c.save()


class ReportService:

    @staticmethod
    def render_communication_report(user_name: str, scores: Dict) -> bytes:
        """
        Render a one-page communication assessment report.

        `scores` holds fluency, grammar, pronunciation, listening, overall,
        feedback, strengths, improvements and date.
        """
        buffer = io.BytesIO()
        page = _Page(buffer)
        width = page.width

        page.header("Communication Skills Assessment Report")

        page.fill(TEXT)
        page.font(14, bold=True)
        page.text(20, 60, f"Candidate: {user_name}")
        page.font(11)
        page.text(20, 68, f"Assessment Date: {scores['date']}")

        page.rect(width - 70, 50, 50, 30, AMBER, radius=3)
        page.fill(NAVY)
        page.font(24, bold=True)
        page.text(width - 45, 70, f"{scores['overall']}%", align="center")
        page.font(8, bold=True)
        page.text(width - 45, 76, "OVERALL", align="center")

        page.fill(TEXT)
        page.font(14, bold=True)
        page.text(20, 95, "Score Breakdown")

        y = 105
        for label, key in (("Fluency", "fluency"), ("Grammar", "grammar"),
                           ("Pronunciation", "pronunciation"), ("Listening", "listening")):
            score = scores[key]
            page.fill(TEXT)
            page.font(11)
            page.text(20, y, label)
            page.text(80, y, f"{score}%")
            page.rect(100, y - 4, 80, 6, (229, 231, 235), radius=1)
            if score > 0:
                page.rect(100, y - 4, score / 100 * 80, 6, score_color(score), radius=1)
            y += 15

        y += 10
        page.fill(TEXT)
        page.font(14, bold=True)
        page.text(20, y, "AI Feedback")

        y += 8
        page.font(10)
        feedback_lines = page.wrap(scores["feedback"], 10, width - 40)
        for index, line in enumerate(feedback_lines):
            page.text(20, y + index * 5, line)
        y += len(feedback_lines) * 5 + 10

        box_width = (width - 30) / 2 - 5
        if scores["strengths"]:
            page.rect(15, y - 5, box_width, 45, (220, 252, 231), radius=3)
            page.fill((22, 163, 74))
            page.font(12, bold=True)
            page.text(20, y + 5, "Strengths")
            page.fill(TEXT)
            page.font(9)
            for index, item in enumerate(scores["strengths"]):
                page.text(20, y + 15 + index * 8, f"• {item}")

        if scores["improvements"]:
            x_offset = (width - 30) / 2 + 20
            page.rect(x_offset - 5, y - 5, box_width, 45, (254, 243, 199), radius=3)
            page.fill((217, 119, 6))
            page.font(12, bold=True)
            page.text(x_offset, y + 5, "Areas to Improve")
            page.fill(TEXT)
            page.font(9)
            for index, item in enumerate(scores["improvements"]):
                page.text(x_offset, y + 15 + index * 8, f"• {item}")

        page.footer("NLP Simulation for Educational Purposes")
        page.finish()
        return buffer.getvalue()

    @staticmethod
    def render_business_plan_report(user_name: str, plans: List[Dict],
                                    generated: Optional[str] = None) -> bytes:
        """Render up to five plan summaries, starting a new page when space runs out."""
        buffer = io.BytesIO()
        page = _Page(buffer)
        width = page.width

        page.header("Business Planning Summary Report")

        page.fill(TEXT)
        page.font(14, bold=True)
        page.text(20, 60, f"Entrepreneur: {user_name}")
        page.font(11)
        page.text(20, 68, f"Generated: {generated or datetime.utcnow().strftime('%d/%m/%Y')}")
        page.text(20, 76, f"Total Plans: {len(plans)}")

        y = 95
        for index, plan in enumerate(plans[:MAX_PLANS_PER_REPORT]):
            if y > 250:
                page.new_page()
                y = 30

            page.rect(15, y - 8, width - 30, 45, (249, 250, 251), radius=3)

            page.fill(NAVY)
            page.font(12, bold=True)
            page.text(20, y, f"Plan {index + 1}: {plan['interest']}")

            page.fill(MUTED)
            page.font(9)
            page.text(20, y + 10, f"Budget: {plan['budget']} | Location: {plan['location']}")
            page.text(20, y + 18, f"Created: {plan['date']}")
            goal_lines = page.wrap(f"Goals: {plan['goals']}", 9, width - 50)
            for line_index, line in enumerate(goal_lines[:2]):
                page.text(20, y + 26 + line_index * 4, line)

            y += 55

        page.footer("Business Planning for Educational Purposes")
        page.finish()
        return buffer.getvalue()

    @staticmethod
    def get_progress_summary(db: Session, user_id: int) -> Dict:
        plan_count = db.query(BusinessInput).filter(BusinessInput.user_id == user_id).count()
        evaluations = db.query(CommunicationEvaluation).filter(
            CommunicationEvaluation.user_id == user_id
        ).order_by(CommunicationEvaluation.created_at.desc(), CommunicationEvaluation.id.desc()).all()

        def mean_of(values):
            return sum(values) / len(values)

        def _round(value):
            return int(value + 0.5)

        def per_evaluation(e):
            return (e.fluency_score + e.grammar_score + e.pronunciation_score + e.listening_score) / 4

        if evaluations:
            average = _round(mean_of([per_evaluation(e) for e in evaluations]))
            radar = [
                {"subject": "Fluency", "score": _round(mean_of([e.fluency_score for e in evaluations]))},
                {"subject": "Grammar", "score": _round(mean_of([e.grammar_score for e in evaluations]))},
                {"subject": "Pronunciation",
                 "score": _round(mean_of([e.pronunciation_score for e in evaluations]))},
                {"subject": "Listening", "score": _round(mean_of([e.listening_score for e in evaluations]))},
            ]
        else:
            average = 0
            radar = []

        latest = list(reversed(evaluations[:10]))
        progress = [
            {"name": f"Test {index + 1}", "score": _round(per_evaluation(e))}
            for index, e in enumerate(latest)
        ]

        return {
            "business_plan_count": plan_count,
            "evaluation_count": len(evaluations),
            "average_communication": average,
            "readiness": "Ready" if plan_count > 0 and average >= 60 else "Building",
            "radar": radar,
            "progress": progress,
        }

    @staticmethod
    def _format_date(value: Optional[datetime]) -> str:
        return (value or datetime.utcnow()).strftime("%d/%m/%Y")

    @staticmethod
    def _save_report(db: Session, user: User, report_type: ReportType,
                     report_name: str, content: bytes) -> Dict:
        timestamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
        file_path = os.path.join(
            settings.REPORT_DIRECTORY, str(user.id), f"{report_type.value}_{timestamp}.pdf"
        )
        save_bytes(content, file_path)

        try:
            report = SavedReport(
                user_id=user.id,
                report_name=report_name,
                report_type=report_type,
                file_path=file_path
            )
            db.add(report)
            db.flush()

            unlocked = GamificationService.increment_goal(db, user.id, GoalType.REPORTS_GENERATED)
            report_count = db.query(SavedReport).filter(SavedReport.user_id == user.id).count()
            if report_count >= REPORTS_FOR_ACHIEVEMENT:
                achievement = GamificationService.award_achievement(
                    db, user.id, AchievementType.REPORT_GENERATOR
                )
                if achievement:
                    unlocked.append(achievement)

            db.commit()
        except Exception:
            db.rollback()
            # no row points at the file any more
            if os.path.exists(file_path):
                os.remove(file_path)
            raise

        db.refresh(report)
        logger.info(f"📄 Saved {report_type.value} report {report.id} for user {user.id}")
        return {"report": report, "achievements_unlocked": unlocked}

    @staticmethod
    def create_communication_report(db: Session, user: User, evaluation_id: int) -> Dict:
        evaluation = CommunicationService.get_evaluation(db, user.id, evaluation_id)

        features = CommunicationService.text_features(evaluation.input_text)
        strengths, improvements = CommunicationService.derive_feedback_points(
            evaluation.fluency_score,
            evaluation.grammar_score,
            features["word_count"],
            features["avg_words_per_sentence"],
        )
        scores = {
            "fluency": evaluation.fluency_score,
            "grammar": evaluation.grammar_score,
            "pronunciation": evaluation.pronunciation_score,
            "listening": evaluation.listening_score,
            "overall": evaluation.overall_score,
            "feedback": evaluation.feedback or "",
            "strengths": strengths,
            "improvements": improvements,
            "date": ReportService._format_date(evaluation.created_at),
        }

        content = ReportService.render_communication_report(user.display_name, scores)
        return ReportService._save_report(
            db, user, ReportType.COMMUNICATION,
            f"Communication Report - {scores['date']}", content
        )

    @staticmethod
    def create_business_plan_report(db: Session, user: User) -> Dict:
        plans = db.query(BusinessInput).filter(
            BusinessInput.user_id == user.id
        ).order_by(BusinessInput.created_at.desc(), BusinessInput.id.desc()).all()

        if not plans:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Create a business plan before generating a report"
            )

        plan_data = [
            {
                "interest": plan.business_interest.value.capitalize(),
                "budget": plan.budget.value.capitalize(),
                "location": plan.location,
                "goals": plan.goals,
                "date": ReportService._format_date(plan.created_at),
            }
            for plan in plans
        ]

        content = ReportService.render_business_plan_report(user.display_name, plan_data)
        return ReportService._save_report(
            db, user, ReportType.BUSINESS_PLAN,
            f"Business Plan Summary - {ReportService._format_date(None)}", content
        )

    @staticmethod
    def list_reports(db: Session, user_id: int) -> List[SavedReport]:
        return db.query(SavedReport).filter(
            SavedReport.user_id == user_id
        ).order_by(SavedReport.created_at.desc(), SavedReport.id.desc()).all()

    @staticmethod
    def get_report(db: Session, user_id: int, report_id: int) -> SavedReport:
        report = db.query(SavedReport).filter(
            SavedReport.id == report_id,
            SavedReport.user_id == user_id
        ).first()
        if not report or not os.path.exists(report.file_path):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Report not found"
            )
        return report
