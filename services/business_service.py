import logging
import random
from typing import Dict, List, Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from config import GOALS_MAX_LENGTH, LOCATION_MAX_LENGTH
from models.business import BusinessCategory, BudgetTier, BusinessInput
from models.gamification import AchievementType, GoalType
from schemas.business import BusinessPlanRequest
from services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

BUSINESS_IDEAS = {
    BusinessCategory.TECHNOLOGY: ["Mobile App Development Agency", "IT Consulting Services",
                                  "E-commerce Platform", "SaaS Product Development"],
    BusinessCategory.FOOD: ["Cloud Kitchen / Food Delivery", "Specialty Café",
                            "Catering Services", "Food Truck Business"],
    BusinessCategory.RETAIL: ["Online Boutique Store", "Subscription Box Service",
                              "Dropshipping Business", "Local Artisan Marketplace"],
    BusinessCategory.SERVICES: ["Digital Marketing Agency", "Freelance Consulting",
                                "Home Services Platform", "Virtual Assistant Agency"],
    BusinessCategory.EDUCATION: ["Online Tutoring Platform", "Skill Development Academy",
                                 "Educational Content Creation", "Corporate Training Services"],
    BusinessCategory.HEALTH: ["Fitness Coaching Business", "Wellness Center",
                              "Health Tech App", "Nutrition Consulting"],
}

BUDGET_RANGES = {
    BudgetTier.LOW: ("₹50,000", "₹2,00,000"),
    BudgetTier.MEDIUM: ("₹2,00,000", "₹10,00,000"),
    BudgetTier.HIGH: ("₹10,00,000", "₹50,00,000"),
}

ROADMAP = [
    "Week 1-2: Market research and validation",
    "Week 3-4: Business plan development",
    "Week 5-6: Legal registration and setup",
    "Week 7-8: Build MVP / Initial setup",
    "Week 9-10: Marketing strategy execution",
    "Week 11-12: Soft launch and feedback collection",
    "Month 4+: Scale and optimize operations",
]

RESOURCES = [
    "Business registration portals (MCA, GST)",
    "Accounting software (Zoho, Tally)",
    "Project management tools (Trello, Notion)",
    "Marketing platforms (Google Ads, Meta)",
    "Legal consultation services",
    "Banking and payment gateways",
]


class BusinessService:

    @staticmethod
    def resolve_category(value: Union[str, BusinessCategory]) -> BusinessCategory:
        """Case-insensitive lookup; unknown categories fall back to services."""
        if isinstance(value, BusinessCategory):
            return value
        try:
            return BusinessCategory((value or "").strip().lower())
        except ValueError:
            logger.warning(f"Unknown business category {value!r}, using services")
            return BusinessCategory.SERVICES

    @staticmethod
    def resolve_budget(value: Union[str, BudgetTier]) -> BudgetTier:
        if isinstance(value, BudgetTier):
            return value
        try:
            return BudgetTier((value or "").strip().lower())
        except ValueError:
            logger.warning(f"Unknown budget tier {value!r}, using medium")
            return BudgetTier.MEDIUM

    @staticmethod
    def get_options() -> Dict:
        return {
            "categories": [category.value for category in BusinessCategory],
            "budgets": [
                {"value": tier.value, "range": f"{low} - {high}"}
                for tier, (low, high) in BUDGET_RANGES.items()
            ],
        }

    @staticmethod
    def generate_recommendation(interest: Union[str, BusinessCategory],
                                budget: Union[str, BudgetTier],
                                rng: Optional[random.Random] = None) -> Dict:
        """Only the business idea is random; roadmap and resources never change."""
        rng = rng or random.Random()
        category = BusinessService.resolve_category(interest)
        tier = BusinessService.resolve_budget(budget)
        low, high = BUDGET_RANGES[tier]

        return {
            "business_idea": rng.choice(BUSINESS_IDEAS[category]),
            "startup_cost": f"Estimated {low} - {high}",
            "roadmap": list(ROADMAP),
            "resources": list(RESOURCES),
        }

    @staticmethod
    def submit_plan(db: Session, user_id: int, plan: BusinessPlanRequest,
                    rng: Optional[random.Random] = None) -> Dict:
        location = (plan.location or "").strip()
        goals = (plan.goals or "").strip()

        if not location or not goals:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please fill in all fields"
            )
        if len(location) > LOCATION_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Location must be 200 characters or less"
            )
        if len(goals) > GOALS_MAX_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Goals must be 5000 characters or less"
            )

        recommendation = BusinessService.generate_recommendation(
            plan.business_interest, plan.budget, rng
        )

        db_input = BusinessInput(
            user_id=user_id,
            business_interest=plan.business_interest,
            budget=plan.budget,
            location=location,
            goals=goals
        )
        db.add(db_input)
        db.flush()

        unlocked = GamificationService.increment_goal(db, user_id, GoalType.BUSINESS_PLANS)
        achievement = GamificationService.award_achievement(db, user_id, AchievementType.FIRST_PLAN)
        if achievement:
            unlocked.append(achievement)

        db.commit()
        db.refresh(db_input)
        logger.info(f"💡 Business plan {db_input.id} saved for user {user_id}")

        return {
            "id": db_input.id,
            "recommendation": recommendation,
            "achievements_unlocked": unlocked,
        }

    @staticmethod
    def list_plans(db: Session, user_id: int) -> List[BusinessInput]:
        return db.query(BusinessInput).filter(
            BusinessInput.user_id == user_id
        ).order_by(BusinessInput.created_at.desc(), BusinessInput.id.desc()).all()
