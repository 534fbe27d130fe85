import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.gamification import (
    AchievementType, GoalType, UserAchievement, UserStreak, WeeklyGoal
)

logger = logging.getLogger(__name__)

LISTENER_PRO_EXERCISES = 10

LEVEL_THRESHOLDS = [0, 100, 300, 600, 1000, 1500, 2100, 2800, 3600, 4500, 5500]

GOAL_LABELS = {
    GoalType.BUSINESS_PLANS: "Create Business Plans",
    GoalType.EVALUATIONS: "Complete Evaluations",
    GoalType.PITCH_SESSIONS: "Practice Pitches",
    GoalType.LISTENING_EXERCISES: "Listening Exercises",
    GoalType.REPORTS_GENERATED: "Generate Reports",
}

# reports_generated has a label but is never created by default
DEFAULT_WEEKLY_GOALS = [
    (GoalType.BUSINESS_PLANS, 2),
    (GoalType.EVALUATIONS, 3),
    (GoalType.PITCH_SESSIONS, 2),
    (GoalType.LISTENING_EXERCISES, 5),
]

ACHIEVEMENTS = {
    AchievementType.FIRST_PLAN: {
        "title": "Business Starter",
        "description": "Created your first business plan",
        "xp": 100,
        "icon": "target",
    },
    AchievementType.FIRST_EVALUATION: {
        "title": "Communication Beginner",
        "description": "Completed your first communication evaluation",
        "xp": 100,
        "icon": "star",
    },
    AchievementType.STREAK_3: {
        "title": "On Fire!",
        "description": "3-day activity streak",
        "xp": 150,
        "icon": "flame",
    },
    AchievementType.STREAK_7: {
        "title": "Week Warrior",
        "description": "7-day activity streak",
        "xp": 300,
        "icon": "flame",
    },
    AchievementType.STREAK_30: {
        "title": "Monthly Champion",
        "description": "30-day activity streak",
        "xp": 1000,
        "icon": "crown",
    },
    AchievementType.COMMUNICATION_MASTER: {
        "title": "Communication Master",
        "description": "Scored 90+ in all communication areas",
        "xp": 500,
        "icon": "award",
    },
    AchievementType.LISTENER_PRO: {
        "title": "Listener Pro",
        "description": "Completed 10 listening exercises",
        "xp": 200,
        "icon": "medal",
    },
    AchievementType.PITCH_PERFECT: {
        "title": "Pitch Perfect",
        "description": "Scored 85+ in pitch practice",
        "xp": 400,
        "icon": "zap",
    },
    AchievementType.GOAL_ACHIEVER: {
        "title": "Goal Achiever",
        "description": "Completed all weekly goals",
        "xp": 250,
        "icon": "trophy",
    },
    AchievementType.REPORT_GENERATOR: {
        "title": "Report Generator",
        "description": "Generated 5 reports",
        "xp": 150,
        "icon": "star",
    },
    AchievementType.CONSISTENCY_KING: {
        "title": "Consistency King",
        "description": "Maintained 90%+ completion rate",
        "xp": 350,
        "icon": "crown",
    },
}


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


class GamificationService:

    @staticmethod
    def level_progress(total_xp: int, level: int) -> Dict:
        """
        Progress through the bracket of the *stored* level.

        The bracket is [thresholds[level - 1], thresholds[level]). On the last
        level the upper bound collapses onto the final threshold, so the bar
        stays full.
        """
        if 1 <= level <= len(LEVEL_THRESHOLDS):
            current_level_xp = LEVEL_THRESHOLDS[level - 1]
        else:
            current_level_xp = 0

        if 1 <= level < len(LEVEL_THRESHOLDS):
            next_level_xp = LEVEL_THRESHOLDS[level]
        else:
            next_level_xp = LEVEL_THRESHOLDS[-1]

        span = next_level_xp - current_level_xp
        if span <= 0:
            progress = 100.0
        else:
            progress = _clamp((total_xp - current_level_xp) / span * 100, 0, 100)

        return {
            "level": level,
            "total_xp": total_xp,
            "current_level_xp": current_level_xp,
            "next_level_xp": next_level_xp,
            "xp_to_next_level": max(0, next_level_xp - total_xp),
            "progress": round(progress, 2),
        }

    @staticmethod
    def level_for_xp(total_xp: int) -> int:
        level = 1
        for index, threshold in enumerate(LEVEL_THRESHOLDS):
            if total_xp >= threshold:
                level = index + 1
        return level

    @staticmethod
    def get_stats(db: Session, user_id: int) -> Dict:
        streak = db.query(UserStreak).filter(UserStreak.user_id == user_id).first()
        achievement_count = db.query(UserAchievement).filter(
            UserAchievement.user_id == user_id
        ).count()

        current_streak = streak.current_streak if streak else 0
        longest_streak = streak.longest_streak if streak else 0
        total_xp = streak.total_xp if streak else 0
        level = streak.level if streak else 1

        # The stored level is reported as-is, only flagged when it disagrees with the XP
        return {
            "current_streak": current_streak,
            "longest_streak": longest_streak,
            "total_xp": total_xp,
            "level": level,
            "achievement_count": achievement_count,
            "level_progress": GamificationService.level_progress(total_xp, level),
            "level_consistent": GamificationService.level_for_xp(total_xp) == level,
        }

    @staticmethod
    def get_week_start(today: Optional[date] = None) -> date:
        """Monday of the week containing `today`; Sunday closes the week."""
        today = today or date.today()
        return today - timedelta(days=today.weekday())

    @staticmethod
    def get_weekly_goals(db: Session, user_id: int, today: Optional[date] = None) -> Dict:
        week_start = GamificationService.get_week_start(today)
        goals = db.query(WeeklyGoal).filter(
            WeeklyGoal.user_id == user_id,
            WeeklyGoal.week_start == week_start
        ).order_by(WeeklyGoal.id).all()

        if not goals:
            goals = GamificationService._create_default_goals(db, user_id, week_start)

        entries = []
        ratios = []
        for goal in goals:
            ratio = min(goal.current_value / goal.target_value, 1) if goal.target_value > 0 else 1
            ratios.append(ratio)
            entries.append({
                "id": goal.id,
                "goal_type": goal.goal_type.value,
                "label": GOAL_LABELS.get(goal.goal_type, goal.goal_type.value),
                "target_value": goal.target_value,
                "current_value": goal.current_value,
                "completed": goal.completed,
                "progress": round(ratio * 100, 2),
            })

        total_progress = sum(ratios) / len(ratios) * 100 if ratios else 0

        return {
            "week_start": week_start,
            "goals": entries,
            "completed_count": sum(1 for goal in goals if goal.completed),
            "total_progress": round(total_progress, 2),
        }

    @staticmethod
    def _create_default_goals(db: Session, user_id: int, week_start: date) -> List[WeeklyGoal]:
        goals = [
            WeeklyGoal(
                user_id=user_id,
                goal_type=goal_type,
                target_value=target,
                current_value=0,
                week_start=week_start,
                completed=False
            )
            for goal_type, target in DEFAULT_WEEKLY_GOALS
        ]
        db.add_all(goals)
        try:
            db.commit()
        except IntegrityError:
            # another request created this week's goals first
            db.rollback()
            logger.info(f"Weekly goals for user {user_id} already exist, reusing them")
            return db.query(WeeklyGoal).filter(
                WeeklyGoal.user_id == user_id,
                WeeklyGoal.week_start == week_start
            ).order_by(WeeklyGoal.id).all()
        logger.info(f"🎯 Created {len(goals)} default goals for user {user_id}, week of {week_start}")
        return goals

    @staticmethod
    def increment_goal(db: Session, user_id: int, goal_type: GoalType,
                       today: Optional[date] = None) -> List[Dict]:
        """
        Count one completed activity against this week's goal of that type.

        Does nothing when the user has no such goal this week. Returns the
        achievements unlocked as a consequence.
        """
        week_start = GamificationService.get_week_start(today)
        goal = db.query(WeeklyGoal).filter(
            WeeklyGoal.user_id == user_id,
            WeeklyGoal.goal_type == goal_type,
            WeeklyGoal.week_start == week_start
        ).first()

        if not goal:
            return []

        goal.current_value += 1
        goal.completed = goal.current_value >= goal.target_value
        db.flush()

        unlocked = []
        if goal.completed:
            week_goals = db.query(WeeklyGoal).filter(
                WeeklyGoal.user_id == user_id,
                WeeklyGoal.week_start == week_start
            ).all()
            if all(g.completed for g in week_goals):
                achievement = GamificationService.award_achievement(
                    db, user_id, AchievementType.GOAL_ACHIEVER
                )
                if achievement:
                    unlocked.append(achievement)
        return unlocked

    @staticmethod
    def record_listening_exercise(db: Session, user_id: int,
                                  today: Optional[date] = None) -> List[Dict]:
        unlocked = GamificationService.increment_goal(
            db, user_id, GoalType.LISTENING_EXERCISES, today
        )
        total = db.query(func.coalesce(func.sum(WeeklyGoal.current_value), 0)).filter(
            WeeklyGoal.user_id == user_id,
            WeeklyGoal.goal_type == GoalType.LISTENING_EXERCISES
        ).scalar()
        if total >= LISTENER_PRO_EXERCISES:
            achievement = GamificationService.award_achievement(
                db, user_id, AchievementType.LISTENER_PRO
            )
            if achievement:
                unlocked.append(achievement)
        return unlocked

    @staticmethod
    def award_achievement(db: Session, user_id: int,
                          achievement_type: AchievementType) -> Optional[Dict]:
        """Grant an achievement once; returns None when it was already earned."""
        existing = db.query(UserAchievement).filter(
            UserAchievement.user_id == user_id,
            UserAchievement.achievement_type == achievement_type
        ).first()
        if existing:
            return None

        entry = ACHIEVEMENTS[achievement_type]
        db.add(UserAchievement(user_id=user_id, achievement_type=achievement_type))

        streak = db.query(UserStreak).filter(UserStreak.user_id == user_id).first()
        if not streak:
            streak = UserStreak(user_id=user_id, current_streak=0, longest_streak=0,
                                total_xp=0, level=1)
            db.add(streak)
        streak.total_xp = (streak.total_xp or 0) + entry["xp"]
        db.flush()

        logger.info(f"🏆 User {user_id} unlocked {achievement_type.value} (+{entry['xp']} XP)")
        return {
            "type": achievement_type.value,
            "title": entry["title"],
            "description": entry["description"],
            "xp": entry["xp"],
        }

    @staticmethod
    def get_achievement_gallery(db: Session, user_id: int) -> Dict:
        rows = db.query(UserAchievement).filter(UserAchievement.user_id == user_id).all()
        earned = {}
        for row in rows:
            if row.achievement_type not in earned:
                earned[row.achievement_type] = row.earned_at

        achievements = [
            {
                "type": achievement_type.value,
                "title": entry["title"],
                "description": entry["description"],
                "xp": entry["xp"],
                "icon": entry["icon"],
                "unlocked": achievement_type in earned,
                "earned_at": earned.get(achievement_type),
            }
            for achievement_type, entry in ACHIEVEMENTS.items()
        ]

        return {
            "achievements": achievements,
            "unlocked_count": sum(1 for a in achievements if a["unlocked"]),
            "total_count": len(ACHIEVEMENTS),
        }
