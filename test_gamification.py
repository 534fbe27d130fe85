from datetime import date

from models.gamification import AchievementType, GoalType, UserAchievement, UserStreak, WeeklyGoal
from services.gamification_service import GamificationService

WEDNESDAY = date(2026, 10, 21)
MONDAY = date(2026, 10, 19)


def test_level_progress_inside_bracket():
    progress = GamificationService.level_progress(250, 2)
    assert progress["current_level_xp"] == 100
    assert progress["next_level_xp"] == 300
    assert progress["progress"] == 75.0
    assert progress["xp_to_next_level"] == 50


def test_level_progress_on_last_level_is_full():
    progress = GamificationService.level_progress(6000, 11)
    assert progress["progress"] == 100.0
    assert progress["xp_to_next_level"] == 0


def test_level_progress_is_clamped():
    assert GamificationService.level_progress(50, 3)["progress"] == 0.0
    assert GamificationService.level_progress(900, 1)["progress"] == 100.0


def test_level_for_xp():
    assert GamificationService.level_for_xp(0) == 1
    assert GamificationService.level_for_xp(100) == 2
    assert GamificationService.level_for_xp(5499) == 10
    assert GamificationService.level_for_xp(10000) == 11


def test_week_starts_on_monday():
    assert GamificationService.get_week_start(MONDAY) == MONDAY
    assert GamificationService.get_week_start(WEDNESDAY) == MONDAY
    assert GamificationService.get_week_start(date(2026, 10, 25)) == MONDAY
    assert GamificationService.get_week_start(date(2026, 10, 26)) == date(2026, 10, 26)


def test_default_goals_are_created_once_per_week(db, user):
    first = GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    second = GamificationService.get_weekly_goals(db, user.id, date(2026, 10, 25))

    assert db.query(WeeklyGoal).filter(WeeklyGoal.user_id == user.id).count() == 4
    assert [g["id"] for g in first["goals"]] == [g["id"] for g in second["goals"]]
    assert [g["goal_type"] for g in first["goals"]] == [
        "business_plans", "evaluations", "pitch_sessions", "listening_exercises"
    ]
    assert first["week_start"] == MONDAY
    assert first["total_progress"] == 0

    GamificationService.get_weekly_goals(db, user.id, date(2026, 10, 26))
    assert db.query(WeeklyGoal).filter(WeeklyGoal.user_id == user.id).count() == 8


def test_increment_without_goals_is_a_no_op(db, user):
    assert GamificationService.increment_goal(db, user.id, GoalType.EVALUATIONS, WEDNESDAY) == []
    assert db.query(WeeklyGoal).count() == 0


def test_completing_every_goal_unlocks_goal_achiever(db, user):
    GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    unlocked = []
    for goal_type, times in ((GoalType.BUSINESS_PLANS, 2), (GoalType.EVALUATIONS, 3),
                             (GoalType.PITCH_SESSIONS, 2), (GoalType.LISTENING_EXERCISES, 5)):
        for _ in range(times):
            unlocked = GamificationService.increment_goal(db, user.id, goal_type, WEDNESDAY)
    db.commit()

    assert [a["type"] for a in unlocked] == ["goal_achiever"]
    goals = GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    assert goals["completed_count"] == 4
    assert goals["total_progress"] == 100.0


def test_partial_progress_is_capped_per_goal(db, user):
    GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    for _ in range(4):
        GamificationService.increment_goal(db, user.id, GoalType.PITCH_SESSIONS, WEDNESDAY)
    db.commit()

    goals = GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    pitch = next(g for g in goals["goals"] if g["goal_type"] == "pitch_sessions")
    assert pitch["current_value"] == 4
    assert pitch["progress"] == 100.0
    assert goals["total_progress"] == 25.0


def test_listener_pro_counts_across_weeks(db, user):
    next_week = date(2026, 10, 28)
    GamificationService.get_weekly_goals(db, user.id, WEDNESDAY)
    GamificationService.get_weekly_goals(db, user.id, next_week)

    for _ in range(5):
        assert GamificationService.record_listening_exercise(db, user.id, WEDNESDAY) == []
    for _ in range(4):
        GamificationService.record_listening_exercise(db, user.id, next_week)
    unlocked = GamificationService.record_listening_exercise(db, user.id, next_week)
    db.commit()

    assert [a["type"] for a in unlocked] == ["listener_pro"]


def test_award_is_idempotent(db, user):
    first = GamificationService.award_achievement(db, user.id, AchievementType.FIRST_PLAN)
    second = GamificationService.award_achievement(db, user.id, AchievementType.FIRST_PLAN)
    db.commit()

    assert first["xp"] == 100
    assert second is None
    assert db.query(UserAchievement).count() == 1
    streak = db.query(UserStreak).filter(UserStreak.user_id == user.id).one()
    assert streak.total_xp == 100


def test_stats_flag_a_stale_level(db, user):
    stats = GamificationService.get_stats(db, user.id)
    assert stats["level"] == 1
    assert stats["total_xp"] == 0
    assert stats["level_consistent"] is True

    GamificationService.award_achievement(db, user.id, AchievementType.FIRST_PLAN)
    db.commit()
    stats = GamificationService.get_stats(db, user.id)
    assert stats["level"] == 1
    assert stats["total_xp"] == 100
    assert stats["level_consistent"] is False
    assert stats["achievement_count"] == 1


def test_gallery_lists_every_achievement(db, user):
    for achievement_type in (AchievementType.FIRST_PLAN, AchievementType.PITCH_PERFECT,
                             AchievementType.LISTENER_PRO):
        GamificationService.award_achievement(db, user.id, achievement_type)
    db.commit()

    gallery = GamificationService.get_achievement_gallery(db, user.id)
    assert gallery["total_count"] == 11
    assert gallery["unlocked_count"] == 3
    assert len({a["type"] for a in gallery["achievements"]}) == 11
    unlocked = {a["type"] for a in gallery["achievements"] if a["unlocked"]}
    assert unlocked == {"first_plan", "pitch_perfect", "listener_pro"}


def test_gamification_endpoints(client, auth_headers):
    goals = client.get("/api/gamification/goals", headers=auth_headers).json()
    assert len(goals["goals"]) == 4

    client.post(
        "/api/business/plans",
        json={"business_interest": "food", "budget": "medium", "location": "Goa", "goals": "Run a cafe"},
        headers=auth_headers,
    )
    goals = client.get("/api/gamification/goals", headers=auth_headers).json()
    plans_goal = next(g for g in goals["goals"] if g["goal_type"] == "business_plans")
    assert plans_goal["current_value"] == 1

    stats = client.get("/api/gamification/stats", headers=auth_headers).json()
    assert stats["total_xp"] == 100
    assert stats["level_progress"]["progress"] == 100.0

    gallery = client.get("/api/gamification/achievements", headers=auth_headers).json()
    assert gallery["unlocked_count"] == 1


def test_default_goals_reuse_rows_created_by_another_session(db, user, session_factory):
    other = session_factory()
    try:
        GamificationService.get_weekly_goals(other, user.id, WEDNESDAY)
    finally:
        other.close()

    goals = GamificationService._create_default_goals(db, user.id, MONDAY)

    assert len(goals) == 4
    assert db.query(WeeklyGoal).filter(WeeklyGoal.user_id == user.id).count() == 4
    assert [g.goal_type for g in goals] == [
        GoalType.BUSINESS_PLANS, GoalType.EVALUATIONS, GoalType.PITCH_SESSIONS, GoalType.LISTENING_EXERCISES
    ]
