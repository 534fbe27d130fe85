import random

from conftest import register_and_login
from models.communication import CommunicationEvaluation
from services import communication_service
from services.communication_service import CommunicationService

SAMPLES = [
    "hi there",
    "i think we should meet again next week and talk about the shop",
    "Hello team. Our bakery opened last month, and sales are growing! What should we try next?",
    " ".join(["word"] * 300) + ".",
]


def test_scores_stay_in_bounds_and_overall_is_rounded_mean():
    for seed in range(200):
        rng = random.Random(seed)
        for text in SAMPLES:
            result = CommunicationService.evaluate_text(text, rng)
            scores = [
                result["fluency_score"], result["grammar_score"],
                result["pronunciation_score"], result["listening_score"],
            ]
            assert all(0 <= score <= 100 for score in scores + [result["overall_score"]])
            assert result["overall_score"] == int(sum(scores) / 4 + 0.5)


def test_random_scores_stay_in_their_ranges():
    for seed in range(100):
        result = CommunicationService.evaluate_text("no punctuation here at all ok", random.Random(seed))
        assert 50 <= result["grammar_score"] <= 65
        assert 60 <= result["pronunciation_score"] <= 90
        assert 55 <= result["listening_score"] <= 90


def test_long_text_has_full_fluency():
    text = " ".join(["Growth"] * 250) + "."
    result = CommunicationService.evaluate_text(text, random.Random(7))
    assert result["fluency_score"] == 100
    assert "Detailed and comprehensive expression" in result["strengths"]


def test_seeded_rng_makes_evaluation_reproducible():
    text = SAMPLES[2]
    first = CommunicationService.evaluate_text(text, random.Random(42))
    second = CommunicationService.evaluate_text(text, random.Random(42))
    assert first == second


def test_feedback_points_are_capped_at_three():
    strengths, improvements = CommunicationService.derive_feedback_points(95, 95, 120, 12)
    assert strengths == [
        "Good sentence flow and coherence",
        "Proper use of punctuation and grammar",
        "Detailed and comprehensive expression",
    ]
    assert improvements == []

    strengths, improvements = CommunicationService.derive_feedback_points(40, 50, 5, 2)
    assert strengths == []
    assert len(improvements) == 3
    assert improvements[0] == "Practice constructing longer, flowing sentences"


def test_feedback_mentions_overall_score_or_focus_area():
    for seed in range(20):
        feedback = CommunicationService.build_feedback(
            82, ["Good sentence flow and coherence"], [], random.Random(seed)
        )
        assert "82%" in feedback or "Keep up the good work!" in feedback


def test_submit_evaluation_over_http(client, auth_headers):
    response = client.post(
        "/api/communication/evaluations",
        json={"input_text": SAMPLES[2]},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["id"] > 0
    assert [a["type"] for a in body["achievements_unlocked"]] == ["first_evaluation"]

    response = client.post(
        "/api/communication/evaluations",
        json={"input_text": SAMPLES[2]},
        headers=auth_headers,
    )
    assert response.json()["achievements_unlocked"] == []

    history = client.get("/api/communication/evaluations", headers=auth_headers).json()
    assert len(history) == 2
    assert history[0]["id"] > history[1]["id"]


def test_short_text_is_rejected(client, auth_headers):
    response = client.post(
        "/api/communication/evaluations",
        json={"input_text": "   too short   "},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please enter at least 20 characters for accurate evaluation"


def test_overlong_text_is_rejected(client, auth_headers):
    response = client.post(
        "/api/communication/evaluations",
        json={"input_text": "a" * 10001},
        headers=auth_headers,
    )
    assert response.status_code == 400


def test_evaluations_are_private(client, auth_headers):
    client.post("/api/communication/evaluations", json={"input_text": SAMPLES[2]}, headers=auth_headers)
    other = register_and_login(client, email="other@example.com", name="Ravi")
    assert client.get("/api/communication/evaluations", headers=other).json() == []


class HighRandom(random.Random):
    """Every uniform draw lands on its upper bound."""

    def uniform(self, a, b):
        return b


def test_all_scores_above_ninety_unlock_communication_master(db, user):
    text = ("We " + "grow " * 29).strip() + ". " + ("Customers " + "return " * 29).strip() + "."
    result = CommunicationService.submit_evaluation(db, user.id, text, HighRandom())

    assert result["fluency_score"] >= 90
    assert result["grammar_score"] == 100
    assert result["pronunciation_score"] == 90
    assert result["listening_score"] == 90
    assert [a["type"] for a in result["achievements_unlocked"]] == ["first_evaluation", "communication_master"]


def test_stored_feedback_is_truncated(db, user, monkeypatch):
    monkeypatch.setattr(communication_service, "FEEDBACK_MAX_LENGTH", 12)
    result = CommunicationService.submit_evaluation(db, user.id, SAMPLES[2], random.Random(5))

    stored = db.query(CommunicationEvaluation).filter(CommunicationEvaluation.id == result["id"]).one()
    assert stored.feedback == result["feedback"][:12]
    assert len(result["feedback"]) > 12
