from models.pitch import PitchSession
from services import pitch_service
from services.pitch_service import BUSINESS_TERMS, PitchService


def test_plain_pitch_scores_base_and_gets_every_hint():
    result = PitchService.analyze_pitch("we sell shoes")
    assert result["score"] == 50
    lines = result["feedback"].split("\n")
    assert len(lines) == 5
    assert all(line.startswith("△") for line in lines)


def test_feedback_lines_follow_rule_order():
    text = ("Our problem is clear and our solution is simple for every customer in the market. "
            "We grew 40% last year. Would you join us?")
    lines = PitchService.analyze_pitch(text)["feedback"].split("\n")
    assert lines[0] == "△ Consider adding more detail to your pitch"
    assert lines[1].startswith("✓ Strong use of business terminology (problem, solution, market, customer")
    assert lines[2] == "✓ Good use of specific numbers and data"
    assert lines[3] == "✓ Engaging the audience with questions"
    assert lines[4] == "✓ Clear call to action"


def test_score_never_decreases_with_more_business_terms():
    text = "Our plan"
    previous = PitchService.analyze_pitch(text)["score"]
    for term in BUSINESS_TERMS:
        text += f" {term}"
        score = PitchService.analyze_pitch(text)["score"]
        assert score >= previous
        previous = score
    assert previous == 90


def test_score_is_clamped_to_100():
    text = " ".join(BUSINESS_TERMS) + " We have 500 customers today? Let's schedule the next step. "
    text += " ".join(["more"] * 60)
    result = PitchService.analyze_pitch(text)
    assert result["score"] == 100


def test_terms_match_inside_longer_words():
    result = PitchService.analyze_pitch("marketing values")
    assert result["score"] == 60


def test_scenarios_listing(client):
    scenarios = client.get("/api/pitch/scenarios").json()
    assert [s["id"] for s in scenarios] == ["investor_pitch", "client_meeting", "partnership", "elevator_pitch"]
    assert client.get("/api/pitch/scenarios/elevator_pitch").json()["duration"] == "30 seconds"
    assert client.get("/api/pitch/scenarios/space_pitch").status_code == 404


def test_submit_pitch_over_http(client, auth_headers):
    sample = PitchService.get_scenario("investor_pitch")["sample_response"]
    response = client.post(
        "/api/pitch/sessions",
        json={"scenario_type": "investor_pitch", "user_response": sample},
        headers=auth_headers,
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert body["score"] == PitchService.analyze_pitch(sample)["score"]

    sessions = client.get("/api/pitch/sessions", headers=auth_headers).json()
    assert len(sessions) == 1
    assert sessions[0]["score"] == body["score"]


def test_high_scoring_pitch_unlocks_pitch_perfect(client, auth_headers):
    text = " ".join(BUSINESS_TERMS) + " with 3 pilots. Shall we talk?"
    response = client.post(
        "/api/pitch/sessions",
        json={"scenario_type": "elevator_pitch", "user_response": text},
        headers=auth_headers,
    )
    assert response.json()["score"] == 100
    assert [a["type"] for a in response.json()["achievements_unlocked"]] == ["pitch_perfect"]


def test_pitch_validation(client, auth_headers):
    response = client.post(
        "/api/pitch/sessions",
        json={"scenario_type": "investor_pitch", "user_response": "   "},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Please provide your pitch response"

    response = client.post(
        "/api/pitch/sessions",
        json={"scenario_type": "unknown", "user_response": "hello"},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Unknown scenario"


def test_only_ascii_digits_count_as_numbers():
    assert PitchService.analyze_pitch("we sell ٣ shoes")["score"] == 50
    assert PitchService.analyze_pitch("we sell 3 shoes")["score"] == 60


def test_overlong_pitch_is_rejected(client, auth_headers):
    response = client.post(
        "/api/pitch/sessions",
        json={"scenario_type": "investor_pitch", "user_response": "a" * 10001},
        headers=auth_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Response must be 10000 characters or less"


def test_stored_pitch_feedback_is_truncated(db, user, monkeypatch):
    monkeypatch.setattr(pitch_service, "FEEDBACK_MAX_LENGTH", 20)
    result = PitchService.submit_pitch(db, user.id, "elevator_pitch", "we sell shoes")

    stored = db.query(PitchSession).filter(PitchSession.id == result["id"]).one()
    assert stored.ai_feedback == result["feedback"][:20]
    assert len(result["feedback"]) > 20
