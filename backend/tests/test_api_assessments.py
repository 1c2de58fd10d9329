"""Integration tests for quiz submission and assessment history."""

from datetime import datetime, timedelta, timezone

from tests.conftest import (
    TestingSessionLocal,
    login_user,
    register_user,
    signed_in_user,
    submit_assessment,
)
from quizportal.models.assessment import Assessment


# ===== Submission =====


def test_submit_grades_and_persists(client):
    user_id = signed_in_user(client)
    resp = submit_assessment(client, subject="ml", answers=["A", "C"], correct=["A", "B"])
    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["score"] == 1
    assert data["totalQuestions"] == 2
    assert data["percentage"] == 50
    assert isinstance(data["assessmentId"], int)

    db = TestingSessionLocal()
    try:
        record = db.query(Assessment).filter(Assessment.id == data["assessmentId"]).one()
        assert record.owner_id == user_id
        assert record.subject == "ml"
        assert record.answers == [
            {"questionNumber": 1, "userAnswer": "A", "correctAnswer": "A", "isCorrect": True},
            {"questionNumber": 2, "userAnswer": "C", "correctAnswer": "B", "isCorrect": False},
        ]
    finally:
        db.close()


def test_submit_rounds_half_up(client):
    signed_in_user(client)
    resp = submit_assessment(client, answers=["A"] + ["X"] * 7, correct=["A"] * 8)
    assert resp.json()["percentage"] == 13


def test_submit_number_never_matches_numeric_string(client):
    signed_in_user(client)
    resp = client.post(
        "/api/assessment",
        json={"subject": "cd", "answers": [2, "3"], "questions": [{"correctAnswer": "2"}, {"correctAnswer": 3}]},
    )
    assert resp.status_code == 200
    assert resp.json()["score"] == 0


def test_submit_numbers_compare_by_value_and_are_stored_as_given(client):
    signed_in_user(client)
    resp = client.post(
        "/api/assessment",
        json={"subject": "ml", "answers": [1, True], "questions": [{"correctAnswer": 1.0}, {"correctAnswer": 1}]},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["score"] == 1

    detail = client.get(f"/api/assessments/{data['assessmentId']}").json()
    assert detail["answers"][0]["userAnswer"] == 1
    assert detail["answers"][0]["isCorrect"] is True
    assert detail["answers"][1]["userAnswer"] is True
    assert detail["answers"][1]["isCorrect"] is False


def test_submit_length_mismatch_400(client):
    signed_in_user(client)
    resp = submit_assessment(client, answers=["A"], correct=["A", "B"])
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_submit_missing_questions_400(client):
    signed_in_user(client)
    resp = client.post("/api/assessment", json={"subject": "ml", "answers": ["A"]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"


def test_submit_question_without_key_400(client):
    signed_in_user(client)
    resp = client.post(
        "/api/assessment",
        json={"subject": "ml", "answers": ["A"], "questions": [{"question": "no key"}]},
    )
    assert resp.status_code == 400


def test_submit_empty_quiz_400(client):
    signed_in_user(client)
    resp = client.post("/api/assessment", json={"subject": "ml", "answers": [], "questions": []})
    assert resp.status_code == 400


def test_submit_requires_session(client):
    resp = submit_assessment(client)
    assert resp.status_code == 401
    assert "error" in resp.json()


# ===== History =====


def test_history_lists_own_records_newest_first(client):
    signed_in_user(client, user_id="alice")
    first = submit_assessment(client, subject="ml").json()["assessmentId"]
    second = submit_assessment(client, subject="cd").json()["assessmentId"]

    # Force distinct timestamps: the first submission is a day older.
    db = TestingSessionLocal()
    try:
        record = db.query(Assessment).filter(Assessment.id == first).one()
        record.submitted_at = datetime.now(timezone.utc) - timedelta(days=1)
        db.commit()
    finally:
        db.close()

    client.get("/logout")
    signed_in_user(client, user_id="bob")
    submit_assessment(client, subject="cns")
    client.get("/logout")
    login_user(client, "alice")

    resp = client.get("/api/assessments")
    assert resp.status_code == 200
    rows = resp.json()
    assert [row["id"] for row in rows] == [second, first]
    assert set(rows[0].keys()) == {"id", "subject", "score", "totalQuestions", "percentage", "submittedAt"}
    assert rows[0]["subject"] == "cd"


def test_history_empty_for_new_user(client):
    signed_in_user(client)
    resp = client.get("/api/assessments")
    assert resp.status_code == 200
    assert resp.json() == []


def test_history_requires_session(client):
    assert client.get("/api/assessments").status_code == 401


# ===== Single record =====


def test_get_own_record_includes_answer_detail(client):
    user_id = signed_in_user(client)
    assessment_id = submit_assessment(client).json()["assessmentId"]
    resp = client.get(f"/api/assessments/{assessment_id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == assessment_id
    assert data["ownerId"] == user_id
    assert data["totalQuestions"] == 2
    assert data["answers"][1] == {
        "questionNumber": 2,
        "userAnswer": "C",
        "correctAnswer": "B",
        "isCorrect": False,
    }


def test_get_other_users_record_404(client):
    signed_in_user(client, user_id="alice")
    assessment_id = submit_assessment(client).json()["assessmentId"]
    client.get("/logout")

    signed_in_user(client, user_id="mallory")
    resp = client.get(f"/api/assessments/{assessment_id}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "Assessment not found"


def test_get_missing_record_404(client):
    signed_in_user(client)
    assert client.get("/api/assessments/9999").status_code == 404


def test_get_non_numeric_id_404(client):
    signed_in_user(client)
    assert client.get("/api/assessments/not-an-id").status_code == 404


def test_get_record_requires_session(client):
    register_user(client, user_id="alice")
    assert client.get("/api/assessments/1").status_code == 401


def test_timestamps_are_sent_as_utc(client):
    signed_in_user(client)
    assessment_id = submit_assessment(client).json()["assessmentId"]
    summary = client.get("/api/assessments").json()[0]["submittedAt"]
    detail = client.get(f"/api/assessments/{assessment_id}").json()["submittedAt"]
    for value in (summary, detail):
        assert value.endswith("Z") or value.endswith("+00:00"), value
