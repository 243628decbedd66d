"""
API integration tests using FastAPI TestClient with in-memory DB.
"""
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from api.models.models import User, UserProgress
from api.utils.jwt import get_password_hash


def add_user(db, email, password):
    user = User(id=str(uuid4()), email=email, hashed_password=get_password_hash(password))
    db.add(user)
    db.commit()
    return user


def add_progress(db, user_id, subject_id, xp, streak=1):
    db.add(
        UserProgress(
            id=str(uuid4()),
            user_id=user_id,
            subject_id=subject_id,
            status="in_progress",
            completion_percentage=min(xp, 99),
            xp_points=xp,
            study_streak=streak,
        )
    )
    db.commit()


@pytest.mark.integration
class TestHealthRoutes:
    """Health and root endpoints (no auth)."""

    def test_root_returns_healthy(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert "Healthy" in data["message"]

    def test_request_id_echoed(self, api_client: TestClient):
        response = api_client.get("/", headers={"x-request-id": "req-123"})
        assert response.headers.get("x-request-id") == "req-123"


@pytest.mark.integration
class TestAuthRoutes:
    """Auth: register, login, logout, me."""

    def test_register_success(self, api_client: TestClient):
        response = api_client.post(
            "/auth/register",
            json={
                "email": "NewUser@example.com",
                "password": "securepass123",
                "confirm_password": "securepass123",
                "display_name": "New User",
            },
        )
        assert response.status_code == 200
        me = api_client.get("/auth/me")
        assert me.status_code == 200
        assert me.json()["email"] == "newuser@example.com"
        assert me.json()["display_name"] == "New User"

    def test_register_duplicate_fails(self, api_client: TestClient):
        api_client.post(
            "/auth/register",
            json={"email": "dup@example.com", "password": "pass123", "confirm_password": "pass123"},
        )
        response = api_client.post(
            "/auth/register",
            json={"email": "dup@example.com", "password": "other", "confirm_password": "other"},
        )
        assert response.status_code == 400

    def test_register_password_mismatch(self, api_client: TestClient):
        response = api_client.post(
            "/auth/register",
            json={"email": "mismatch@example.com", "password": "a", "confirm_password": "b"},
        )
        assert response.status_code == 400

    def test_login_success(self, api_client: TestClient, db):
        add_user(db, "login@example.com", "mypass")
        response = api_client.post(
            "/auth/login",
            json={"email": "login@example.com", "password": "mypass"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data.get("token_set") is True
        assert "access_token" in response.cookies

    def test_login_wrong_password_fails(self, api_client: TestClient, db):
        add_user(db, "wrong@example.com", "correct")
        response = api_client.post(
            "/auth/login",
            json={"email": "wrong@example.com", "password": "wrong"},
        )
        assert response.status_code == 401

    def test_me_requires_cookie(self, api_client: TestClient):
        assert api_client.get("/auth/me").status_code == 401

    def test_logout_returns_ok(self, api_client: TestClient):
        response = api_client.post("/auth/logout")
        assert response.status_code == 200


@pytest.mark.integration
class TestCatalogRoutes:
    def test_catalog_walk(self, portal: TestClient):
        unis = portal.get("/portal/catalog/universities").json()["universities"]
        assert [u["id"] for u in unis] == ["uni-test"]
        depts = portal.get("/portal/catalog/universities/uni-test/departments").json()["departments"]
        assert [d["id"] for d in depts] == ["dept-test"]
        sems = portal.get("/portal/catalog/departments/dept-test/semesters").json()["semesters"]
        assert [s["number"] for s in sems] == [3]
        subjects = portal.get("/portal/catalog/semesters/sem-test/subjects").json()["subjects"]
        assert {s["id"] for s in subjects} == {"sub-dsa", "sub-os"}
        assert all(s["has_materials"] for s in subjects)

    def test_unknown_university(self, portal: TestClient):
        assert portal.get("/portal/catalog/universities/nope/departments").status_code == 404

    def test_materials(self, portal: TestClient):
        response = portal.get("/portal/subjects/sub-dsa/materials")
        assert response.status_code == 200
        data = response.json()
        assert data["question_count"] == 5
        assert data["video_resources"] == [{"title": "Lecture 1"}]

    def test_quiz_hides_answers(self, portal: TestClient):
        response = portal.get("/portal/subjects/sub-dsa/quiz")
        assert response.status_code == 200
        questions = response.json()["questions"]
        assert len(questions) == 5
        assert all("correct_answer" not in q for q in questions)
        assert questions[0]["options"] == ["A", "B", "C", "D"]

    def test_materials_require_auth(self, api_client: TestClient, db, seed_catalog):
        seed_catalog(db)
        assert api_client.get("/portal/subjects/sub-dsa/materials").status_code == 401


@pytest.mark.integration
class TestProgressRoutes:
    def test_untouched_subject_is_zero_state(self, portal: TestClient):
        data = portal.get("/portal/progress/sub-dsa").json()
        assert data["status"] == "not_started"
        assert data["completion_percentage"] == 0
        assert data["completion_state"] == "below_threshold"

    def test_full_completion_flow(self, portal: TestClient, right_answers):
        opened = portal.post(
            "/portal/progress/sub-dsa/events", json={"kind": "open_materials", "first_open": True}
        )
        assert opened.status_code == 200
        assert opened.json()["record"]["completion_percentage"] == 15
        assert opened.json()["xp_gained"] == 15

        quiz = portal.post("/portal/progress/sub-dsa/quiz", json={"answers": right_answers})
        assert quiz.status_code == 200
        body = quiz.json()
        assert body["record"]["completion_percentage"] == 99
        assert body["record"]["gate_questions_completed"] is True
        assert body["record"]["completion_state"] == "awaiting_confirmation"
        assert body["prompt_confirmation"] is True
        assert [a["achievement_type"] for a in body["unlocked"]] == ["gate_master"]

        confirm = portal.post("/portal/progress/sub-dsa/completion/confirm")
        assert confirm.status_code == 200
        record = confirm.json()["record"]
        assert record["status"] == "completed"
        assert record["completion_percentage"] == 100
        assert record["xp_points"] == 100

        listing = portal.get("/portal/progress").json()
        assert listing["total_xp"] == 100
        assert [r["subject_id"] for r in listing["records"]] == ["sub-dsa"]
        assert portal.get("/portal/xp").json() == {"total_xp": 100}

        achievements = portal.get("/portal/achievements").json()["achievements"]
        assert {a["achievement_type"] for a in achievements} == {"gate_master", "first_subject"}

    def test_decline_is_remembered(self, portal: TestClient, right_answers):
        portal.post("/portal/progress/sub-os/quiz", json={"answers": right_answers})
        declined = portal.post("/portal/progress/sub-os/completion/decline")
        assert declined.status_code == 200
        assert declined.json()["record"]["completion_state"] == "deferred"

        refetched = portal.get("/portal/progress/sub-os").json()
        assert refetched["completion_percentage"] == 99
        assert refetched["completion_state"] == "deferred"

        again = portal.post("/portal/progress/sub-os/completion/decline")
        assert again.status_code == 400

    def test_replayed_quiz_batch_awards_nothing(self, portal: TestClient):
        event = {"kind": "answer_quiz_batch", "correct_count": 3, "total_count": 5}
        first = portal.post("/portal/progress/sub-dsa/events", json=event).json()
        second = portal.post("/portal/progress/sub-dsa/events", json=event).json()
        assert first["xp_gained"] == 60
        assert second["xp_gained"] == 0
        assert second["record"]["xp_points"] == 60

    def test_out_of_range_percentage_is_400(self, portal: TestClient):
        response = portal.post(
            "/portal/progress/sub-dsa/events", json={"kind": "view_syllabus_section", "percentage": 150}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "ValidationError"
        assert portal.get("/portal/progress").json()["records"] == []

    def test_missing_percentage_is_400(self, portal: TestClient):
        response = portal.post("/portal/progress/sub-dsa/events", json={"kind": "explicit_progress"})
        assert response.status_code == 400

    def test_unknown_kind_is_422(self, portal: TestClient):
        response = portal.post("/portal/progress/sub-dsa/events", json={"kind": "teleport"})
        assert response.status_code == 422

    def test_confirm_before_offer_is_400(self, portal: TestClient):
        portal.post("/portal/progress/sub-dsa/events", json={"kind": "view_syllabus_section", "percentage": 40})
        response = portal.post("/portal/progress/sub-dsa/completion/confirm")
        assert response.status_code == 400

    def test_unknown_subject_is_404(self, portal: TestClient):
        response = portal.post("/portal/progress/sub-missing/events", json={"kind": "open_materials"})
        assert response.status_code == 404

    def test_too_many_answers_is_400(self, portal: TestClient):
        response = portal.post("/portal/progress/sub-dsa/quiz", json={"answers": [0] * 6})
        assert response.status_code == 400

    def test_progress_requires_auth(self, api_client: TestClient):
        assert api_client.get("/portal/progress").status_code == 401


@pytest.mark.integration
class TestLeaderboardRoutes:
    def test_user_ranked_among_competitors(self, portal: TestClient, db, portal_user_id):
        add_progress(db, portal_user_id, "sub-dsa", 200, streak=4)
        add_progress(db, portal_user_id, "sub-os", 140, streak=2)

        data = portal.get("/portal/leaderboard").json()
        assert data["user_rank"] == 2
        assert [e["total_xp"] for e in data["entries"]] == [500, 340, 300, 100]
        assert [e["rank"] for e in data["entries"]] == [1, 2, 3, 4]
        me = data["entries"][1]
        assert me["name"] == "You"
        assert me["is_current_user"] is True
        assert me["is_synthetic"] is False
        assert me["current_streak"] == 4

    def test_limit_keeps_rank(self, portal: TestClient):
        data = portal.get("/portal/leaderboard", params={"limit": 2}).json()
        assert len(data["entries"]) == 2
        assert data["user_rank"] == 4

    def test_limit_bounds(self, portal: TestClient):
        assert portal.get("/portal/leaderboard", params={"limit": 0}).status_code == 422
