"""Tests for quiz gating, question delivery, answers and results."""

from models.response import ResponseModel
from schemas.admin import QuestionCreate
from utils.question_manager import QuestionManager


class TestQuizGating:
    """The quiz switch blocks ordinary users but never the administrator."""

    def test_status_reports_disabled_by_default(self, client, login):
        response = client.get("/api/quiz/status", headers=login("bob"))
        assert response.status_code == 200
        assert response.json()["enabled"] is False

    def test_admin_always_sees_enabled(self, client, login):
        response = client.get("/api/quiz/status", headers=login("admin"))
        assert response.json()["enabled"] is True

    def test_questions_gated_for_users(self, client, login, questions):
        response = client.get("/api/quiz/1", headers=login("bob"))
        assert response.status_code == 403
        assert response.json() == {
            "message": "Quiz is not yet enabled by the administrator",
            "error": "Quiz disabled",
        }

    def test_admin_bypasses_gate(self, client, login, questions):
        response = client.get("/api/quiz/1", headers=login("admin"))
        assert response.status_code == 200

    def test_timer_start_gated(self, client, login):
        assert client.get("/api/quiz/timer/start", headers=login("bob")).status_code == 403

    def test_enabling_opens_the_quiz(self, client, login, questions, enable_quiz):
        enable_quiz(True)
        headers = login("bob")
        assert client.get("/api/quiz/status", headers=headers).json()["enabled"] is True
        assert client.get("/api/quiz/1", headers=headers).status_code == 200

    def test_requires_authentication(self, client, questions):
        assert client.get("/api/quiz/1").status_code == 401


class TestQuestionListing:
    """Tests for GET /api/quiz/{year}."""

    def test_invalid_year(self, client, login, enable_quiz):
        enable_quiz(True)
        response = client.get("/api/quiz/4", headers=login("bob"))
        assert response.status_code == 400
        assert response.json()["message"].startswith("Invalid year selection")

    def test_non_numeric_year(self, client, login, enable_quiz):
        enable_quiz(True)
        assert client.get("/api/quiz/abc", headers=login("bob")).status_code == 400

    def test_pagination(self, client, login, questions, enable_quiz):
        enable_quiz(True)
        response = client.get("/api/quiz/1?page=2&limit=2", headers=login("bob"))
        assert response.status_code == 200
        data = response.json()
        assert data["pagination"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}
        assert [q["question"] for q in data["questions"]] == ["6 * 7?"]

    def test_correct_answers_are_not_exposed(self, client, login, questions, enable_quiz):
        enable_quiz(True)
        data = client.get("/api/quiz/1", headers=login("bob")).json()
        assert len(data["questions"]) == 3
        for question in data["questions"]:
            assert "correct_answer" not in question
        assert data["questions"][0]["options"] == ["3", "4", "5"]

    def test_empty_year(self, client, login, questions, enable_quiz):
        enable_quiz(True)
        data = client.get("/api/quiz/3", headers=login("bob")).json()
        assert data["questions"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["pages"] == 0

    def test_limit_out_of_range(self, client, login, enable_quiz):
        enable_quiz(True)
        response = client.get("/api/quiz/1?limit=0", headers=login("bob"))
        assert response.status_code == 400


class TestQuestionCache:
    """Question pages are served from cache until expiry or invalidation."""

    def test_repeat_request_served_from_cache(
        self, client, login, questions, enable_quiz, db, question_cache
    ):
        enable_quiz(True)
        headers = login("bob")
        first = client.get("/api/quiz/1", headers=headers).json()
        QuestionManager(db).add_questions(
            [QuestionCreate(year_level=1, question="New?", correct_answer="x")]
        )
        second = client.get("/api/quiz/1", headers=headers).json()
        assert second == first
        assert len(question_cache) == 1

    def test_cache_expires(self, client, login, questions, enable_quiz, db, clock):
        enable_quiz(True)
        headers = login("bob")
        client.get("/api/quiz/1", headers=headers)
        QuestionManager(db).add_questions(
            [QuestionCreate(year_level=1, question="New?", correct_answer="x")]
        )
        clock.advance(601)
        data = client.get("/api/quiz/1", headers=headers).json()
        assert data["pagination"]["total"] == 4

    def test_admin_question_upload_invalidates(
        self, client, login, questions, enable_quiz
    ):
        enable_quiz(True)
        headers = login("bob")
        client.get("/api/quiz/1", headers=headers)
        response = client.post(
            "/api/admin/questions",
            headers=login("admin"),
            json={
                "questions": [
                    {"year_level": 1, "question": "1 + 1?", "correct_answer": "2"}
                ]
            },
        )
        assert response.status_code == 201
        data = client.get("/api/quiz/1", headers=headers).json()
        assert data["pagination"]["total"] == 4

    def test_gated_request_does_not_populate_cache(
        self, client, login, questions, question_cache
    ):
        client.get("/api/quiz/1", headers=login("bob"))
        assert len(question_cache) == 0


class TestAnswers:
    """Tests for save, submit and answer retrieval."""

    def test_save_then_fetch(self, client, login):
        headers = login("alice")
        response = client.post(
            "/api/quiz/save", headers=headers, json={"year": 1, "answers": {"1": "4"}}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Answers saved successfully"}
        data = client.get("/api/quiz/answers/1", headers=headers).json()
        assert data == {"answers": {"1": "4"}}

    def test_save_accepts_serialized_answers(self, client, login):
        headers = login("alice")
        client.post(
            "/api/quiz/save",
            headers=headers,
            json={"year": 2, "answers": '{"7": "Queue"}'},
        )
        data = client.get("/api/quiz/answers/2", headers=headers).json()
        assert data == {"answers": {"7": "Queue"}}

    def test_no_answers_yet(self, client, login):
        data = client.get("/api/quiz/answers/1", headers=login("alice")).json()
        assert data == {"answers": {}}

    def test_answers_are_private(self, client, login):
        client.post(
            "/api/quiz/save",
            headers=login("alice"),
            json={"year": 1, "answers": {"1": "4"}},
        )
        data = client.get("/api/quiz/answers/1", headers=login("bob")).json()
        assert data == {"answers": {}}

    def test_missing_answers_is_bad_request(self, client, login):
        response = client.post("/api/quiz/save", headers=login("alice"), json={"year": 1})
        assert response.status_code == 400

    def test_invalid_year_rejected(self, client, login):
        response = client.post(
            "/api/quiz/submit", headers=login("alice"), json={"year": 9, "answers": {}}
        )
        assert response.status_code == 400

    def test_resubmit_keeps_one_completed_row(self, client, login, users, db):
        headers = login("alice")
        for answers in ({"1": "a"}, {"1": "b"}):
            response = client.post(
                "/api/quiz/submit", headers=headers, json={"year": 1, "answers": answers}
            )
            assert response.status_code == 200

        db.expire_all()
        rows = db.query(ResponseModel).filter(ResponseModel.user_id == users["alice"]).all()
        assert len(rows) == 1
        assert rows[0].completed is True
        data = client.get("/api/quiz/answers/1", headers=headers).json()
        assert data == {"answers": {"1": "b"}}

    def test_boolean_year_rejected(self, client, login):
        response = client.post(
            "/api/quiz/save", headers=login("alice"), json={"year": True, "answers": {}}
        )
        assert response.status_code == 400

    def test_year_as_text_accepted(self, client, login):
        headers = login("alice")
        client.post("/api/quiz/save", headers=headers, json={"year": "2", "answers": {"5": "x"}})
        data = client.get("/api/quiz/answers/2", headers=headers).json()
        assert data == {"answers": {"5": "x"}}

    def test_submit_marks_completed(self, client, login):
        headers = login("alice")
        response = client.post(
            "/api/quiz/submit", headers=headers, json={"year": 1, "answers": {"1": "4"}}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Quiz submitted successfully"}
        scores = client.get("/api/quiz/results", headers=headers).json()["scores"]
        assert "1" in scores


class TestResults:
    """Tests for GET /api/quiz/results."""

    def test_scores_completed_responses_only(self, client, login, questions):
        headers = login("alice")
        year1 = {str(questions[0].id): "4", str(questions[1].id): "Rome"}
        client.post("/api/quiz/submit", headers=headers, json={"year": 1, "answers": year1})
        client.post(
            "/api/quiz/save",
            headers=headers,
            json={"year": 2, "answers": {str(questions[3].id): "Queue"}},
        )

        data = client.get("/api/quiz/results", headers=headers).json()
        assert data["user"] == {"username": "alice", "warnings": 0, "fullscreenViolations": 0}
        assert list(data["scores"]) == ["1"]
        assert data["scores"]["1"]["score"] == 1
        assert data["scores"]["1"]["totalQuestions"] == 3
        assert data["scores"]["1"]["completed"] is True

    def test_numeric_answers_compare_as_text(self, client, login, questions):
        headers = login("alice")
        client.post(
            "/api/quiz/submit",
            headers=headers,
            json={"year": 1, "answers": {str(questions[2].id): 42}},
        )
        data = client.get("/api/quiz/results", headers=headers).json()
        assert data["scores"]["1"]["score"] == 1

    def test_no_results(self, client, login):
        data = client.get("/api/quiz/results", headers=login("bob")).json()
        assert data["scores"] == {}


class TestViolations:
    """Tests for tab-switch warnings and fullscreen violations."""

    def test_tab_warning_sets_count(self, client, login):
        headers = login("bob")
        response = client.post("/api/quiz/tab-warning", headers=headers, json={"warningCount": 3})
        assert response.status_code == 200
        assert response.json()["warnings"] == 3
        user = client.get("/api/quiz/results", headers=headers).json()["user"]
        assert user["warnings"] == 3

    def test_negative_warning_count_rejected(self, client, login):
        response = client.post(
            "/api/quiz/tab-warning", headers=login("bob"), json={"warningCount": -1}
        )
        assert response.status_code == 400

    def test_fullscreen_violation_increments(self, client, login):
        headers = login("bob")
        client.post("/api/quiz/fullscreen-violation", headers=headers)
        response = client.post("/api/quiz/fullscreen-violation", headers=headers)
        assert response.json()["violations"] == 2
