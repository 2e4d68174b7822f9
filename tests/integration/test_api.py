# ==============================================================================
# ARCHITECTURE: INTEGRATION TEST (HTTP SURFACE)
# ------------------------------------------------------------------------------
# GOAL: Verify the FastAPI routes, status codes and JSON shapes.
# CONSTRAINTS:
#   1. CLIENT: fastapi.testclient.TestClient against create_app().
#   2. DATA: JSON files under tmp_path, in-memory progress (see conftest).
# ==============================================================================
import pytest


def answer(client, qid, selected):
    return client.post("/api/answer", json={"questionId": qid, "selectedAnswer": selected})


class TestQuestionRoutes:
    def test_categories(self, client):
        response = client.get("/api/categories")

        assert response.status_code == 200
        assert [c["id"] for c in response.json()] == ["technology", "management", "strategy"]

    def test_questions_never_expose_answers(self, client):
        for path in ("/api/questions", "/api/questions/random?count=10", "/api/questions/q1"):
            body = client.get(path).json()
            for q in body if isinstance(body, list) else [body]:
                assert "correctAnswer" not in q
                assert "explanation" not in q
                assert set(q) >= {"id", "category", "categoryName", "question", "choices"}

    def test_question_filters(self, client):
        ids = [q["id"] for q in client.get("/api/questions?category=technology").json()]
        assert ids == ["q1", "q2"]

        ids = [q["id"] for q in client.get("/api/questions?difficulty=hard").json()]
        assert ids == ["q4"]

    def test_random_defaults_to_five(self, client):
        response = client.get("/api/questions/random")

        assert response.status_code == 200
        assert len(response.json()) == 4  # only four in the bank

    def test_random_by_category(self, client):
        body = client.get("/api/questions/random?category=strategy&count=3").json()
        assert [q["id"] for q in body] == ["q4"]

    def test_weak_route_not_shadowed_by_id(self, client):
        response = client.get("/api/questions/weak")

        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_question_is_404(self, client):
        response = client.get("/api/questions/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "問題が見つかりません"}

    def test_unknown_category_is_400(self, client):
        response = client.get("/api/questions/random?category=physics")

        assert response.status_code == 400
        assert "error" in response.json()

    def test_question_list_status(self, client):
        answer(client, "q1", 1)
        answer(client, "q2", 3)

        items = {i["id"]: i for i in client.get("/api/questions/list").json()}
        assert items["q1"]["status"] == "correct"
        assert items["q2"]["status"] == "incorrect"
        assert items["q3"]["status"] == "unanswered"
        assert items["q1"]["correctCount"] == 1


class TestAnswerRoute:
    def test_correct_answer(self, client):
        response = answer(client, "q1", 1)

        assert response.status_code == 200
        body = response.json()
        assert body["isCorrect"] is True
        assert body["correctAnswer"] == 1
        assert body["explanation"] == "Explanation q1"
        assert body["stats"]["attempts"] == 1
        assert body["stats"]["correctCount"] == 1
        assert body["stats"]["lastAttemptAt"] is not None
        assert body["relatedTerms"] == []

    def test_related_terms_are_resolved(self, client):
        body = answer(client, "q3", 2).json()

        assert [t["id"] for t in body["relatedTerms"]] == ["wbs"]
        assert body["relatedTerms"][0]["fullName"] == "Work Breakdown Structure"

    def test_timeout_sentinel(self, client):
        body = answer(client, "q1", -1).json()

        assert body["isCorrect"] is False
        history = client.get("/api/history").json()
        assert history[0]["selectedAnswer"] == -1

    def test_unknown_question_is_404(self, client):
        response = answer(client, "missing", 0)

        assert response.status_code == 404
        assert response.json() == {"error": "問題が見つかりません"}
        assert client.get("/api/progress").json()["totalAttempts"] == 0

    @pytest.mark.parametrize("selected", [4, -2, "1", 1.5, None, True])
    def test_invalid_selection_is_400(self, client, selected):
        response = answer(client, "q1", selected)

        assert response.status_code == 400
        assert "error" in response.json()
        assert client.get("/api/progress").json()["totalAttempts"] == 0

    def test_missing_body_fields_are_400(self, client):
        response = client.post("/api/answer", json={"questionId": "q1"})
        assert response.status_code == 400


class TestProgressRoutes:
    def test_fresh_progress(self, client):
        body = client.get("/api/progress").json()

        assert body["totalAttempts"] == 0
        assert body["totalCorrect"] == 0
        assert body["overallCorrectRate"] == 0
        assert body["weakQuestionsCount"] == 0
        assert body["user"]["id"] == "default_user"
        assert set(body["categoryStats"]) == {"technology", "management", "strategy"}

    def test_two_wrong_answers_make_question_weak(self, client):
        answer(client, "q2", 3)
        answer(client, "q2", 3)

        assert client.get("/api/progress").json()["weakQuestionsCount"] == 1
        assert [q["id"] for q in client.get("/api/questions/weak").json()] == ["q2"]

    def test_reset(self, client):
        answer(client, "q2", 3)
        answer(client, "q2", 3)

        response = client.post("/api/progress/reset")

        assert response.status_code == 200
        assert response.json() == {"message": "進捗をリセットしました"}
        assert client.get("/api/progress").json()["totalAttempts"] == 0
        assert client.get("/api/questions/weak").json() == []

    def test_history_newest_first_with_preview(self, client):
        answer(client, "q1", 0)
        answer(client, "q3", 0)

        history = client.get("/api/history?limit=1").json()

        assert len(history) == 1
        assert history[0]["questionId"] == "q3"
        assert history[0]["question"]["questionText"].endswith("...")
        assert len(history[0]["question"]["questionText"]) == 53

    @pytest.mark.parametrize("limit", [0, 101, "many"])
    def test_history_limit_bounds(self, client, limit):
        assert client.get(f"/api/history?limit={limit}").status_code == 400


class TestGlossaryRoutes:
    def test_list_and_filter(self, client):
        assert [t["id"] for t in client.get("/api/glossary").json()] == ["wbs", "dns"]
        assert [t["id"] for t in client.get("/api/glossary?category=technology").json()] == ["dns"]
        assert [t["id"] for t in client.get("/api/glossary?search=WBS").json()] == ["wbs"]

    def test_single_term(self, client):
        assert client.get("/api/glossary/dns").json()["term"] == "DNS"

        response = client.get("/api/glossary/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "用語が見つかりません"}


class TestOperational:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}

    def test_correlation_id_header(self, client):
        assert client.get("/api/health").headers["X-Correlation-ID"]

    def test_storage_failure_is_500(self, client, data_dir):
        (data_dir / "questions.json").write_text("{broken", encoding="utf-8")

        response = client.get("/api/questions")

        assert response.status_code == 500
        assert response.json() == {"error": "問題の取得に失敗しました"}
