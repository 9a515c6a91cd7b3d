import pytest
from fastapi.testclient import TestClient

from namhae_welfare.core.database import WelfareDatabase
from namhae_welfare.core.errors import StorageError
from namhae_welfare.main import app
from namhae_welfare.services.survey_questions import QUESTION_CATALOG


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client, birth_date_for_age):
    def _register(age: int = 70, **overrides) -> dict:
        body = {
            "name": "강남해",
            "birth_date": birth_date_for_age(age),
            "address": "남해군 남해읍",
            "district_code": "남해읍",
        }
        body.update(overrides)
        resp = client.post("/api/users", json=body)
        assert resp.status_code == 200, resp.text
        return resp.json()
    return _register


def _answers_for(category) -> list[dict]:
    return [
        {"question_id": q.id, "question": q.text, "answer": q.options[0]}
        for q in QUESTION_CATALOG[category]
    ]


# ── Health ───────────────────────────────────────────────────────────────


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "healthy"

    body = client.get("/health").json()
    assert body["status"] == "healthy"
    assert body["services"]["database"] is True
    assert body["services"]["rate_limiter"] is False


def test_unknown_api_route_returns_json_404(client):
    resp = client.get("/api/does-not-exist")
    assert resp.status_code == 404
    assert "error" in resp.json()


# ── Users ────────────────────────────────────────────────────────────────


def test_register_user(register):
    body = register(age=85)
    assert body["success"] is True
    assert body["age_group"] == "super-elderly"
    assert len(body["user_key"]) == 32
    assert body["user_id"]


def test_register_missing_field_is_400(client, birth_date_for_age):
    resp = client.post(
        "/api/users",
        json={"name": "강남해", "birth_date": birth_date_for_age(70), "address": "남해군"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "모든 필드가 필요합니다."}


def test_register_missing_birth_date_is_400(client):
    resp = client.post(
        "/api/users",
        json={"name": "강남해", "address": "남해군", "district_code": "남해읍"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "모든 필드가 필요합니다."}


def test_register_overlong_address_is_400(client, birth_date_for_age):
    resp = client.post(
        "/api/users",
        json={
            "name": "강남해",
            "birth_date": birth_date_for_age(70),
            "address": "남" * 500,
            "district_code": "남해읍",
        },
    )
    assert resp.status_code == 400
    assert "최대 200자" in resp.json()["error"]


def test_register_underage_is_400(client, birth_date_for_age):
    resp = client.post(
        "/api/users",
        json={
            "name": "젊은이",
            "birth_date": birth_date_for_age(65, days_until_birthday=1),
            "address": "남해군 남해읍",
            "district_code": "남해읍",
        },
    )
    assert resp.status_code == 400
    assert "65세 이상" in resp.json()["error"]


def test_register_non_json_body_is_400(client):
    resp = client.post("/api/users", content="not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_get_user_by_key(client, register):
    created = register(age=76, name="윤고령")

    resp = client.get(f"/api/users/{created['user_key']}")
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["name"] == "윤고령"
    assert user["age"] == 76
    assert user["age_group"] == "elderly"

    assert client.get("/api/users/" + "0" * 32).status_code == 404


def test_storage_failure_is_generic_500(client, birth_date_for_age, monkeypatch):
    def broken_insert(self, user):
        raise StorageError()

    monkeypatch.setattr(WelfareDatabase, "insert_user", broken_insert)
    resp = client.post(
        "/api/users",
        json={
            "name": "강남해",
            "birth_date": birth_date_for_age(70),
            "address": "남해군 남해읍",
            "district_code": "남해읍",
        },
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "데이터 처리 중 오류가 발생했습니다."}


# ── Survey ───────────────────────────────────────────────────────────────


def test_start_survey_unknown_user_is_404(client):
    resp = client.post("/api/survey/start", json={"user_key": "b" * 32})
    assert resp.status_code == 404
    assert resp.json() == {"error": "사용자를 찾을 수 없습니다."}


def test_start_survey_returns_catalog(client, register):
    user = register()
    resp = client.post("/api/survey/start", json={"user_key": user["user_key"]})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["session_id"]
    assert list(body["questions"]) == ["health", "living", "economic", "social"]
    assert [len(qs) for qs in body["questions"].values()] == [3, 3, 3, 3]


def test_answer_validation_errors(client, register):
    user = register()
    session_id = client.post("/api/survey/start", json={"user_key": user["user_key"]}).json()["session_id"]

    bad_category = client.post(
        "/api/survey/answer",
        json={"session_id": session_id, "category": "hobby", "answers": []},
    )
    assert bad_category.status_code == 400

    wrong_question = client.post(
        "/api/survey/answer",
        json={
            "session_id": session_id,
            "category": "health",
            "answers": [{"question_id": 10, "question": "?", "answer": "활발"}],
        },
    )
    assert wrong_question.status_code == 400

    malformed = client.post(
        "/api/survey/answer",
        json={"session_id": session_id, "category": "health", "answers": "매우 좋음"},
    )
    assert malformed.status_code == 400
    assert "error" in malformed.json()

    boolean_id = client.post(
        "/api/survey/answer",
        json={
            "session_id": session_id,
            "category": "health",
            "answers": [{"question_id": True, "answer": "좋음"}],
        },
    )
    assert boolean_id.status_code == 400
    assert client.get(f"/api/survey/{session_id}").json()["answered_questions"] == 0

    unknown_session = client.post(
        "/api/survey/answer",
        json={"session_id": "nope", "category": "health", "answers": _answers_for("health")},
    )
    assert unknown_session.status_code == 404


def test_full_survey_flow(client, register):
    user = register(age=70)
    session_id = client.post(
        "/api/survey/start", json={"user_key": user["user_key"]}
    ).json()["session_id"]

    for category in QUESTION_CATALOG:
        resp = client.post(
            "/api/survey/answer",
            json={"session_id": session_id, "category": category.value, "answers": _answers_for(category)},
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    assert resp.json()["status"] == "completed"
    assert resp.json()["answered_categories"] == ["health", "living", "economic", "social"]

    progress = client.get(f"/api/survey/{session_id}").json()
    assert progress["status"] == "completed"
    assert progress["answered_questions"] == 12

    recs = client.post("/api/recommendations", json={"session_id": session_id})
    assert recs.status_code == 200
    body = recs.json()
    assert body["user_info"] == {"age_group": "pre-elderly", "age": 70}
    assert 0 < len(body["recommendations"]) <= 5
    for rec in body["recommendations"]:
        assert 0.7 <= rec["score"] < 1.0
        assert rec["reason"]
        assert rec["target_age_min"] <= 70 <= rec["target_age_max"]

    results = client.get(f"/api/results/{user['user_key']}").json()
    assert results["success"] is True
    assert results["has_survey"] is True
    assert results["user_info"]["name"] == "강남해"
    assert len(results["recommendations"]) <= 5


def test_resubmitted_category_does_not_duplicate(client, register):
    user = register()
    session_id = client.post(
        "/api/survey/start", json={"user_key": user["user_key"]}
    ).json()["session_id"]
    payload = {"session_id": session_id, "category": "living", "answers": _answers_for("living")}

    client.post("/api/survey/answer", json=payload)
    client.post("/api/survey/answer", json=payload)

    progress = client.get(f"/api/survey/{session_id}").json()
    assert progress["answered_questions"] == 3
    assert progress["answered_categories"] == ["living"]
    assert progress["status"] == "active"


def test_progress_unknown_session_is_404(client):
    assert client.get("/api/survey/unknown").status_code == 404


# ── Recommendations / Results ────────────────────────────────────────────


def test_recommendations_unknown_session_is_404(client):
    resp = client.post("/api/recommendations", json={"session_id": "missing"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "사용자 정보를 찾을 수 없습니다."}


def test_results_before_any_survey(client, register):
    user = register()
    resp = client.get(f"/api/results/{user['user_key']}")

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["has_survey"] is False
    assert "recommendations" not in body


def test_results_unknown_key_is_404(client):
    resp = client.get("/api/results/" + "c" * 32)
    assert resp.status_code == 404
    assert resp.json() == {"error": "결과를 찾을 수 없습니다."}


def test_welfare_services_listing(client):
    body = client.get("/api/welfare-services").json()
    assert body["total"] == 5

    only_dementia = client.get("/api/welfare-services", params={"age": 64}).json()
    assert [s["name"] for s in only_dementia["services"]] == ["치매검진 서비스"]

    assert client.get("/api/welfare-services", params={"age": -1}).status_code == 400
