"""
API integration tests using FastAPI TestClient with in-memory DB.
"""
import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
class TestHealthRoutes:
    def test_root_returns_healthy(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        assert "Healthy" in response.json()["message"]

    def test_request_id_echoed(self, api_client: TestClient):
        response = api_client.get("/", headers={"x-request-id": "abc-123"})
        assert response.headers.get("x-request-id") == "abc-123"


@pytest.mark.integration
class TestAuthRoutes:
    def test_register_success(self, api_client: TestClient, registration):
        response = api_client.post("/api/register", json=registration)
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == registration["username"]
        assert "password" not in data and "hashed_password" not in data
        assert "access_token" in response.cookies

    def test_register_seeds_progress(self, auth_client: TestClient):
        response = auth_client.get("/api/progress")
        assert response.status_code == 200
        data = response.json()
        assert data["overallProgress"] == 0
        assert set(data["modules"]) == {"phishing", "password"}
        assert data["modules"]["phishing"] == {
            "progress": 0,
            "score": 0,
            "completedChallenges": [],
            "timeSpent": 0,
            "isCompleted": False,
        }

    def test_register_rejects_password_over_bcrypt_limit(self, api_client: TestClient, registration):
        response = api_client.post("/api/register", json={**registration, "password": "x" * 80})
        assert response.status_code == 422
        assert api_client.post("/api/login", json={"username": registration["username"], "password": "x" * 80}).status_code == 401

    def test_register_limit_counts_bytes_not_characters(self, api_client: TestClient, registration):
        # 36 characters, 72 bytes in UTF-8
        response = api_client.post("/api/register", json={**registration, "password": "é" * 36})
        assert response.status_code == 201
        response = api_client.post("/api/register", json={**registration, "username": "other", "password": "é" * 37})
        assert response.status_code == 422

    def test_register_duplicate_fails(self, api_client: TestClient, registration):
        api_client.post("/api/register", json=registration)
        response = api_client.post("/api/register", json=registration)
        assert response.status_code == 400

    def test_register_missing_fields(self, api_client: TestClient):
        response = api_client.post("/api/register", json={"username": "someone", "password": "secret1"})
        assert response.status_code == 422

    def test_login_success(self, auth_client: TestClient, registration):
        auth_client.post("/api/logout")
        auth_client.cookies.clear()
        response = auth_client.post(
            "/api/login",
            json={"username": registration["username"], "password": registration["password"]},
        )
        assert response.status_code == 200
        assert response.json()["username"] == registration["username"]
        assert auth_client.get("/api/user").status_code == 200

    def test_login_wrong_password_fails(self, auth_client: TestClient, registration):
        response = auth_client.post(
            "/api/login",
            json={"username": registration["username"], "password": "wrong-password"},
        )
        assert response.status_code == 401

    def test_current_user(self, auth_client: TestClient, registration):
        response = auth_client.get("/api/user")
        assert response.status_code == 200
        assert response.json()["email"] == registration["email"]

    def test_protected_routes_require_cookie(self, api_client: TestClient):
        assert api_client.get("/api/user").status_code == 401
        assert api_client.get("/api/progress").status_code == 401
        assert api_client.post("/api/modules/password/check", json={"password": "x"}).status_code == 401

    def test_invalid_token_rejected(self, api_client: TestClient):
        response = api_client.get("/api/user", headers={"Cookie": "access_token=not-a-jwt"})
        assert response.status_code == 401

    def test_logout_returns_ok(self, api_client: TestClient):
        response = api_client.post("/api/logout")
        assert response.status_code == 200


@pytest.mark.integration
class TestModuleRoutes:
    def test_list_modules(self, auth_client: TestClient):
        response = auth_client.get("/api/modules")
        assert response.status_code == 200
        modules = response.json()
        assert [m["id"] for m in modules] == ["phishing", "password"]
        assert modules[0]["totalChallenges"] == 3

    def test_module_detail_hides_answers(self, auth_client: TestClient):
        response = auth_client.get("/api/modules/phishing")
        assert response.status_code == 200
        challenge = response.json()["challenges"][0]
        assert challenge["sender"] == "accounts@paypa1-security.com"
        assert "isPhishing" not in challenge and "explanation" not in challenge

    def test_unknown_module(self, auth_client: TestClient):
        assert auth_client.get("/api/modules/nope").status_code == 404
        assert auth_client.get("/api/modules/nope/progress").status_code == 404


@pytest.mark.integration
class TestPasswordRoutes:
    def test_check_returns_camel_case_assessment(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/password/check", json={"password": "P@ssw0rd1234"})
        assert response.status_code == 200
        assert response.json() == {
            "requirements": {
                "length": True,
                "uppercase": True,
                "lowercase": True,
                "number": True,
                "special": True,
                "notCommon": False,
            },
            "strength": 100,
            "strengthText": "Very Strong",
        }

    def test_check_empty_password(self, auth_client: TestClient):
        data = auth_client.post("/api/modules/password/check", json={"password": ""}).json()
        assert data["strength"] == 0
        assert data["strengthText"] == "Very Weak"

    def test_check_rejects_non_string(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/password/check", json={"password": 123456})
        assert response.status_code == 422

    def test_submit_strong_password(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/password/submit", json={"challengeId": 1, "password": "Zebra#Lamp77"})
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["strength"] == 100
        assert data["score"] == 100
        assert data["progress"] == 33

        module = auth_client.get("/api/modules/password/progress").json()
        assert module["completedChallenges"] == [1]
        assert auth_client.get("/api/progress").json()["overallProgress"] == 16.5

    def test_resubmitting_a_solved_challenge_awards_nothing(self, auth_client: TestClient):
        body = {"challengeId": 1, "password": "Zebra#Lamp77"}
        auth_client.post("/api/modules/password/submit", json=body)
        data = auth_client.post("/api/modules/password/submit", json=body).json()
        assert data["success"] is True
        assert data["score"] == 100
        assert data["progress"] == 33

    def test_submit_weak_password(self, auth_client: TestClient):
        data = auth_client.post("/api/modules/password/submit", json={"challengeId": 1, "password": "password"}).json()
        assert data["success"] is False
        assert data["score"] == 0
        assert data["progress"] == 0

    def test_submit_unknown_challenge(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/password/submit", json={"challengeId": 9, "password": "Zebra#Lamp77"})
        assert response.status_code == 422


@pytest.mark.integration
class TestPhishingRoutes:
    def test_correct_answer(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/phishing/submit", json={"challengeId": 1, "answer": "phishing"})
        assert response.status_code == 200
        data = response.json()
        assert data["isCorrect"] is True
        assert "paypa1-security.com" in data["explanation"]
        assert data["score"] == 100
        assert data["progress"] == 33
        assert data["nextChallengeId"] == 2

    def test_incorrect_answer_keeps_progress(self, auth_client: TestClient):
        data = auth_client.post("/api/modules/phishing/submit", json={"challengeId": 2, "answer": "phishing"}).json()
        assert data["isCorrect"] is False
        assert data["score"] == 0
        assert data["nextChallengeId"] == 1

    def test_all_challenges_complete_module(self, auth_client: TestClient):
        for challenge_id, answer in ((1, "phishing"), (2, "legitimate"), (3, "phishing")):
            data = auth_client.post(
                "/api/modules/phishing/submit", json={"challengeId": challenge_id, "answer": answer}
            ).json()
        assert data["progress"] == 100
        assert data["score"] == 300
        assert data["nextChallengeId"] is None
        assert auth_client.get("/api/progress/phishing").json()["isCompleted"] is True

    def test_string_challenge_ids_do_not_double_award(self, auth_client: TestClient):
        auth_client.put("/api/progress/phishing", json={"completedChallenges": ["1"], "score": 100, "progress": 33})
        data = auth_client.post("/api/modules/phishing/submit", json={"challengeId": 1, "answer": "phishing"}).json()
        assert data["score"] == 100
        assert data["progress"] == 33
        assert auth_client.get("/api/progress/phishing").json()["completedChallenges"] == [1]

    def test_non_numeric_challenge_ids_rejected(self, auth_client: TestClient):
        response = auth_client.put("/api/progress/phishing", json={"completedChallenges": ["one"]})
        assert response.status_code == 422

    def test_invalid_answer(self, auth_client: TestClient):
        response = auth_client.post("/api/modules/phishing/submit", json={"challengeId": 1, "answer": "dunno"})
        assert response.status_code == 422


@pytest.mark.integration
class TestProgressRoutes:
    def test_partial_update(self, auth_client: TestClient):
        response = auth_client.put("/api/progress/phishing", json={"progress": 20, "score": 150})
        assert response.status_code == 200
        data = response.json()
        assert data["modules"]["phishing"]["progress"] == 20
        assert data["modules"]["phishing"]["score"] == 150
        assert data["overallProgress"] == 10.0

        response = auth_client.put("/api/progress/phishing", json={"timeSpent": 7})
        module = response.json()["modules"]["phishing"]
        assert module == {
            "progress": 20,
            "score": 150,
            "completedChallenges": [],
            "timeSpent": 7,
            "isCompleted": False,
        }

    def test_explicit_zero_is_applied(self, auth_client: TestClient):
        auth_client.put("/api/progress/password", json={"score": 300})
        data = auth_client.put("/api/progress/password", json={"score": 0}).json()
        assert data["modules"]["password"]["score"] == 0

    def test_completed_challenges_replaced(self, auth_client: TestClient):
        auth_client.put("/api/progress/phishing", json={"completedChallenges": [1, 2]})
        data = auth_client.put("/api/progress/phishing", json={"completedChallenges": [3, 3]}).json()
        assert data["modules"]["phishing"]["completedChallenges"] == [3]

    def test_same_update_twice(self, auth_client: TestClient):
        body = {"progress": 60, "score": 400, "completedChallenges": [1, 2]}
        first = auth_client.put("/api/progress/password", json=body).json()
        second = auth_client.put("/api/progress/password", json=body).json()
        assert first == second

    def test_unknown_module_created_on_demand(self, auth_client: TestClient):
        data = auth_client.put("/api/progress/spotthescam", json={"progress": 90}).json()
        assert data["modules"]["spotthescam"]["progress"] == 90
        assert data["overallProgress"] == 30.0
        assert auth_client.get("/api/progress/spotthescam").status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"progress": 150},
            {"progress": -1},
            {"score": -10},
            {"progress": None},
            {"points": 10},
        ],
    )
    def test_invalid_update_rejected(self, auth_client: TestClient, body):
        response = auth_client.put("/api/progress/phishing", json=body)
        assert response.status_code == 422
        assert auth_client.get("/api/progress/phishing").json()["progress"] == 0

    def test_get_missing_module_progress(self, auth_client: TestClient):
        assert auth_client.get("/api/progress/masquerading").status_code == 404
