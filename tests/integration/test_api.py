"""Integration tests for API endpoints"""

import json
import pytest
from unittest.mock import AsyncMock, patch
from fastapi.testclient import TestClient
from finavatar.domain.exceptions import AdvisorAPIError


def _create_habit(client: TestClient, user_id: str = "user_1", **overrides) -> dict:
    body = {
        "user_id": user_id,
        "category": "Food",
        "amount": 25.0,
        "frequency": "daily",
        "description": "Lunch",
        "is_recurring": False,
    }
    body.update(overrides)
    response = client.post("/v1/habits", json=body)
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "finavatar_health_score_total" in response.text


def test_request_id_header(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_score_endpoint(client: TestClient):
    """Test POST /v1/health/score with the reference snapshot"""
    response = client.post(
        "/v1/health/score",
        json={
            "user_id": "user_1",
            "monthly_income": 5000,
            "monthly_expenses": 3000,
            "savings": 1000,
            "debt": 500,
            "investments": 500,
            "goal_profile": "moderate",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["metrics"]["body_archetype"] == "fit"
    assert data["metrics"]["fitness_level"] == pytest.approx(0.8)
    assert data["metrics"]["happiness_level"] == 1.0
    assert data["financial_score"] == pytest.approx(94)
    assert data["advice"] == ["Excellent financial health! Keep up the good work"]


def test_score_endpoint_rejects_negative_values(client: TestClient):
    response = client.post(
        "/v1/health/score",
        json={"user_id": "user_1", "monthly_income": -1, "monthly_expenses": 0},
    )
    assert response.status_code == 422


def test_avatar_state_persisted(client: TestClient):
    """Test GET /v1/avatar/{user_id} returns the latest score"""
    client.post(
        "/v1/health/score",
        json={"user_id": "user_2", "monthly_income": 1000, "monthly_expenses": 950, "debt": 400},
    )
    client.post(
        "/v1/health/score",
        json={"user_id": "user_2", "monthly_income": 1000, "monthly_expenses": 600, "savings": 300},
    )

    response = client.get("/v1/avatar/user_2")

    assert response.status_code == 200
    data = response.json()
    assert data["metrics"]["weight_level"] == pytest.approx(0.6)
    assert data["metrics"]["stress_level"] == 0


def test_avatar_state_not_found(client: TestClient):
    response = client.get("/v1/avatar/nobody")
    assert response.status_code == 404


def test_create_and_list_habits(client: TestClient):
    first = _create_habit(client, category="Food")
    _create_habit(client, category="food", amount=10)
    _create_habit(client, category="Rent", amount=900, frequency="monthly")
    _create_habit(client, user_id="someone_else")

    response = client.get("/v1/habits?user_id=user_1")
    assert response.status_code == 200
    habits = response.json()["habits"]
    assert len(habits) == 3
    assert habits[0]["id"] == first["id"]

    by_category = client.get("/v1/habits?user_id=user_1&category=FOOD").json()["habits"]
    assert {h["category"] for h in by_category} == {"Food", "food"}


def test_create_habit_validation(client: TestClient):
    response = client.post(
        "/v1/habits",
        json={"user_id": "user_1", "category": "Food", "amount": 0, "frequency": "daily"},
    )
    assert response.status_code == 422

    response = client.post(
        "/v1/habits",
        json={"user_id": "user_1", "category": "Food", "amount": 5, "frequency": "hourly"},
    )
    assert response.status_code == 422


def test_list_habits_date_range(client: TestClient):
    _create_habit(client)

    future = client.get("/v1/habits", params={"user_id": "user_1", "start": "2999-01-01T00:00:00Z"})
    past = client.get("/v1/habits", params={"user_id": "user_1", "end": "2999-01-01T00:00:00Z"})

    assert future.json()["habits"] == []
    assert len(past.json()["habits"]) == 1


def test_update_habit(client: TestClient):
    habit = _create_habit(client)

    response = client.patch(f"/v1/habits/{habit['id']}", json={"user_id": "user_1", "amount": 40})

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 40
    assert data["category"] == "Food"
    assert data["created_at"] == habit["created_at"]

    fetched = client.get(f"/v1/habits/{habit['id']}?user_id=user_1").json()
    assert fetched["amount"] == 40


def test_update_habit_not_found(client: TestClient):
    response = client.patch("/v1/habits/missing", json={"user_id": "user_1", "amount": 40})
    assert response.status_code == 404


def test_update_habit_of_other_user(client: TestClient):
    habit = _create_habit(client, user_id="owner")
    response = client.patch(f"/v1/habits/{habit['id']}", json={"user_id": "intruder", "amount": 1})
    assert response.status_code == 404


def test_delete_habit(client: TestClient):
    habit = _create_habit(client)

    response = client.delete(f"/v1/habits/{habit['id']}?user_id=user_1")
    assert response.status_code == 204

    assert client.get(f"/v1/habits/{habit['id']}?user_id=user_1").status_code == 404
    assert client.delete(f"/v1/habits/{habit['id']}?user_id=user_1").status_code == 404


def test_patterns_endpoint(client: TestClient):
    _create_habit(client, amount=30)
    _create_habit(client, amount=50)

    response = client.get("/v1/habits/patterns?user_id=user_1")

    assert response.status_code == 200
    patterns = response.json()["patterns"]
    assert len(patterns) == 1
    assert patterns[0]["frequency"] == 2
    assert patterns[0]["total_spent"] == 80
    assert patterns[0]["trend"] == "increasing"  # nothing older than 30 days


def test_insights_endpoint_round_trip(client: TestClient):
    """Adding then deleting a habit leaves insights unchanged"""
    _create_habit(client, category="Gym", amount=10, frequency="weekly", is_recurring=True)
    before = client.get("/v1/habits/insights?user_id=user_1").json()
    assert before["total_recurring_monthly_cost"] == 40

    extra = _create_habit(client, category="Travel", amount=3500)
    during = client.get("/v1/habits/insights?user_id=user_1").json()
    assert during["top_categories"][0] == "Travel"

    client.delete(f"/v1/habits/{extra['id']}?user_id=user_1")
    after = client.get("/v1/habits/insights?user_id=user_1").json()
    assert after == before


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_recommendations_endpoint(mock_generate: AsyncMock, client: TestClient):
    mock_generate.return_value = json.dumps(
        {"recommendations": [{"title": "Meal prep", "priority": "high", "estimatedSavings": 120}]}
    )
    _create_habit(client)

    response = client.post(
        "/v1/advisor/recommendations",
        json={"user_id": "user_1", "monthly_income": 4000, "monthly_expenses": 3500},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["notice"] is None
    assert data["recommendations"][0]["title"] == "Meal prep"
    assert data["recommendations"][0]["estimated_savings"] == 120
    assert data["recommendations"][0]["impact_score"] == 5
    assert "Food" in mock_generate.call_args.args[0]


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_recommendations_endpoint_malformed_reply(mock_generate: AsyncMock, client: TestClient):
    mock_generate.return_value = "Here you go: {recommendations: oops"

    response = client.post(
        "/v1/advisor/recommendations",
        json={"user_id": "user_1", "monthly_income": 4000, "monthly_expenses": 3500},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["recommendations"] == []
    assert data["notice"]


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_recommendations_endpoint_service_down(mock_generate: AsyncMock, client: TestClient):
    mock_generate.side_effect = AdvisorAPIError("Advisor API unavailable")

    response = client.post(
        "/v1/advisor/recommendations",
        json={"user_id": "user_1", "monthly_income": 4000, "monthly_expenses": 3500},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["recommendations"] == []
    assert "unavailable" in data["notice"]


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_voice_endpoint_records_expense(mock_generate: AsyncMock, client: TestClient):
    mock_generate.return_value = json.dumps(
        {
            "intent": "expense",
            "confidence": 0.9,
            "extractedData": {"amount": 15, "category": "Coffee"},
            "response": "Tracked $15 for Coffee.",
        }
    )

    response = client.post(
        "/v1/advisor/voice",
        json={"user_id": "user_1", "transcript": "I spent fifteen dollars on coffee"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["analysis"]["intent"] == "expense"
    assert data["recorded_habit"]["category"] == "Coffee"
    assert data["recorded_habit"]["description"] == "I spent fifteen dollars on coffee"

    habits = client.get("/v1/habits?user_id=user_1").json()["habits"]
    assert len(habits) == 1


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_voice_endpoint_service_down(mock_generate: AsyncMock, client: TestClient):
    mock_generate.side_effect = AdvisorAPIError("timeout")

    response = client.post(
        "/v1/advisor/voice",
        json={"user_id": "user_1", "transcript": "I spent fifteen dollars on coffee"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["analysis"]["intent"] == "unknown"
    assert data["recorded_habit"] is None
    assert data["notice"]


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_question_endpoint(mock_generate: AsyncMock, client: TestClient):
    mock_generate.return_value = "  Aim for three to six months of expenses.  "

    response = client.post(
        "/v1/advisor/question",
        json={"user_id": "user_1", "question": "How big should my emergency fund be?"},
    )

    assert response.status_code == 200
    assert response.json()["answer"] == "Aim for three to six months of expenses."


@patch("finavatar.infrastructure.clients.advisor.AdvisorClient.generate_text")
def test_coaching_tip_fallback(mock_generate: AsyncMock, client: TestClient):
    mock_generate.side_effect = AdvisorAPIError("down")

    response = client.get("/v1/advisor/coaching-tip?user_id=user_1")

    assert response.status_code == 200
    data = response.json()
    assert data["answer"] == "Keep tracking your expenses to build better financial habits!"
    assert data["notice"]
