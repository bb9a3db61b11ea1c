"""
Tests for the v1 HTTP routes.

Routes are mounted on a bare FastAPI app carrying a DecisionService over a
mocked store, so no database is needed. The lifespan tests run the real app
with table creation, the engine and draining patched out.
"""
import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from app.main import app
from app.routers.v1 import router
from application.service.decision_service import DecisionService
from domain.config import reload_config
from domain.entities import Decision, DecisionFilter
from domain.exceptions import DecisionStoreError, InvalidPaginationTokenError
from domain.interfaces import DecisionStore
from infrastructure.db.repositories.decision_store_sqlalchemy import DecisionStoreSqlalchemy
from infrastructure.metrics.metrics_adapter import MetricsAdapter

NOW = 1_700_000_000


@pytest.fixture
def mock_store(mocker):
    mock_store = mocker.AsyncMock(spec=DecisionStore)
    mock_store.list_decisions.return_value = ([], "")
    mock_store.count_decisions.return_value = 0
    mock_store.upsert_decision.return_value = None
    mock_store.mark_decisions_as_seen.return_value = None
    return mock_store


@pytest.fixture
def client(mock_store):
    api = FastAPI()
    api.include_router(router)
    api.state.decision_service = DecisionService(mock_store, metrics_port=MetricsAdapter(), now_fn=lambda: NOW)
    with TestClient(api) as client:
        yield client


class TestListLikedYouRoute:

    def test_returns_likers_and_token(self, client, mock_store):
        mock_store.list_decisions.return_value = (
            [
                Decision(actor_user_id="user2", recipient_user_id="user1", liked_recipient=True, last_modified=1),
                Decision(actor_user_id="user3", recipient_user_id="user1", liked_recipient=True, last_modified=2),
            ],
            "user3##user1",
        )

        response = client.get("/v1/liked-you", params={"recipient_user_id": "user1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "likers": [
                {"actor_id": "user2", "unix_timestamp": 1},
                {"actor_id": "user3", "unix_timestamp": 2},
            ],
            "next_pagination_token": "user3##user1",
        }

    def test_pagination_token_is_forwarded(self, client, mock_store):
        client.get("/v1/liked-you", params={"recipient_user_id": "user1", "pagination_token": "user3##user1"})

        mock_store.list_decisions.assert_awaited_once_with(
            DecisionFilter(recipient_user_id="user1", liked_recipient=True), "user3##user1"
        )

    def test_new_likes_route_filters_unseen(self, client, mock_store):
        response = client.get("/v1/liked-you/new", params={"recipient_user_id": "user1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"likers": [], "next_pagination_token": ""}
        mock_store.list_decisions.assert_awaited_once_with(
            DecisionFilter(recipient_user_id="user1", liked_recipient=True, seen_by_recipient=False), ""
        )

    def test_invalid_token_returns_400(self, client, mock_store):
        mock_store.list_decisions.side_effect = InvalidPaginationTokenError("invalid pagination token: 'x'")

        response = client.get("/v1/liked-you", params={"recipient_user_id": "user1", "pagination_token": "x"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["error"] == "invalid_pagination_token"

    def test_store_error_returns_503(self, client, mock_store):
        mock_store.list_decisions.side_effect = DecisionStoreError("failed to list decisions: down")

        response = client.get("/v1/liked-you/new", params={"recipient_user_id": "user1"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"] == {"error": "decision_store_error", "message": "failed to list decisions: down"}

    def test_missing_recipient_is_rejected(self, client):
        response = client.get("/v1/liked-you")

        assert response.status_code == 422


class TestCountLikedYouRoute:

    def test_returns_count(self, client, mock_store):
        mock_store.count_decisions.return_value = 3

        response = client.get("/v1/liked-you/count", params={"recipient_user_id": "user1"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"count": 3}

    def test_store_error_returns_503(self, client, mock_store):
        mock_store.count_decisions.side_effect = DecisionStoreError("failed to count decisions: down")

        response = client.get("/v1/liked-you/count", params={"recipient_user_id": "user1"})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


class TestPutDecisionRoute:

    def test_mutual_like(self, client, mock_store):
        mock_store.list_decisions.return_value = (
            [Decision(actor_user_id="user1", recipient_user_id="user2", liked_recipient=True, last_modified=1)],
            "user1##user2",
        )

        response = client.put(
            "/v1/decision",
            json={"actor_user_id": "user2", "recipient_user_id": "user1", "liked_recipient": True},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"mutual_likes": True}
        mock_store.upsert_decision.assert_awaited_once_with(
            Decision(actor_user_id="user2", recipient_user_id="user1", liked_recipient=True, last_modified=NOW)
        )

    def test_pass(self, client, mock_store):
        response = client.put(
            "/v1/decision",
            json={"actor_user_id": "user2", "recipient_user_id": "user1", "liked_recipient": False},
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"mutual_likes": False}

    def test_mutual_check_failure_reports_partial_success(self, client, mock_store):
        mock_store.list_decisions.side_effect = DecisionStoreError("failed to list decisions: down")

        response = client.put(
            "/v1/decision",
            json={"actor_user_id": "user2", "recipient_user_id": "user1", "liked_recipient": True},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        detail = response.json()["detail"]
        assert detail["error"] == "mutual_likes_check_failed"
        assert detail["decision_recorded"] is True
        assert detail["mutual_likes"] is False
        mock_store.upsert_decision.assert_awaited_once()

    def test_upsert_failure_returns_503(self, client, mock_store):
        mock_store.upsert_decision.side_effect = DecisionStoreError("failed to upsert decision: down")

        response = client.put(
            "/v1/decision",
            json={"actor_user_id": "user2", "recipient_user_id": "user1", "liked_recipient": True},
        )

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["detail"]["error"] == "decision_store_error"

    def test_empty_user_id_is_rejected(self, client, mock_store):
        response = client.put(
            "/v1/decision",
            json={"actor_user_id": "", "recipient_user_id": "user1", "liked_recipient": True},
        )

        assert response.status_code == 422
        mock_store.upsert_decision.assert_not_awaited()


def test_health():
    response = TestClient(app).get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "ok"


def test_metrics_exposes_decision_counters(client):
    client.put(
        "/v1/decision",
        json={"actor_user_id": "user2", "recipient_user_id": "user1", "liked_recipient": False},
    )

    response = TestClient(app).get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert 'explore_decision_total{outcome="pass"}' in response.text


@pytest.fixture
def set_env(monkeypatch):
    """Set environment variables and reload the config from them."""
    def apply(**env):
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        reload_config()
    yield apply
    monkeypatch.undo()
    reload_config()


@pytest.fixture
def lifespan_mocks(mocker):
    init_models = mocker.patch("app.main.init_models", new_callable=mocker.AsyncMock)
    engine = mocker.patch("app.main.engine")
    engine.dispose = mocker.AsyncMock()
    drain = mocker.patch.object(DecisionService, "drain", new_callable=mocker.AsyncMock)
    return init_models, engine, drain


class TestLifespan:

    def test_startup_builds_service_and_shutdown_drains(self, lifespan_mocks, set_env):
        init_models, engine, drain = lifespan_mocks
        set_env(DB_CREATE_TABLES="true", MARK_SEEN_TIMEOUT_SECONDS="1.5", SHUTDOWN_DRAIN_TIMEOUT_SECONDS="2.5")

        with TestClient(app) as client:
            init_models.assert_awaited_once_with()
            service = app.state.decision_service
            assert isinstance(service, DecisionService)
            assert isinstance(service.decision_store, DecisionStoreSqlalchemy)
            assert service.mark_seen_timeout_seconds == 1.5
            assert client.get("/health").status_code == status.HTTP_200_OK
            drain.assert_not_awaited()

        drain.assert_awaited_once_with(timeout=2.5)
        engine.dispose.assert_awaited_once_with()

    def test_tables_are_not_created_when_disabled(self, lifespan_mocks, set_env):
        init_models, engine, drain = lifespan_mocks
        set_env(DB_CREATE_TABLES="false")

        with TestClient(app):
            assert isinstance(app.state.decision_service, DecisionService)

        init_models.assert_not_awaited()
        drain.assert_awaited_once()
