import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from draft_lottery.api import server
from draft_lottery.config import Config
from draft_lottery.data.schema import default_config
from draft_lottery.data.store import LotteryStore, StoreError
from draft_lottery.utils.logging_config import ROOT_LOGGER


@pytest.fixture(autouse=True)
def temp_store(tmp_path: Path) -> LotteryStore:
    """Point the API at a fresh database for every test."""
    store = LotteryStore(tmp_path / "database.json")
    server.set_store(store)
    yield store
    server.set_store(None)


@pytest.fixture
def client() -> TestClient:
    return TestClient(server.app)


def _lottery_payload(year: int) -> dict:
    return {
        "id": f"lottery-{year}",
        "year": year,
        "date": f"{year}-06-15T19:00:00.000Z",
        "picks": [
            {"round": 1, "pickNumber": 1, "teamId": "team-2", "originalPosition": 2, "movement": -1},
            {"round": 1, "pickNumber": 2, "teamId": "team-1", "originalPosition": 1, "movement": 1},
        ],
        "config": default_config().to_dict(),
    }


def test_health_reports_store(client: TestClient, temp_store: LotteryStore) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["lotteries_stored"] == 0
    assert body["store_path"] == str(temp_store.path)


def test_health_unhealthy_with_corrupt_store(client: TestClient, temp_store: LotteryStore) -> None:
    temp_store.path.write_text("{")
    body = client.get("/health").json()
    assert body["status"] == "unhealthy"
    assert body["lotteries_stored"] is None


def test_get_config_returns_defaults(client: TestClient) -> None:
    resp = client.get("/config")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/json")
    body = resp.json()
    assert body["numberOfTeams"] == 10
    assert len(body["teams"]) == 10
    assert body["teams"][0] == {
        "id": "team-1",
        "name": "Knockout Kings",
        "logoUrl": "https://www47.myfantasyleague.com/fflnetdynamic2024/58890_franchise_icon0001.png",
        "logoType": "url",
    }
    assert {"position": 10, "percentage": 25.0} in body["weightedSystem"]


def test_post_config_replaces_config(client: TestClient) -> None:
    payload = default_config().to_dict()
    payload["numberOfRounds"] = 3
    payload["pickDelaySeconds"] = 5
    payload["initialOrder"] = [2, 1, 3, 4, 5, 6, 7, 8, 9, 10]

    resp = client.post("/config", json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    body = client.get("/config").json()
    assert body["numberOfRounds"] == 3
    assert body["pickDelaySeconds"] == 5
    assert body["initialOrder"] == [2, 1, 3, 4, 5, 6, 7, 8, 9, 10]


def test_post_config_rejects_invalid_payload(client: TestClient) -> None:
    resp = client.post("/config", json={"numberOfTeams": 0})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Invalid request body"
    fields = {tuple(error["loc"]) for error in body["detail"]}
    assert ("body", "numberOfTeams") in fields
    assert ("body", "numberOfRounds") in fields


def test_run_lottery_rejects_malformed_body(client: TestClient) -> None:
    resp = client.post("/lottery/run", json={"initialOrder": "first"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Invalid request body"


def test_config_store_failure_returns_500(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, temp_store: LotteryStore
) -> None:
    def broken():
        raise StoreError("disk on fire")

    monkeypatch.setattr(temp_store, "get_config", broken)
    resp = client.get("/config")
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to fetch config"}


def test_lottery_list_and_save(client: TestClient) -> None:
    assert client.get("/lottery").json() == []

    for year in (2022, 2024, 2023):
        resp = client.post("/lottery", json=_lottery_payload(year))
        assert resp.status_code == 200
        assert resp.json() == {"success": True}

    years = [item["year"] for item in client.get("/lottery").json()]
    assert years == [2024, 2023, 2022]


def test_save_lottery_store_failure_returns_500(
    client: TestClient, monkeypatch: pytest.MonkeyPatch, temp_store: LotteryStore
) -> None:
    def broken(lottery):
        raise StoreError("read-only")

    monkeypatch.setattr(temp_store, "save_lottery", broken)
    resp = client.post("/lottery", json=_lottery_payload(2024))
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to save lottery"}


def test_get_lottery_by_year(client: TestClient) -> None:
    client.post("/lottery", json=_lottery_payload(2023))

    resp = client.get("/lottery/2023")
    assert resp.status_code == 200
    body = resp.json()
    assert body["year"] == 2023
    assert body["picks"][0]["teamId"] == "team-2"
    assert body["picks"][0]["movement"] == -1


def test_get_lottery_year_with_leading_zeros(client: TestClient) -> None:
    client.post("/lottery", json=_lottery_payload(2023))
    assert client.get("/lottery/02023").status_code == 200


def test_get_lottery_invalid_year(client: TestClient) -> None:
    resp = client.get("/lottery/abc")
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid year"}


def test_get_lottery_not_found(client: TestClient) -> None:
    resp = client.get("/lottery/1999")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Lottery not found"}


def test_run_lottery_draws_all_rounds(client: TestClient) -> None:
    resp = client.post("/lottery/run", json={"seed": 7})
    assert resp.status_code == 200
    body = resp.json()

    assert len(body["picks"]) == 50
    assert body["initialOrder"] == list(range(1, 11))
    assert body["saved"] is False
    assert body["lottery"] is None
    assert all(abs(pick["movement"]) <= 2 for pick in body["picks"])
    movement = body["movement"]
    assert movement["up"] + movement["down"] + movement["stayed"] == 50


def test_run_lottery_is_reproducible_with_seed(client: TestClient) -> None:
    first = client.post("/lottery/run", json={"seed": 11}).json()["picks"]
    second = client.post("/lottery/run", json={"seed": 11}).json()["picks"]
    assert first == second


def test_run_lottery_rejects_bad_initial_order(client: TestClient) -> None:
    resp = client.post("/lottery/run", json={"initialOrder": [1, 2, 3, 4, 5]})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert "5" in error and "10" in error


def test_run_lottery_saves_result(client: TestClient) -> None:
    order = [10, 9, 8, 7, 6, 5, 4, 3, 2, 1]
    resp = client.post(
        "/lottery/run", json={"initialOrder": order, "save": True, "year": 2024, "seed": 3}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["saved"] is True
    assert body["lottery"]["id"] == "lottery-2024"

    stored = client.get("/lottery/2024").json()
    assert stored["picks"] == body["picks"]
    assert stored["config"]["initialOrder"] == order


def test_startup_applies_configured_log_level(
    monkeypatch: pytest.MonkeyPatch, temp_store: LotteryStore
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    Config.reset_instance()
    logger = logging.getLogger(ROOT_LOGGER)
    try:
        with TestClient(server.app) as client:
            assert logger.level == logging.DEBUG
            assert client.get("/health").json()["status"] == "healthy"
        assert temp_store.path.exists()
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        Config.reset_instance()
