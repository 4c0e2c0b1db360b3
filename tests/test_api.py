from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from prometheus_client import REGISTRY

from apps.tycoon.infra.settings import Settings
from apps.tycoon.main import build_app


def _recorded(result: str) -> float:
    return REGISTRY.get_sample_value("tycoon_referrals_recorded_total", {"result": result}) or 0.0


@pytest.mark.asyncio
async def test_root_reports_liveness(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.text == "Tap Tycoon API Server is online."


@pytest.mark.asyncio
async def test_my_referrals_for_unknown_user(client):
    response = await client.get("/my-referrals/12345")
    assert response.status_code == 200
    assert response.json() == {
        "friendsInvited": 0,
        "unclaimedCount": 0,
        "unclaimedReward": {"money": 0, "gems": 0},
    }


@pytest.mark.asyncio
async def test_referral_stats_and_claim_flow(client):
    for referee in (200, 201):
        response = await client.post("/referral", json={"referrerId": 100, "refereeId": referee})
        assert response.status_code == 200
        assert response.text == "Referral recorded successfully"

    response = await client.get("/my-referrals/100")
    assert response.json() == {
        "friendsInvited": 2,
        "unclaimedCount": 2,
        "unclaimedReward": {"money": 100_000, "gems": 10},
    }

    response = await client.post("/claim-rewards", json={"userId": "100"})
    assert response.status_code == 200
    assert response.json() == {"claimedCount": 2, "rewards": {"money": 100_000, "gems": 10}}

    response = await client.post("/claim-rewards", json={"userId": 100})
    assert response.json() == {"claimedCount": 0, "rewards": {"money": 0, "gems": 0}}

    response = await client.get("/my-referrals/100")
    assert response.json()["unclaimedCount"] == 0
    assert response.json()["friendsInvited"] == 2


@pytest.mark.asyncio
async def test_claim_rewards_requires_user_id(client):
    response = await client.post("/claim-rewards", json={})
    assert response.status_code == 400
    assert response.json() == {"error": "userId is required"}

    response = await client.post("/claim-rewards", json={"userId": ""})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_save_and_load_round_trip(client):
    state = {"money": 9000, "gems": 3, "buildings": [{"id": "mine", "level": 2}]}

    response = await client.post("/save", json={"userId": "77", "gameState": state})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Game saved successfully."}

    response = await client.get("/load/77")
    assert response.status_code == 200
    assert response.json() == state


@pytest.mark.asyncio
async def test_load_without_save_is_not_found(client):
    response = await client.get("/load/new-player")
    assert response.status_code == 404
    assert "message" in response.json()


@pytest.mark.asyncio
async def test_save_requires_game_state(client):
    response = await client.post("/save", json={"userId": "77"})
    assert response.status_code == 400
    assert response.json() == {"error": "gameState is required"}

    response = await client.post("/save", json={"userId": "77", "gameState": None})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_save_rejects_oversized_state(client):
    response = await client.post("/save", json={"userId": "77", "gameState": {"blob": "x" * 1024}})
    assert response.status_code == 413
    assert "error" in response.json()

    response = await client.get("/load/77")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_legacy_referral_is_idempotent(client):
    payload = {"referrerId": "1", "refereeId": "2"}
    await client.post("/referral", json=payload)

    response = await client.post("/referral", json=payload)
    assert response.status_code == 200
    assert response.text == "Referral already recorded."

    response = await client.post("/referral", json={"referrerId": "9", "refereeId": "2"})
    assert response.text == "Referral already recorded."

    response = await client.post("/referral", json={"referrerId": "3", "refereeId": "3"})
    assert response.text == "Self-referral ignored."

    response = await client.post("/referral", json={"referrerId": "1"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_legacy_rewards_and_claim(client):
    await client.post("/referral", json={"referrerId": "1", "refereeId": "2"})
    await client.post("/referral", json={"referrerId": "1", "refereeId": "3"})

    response = await client.get("/rewards/1")
    assert response.json() == {"rewardsToClaim": 2, "referrals": ["2", "3"]}

    response = await client.post("/claim", json={"userId": "1"})
    assert response.status_code == 200
    assert response.text == "Rewards claimed successfully"

    response = await client.post("/claim", json={"userId": "1"})
    assert response.status_code == 400
    assert response.text == "No rewards to claim"

    response = await client.get("/rewards/1")
    assert response.json() == {"rewardsToClaim": 0, "referrals": ["2", "3"]}


@pytest.mark.asyncio
async def test_metrics_are_exposed(client):
    await client.post("/referral", json={"referrerId": "1", "refereeId": "2"})
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "tycoon_referrals_recorded_total" in response.text


@pytest.mark.asyncio
async def test_storage_failures_become_server_errors(broken_storage):
    settings = Settings(BOT_TOKEN="123456:TEST-TOKEN", STORAGE_BACKEND="memory")
    app = build_app(settings, broken_storage, run_bot=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        stats = await http.get("/my-referrals/1")
        claim = await http.post("/claim-rewards", json={"userId": "1"})
        save = await http.post("/save", json={"userId": "1", "gameState": {"a": 1}})
        load = await http.get("/load/1")

    for response in (stats, claim, save, load):
        assert response.status_code == 500
        assert response.json() == {"error": "Database operation failed"}


@pytest.mark.asyncio
async def test_legacy_self_referral_is_counted_as_ignored(client):
    before = _recorded("ignored")

    response = await client.post("/referral", json={"referrerId": 5, "refereeId": "5"})

    assert response.status_code == 200
    assert response.text == "Self-referral ignored."
    assert _recorded("ignored") == before + 1
    response = await client.get("/rewards/5")
    assert response.json() == {"rewardsToClaim": 0, "referrals": []}
