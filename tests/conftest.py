from __future__ import annotations

import os
from typing import Any

os.environ.setdefault("BOT_TOKEN", "123456:TEST-TOKEN")
os.environ.setdefault("STORAGE_BACKEND", "memory")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from apps.tycoon.infra.db import Database
from apps.tycoon.infra.settings import Settings
from apps.tycoon.main import build_app
from apps.tycoon.repositories.base import ReferralRecord, SaveRecord, Storage, StorageError
from apps.tycoon.repositories.memory import MemoryStorage
from apps.tycoon.repositories.sql import SqlStorage


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def storage(request):
    if request.param == "memory":
        yield MemoryStorage()
        return
    sql_storage = SqlStorage(Database("sqlite+aiosqlite:///:memory:"))
    await sql_storage.init()
    yield sql_storage
    await sql_storage.close()


@pytest_asyncio.fixture(params=["memory", "sqlite-file"])
async def shared_storage(request, tmp_path):
    """Storage that tolerates truly concurrent sessions."""
    if request.param == "memory":
        yield MemoryStorage()
        return
    sql_storage = SqlStorage(Database(f"sqlite+aiosqlite:///{tmp_path / 'tycoon.db'}"))
    await sql_storage.init()
    yield sql_storage
    await sql_storage.close()


@pytest_asyncio.fixture()
async def client():
    settings = Settings(BOT_TOKEN="123456:TEST-TOKEN", STORAGE_BACKEND="memory", SAVE_MAX_BYTES=256)
    app = build_app(settings, MemoryStorage(), run_bot=False)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http:
        yield http


class BrokenStorage(Storage):
    async def record_referral(self, referrer_id: str, referred_id: str) -> bool:
        raise StorageError("connection lost")

    async def referrals_for(self, referrer_id: str) -> list[ReferralRecord]:
        raise StorageError("connection lost")

    async def claim_pending(self, referrer_id: str) -> int:
        raise StorageError("connection lost")

    async def save_game(self, user_id: str, game_state: Any) -> SaveRecord:
        raise StorageError("connection lost")

    async def load_game(self, user_id: str) -> SaveRecord | None:
        raise StorageError("connection lost")


@pytest.fixture()
def broken_storage():
    return BrokenStorage()
