from __future__ import annotations

import asyncio
import copy
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

from apps.tycoon.db.models import ReferralStatus

from .base import ReferralRecord, SaveRecord, Storage


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class MemoryStorage(Storage):
    """Process-local storage. Data is lost on restart.

    All state sits behind one lock, so each operation is observed whole.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._referrals: dict[str, ReferralRecord] = {}
        self._saves: dict[str, SaveRecord] = {}

    async def record_referral(self, referrer_id: str, referred_id: str) -> bool:
        async with self._lock:
            if referred_id in self._referrals:
                return False
            self._referrals[referred_id] = ReferralRecord(
                referrer_id=referrer_id,
                referred_id=referred_id,
                status=ReferralStatus.PENDING,
                created_at=_now(),
            )
            return True

    async def referrals_for(self, referrer_id: str) -> list[ReferralRecord]:
        async with self._lock:
            # dicts keep insertion order, which is creation order here
            return [record for record in self._referrals.values() if record.referrer_id == referrer_id]

    async def claim_pending(self, referrer_id: str) -> int:
        async with self._lock:
            claimed_at = _now()
            claimed = 0
            for referred_id, record in self._referrals.items():
                if record.referrer_id == referrer_id and record.pending:
                    self._referrals[referred_id] = replace(
                        record, status=ReferralStatus.CLAIMED, claimed_at=claimed_at
                    )
                    claimed += 1
            return claimed

    async def save_game(self, user_id: str, game_state: Any) -> SaveRecord:
        async with self._lock:
            record = SaveRecord(user_id=user_id, game_state=copy.deepcopy(game_state), last_saved=_now())
            self._saves[user_id] = record
            return record

    async def load_game(self, user_id: str) -> SaveRecord | None:
        async with self._lock:
            record = self._saves.get(user_id)
            if record is None:
                return None
            return replace(record, game_state=copy.deepcopy(record.game_state))
