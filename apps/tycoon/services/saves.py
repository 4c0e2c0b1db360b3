from __future__ import annotations

import json
import logging
from typing import Any

from apps.tycoon.core.metrics import GAME_SAVES
from apps.tycoon.repositories.base import SaveRecord, Storage
from apps.tycoon.services.referrals import normalize_user_id

logger = logging.getLogger(__name__)


class SaveError(Exception):
    pass


class SaveTooLarge(SaveError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Game state is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit


def payload_size(game_state: Any) -> int:
    return len(json.dumps(game_state, separators=(",", ":"), ensure_ascii=False).encode("utf-8"))


async def save(storage: Storage, user_id: str | int, game_state: Any, *, max_bytes: int) -> SaveRecord:
    user_id = normalize_user_id(user_id)
    size = payload_size(game_state)
    if size > max_bytes:
        raise SaveTooLarge(size, max_bytes)
    record = await storage.save_game(user_id, game_state)
    GAME_SAVES.inc()
    logger.info("Saved game for user %s (%s bytes)", user_id, size)
    return record


async def load(storage: Storage, user_id: str | int) -> Any | None:
    """Stored game state for ``user_id``, or ``None`` for a new player."""
    record = await storage.load_game(normalize_user_id(user_id))
    if record is None:
        return None
    return record.game_state
