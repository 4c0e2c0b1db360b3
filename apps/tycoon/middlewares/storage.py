from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from apps.tycoon.repositories.base import Storage


class StorageMiddleware(BaseMiddleware):
    """Hands the shared storage to handlers as the ``store`` argument."""

    def __init__(self, storage: Storage) -> None:
        self._storage = storage

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        data["store"] = self._storage
        return await handler(event, data)
