from __future__ import annotations

from apps.tycoon.repositories.base import Storage
from apps.tycoon.repositories.memory import MemoryStorage
from apps.tycoon.repositories.sql import SqlStorage

from .db import Database
from .settings import Settings


def create_storage(settings: Settings) -> Storage:
    if settings.storage_backend == "memory":
        return MemoryStorage()
    return SqlStorage(Database.from_settings(settings))
