from __future__ import annotations

import abc
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from apps.tycoon.db.models import ReferralStatus


class StorageError(Exception):
    """Persistence backend failed to complete an operation."""


@dataclass(frozen=True)
class ReferralRecord:
    referrer_id: str
    referred_id: str
    status: ReferralStatus
    created_at: datetime
    claimed_at: datetime | None = None

    @property
    def pending(self) -> bool:
        return self.status is ReferralStatus.PENDING


@dataclass(frozen=True)
class SaveRecord:
    user_id: str
    game_state: Any
    last_saved: datetime


class Storage(abc.ABC):
    """Persistence used by the referral ledger and the save store.

    Every method is a single atomic unit against the backend. Callers never
    combine a read with a later write to implement one of these operations.
    """

    async def init(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @abc.abstractmethod
    async def record_referral(self, referrer_id: str, referred_id: str) -> bool:
        """Insert a pending referral unless ``referred_id`` is already known.

        Returns ``True`` only when a new record was created.
        """

    @abc.abstractmethod
    async def referrals_for(self, referrer_id: str) -> list[ReferralRecord]:
        """Records owned by ``referrer_id``, oldest first."""

    @abc.abstractmethod
    async def claim_pending(self, referrer_id: str) -> int:
        """Move every pending record of ``referrer_id`` to claimed; return how many moved."""

    @abc.abstractmethod
    async def save_game(self, user_id: str, game_state: Any) -> SaveRecord:
        ...

    @abc.abstractmethod
    async def load_game(self, user_id: str) -> SaveRecord | None:
        ...
