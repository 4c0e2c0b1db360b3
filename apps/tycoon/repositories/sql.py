from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apps.tycoon.db.models import Referral, ReferralStatus, UserSave
from apps.tycoon.infra.db import Database

from .base import ReferralRecord, SaveRecord, Storage, StorageError

logger = logging.getLogger(__name__)

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlStorage(Storage):
    """SQLite or PostgreSQL storage on top of the async SQLAlchemy engine.

    Referral attribution relies on the unique ``referred_id`` constraint with
    ``ON CONFLICT DO NOTHING``; claiming is one conditional ``UPDATE``.
    """

    def __init__(self, database: Database) -> None:
        try:
            self._insert = _INSERTS[database.dialect]
        except KeyError:
            raise ValueError(f"Unsupported SQL dialect: {database.dialect}") from None
        self._database = database

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        try:
            async with self._database.session() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(str(exc)) from exc

    async def init(self) -> None:
        try:
            await self._database.create_all()
        except (SQLAlchemyError, OSError) as exc:
            raise StorageError(str(exc)) from exc
        logger.info("Database schema is ready (%s)", self._database.dialect)

    async def close(self) -> None:
        await self._database.dispose()

    async def record_referral(self, referrer_id: str, referred_id: str) -> bool:
        stmt = (
            self._insert(Referral)
            .values(referrer_id=referrer_id, referred_id=referred_id, status=ReferralStatus.PENDING.value)
            .on_conflict_do_nothing(index_elements=[Referral.referred_id])
            .returning(Referral.id)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            created = result.scalar_one_or_none() is not None
            await session.commit()
        return created

    async def referrals_for(self, referrer_id: str) -> list[ReferralRecord]:
        stmt = select(Referral).where(Referral.referrer_id == referrer_id).order_by(Referral.id)
        async with self._session() as session:
            rows = (await session.scalars(stmt)).all()
        return [
            ReferralRecord(
                referrer_id=row.referrer_id,
                referred_id=row.referred_id,
                status=ReferralStatus(row.status),
                created_at=row.created_at,
                claimed_at=row.claimed_at,
            )
            for row in rows
        ]

    async def claim_pending(self, referrer_id: str) -> int:
        stmt = (
            update(Referral)
            .where(
                Referral.referrer_id == referrer_id,
                Referral.status == ReferralStatus.PENDING.value,
            )
            .values(status=ReferralStatus.CLAIMED.value, claimed_at=func.now())
            .execution_options(synchronize_session=False)
        )
        async with self._session() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount

    async def save_game(self, user_id: str, game_state: Any) -> SaveRecord:
        stmt = self._insert(UserSave).values(user_id=user_id, game_state=game_state, last_saved=func.now())
        stmt = stmt.on_conflict_do_update(
            index_elements=[UserSave.user_id],
            set_={"game_state": stmt.excluded.game_state, "last_saved": func.now()},
        ).returning(UserSave.last_saved)
        async with self._session() as session:
            last_saved = (await session.execute(stmt)).scalar_one()
            await session.commit()
        return SaveRecord(user_id=user_id, game_state=game_state, last_saved=last_saved)

    async def load_game(self, user_id: str) -> SaveRecord | None:
        async with self._session() as session:
            row = await session.get(UserSave, user_id)
        if row is None:
            return None
        return SaveRecord(user_id=row.user_id, game_state=row.game_state, last_saved=row.last_saved)
