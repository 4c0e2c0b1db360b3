from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Index, Integer, JSON, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from apps.tycoon.db import Base

JSONType = JSON().with_variant(JSONB, "postgresql")
PKBigInt = BigInteger().with_variant(Integer, "sqlite")
USER_ID_LENGTH = 64


class ReferralStatus(str, Enum):
    PENDING = "pending"
    CLAIMED = "claimed"


class Referral(Base):
    __tablename__ = "referrals"
    __table_args__ = (
        UniqueConstraint("referred_id", name="uq_referrals_referred"),
        CheckConstraint("referrer_id <> referred_id", name="ck_referrals_not_self"),
        Index("ix_referrals_referrer_status", "referrer_id", "status"),
    )

    id: Mapped[int] = mapped_column(PKBigInt, primary_key=True, autoincrement=True)
    referrer_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), nullable=False)
    referred_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ReferralStatus.PENDING.value,
        server_default=ReferralStatus.PENDING.value,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
    claimed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class UserSave(Base):
    __tablename__ = "user_saves"

    user_id: Mapped[str] = mapped_column(String(USER_ID_LENGTH), primary_key=True)
    game_state: Mapped[Any] = mapped_column(JSONType, nullable=False)
    last_saved: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
