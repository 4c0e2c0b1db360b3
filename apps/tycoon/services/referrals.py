from __future__ import annotations

import logging
from dataclasses import dataclass

from apps.tycoon.core.metrics import REFERRALS_RECORDED, REWARDS_CLAIMED
from apps.tycoon.core.rewards import REFERRER_REWARD, Reward
from apps.tycoon.repositories.base import ReferralRecord, Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferralStats:
    friends_invited: int
    unclaimed_count: int
    unclaimed_reward: Reward

    def to_dict(self) -> dict:
        return {
            "friendsInvited": self.friends_invited,
            "unclaimedCount": self.unclaimed_count,
            "unclaimedReward": self.unclaimed_reward.to_dict(),
        }


@dataclass(frozen=True)
class ClaimResult:
    claimed_count: int
    rewards: Reward

    def to_dict(self) -> dict:
        return {"claimedCount": self.claimed_count, "rewards": self.rewards.to_dict()}


def normalize_user_id(value: str | int) -> str:
    return str(value).strip()


async def record_referral(storage: Storage, referrer_id: str | int, referred_id: str | int) -> bool:
    """Attribute ``referred_id`` to ``referrer_id`` if nobody claimed them first.

    Self-referrals and already-referred users are ignored. Returns whether a
    new record was created.
    """
    referrer_id = normalize_user_id(referrer_id)
    referred_id = normalize_user_id(referred_id)
    if not referrer_id or not referred_id or referrer_id == referred_id:
        REFERRALS_RECORDED.labels(result="ignored").inc()
        return False
    logger.info("Referral attempt: %s -> %s", referrer_id, referred_id)
    created = await storage.record_referral(referrer_id, referred_id)
    if created:
        REFERRALS_RECORDED.labels(result="created").inc()
        logger.info("New referral recorded: %s -> %s", referrer_id, referred_id)
    else:
        REFERRALS_RECORDED.labels(result="duplicate").inc()
        logger.info("Referred user %s is already attributed", referred_id)
    return created


async def list_referrals(storage: Storage, referrer_id: str | int) -> list[ReferralRecord]:
    return await storage.referrals_for(normalize_user_id(referrer_id))


async def get_stats(storage: Storage, referrer_id: str | int) -> ReferralStats:
    records = await list_referrals(storage, referrer_id)
    unclaimed = sum(1 for record in records if record.pending)
    return ReferralStats(
        friends_invited=len(records),
        unclaimed_count=unclaimed,
        unclaimed_reward=REFERRER_REWARD.times(unclaimed),
    )


async def claim_rewards(storage: Storage, referrer_id: str | int) -> ClaimResult:
    referrer_id = normalize_user_id(referrer_id)
    claimed = await storage.claim_pending(referrer_id)
    if claimed:
        REWARDS_CLAIMED.inc(claimed)
    logger.info("User %s claimed %s reward(s)", referrer_id, claimed)
    return ClaimResult(claimed_count=claimed, rewards=REFERRER_REWARD.times(claimed))
