from __future__ import annotations

from prometheus_client import Counter

REFERRALS_RECORDED = Counter(
    "tycoon_referrals_recorded_total",
    "Referral attempts by outcome",
    ["result"],
)
REWARDS_CLAIMED = Counter(
    "tycoon_referral_rewards_claimed_total",
    "Referral records transitioned from pending to claimed",
)
GAME_SAVES = Counter(
    "tycoon_game_saves_total",
    "Game states written to the save store",
)
