from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Reward:
    money: int
    gems: int

    def times(self, count: int) -> "Reward":
        return Reward(money=self.money * count, gems=self.gems * count)

    def to_dict(self) -> dict[str, int]:
        return {"money": self.money, "gems": self.gems}


# Paid to the referrer for every referred friend once claimed.
REFERRER_REWARD = Reward(money=50_000, gems=5)
