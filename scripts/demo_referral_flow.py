from __future__ import annotations

import asyncio

from apps.tycoon.infra.db import Database
from apps.tycoon.repositories.sql import SqlStorage
from apps.tycoon.services import referrals as referral_service
from apps.tycoon.services import saves as save_service


async def main() -> None:
    storage = SqlStorage(Database("sqlite+aiosqlite:///:memory:"))
    await storage.init()

    for friend in ("200", "201", "202"):
        created = await referral_service.record_referral(storage, "100", friend)
        print(f"100 -> {friend}: new={created}")
    print("Repeat 100 -> 200: new=", await referral_service.record_referral(storage, "100", "200"))
    print("Hijack 999 -> 200: new=", await referral_service.record_referral(storage, "999", "200"))

    print("Stats:", (await referral_service.get_stats(storage, "100")).to_dict())
    print("Claim:", (await referral_service.claim_rewards(storage, "100")).to_dict())
    print("Claim again:", (await referral_service.claim_rewards(storage, "100")).to_dict())

    await save_service.save(storage, "100", {"money": 1_250_000, "gems": 42, "upgrades": [1, 3]}, max_bytes=4096)
    print("Loaded save:", await save_service.load(storage, "100"))

    await storage.close()


if __name__ == "__main__":
    asyncio.run(main())
