from __future__ import annotations

from fastapi import APIRouter, Depends

from apps.tycoon.api.deps import get_storage, path_user_id
from apps.tycoon.api.schemas import UserRequest
from apps.tycoon.repositories.base import Storage
from apps.tycoon.services import referrals as referral_service

router = APIRouter(tags=["referrals"])


@router.get("/my-referrals/{user_id}")
async def my_referrals(
    user_id: str = Depends(path_user_id),
    storage: Storage = Depends(get_storage),
):
    stats = await referral_service.get_stats(storage, user_id)
    return stats.to_dict()


@router.post("/claim-rewards")
async def claim_rewards(request: UserRequest, storage: Storage = Depends(get_storage)):
    result = await referral_service.claim_rewards(storage, request.user_id)
    return result.to_dict()
