"""Plain-text routes kept for game builds that predate the JSON contract.

They share the referral ledger with ``/my-referrals`` and ``/claim-rewards``.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import PlainTextResponse

from apps.tycoon.api.deps import get_storage, path_user_id
from apps.tycoon.api.schemas import ReferralRequest, UserRequest
from apps.tycoon.repositories.base import Storage
from apps.tycoon.services import referrals as referral_service

router = APIRouter(tags=["legacy"])


@router.post("/referral", response_class=PlainTextResponse)
async def record_referral(request: ReferralRequest, storage: Storage = Depends(get_storage)) -> str:
    created = await referral_service.record_referral(storage, request.referrer_id, request.referee_id)
    if created:
        return "Referral recorded successfully"
    if referral_service.normalize_user_id(request.referrer_id) == referral_service.normalize_user_id(request.referee_id):
        return "Self-referral ignored."
    return "Referral already recorded."


@router.get("/rewards/{user_id}")
async def rewards(
    user_id: str = Depends(path_user_id),
    storage: Storage = Depends(get_storage),
):
    records = await referral_service.list_referrals(storage, user_id)
    return {
        "rewardsToClaim": sum(1 for record in records if record.pending),
        "referrals": [record.referred_id for record in records],
    }


@router.post("/claim", response_class=PlainTextResponse)
async def claim(request: UserRequest, storage: Storage = Depends(get_storage)):
    result = await referral_service.claim_rewards(storage, request.user_id)
    if result.claimed_count == 0:
        return PlainTextResponse("No rewards to claim", status_code=status.HTTP_400_BAD_REQUEST)
    return "Rewards claimed successfully"
