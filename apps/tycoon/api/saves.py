from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from apps.tycoon.api.deps import get_app_settings, get_storage, path_user_id
from apps.tycoon.api.schemas import SaveRequest
from apps.tycoon.infra.settings import Settings
from apps.tycoon.repositories.base import Storage
from apps.tycoon.services import saves as save_service

router = APIRouter(tags=["saves"])


@router.post("/save")
async def save_game(
    request: SaveRequest,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
):
    await save_service.save(storage, request.user_id, request.game_state, max_bytes=settings.save_max_bytes)
    return {"success": True, "message": "Game saved successfully."}


@router.get("/load/{user_id}")
async def load_game(
    user_id: str = Depends(path_user_id),
    storage: Storage = Depends(get_storage),
):
    game_state = await save_service.load(storage, user_id)
    if game_state is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"message": "No save data found for this user."},
        )
    return JSONResponse(content=game_state)
