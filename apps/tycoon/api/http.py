from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from .legacy import router as legacy_router
from .referrals import router as referrals_router
from .saves import router as saves_router

router = APIRouter()
router.include_router(referrals_router)
router.include_router(saves_router)
router.include_router(legacy_router)


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Tap Tycoon API Server is online."


@router.get("/health", response_class=PlainTextResponse)
async def healthcheck() -> str:
    return "ok"


@router.get("/metrics")
async def metrics() -> Response:
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
