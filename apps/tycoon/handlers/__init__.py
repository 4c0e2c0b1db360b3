from __future__ import annotations

from aiogram import Dispatcher

from apps.tycoon.infra.settings import Settings

from . import start


def register_handlers(dp: Dispatcher, settings: Settings) -> None:
    dp.include_router(start.create_router(settings))
