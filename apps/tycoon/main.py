from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field

import uvicorn
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apps.tycoon.api.errors import register_error_handlers
from apps.tycoon.api.http import router as http_router
from apps.tycoon.handlers import register_handlers
from apps.tycoon.infra.logging import setup_logging
from apps.tycoon.infra.settings import Settings, get_settings
from apps.tycoon.infra.storage import create_storage
from apps.tycoon.middlewares import StorageMiddleware
from apps.tycoon.repositories.base import Storage

logger = logging.getLogger(__name__)


@dataclass
class BotRunner:
    bot: Bot
    dispatcher: Dispatcher
    task: asyncio.Task | None = field(default=None, init=False)

    def start(self) -> None:
        self.task = asyncio.create_task(
            self.dispatcher.start_polling(self.bot, handle_signals=False, close_bot_session=False)
        )

    async def stop(self) -> None:
        if self.task:
            self.task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.task
        await self.bot.session.close()


def build_dispatcher(settings: Settings, storage: Storage) -> Dispatcher:
    dp = Dispatcher(name="tycoon_dispatcher")
    dp.update.middleware(StorageMiddleware(storage))
    register_handlers(dp, settings)
    return dp


def build_bot_runner(settings: Settings, storage: Storage) -> BotRunner:
    bot = Bot(token=settings.bot_token, default=DefaultBotProperties(parse_mode=ParseMode.HTML))
    return BotRunner(bot=bot, dispatcher=build_dispatcher(settings, storage))


def build_app(
    settings: Settings | None = None,
    storage: Storage | None = None,
    *,
    run_bot: bool = True,
) -> FastAPI:
    settings = settings or get_settings()
    storage = storage or create_storage(settings)
    bot_runner = build_bot_runner(settings, storage) if run_bot else None

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.storage = storage
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    app.include_router(http_router)

    @app.on_event("startup")
    async def on_startup() -> None:
        await storage.init()
        if bot_runner:
            bot_runner.start()
            logger.info("Telegram bot is polling for messages")

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        if bot_runner:
            await bot_runner.stop()
        await storage.close()

    return app


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    return build_app(settings)


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run("apps.tycoon.main:create_app", factory=True, host=settings.host, port=settings.port)
