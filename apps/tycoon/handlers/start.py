from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import Message

from apps.tycoon.db.models import USER_ID_LENGTH
from apps.tycoon.infra.settings import Settings
from apps.tycoon.repositories.base import Storage, StorageError
from apps.tycoon.services import referrals as referral_service
from apps.tycoon.ui.texts import (
    REFERRED_WELCOME_TEXT,
    WELCOME_TEXT,
    format_invite_text,
    game_keyboard,
    referral_link,
)

logger = logging.getLogger(__name__)


def parse_referral_code(args: str | None) -> str | None:
    """Referrer id carried by ``/start <code>``, if any."""
    parts = args.split(maxsplit=1) if args else []
    if not parts or len(parts[0]) > USER_ID_LENGTH:
        return None
    return parts[0]


def create_router(settings: Settings) -> Router:
    router = Router(name="start")
    keyboard = game_keyboard(settings.game_url)

    @router.message(CommandStart())
    async def handle_start(message: Message, command: CommandObject, store: Storage) -> None:
        if not message.from_user:
            return
        sender_id = str(message.from_user.id)
        code = parse_referral_code(command.args)
        if code is None or code == sender_id:
            await message.answer(WELCOME_TEXT, reply_markup=keyboard)
            return

        try:
            created = await referral_service.record_referral(store, code, sender_id)
        except StorageError:
            logger.exception("Failed to record referral %s -> %s", code, sender_id)
            created = False
        text = REFERRED_WELCOME_TEXT if created else WELCOME_TEXT
        await message.answer(text, reply_markup=keyboard)

    @router.message(Command("invite"))
    async def handle_invite(message: Message, store: Storage) -> None:
        if not message.from_user:
            return
        bot_info = await message.bot.me()
        link = referral_link(bot_info.username, message.from_user.id)
        try:
            stats = await referral_service.get_stats(store, message.from_user.id)
        except StorageError:
            logger.exception("Failed to load referral stats for %s", message.from_user.id)
            await message.answer(f"Your invite link: {link}")
            return
        await message.answer(format_invite_text(link, stats))

    return router
