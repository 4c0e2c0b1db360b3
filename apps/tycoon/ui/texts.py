from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup, WebAppInfo

from apps.tycoon.services.referrals import ReferralStats

WELCOME_TEXT = "Welcome to Tap Tycoon! Open the game below to start playing."
REFERRED_WELCOME_TEXT = (
    "Welcome! Thanks for being referred by a friend, "
    "you'll get a special starting bonus in the game!"
)


def referral_link(bot_username: str, user_id: int | str) -> str:
    return f"https://t.me/{bot_username}?start={user_id}"


def format_invite_text(link: str, stats: ReferralStats) -> str:
    reward = stats.unclaimed_reward
    return (
        "Invite friends to Tap Tycoon!\n"
        f"Your link: {link}\n\n"
        f"Friends invited: <b>{stats.friends_invited}</b>\n"
        f"Unclaimed rewards: <b>{reward.money}</b> money / <b>{reward.gems}</b> gems\n"
        "Claim them from the game menu."
    )


def game_keyboard(game_url: str | None) -> InlineKeyboardMarkup | None:
    if not game_url:
        return None
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="🎮 Play Tap Tycoon", web_app=WebAppInfo(url=game_url))]]
    )
