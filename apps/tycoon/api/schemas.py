from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from apps.tycoon.db.models import USER_ID_LENGTH


class RequestModel(BaseModel):
    # Game clients send Telegram ids as JSON numbers as often as strings.
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True, str_strip_whitespace=True)


class UserRequest(RequestModel):
    user_id: str = Field(..., min_length=1, max_length=USER_ID_LENGTH, alias="userId")


class SaveRequest(RequestModel):
    user_id: str = Field(..., min_length=1, max_length=USER_ID_LENGTH, alias="userId")
    game_state: Any = Field(..., alias="gameState")

    @field_validator("game_state")
    @classmethod
    def _require_state(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("gameState is required")
        return value


class ReferralRequest(RequestModel):
    referrer_id: str = Field(..., min_length=1, max_length=USER_ID_LENGTH, alias="referrerId")
    referee_id: str = Field(..., min_length=1, max_length=USER_ID_LENGTH, alias="refereeId")
