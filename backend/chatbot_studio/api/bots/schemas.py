"""
Bot management API schemas.
"""
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from chatbot_studio.api.common import CamelModel, PartialUpdate

HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{3,8}$"


class CreateBotRequest(CamelModel):
    """Request schema for creating a bot."""

    name: str = Field(..., min_length=1, max_length=100, description="Bot name")
    description: Optional[str] = Field(default=None, max_length=1000)
    system_prompt: Optional[str] = Field(default=None, max_length=4000)
    welcome_message: Optional[str] = Field(
        default=None,
        max_length=1000,
        description="Greeting, also the reply when nothing matches",
    )
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    avatar: Optional[str] = Field(default=None, max_length=500)


class UpdateBotRequest(PartialUpdate):
    """Request schema for updating a bot. Null clears description or avatar."""

    nullable_fields = frozenset({"description", "avatar"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    system_prompt: Optional[str] = Field(default=None, min_length=1, max_length=4000)
    welcome_message: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    avatar: Optional[str] = Field(default=None, max_length=500)
    published: Optional[bool] = None


class BotResponse(CamelModel):
    """Response schema for a bot."""

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    system_prompt: str
    welcome_message: str
    avatar: Optional[str] = None
    color: str
    published: bool
    created_at: datetime
    updated_at: datetime


class BotWithCountsResponse(BotResponse):
    """Bot with related row counts."""

    count: dict[str, int] = Field(default_factory=dict, alias="_count")


def _validate_patterns(patterns: list[str]) -> list[str]:
    # Stored as given; surrounding spaces are part of the substring match
    if not patterns or any(not p.strip() for p in patterns):
        raise ValueError("Patterns must contain at least one non-empty string")
    return patterns


class CreateIntentRequest(CamelModel):
    """Request schema for creating an intent."""

    name: str = Field(..., min_length=1, max_length=100)
    patterns: list[str] = Field(..., min_length=1, description="Trigger substrings")
    response: str = Field(..., min_length=1)
    enabled: bool = True

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: list[str]) -> list[str]:
        return _validate_patterns(v)


class UpdateIntentRequest(PartialUpdate):
    """Request schema for updating an intent."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    patterns: Optional[list[str]] = None
    response: Optional[str] = Field(default=None, min_length=1)
    enabled: Optional[bool] = None

    @field_validator("patterns")
    @classmethod
    def validate_patterns(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return _validate_patterns(v)


class IntentResponse(CamelModel):
    """Response schema for an intent."""

    id: str
    bot_id: str
    name: str
    patterns: list[str]
    response: str
    enabled: bool
    created_at: datetime
    updated_at: datetime


class CreateFAQRequest(CamelModel):
    """Request schema for creating an FAQ."""

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    enabled: bool = True


class UpdateFAQRequest(PartialUpdate):
    """Request schema for updating an FAQ. Null clears the category."""

    nullable_fields = frozenset({"category"})

    question: Optional[str] = Field(default=None, min_length=1)
    answer: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, max_length=100)
    enabled: Optional[bool] = None


class FAQResponse(CamelModel):
    """Response schema for an FAQ."""

    id: str
    bot_id: str
    question: str
    answer: str
    category: Optional[str] = None
    enabled: bool
    created_at: datetime
    updated_at: datetime
