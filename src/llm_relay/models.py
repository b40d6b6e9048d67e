# src/llm_relay/models.py
from __future__ import annotations

import logging
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

logger = logging.getLogger(__name__)

Role = Literal["system", "user", "assistant"]
ApiName = Literal["google", "deepseek"]

API_NAMES: tuple[ApiName, ...] = ("google", "deepseek")
DEFAULT_API: ApiName = "google"


class ChatMessage(BaseModel):
    role: Role
    content: StrictStr
    # passed through untyped; adapters decide what to do with it
    name: Optional[Any] = None


class ChatRequest(BaseModel):
    """Wire names are camelCase (preferredApi); attributes are snake_case."""

    messages: List[ChatMessage] = Field(min_length=1)
    # None = a preference was sent but names no known provider
    preferred_api: Optional[ApiName] = Field(DEFAULT_API, alias="preferredApi")

    @field_validator("preferred_api", mode="before")
    @classmethod
    def _unknown_api(cls, v):
        if v not in API_NAMES:
            logger.warning("unknown preferredApi=%r, single fallback attempt", v)
            return None
        return v


class ChatResult(BaseModel):
    reply: Optional[str] = None
    used_api: Optional[ApiName] = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Response generated successfully."
    reply: str
    used_api: ApiName = Field(alias="usedApi")
    timestamp: str
