# src/llm_relay/adapters/base.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import httpx

from llm_relay.models import ChatMessage


class ProviderError(Exception):
    """A provider answered, but not with something we can use."""


class Provider(Protocol):
    name: str

    async def invoke(self, messages: List[ChatMessage]) -> Optional[str]:
        ...


async def post_json(url: str, payload: dict, headers: dict, timeout: float) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.post(url, headers=headers, json=payload)


def join_text_parts(parts: List[Any]) -> str:
    """Concatenate the `text` of every {"text": ...} part, ignoring the rest."""
    return "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )
