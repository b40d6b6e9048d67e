# src/llm_relay/adapters/deepseek.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from llm_relay.adapters.base import ProviderError, join_text_parts, post_json
from llm_relay.models import ChatMessage

ALLOWED_ROLES = ("system", "user", "assistant")


def to_chat_messages(messages: List[ChatMessage]) -> List[Dict[str, str]]:
    out: List[Dict[str, str]] = []
    for m in messages:
        if m.role not in ALLOWED_ROLES:
            raise ProviderError(f"Invalid role: {m.role}")
        item = {"role": m.role, "content": m.content}
        # name only when set; the API wants a string
        if m.name:
            item["name"] = m.name if isinstance(m.name, str) else str(m.name)
        out.append(item)
    return out


def extract_content(data: Dict[str, Any]) -> Optional[str]:
    """
    choices[0].message.content as text.

    Missing content is None; a list of parts is joined; anything else
    is a malformed reply.
    """
    choice = (data.get("choices") or [{}])[0]
    msg = choice.get("message") or {}
    raw = msg.get("content")

    if raw is None or isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        text = join_text_parts(raw)
        if text:
            return text
    raise ProviderError(f"unexpected content type {type(raw).__name__}")


class DeepseekProvider:
    """DeepSeek adapter (OpenAI-compatible /chat/completions)."""

    name = "deepseek"

    def __init__(
        self,
        api_key: str,
        model: str = "deepseek-chat",
        base_url: str = "https://api.deepseek.com/v1",
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def invoke(self, messages: List[ChatMessage]) -> Optional[str]:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": to_chat_messages(messages),
        }

        resp = await post_json(url, payload, headers, self.timeout)
        resp.raise_for_status()
        return extract_content(resp.json())
