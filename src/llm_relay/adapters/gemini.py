# src/llm_relay/adapters/gemini.py
from __future__ import annotations

from typing import Any, Dict, List

from llm_relay.adapters.base import ProviderError, join_text_parts, post_json
from llm_relay.models import ChatMessage


def to_contents(messages: List[ChatMessage]) -> List[Dict[str, Any]]:
    """
    Map a generic transcript onto Gemini `contents`.

    Gemini only knows 'user' and 'model' turns: 'assistant' becomes 'model',
    everything else (system included) is sent as 'user'. All but the last
    message form the history; the last one is always the new user turn.
    """
    history = [
        {
            "role": "model" if m.role == "assistant" else "user",
            "parts": [{"text": m.content}],
        }
        for m in messages[:-1]
    ]
    last = {"role": "user", "parts": [{"text": messages[-1].content}]}
    return history + [last]


def extract_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback") or {}
        reason = feedback.get("blockReason", "no candidates")
        raise ProviderError(f"empty Gemini response ({reason})")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    text = join_text_parts(parts)
    if not text:
        reason = candidates[0].get("finishReason", "no text parts")
        raise ProviderError(f"Gemini candidate without text ({reason})")
    return text


class GeminiProvider:
    name = "google"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def invoke(self, messages: List[ChatMessage]) -> str:
        if not messages:
            raise ProviderError("no messages to send")

        # Normalize model name in case it came as "models/gemini-2.0-flash"
        model = self.model.split("/", 1)[1] if self.model.startswith("models/") else self.model
        url = f"{self.base_url}/models/{model}:generateContent"
        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        payload = {"contents": to_contents(messages)}

        resp = await post_json(url, payload, headers, self.timeout)
        resp.raise_for_status()
        return extract_text(resp.json())
