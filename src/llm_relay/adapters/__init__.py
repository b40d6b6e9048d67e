# src/llm_relay/adapters/__init__.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from llm_relay.adapters.base import Provider, ProviderError
from llm_relay.adapters.deepseek import DeepseekProvider
from llm_relay.adapters.gemini import GeminiProvider
from llm_relay.core.config import Settings

__all__ = [
    "DeepseekProvider",
    "GeminiProvider",
    "Provider",
    "ProviderError",
    "build_providers",
]


def build_providers(settings: Settings) -> Mapping[str, Provider]:
    """Construct a client only for providers whose key is configured."""
    providers: dict[str, Provider] = {}
    if settings.gg_api_key:
        providers["google"] = GeminiProvider(
            settings.gg_api_key,
            model=settings.gg_model,
            base_url=settings.gg_base_url,
            timeout=settings.request_timeout,
        )
    if settings.ds_api_key:
        providers["deepseek"] = DeepseekProvider(
            settings.ds_api_key,
            model=settings.ds_model,
            base_url=settings.ds_base_url,
            timeout=settings.request_timeout,
        )
    return MappingProxyType(providers)
