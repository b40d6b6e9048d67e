# src/llm_relay/core/fallback.py
from __future__ import annotations

import logging
from typing import List, Mapping, Optional, Tuple

from llm_relay.adapters.base import Provider
from llm_relay.models import API_NAMES, DEFAULT_API, ApiName, ChatMessage, ChatResult

logger = logging.getLogger(__name__)


def attempt_order(preferred: Optional[ApiName]) -> Tuple[ApiName, ...]:
    """[preferred, alternate]; without a known preference, every api in default order."""
    if preferred is None:
        return API_NAMES
    return (preferred,) + tuple(n for n in API_NAMES if n != preferred)


async def try_provider(
    name: str,
    provider: Optional[Provider],
    messages: List[ChatMessage],
) -> Optional[str]:
    """
    Call one provider and downgrade any failure to None.

    Nothing raised by the provider gets past this function; the error is
    logged with the provider name and message only. A reply that is not
    text counts as a failure too.
    """
    if provider is None:
        return None
    try:
        reply = await provider.invoke(messages)
    except Exception as ex:
        logger.error("%s API Error: %s", name, str(ex) or type(ex).__name__)
        return None

    if reply is not None and not isinstance(reply, str):
        logger.error("%s API Error: non-text reply (%s)", name, type(reply).__name__)
        return None
    return reply


async def resolve(
    providers: Mapping[str, Provider],
    messages: List[ChatMessage],
    preferred: Optional[ApiName] = DEFAULT_API,
) -> ChatResult:
    """
    Try the preferred provider, then the alternate, strictly in that order.

    Unconfigured providers are skipped without a call. The first non-empty
    reply wins; when there is none the result carries no reply.

    preferred=None (an unrecognised preference) gets a single attempt on the
    first configured provider in default order, with no further fallback.
    """
    for name in attempt_order(preferred):
        provider = providers.get(name)
        if provider is None:
            logger.debug("skipping %s: not configured", name)
            continue

        reply = await try_provider(name, provider, messages)
        if reply:
            return ChatResult(reply=reply, used_api=name)
        logger.info("%s returned no reply", name)

        if preferred is None:
            break

    return ChatResult()
