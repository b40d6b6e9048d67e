# src/llm_relay/core/logging.py
from __future__ import annotations
import logging
import os
from typing import Optional

_FMT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
# DEBUG=true adds call sites, handy while chasing config-loading issues
_DEBUG_FMT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Chatty third-party loggers: WARNING normally, DEBUG when DEBUG=true
_NOISY = ("httpx", "httpcore")


def _debug_from_env() -> bool:
    return (os.getenv("DEBUG", "") or "").strip().lower() in ("1", "true", "yes", "on")


def resolve_level(debug: bool) -> int:
    """DEBUG=true wins; otherwise LOG_LEVEL (name or number), default INFO."""
    if debug:
        return logging.DEBUG
    raw = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(debug: Optional[bool] = None) -> None:
    """
    Configure root logging. Safe to call again once settings are known:
    an existing handler (ours, pytest's, uvicorn's) is kept and only levels
    and our formatter are refreshed.
    """
    if debug is None:
        debug = _debug_from_env()
    level = resolve_level(debug)
    formatter = logging.Formatter(fmt=_DEBUG_FMT if debug else _FMT, datefmt=_DATEFMT)

    root = logging.getLogger()
    root.setLevel(level)

    ours = [h for h in root.handlers if getattr(h, "_llm_relay", False)]
    if ours:
        for h in ours:
            h.setFormatter(formatter)
    elif not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        handler._llm_relay = True
        root.addHandler(handler)

    for name in _NOISY:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)
