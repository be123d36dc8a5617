# src/boostrunner/telemetry/logger/processors.py

"""
Custom structlog processors used by the boostrunner logging pipeline.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LOG_EMOJIS: dict[int | str, str] = {
    logging.DEBUG: "🐛",
    logging.INFO: "ℹ️",
    logging.WARNING: "⚠️",
    logging.ERROR: "❌",
    logging.CRITICAL: "💥",
    "discover": "🔎",
    "run": "🏃",
    "pass": "✅",
    "fail": "🚫",
    "watch": "👀",
    "path": "📁",
    "general": "➡️",
}

# Keys that only steer rendering and must not leak into the output.
_INTERNAL_KEYS = ("emoji_key",)


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefix the event message with an emoji chosen by ``emoji_key`` or level."""
    emoji_key: Any = event_dict.get("emoji_key")
    emoji = LOG_EMOJIS.get(emoji_key) if emoji_key else None
    if emoji is None:
        level_name = str(event_dict.get("level", method_name)).upper()
        emoji = LOG_EMOJIS.get(logging.getLevelName(level_name), LOG_EMOJIS["general"])

    event = event_dict.get("event")
    if isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Drop rendering hints from the event dict."""
    for key in _INTERNAL_KEYS:
        event_dict.pop(key, None)
    return event_dict

# 🔼⚙️
