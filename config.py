"""
Environment configuration.

Keys come from the process environment, with a local .env file loaded
first. Missing credentials raise ConfigurationError so the pipeline is never
reachable without them.
"""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import ConfigurationError
from prompts import normalize_actions
from schemas import ActionKind

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"
DEFAULT_URL_PROXY_PREFIX = "https://api.allorigins.win/raw?url="
BLOCK_STYLES = ("code", "paragraph")


@dataclass(frozen=True)
class Settings:
    notion_api_key: str
    gemini_api_key: str
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_temperature: float = 0.7
    prompt_max_chars: int = 15000
    enabled_actions: frozenset = frozenset(ActionKind)
    output_block_style: str = "code"
    url_proxy_prefix: str = DEFAULT_URL_PROXY_PREFIX


def _key_status(value):
    return f"Yes (starts with {value[:7]}...)" if value else "No"


def _number(name, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}.", cause=e) from e


def _csv(name):
    raw = os.getenv(name, "")
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_settings():
    """Read settings from the environment and validate required keys."""
    notion_key = os.getenv("NOTION_API_KEY", "")
    gemini_key = os.getenv("GEMINI_API_KEY", "")
    logger.info(f"NOTION_API_KEY loaded: {_key_status(notion_key)}")
    logger.info(f"GEMINI_API_KEY loaded: {_key_status(gemini_key)}")

    if not notion_key or not gemini_key:
        raise ConfigurationError("Server API keys are not configured properly.")

    enabled = frozenset(ActionKind)
    names = _csv("ENABLED_ACTIONS")
    if names:
        enabled = normalize_actions(names)

    style = os.getenv("OUTPUT_BLOCK_STYLE", "code").strip() or "code"
    if style not in BLOCK_STYLES:
        raise ConfigurationError(f"OUTPUT_BLOCK_STYLE must be one of {', '.join(BLOCK_STYLES)}, got {style!r}.")

    return Settings(
        notion_api_key=notion_key,
        gemini_api_key=gemini_key,
        gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        gemini_temperature=_number("GEMINI_TEMPERATURE", 0.7, float),
        prompt_max_chars=_number("PROMPT_MAX_CHARS", 15000, int),
        enabled_actions=enabled,
        output_block_style=style,
        url_proxy_prefix=os.getenv("URL_PROXY_PREFIX", DEFAULT_URL_PROXY_PREFIX),
    )


def cors_origins():
    return _csv("CORS_ORIGINS") or ["*"]


def listen_port():
    return _number("PORT", 3000, int)
