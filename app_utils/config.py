from __future__ import annotations

"""Runtime settings for the customer console.

Values come from the environment first (``.env`` is loaded on import), then
from ``st.secrets``, then from the defaults below.
"""

import logging
import os
from typing import Optional

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:3000/api/customers"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_NOTICE_MS = 3000


def get_config(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.environ.get(name)
    if val is not None:
        return val
    try:
        raw = st.secrets.get(name)  # type: ignore[attr-defined]
    except Exception:  # no secrets.toml
        return default
    return str(raw) if raw is not None else default


def _get_number(name: str, default: float) -> float:
    raw = get_config(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("%s=%r is not a number; using %s", name, raw, default)
        return default
    if value <= 0:
        logger.warning("%s=%r must be positive; using %s", name, raw, default)
        return default
    return value


def api_url() -> str:
    return get_config("CUSTOMERS_API_URL") or DEFAULT_API_URL


def api_timeout() -> float:
    """HTTP timeout in seconds for every backend call."""
    return _get_number("CUSTOMERS_API_TIMEOUT", DEFAULT_TIMEOUT_SECONDS)


def notice_seconds() -> float:
    """How long the success notice stays on screen."""
    return _get_number("SUCCESS_NOTICE_MS", DEFAULT_NOTICE_MS) / 1000.0


def page_title() -> str:
    return get_config("PAGE_TITLE") or "Customers"


def configure_logging() -> None:
    """Set the root log level from ``LOG_LEVEL`` (idempotent)."""
    level_name = (get_config("LOG_LEVEL") or "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(level)
