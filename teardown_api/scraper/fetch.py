"""Retrieval of the API manual."""
from __future__ import annotations

import logging
import os
from pathlib import Path

import requests

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://teardowngame.com/modding/api.html"
DEFAULT_TIMEOUT = 30.0


def resolve_url(value: str | None) -> str:
    if value:
        return value
    return os.environ.get("TEARDOWN_API_URL") or DEFAULT_URL


def resolve_timeout(value: float | None) -> float:
    if value is not None:
        if value <= 0:
            raise ValueError(f"Timeout must be positive, got {value}")
        return value
    env_value = os.environ.get("TEARDOWN_API_TIMEOUT")
    if env_value:
        try:
            timeout = float(env_value)
        except ValueError:
            timeout = 0.0
        if timeout > 0:
            return timeout
        logger.debug("Invalid TEARDOWN_API_TIMEOUT value: %s", env_value)
    return DEFAULT_TIMEOUT


def fetch_document(
    url: str,
    *,
    timeout: float | None = None,
    session: requests.Session | None = None,
) -> str:
    """Download the manual and return its text.

    Transport and HTTP status errors propagate as ``requests.RequestException``.
    """

    effective_timeout = resolve_timeout(timeout)
    logger.info("Fetching %s", url)
    if session is None:
        response = requests.get(url, timeout=effective_timeout)
    else:
        response = session.get(url, timeout=effective_timeout)
    response.raise_for_status()
    response.encoding = "utf-8"
    logger.debug("Fetched %d characters from %s", len(response.text), url)
    return response.text


def read_document(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")
