"""Helpers for safe logging of configuration values.

Database URLs carry credentials; they are masked before being written to
the log.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

_SENSITIVE_KEYS: frozenset[str] = frozenset({"password", "database_url", "dsn"})


def redact_url(url: str) -> str:
    """Return *url* with any password replaced by ``***``."""
    try:
        parsed = make_url(url)
    except ArgumentError:
        return "<unparseable url>"
    return parsed.render_as_string(hide_password=True)


def redact_for_log(values: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of *values* suitable for an INFO log line."""
    redacted: dict[str, Any] = {}
    for key, value in values.items():
        if key.lower() in _SENSITIVE_KEYS and isinstance(value, str):
            redacted[key] = redact_url(value) if "://" in value else "<redacted>"
        else:
            redacted[key] = value
    return redacted
