"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def _digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def safe_log_identifier(value: Any, *, prefix: str) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    return f"{prefix}-{_digest(text)[:12]}"


def token_fingerprint(token: str) -> str:
    """Full SHA-256 of a bearer token, used as a storage key instead of the raw value."""
    return _digest(token)
