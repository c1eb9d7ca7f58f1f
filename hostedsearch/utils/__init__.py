"""Utility helpers for hostedsearch."""

from __future__ import annotations

from .log_json import JsonLogger
from .secure_store import get_secret, set_secret

__all__ = ["JsonLogger", "get_secret", "set_secret"]
