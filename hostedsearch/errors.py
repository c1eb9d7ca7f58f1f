"""Exception types raised by hostedsearch."""
from __future__ import annotations

from typing import Any


class SearchApiError(RuntimeError):
    """Raised by :meth:`Outcome.raise_for_error` for failed outcomes."""

    def __init__(self, status: int, body: Any) -> None:
        message = body.get("message") if isinstance(body, dict) else body
        super().__init__(f"{status}: {message}")
        self.status = status
        self.body = body


__all__ = ["SearchApiError"]
