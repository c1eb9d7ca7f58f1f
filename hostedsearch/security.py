"""Secured API key generation."""
from __future__ import annotations

import hashlib
import hmac
from typing import Sequence, Union

TagFilters = Union[str, Sequence[Union[str, Sequence[str]]]]


def canonical_tag_filters(tag_filters: TagFilters) -> str:
    """Render ``tag_filters`` in the ``tag1,(tag2,tag3)`` string syntax.

    Top-level entries are ANDed; nested sequences are ORed and wrapped in
    parentheses. Strings are returned unchanged.
    """

    if isinstance(tag_filters, str):
        return tag_filters
    parts = []
    for tag in tag_filters:
        if isinstance(tag, str):
            parts.append(tag)
        else:
            parts.append("(" + ",".join(str(t) for t in tag) + ")")
    return ",".join(parts)


def generate_secured_api_key(
    private_api_key: str,
    tag_filters: TagFilters,
    user_token: str | None = None,
) -> str:
    """Return the HMAC-SHA256 hex digest restricting a key to ``tag_filters``."""

    message = canonical_tag_filters(tag_filters) + (user_token or "")
    return hmac.new(
        private_api_key.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


__all__ = ["canonical_tag_filters", "generate_secured_api_key", "TagFilters"]
