"""Value objects passed through the transport layer."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, NamedTuple, Optional

from hostedsearch.errors import SearchApiError


@dataclass(frozen=True, slots=True)
class LogicalRequest:
    """One API call, independent of the host it will be sent to.

    ``path`` must already be percent-encoded.
    """

    method: str
    path: str
    body: Any = None
    headers: Dict[str, str] = field(default_factory=dict)


class HostResult(NamedTuple):
    """Normalized result of a single attempt against a single host."""

    retryable: bool
    is_error: bool
    status: int
    body: Any


class Outcome(NamedTuple):
    """Final result of a logical request.

    ``status`` is the HTTP status of the last attempt, or ``0`` when no host
    could be reached or the call was rejected before any network access.
    """

    is_error: bool
    body: Any
    status: int = 0

    @classmethod
    def failure(cls, message: str, *, status: int = 0, **extra: Any) -> "Outcome":
        body: Dict[str, Any] = {"message": message, "httpCode": status}
        body.update(extra)
        return cls(True, body, status)

    @property
    def ok(self) -> bool:
        return not self.is_error

    def raise_for_error(self) -> Any:
        """Return the body, raising :class:`SearchApiError` for failures."""
        if self.is_error:
            raise SearchApiError(self.status, self.body)
        return self.body

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        if isinstance(self.body, dict):
            return self.body.get(key, default)
        return default


CANNOT_CONTACT_SERVER = "Cannot contact server"


__all__ = ["LogicalRequest", "HostResult", "Outcome", "CANNOT_CONTACT_SERVER"]
