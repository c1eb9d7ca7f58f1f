"""Request transport: host pool, single-host requester and failover."""

from .dispatcher import Dispatcher
from .hosts import HostPool
from .outcome import CANNOT_CONTACT_SERVER, HostResult, LogicalRequest, Outcome
from .requester import Requester

__all__ = [
    "CANNOT_CONTACT_SERVER",
    "Dispatcher",
    "HostPool",
    "HostResult",
    "LogicalRequest",
    "Outcome",
    "Requester",
]
