"""Host failover for logical requests."""
from __future__ import annotations

from hostedsearch.transport.hosts import HostPool
from hostedsearch.transport.outcome import CANNOT_CONTACT_SERVER, LogicalRequest, Outcome
from hostedsearch.transport.requester import Requester
from hostedsearch.utils.log_json import JsonLogger

_logger = JsonLogger("search-transport")


class Dispatcher:
    """Try the hosts of a :class:`HostPool` in order until one answers.

    Every logical request starts again from the first host of the pool.
    Retryable results (connection errors, timeouts, 5xx) move on to the next
    host; any other result is final. At most ``len(pool)`` attempts are made.
    """

    def __init__(self, pool: HostPool, requester: Requester) -> None:
        self.pool = pool
        self.requester = requester

    def dispatch(self, request: LogicalRequest, *, timeout: float | None = None) -> Outcome:
        if len(self.pool) == 0:
            _logger.error("api.hosts_exhausted", method=request.method, path=request.path, attempts=0)
            return Outcome.failure(CANNOT_CONTACT_SERVER)

        result = None
        last = len(self.pool) - 1
        for position, host in enumerate(self.pool):
            _logger.debug(
                "api.request",
                host=host,
                method=request.method,
                path=request.path,
                attempt=position + 1,
            )
            result = self.requester.execute(request, host, timeout)
            if not (result.retryable and result.is_error):
                break
            if position < last:
                _logger.warning(
                    "api.failover",
                    host=host,
                    method=request.method,
                    path=request.path,
                    status=result.status,
                    attempt=position + 1,
                )
        else:
            _logger.error(
                "api.hosts_exhausted",
                method=request.method,
                path=request.path,
                status=result.status,
                attempts=len(self.pool),
            )

        _logger.info(
            "api.response",
            method=request.method,
            path=request.path,
            status=result.status,
            error=result.is_error,
        )
        return Outcome(result.is_error, result.body, result.status)


__all__ = ["Dispatcher"]
