"""Polling for completion of asynchronous server-side writes."""
from __future__ import annotations

from typing import Any

from tenacity import RetryCallState, Retrying, retry_if_result, stop_after_delay, stop_never, wait_fixed

from hostedsearch.params import index_path
from hostedsearch.transport import Dispatcher, LogicalRequest, Outcome
from hostedsearch.utils.log_json import JsonLogger

DEFAULT_POLL_INTERVAL = 0.1
PUBLISHED = "published"

_logger = JsonLogger("search-tasks")


def is_pending(outcome: Outcome) -> bool:
    """Error outcomes and ``published`` tasks end the wait."""
    if outcome.is_error:
        return False
    return outcome.get("status") != PUBLISHED


def _log_poll(retry_state: RetryCallState) -> None:
    task_id = retry_state.kwargs.get("task_id")
    _logger.debug("task.pending", task_id=task_id, attempt=retry_state.attempt_number)


class TaskPoller:
    """Check task status until the server reports it ``published``.

    Each check goes through the dispatcher, so it already benefits from host
    failover; an error outcome is therefore final and returned immediately.
    Pending tasks are checked again after a fixed ``interval``. Without a
    ``timeout`` the wait is unbounded.
    """

    def __init__(self, dispatcher: Dispatcher, *, interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self.dispatcher = dispatcher
        self.interval = interval

    def check(self, *, index_name: str, task_id: Any, headers: dict, timeout: float | None) -> Outcome:
        request = LogicalRequest("GET", index_path(index_name, "task", task_id), headers=headers)
        return self.dispatcher.dispatch(request, timeout=timeout)

    def wait(
        self,
        index_name: str,
        task_id: Any,
        *,
        headers: dict,
        request_timeout: float | None = None,
        timeout: float | None = None,
    ) -> Outcome:
        def _deadline(retry_state: RetryCallState) -> Outcome:
            _logger.warning(
                "task.timeout",
                task_id=task_id,
                attempt=retry_state.attempt_number,
                timeout=timeout,
            )
            return Outcome.failure(f"Task {task_id} was not published after {timeout}s")

        retrying = Retrying(
            retry=retry_if_result(is_pending),
            wait=wait_fixed(self.interval),
            stop=stop_after_delay(timeout) if timeout is not None else stop_never,
            before_sleep=_log_poll,
            retry_error_callback=_deadline,
        )
        outcome = retrying(
            self.check,
            index_name=index_name,
            task_id=task_id,
            headers=headers,
            timeout=request_timeout,
        )
        if outcome.is_error:
            _logger.error("task.failed", task_id=task_id, status=outcome.status)
        else:
            _logger.info("task.published", task_id=task_id)
        return outcome


__all__ = ["TaskPoller", "is_pending", "DEFAULT_POLL_INTERVAL", "PUBLISHED"]
