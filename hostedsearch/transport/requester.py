"""Single-host HTTP execution with normalized results."""
from __future__ import annotations

import json
import time
from typing import Any, Dict, Mapping

import requests

from hostedsearch.transport.outcome import HostResult, LogicalRequest
from hostedsearch.utils.log_json import JsonLogger

JSON_CONTENT_TYPE = "application/json;charset=utf-8"

_logger = JsonLogger("search-transport")


def has_succeeded(status: int) -> bool:
    return 200 <= status < 300


def has_failed(status: int) -> bool:
    """4xx answers are final: another host would answer the same."""
    return 400 <= status < 500


class Requester:
    """Send one :class:`LogicalRequest` to one host.

    Never raises for transport problems; connection errors, timeouts and TLS
    failures are reported as retryable error results with status ``0``.
    """

    def __init__(self, session: requests.Session | None = None, *, scheme: str = "https") -> None:
        self.session = session or requests.Session()
        self._owns_session = session is None
        self.scheme = scheme

    def url_for(self, host: str, path: str) -> str:
        return f"{self.scheme}://{host}{path}"

    @staticmethod
    def encode_body(body: Any, headers: Dict[str, str]) -> bytes | None:
        if body is None:
            headers["Content-Length"] = "0"
            return None
        data = json.dumps(body, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        headers["Content-Type"] = JSON_CONTENT_TYPE
        headers["Content-Length"] = str(len(data))
        return data

    def execute(self, request: LogicalRequest, host: str, timeout: float | None) -> HostResult:
        headers = dict(request.headers)
        data = self.encode_body(request.body, headers)
        url = self.url_for(host, request.path)
        started = time.perf_counter()
        try:
            resp = self.session.request(
                request.method,
                url,
                data=data,
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as exc:
            _logger.warning(
                "api.transport_error",
                host=host,
                method=request.method,
                path=request.path,
                error=type(exc).__name__,
            )
            return HostResult(True, True, 0, {"message": str(exc), "httpCode": 0})
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        return self._normalize(resp, host=host, request=request, latency_ms=latency_ms)

    def _normalize(
        self,
        resp: requests.Response,
        *,
        host: str,
        request: LogicalRequest,
        latency_ms: float,
    ) -> HostResult:
        status = int(resp.status_code)
        retryable = not has_failed(status)
        success = has_succeeded(status)
        text = resp.content.decode("utf-8", errors="replace") if resp.content else ""
        body: Any = text
        if _is_json(resp.headers):
            try:
                body = json.loads(text)
            except ValueError:
                _logger.warning("api.invalid_json", host=host, path=request.path, status=status)
                success = False
                body = {"message": "Cannot parse JSON", "httpCode": 0, "body": text}
        _logger.debug(
            "api.attempt",
            host=host,
            method=request.method,
            path=request.path,
            status=status,
            latency_ms=latency_ms,
        )
        return HostResult(retryable, not success, status, body)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()


def _is_json(headers: Mapping[str, str]) -> bool:
    content_type = headers.get("Content-Type") or headers.get("content-type") or ""
    return "application/json" in content_type.lower()


__all__ = ["Requester", "has_succeeded", "has_failed", "JSON_CONTENT_TYPE"]
