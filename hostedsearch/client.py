"""Search API client: host failover, credentials and account-level calls."""
from __future__ import annotations

import random
import threading
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional, Sequence

import requests

from hostedsearch.config import DEFAULT_TIMEOUT, ClientConfig, default_hosts, load_config
from hostedsearch.params import encode_component, encode_params, index_path
from hostedsearch.security import TagFilters, canonical_tag_filters, generate_secured_api_key
from hostedsearch.tasks import DEFAULT_POLL_INTERVAL, TaskPoller
from hostedsearch.transport import Dispatcher, HostPool, LogicalRequest, Outcome, Requester
from hostedsearch.utils.log_json import JsonLogger

if TYPE_CHECKING:
    from hostedsearch.index import Index

_logger = JsonLogger("search-client")


def user_agent(product: str = "hostedsearch") -> str:
    from hostedsearch import __version__

    return f"{product} for Python {__version__}"


def key_payload(
    acls: Sequence[str],
    validity: int | None = None,
    max_queries_per_ip_per_hour: int | None = None,
    max_hits_per_query: int | None = None,
    indexes: Sequence[str] | None = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"acl": list(acls)}
    if validity is not None:
        payload["validity"] = validity
    if max_queries_per_ip_per_hour is not None:
        payload["maxQueriesPerIPPerHour"] = max_queries_per_ip_per_hour
    if max_hits_per_query is not None:
        payload["maxHitsPerQuery"] = max_hits_per_query
    if indexes is not None:
        payload["indexes"] = list(indexes)
    return payload


class SearchClient:
    """Client for one search application.

    Parameters
    ----------
    application_id:
        Application identifier sent with every request.
    api_key:
        API key sent with every request unless an overlay replaces it.
    hosts:
        Replicas of the API. Defaults to the three ``{application_id}-N``
        hosts. The order is shuffled once per client.
    timeout:
        Per-request read timeout in seconds.
    session:
        Optional :class:`requests.Session` for connection pooling.
    scheme:
        ``"https"`` or ``"http"``, used for every host.
    rng:
        Random source for the host shuffle.
    poll_interval:
        Seconds between task status checks in :meth:`wait_task`.

    Use :meth:`from_config` to build a client from a :class:`ClientConfig`.
    """

    def __init__(
        self,
        application_id: str,
        api_key: str,
        hosts: Optional[Iterable[str]] = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
        scheme: str = "https",
        rng: random.Random | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.application_id = application_id
        self.api_key = api_key
        host_list = list(hosts) if hosts is not None else default_hosts(application_id)
        self.pool = HostPool(host_list, rng=rng)
        self.requester = Requester(session, scheme=scheme)
        self.dispatcher = Dispatcher(self.pool, self.requester)
        self.tasks = TaskPoller(self.dispatcher, interval=poll_interval)
        self.timeout = timeout
        self._lock = threading.Lock()
        self._extra_headers: Dict[str, str] = {}
        self._rate_limit_headers: Dict[str, str] = {}
        self._secured_headers: Dict[str, str] = {}
        self._user_agent = user_agent()
        _logger.info(
            "api.client.init",
            application_id=application_id,
            hosts=len(self.pool),
            timeout=timeout,
        )

    @classmethod
    def from_config(cls, config: ClientConfig, **kwargs: Any) -> "SearchClient":
        client = cls(
            config.application_id,
            config.api_key,
            config.hosts,
            timeout=config.timeout,
            scheme=config.scheme,
            **kwargs,
        )
        if config.user_agent:
            client._user_agent = config.user_agent
        return client

    @classmethod
    def from_env(cls, **kwargs: Any) -> "SearchClient":
        return cls.from_config(load_config(), **kwargs)

    # Configuration ------------------------------------------------------
    def set_extra_header(self, name: str, value: str) -> None:
        """Send ``name: value`` with every subsequent request."""
        with self._lock:
            self._extra_headers[name] = value

    def set_timeout(self, seconds: float) -> None:
        self.timeout = seconds

    def enable_rate_limit_forward(self, admin_api_key: str, end_user_ip: str, rate_limit_api_key: str) -> None:
        """Rate-limit end users behind a trusted proxy with ``rate_limit_api_key``.

        Requests are authenticated with ``admin_api_key`` while the server
        applies the limits of ``rate_limit_api_key`` to ``end_user_ip``.
        """
        with self._lock:
            self._rate_limit_headers = {
                "X-Algolia-API-Key": admin_api_key,
                "X-Forwarded-API-Key": rate_limit_api_key,
                "X-Forwarded-For": end_user_ip,
            }

    def disable_rate_limit_forward(self) -> None:
        with self._lock:
            self._rate_limit_headers = {}

    def use_secured_api_key(
        self,
        secured_api_key: str,
        security_tags: TagFilters | None = None,
        user_token: str | None = None,
    ) -> None:
        """Authenticate with a key produced by :meth:`generate_secured_api_key`."""
        headers = {"X-Algolia-API-Key": secured_api_key}
        if security_tags:
            headers["X-Algolia-TagFilters"] = canonical_tag_filters(security_tags)
        if user_token:
            headers["X-Algolia-UserToken"] = user_token
        with self._lock:
            self._secured_headers = headers

    def disable_secured_api_key(self) -> None:
        with self._lock:
            self._secured_headers = {}

    @staticmethod
    def generate_secured_api_key(
        private_api_key: str,
        tag_filters: TagFilters,
        user_token: str | None = None,
    ) -> str:
        return generate_secured_api_key(private_api_key, tag_filters, user_token)

    # Transport ----------------------------------------------------------
    def headers(self) -> Dict[str, str]:
        """Return a snapshot of the headers for one logical request."""
        with self._lock:
            headers = dict(self._extra_headers)
            headers.update(
                {
                    "X-Algolia-Application-Id": self.application_id,
                    "X-Algolia-API-Key": self.api_key,
                    "Connection": "keep-alive",
                    "User-Agent": self._user_agent,
                }
            )
            headers.update(self._rate_limit_headers)
            headers.update(self._secured_headers)
        return headers

    def request(self, method: str, path: str, body: Any = None) -> Outcome:
        request = LogicalRequest(method, path, body=body, headers=self.headers())
        return self.dispatcher.dispatch(request, timeout=self.timeout)

    def wait_task(self, index_name: str, task_id: Any, *, timeout: float | None = None) -> Outcome:
        """Poll until ``task_id`` is published on ``index_name``.

        Headers are snapshotted once when the wait starts; overlay changes made
        while waiting do not reach later status checks.
        """
        return self.tasks.wait(
            index_name,
            task_id,
            headers=self.headers(),
            request_timeout=self.timeout,
            timeout=timeout,
        )

    def close(self) -> None:
        self.requester.close()

    def __enter__(self) -> "SearchClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # Indexes ------------------------------------------------------------
    def init_index(self, index_name: str) -> "Index":
        from hostedsearch.index import Index

        return Index(self, index_name)

    def list_indexes(self) -> Outcome:
        return self.request("GET", "/1/indexes/")

    def delete_index(self, index_name: str) -> Outcome:
        return self.request("DELETE", index_path(index_name))

    def move_index(self, src_index_name: str, dst_index_name: str) -> Outcome:
        """Rename ``src_index_name``; the destination is overwritten."""
        return self._operation(src_index_name, "move", dst_index_name)

    def copy_index(self, src_index_name: str, dst_index_name: str) -> Outcome:
        """Copy ``src_index_name``; the destination is overwritten."""
        return self._operation(src_index_name, "copy", dst_index_name)

    def _operation(self, src_index_name: str, operation: str, dst_index_name: str) -> Outcome:
        body = {"operation": operation, "destination": dst_index_name}
        return self.request("POST", index_path(src_index_name, "operation"), body)

    def get_logs(self, offset: int = 0, length: int = 10, log_type: str | bool = "all") -> Outcome:
        """Return the most recent API log entries.

        ``log_type`` is ``"all"``, ``"query"``, ``"build"`` or ``"error"``; a
        boolean selects ``"error"`` (``True``) or ``"all"`` (``False``).
        """
        if isinstance(log_type, bool):
            log_type = "error" if log_type else "all"
        query = encode_params({"offset": offset, "length": length, "type": log_type})
        return self.request("GET", f"/1/logs?{query}")

    def multiple_queries(self, queries: Iterable[Mapping[str, Any]], index_name_key: str = "indexName") -> Outcome:
        """Run several queries, possibly on different indexes, in one call."""
        requests_: List[Dict[str, Any]] = []
        for query in queries:
            params = {k: v for k, v in query.items() if k != index_name_key}
            requests_.append({"indexName": query[index_name_key], "params": encode_params(params)})
        return self.request("POST", "/1/indexes/*/queries", {"requests": requests_})

    # API keys -----------------------------------------------------------
    def list_user_keys(self) -> Outcome:
        return self.request("GET", "/1/keys")

    def get_user_key_acl(self, key: str) -> Outcome:
        return self.request("GET", "/1/keys/" + encode_component(key))

    def delete_user_key(self, key: str) -> Outcome:
        return self.request("DELETE", "/1/keys/" + encode_component(key))

    def add_user_key(
        self,
        acls: Sequence[str],
        validity: int | None = None,
        max_queries_per_ip_per_hour: int | None = None,
        max_hits_per_query: int | None = None,
        indexes: Sequence[str] | None = None,
    ) -> Outcome:
        """Create an API key.

        ``acls`` may contain ``search``, ``addObject``, ``deleteObject``,
        ``deleteIndex``, ``settings`` and ``editSettings``. ``validity`` is in
        seconds (0 means no expiry); the two limits default to unlimited.
        """
        body = key_payload(acls, validity, max_queries_per_ip_per_hour, max_hits_per_query, indexes)
        return self.request("POST", "/1/keys", body)

    def update_user_key(
        self,
        key: str,
        acls: Sequence[str],
        validity: int | None = None,
        max_queries_per_ip_per_hour: int | None = None,
        max_hits_per_query: int | None = None,
        indexes: Sequence[str] | None = None,
    ) -> Outcome:
        body = key_payload(acls, validity, max_queries_per_ip_per_hour, max_hits_per_query, indexes)
        return self.request("PUT", "/1/keys/" + encode_component(key), body)


__all__ = ["SearchClient", "key_payload", "user_agent"]
