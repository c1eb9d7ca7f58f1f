from __future__ import annotations

import random

import requests

from hostedsearch.transport import CANNOT_CONTACT_SERVER, Dispatcher, HostPool, LogicalRequest, Requester

HOSTS = ["host-1.search.test", "host-2.search.test", "host-3.search.test"]
JSON_HEADERS = {"Content-Type": "application/json; charset=UTF-8"}
PATH = "/1/indexes/cities/query"


def _dispatcher(hosts=HOSTS):
    return Dispatcher(HostPool(hosts, rng=random.Random(11)), Requester())


def _register(requests_mock, host, **kwargs):
    if "exc" not in kwargs:
        kwargs.setdefault("headers", JSON_HEADERS)
    return requests_mock.post(f"https://{host}{PATH}", **kwargs)


def _request():
    return LogicalRequest("POST", PATH, body={"params": "query=a"})


def test_all_hosts_failing_tries_each_once_in_order(requests_mock):
    dispatcher = _dispatcher()
    mocks = [_register(requests_mock, host, status_code=503, json={"message": "down"}) for host in HOSTS]

    outcome = dispatcher.dispatch(_request())

    assert outcome.is_error is True
    assert outcome.status == 503
    assert all(m.call_count == 1 for m in mocks)
    assert [r.hostname for r in requests_mock.request_history] == list(dispatcher.pool)


def test_connection_failures_everywhere_report_status_zero(requests_mock):
    dispatcher = _dispatcher()
    for host in HOSTS:
        _register(requests_mock, host, exc=requests.exceptions.ConnectionError("unreachable"))

    outcome = dispatcher.dispatch(_request())

    assert outcome.is_error is True
    assert outcome.status == 0
    assert requests_mock.call_count == 3


def test_stops_at_first_success(requests_mock):
    dispatcher = _dispatcher()
    first, second, third = dispatcher.pool
    _register(requests_mock, first, status_code=500, json={"message": "boom"})
    _register(requests_mock, second, json={"hits": []})
    untouched = _register(requests_mock, third, json={"hits": []})

    outcome = dispatcher.dispatch(_request())

    assert outcome == (False, {"hits": []}, 200)
    assert requests_mock.call_count == 2
    assert not untouched.called


def test_client_error_is_not_retried(requests_mock):
    dispatcher = _dispatcher()
    first, second, _ = dispatcher.pool
    _register(requests_mock, first, status_code=403, json={"message": "Invalid API key"})
    healthy = _register(requests_mock, second, json={"hits": []})

    outcome = dispatcher.dispatch(_request())

    assert outcome.is_error is True
    assert outcome.status == 403
    assert outcome.body["message"] == "Invalid API key"
    assert not healthy.called


def test_every_request_starts_from_first_host(requests_mock):
    dispatcher = _dispatcher()
    first = dispatcher.pool[0]
    for host in HOSTS:
        _register(requests_mock, host, json={})

    dispatcher.dispatch(_request())
    dispatcher.dispatch(_request())

    assert [r.hostname for r in requests_mock.request_history] == [first, first]


def test_empty_pool_fails_without_network(requests_mock):
    outcome = _dispatcher(hosts=[]).dispatch(_request())
    assert outcome.is_error is True
    assert outcome.status == 0
    assert outcome.body == {"message": CANNOT_CONTACT_SERVER, "httpCode": 0}
    assert requests_mock.call_count == 0
