"""Client for the search analytics API."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping

import requests

from hostedsearch.client import user_agent
from hostedsearch.params import encode_component, encode_params
from hostedsearch.transport import Dispatcher, HostPool, LogicalRequest, Outcome, Requester
from hostedsearch.utils.log_json import JsonLogger

if TYPE_CHECKING:
    from hostedsearch.client import SearchClient

ANALYTICS_HOST = "analytics.algolia.com"
BENCH_HITS_PER_PAGE = 10

_logger = JsonLogger("search-analytics")


def compare_analytics(analytics: Mapping[str, Any], answer: Mapping[str, Any]) -> Dict[str, Any]:
    """Score a replay of top searches against the analytics they came from.

    Each search starts at 10 relevance points, minus one per typo in every
    returned hit; ``improvement`` is set when the replay finds more hits than
    the recorded average.
    """
    report: Dict[str, Any] = {"score": 0, "searches": []}
    for recorded, replayed in zip(_top_searches(analytics), answer.get("results", [])):
        relevance = BENCH_HITS_PER_PAGE
        for hit in replayed.get("hits", []):
            relevance -= hit.get("_rankingInfo", {}).get("nbTypos", 0)
        nb_hits = replayed.get("nbHits", 0)
        report["searches"].append(
            {
                "query": recorded.get("query"),
                "improvement": nb_hits - (recorded.get("avgHitCount") or 0) > 0,
                "nbHits": nb_hits,
                "relevance": relevance,
            }
        )
        report["score"] += relevance
    return report


def _top_searches(analytics: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    for key in ("topSearchesNoResults", "topSearchesNoResuls", "topSearches"):
        if analytics.get(key):
            return analytics[key]
    return []


class AnalyticsClient:
    """Read popular and failing searches and replay them against another index."""

    def __init__(
        self,
        application_id: str,
        api_key: str,
        *,
        host: str = ANALYTICS_HOST,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.application_id = application_id
        self.api_key = api_key
        self.timeout = timeout
        self.requester = Requester(session)
        self.dispatcher = Dispatcher(HostPool([host]), self.requester)
        self._user_agent = user_agent("hostedsearch analytics")

    def _get(self, path: str, params: Mapping[str, Any] | None = None) -> Outcome:
        query = encode_params(params)
        if query:
            path += "?" + query
        headers = {
            "X-Algolia-API-Key": self.api_key,
            "X-Algolia-Application-Id": self.application_id,
            "User-Agent": self._user_agent,
        }
        outcome = self.dispatcher.dispatch(LogicalRequest("GET", path, headers=headers), timeout=self.timeout)
        if outcome.status != 200 and not outcome.is_error:
            # Only a plain 200 carries analytics data.
            return Outcome.failure(f"status code: {outcome.status}", status=outcome.status)
        return outcome

    def is_alive(self) -> Outcome:
        return self._get("/1/isalive")

    def popular_searches(self, index_name: str, **params: Any) -> Outcome:
        """Top searches; accepts ``size``, ``startAt``, ``endAt``, ``tags`` and ``country``."""
        return self._get(f"/1/searches/{encode_component(index_name)}/popular", params)

    def searches_without_results(self, index_name: str, **params: Any) -> Outcome:
        return self._get(f"/1/searches/{encode_component(index_name)}/noresults", params)

    def dashboard(self, index_name: str, **params: Any) -> Outcome:
        return self._get(f"/1/dashboard/{encode_component(index_name)}", params)

    def bench_popular_searches(
        self, prod_index: str, dev_index: str, search_client: "SearchClient", **params: Any
    ) -> Outcome:
        """Replay the popular searches of ``prod_index`` on ``dev_index``.

        Costs one search operation per replayed query.
        """
        outcome = self.popular_searches(prod_index, **params)
        if outcome.is_error:
            return outcome
        return self._bench(outcome.body, dev_index, search_client)

    def bench_no_results(
        self, prod_index: str, dev_index: str, search_client: "SearchClient", **params: Any
    ) -> Outcome:
        outcome = self.searches_without_results(prod_index, **params)
        if outcome.is_error:
            return outcome
        return self._bench(outcome.body, dev_index, search_client)

    def _bench(self, analytics: Mapping[str, Any], dev_index: str, search_client: "SearchClient") -> Outcome:
        queries = [
            {
                "indexName": dev_index,
                "query": search.get("query", ""),
                "hitsPerPage": BENCH_HITS_PER_PAGE,
                "analytics": 0,
                "getRankingInfo": 1,
            }
            for search in _top_searches(analytics)
        ]
        _logger.info("analytics.bench", index=dev_index, queries=len(queries))
        answer = search_client.multiple_queries(queries)
        if answer.is_error:
            return answer
        return Outcome(False, compare_analytics(analytics, answer.body), answer.status)

    def close(self) -> None:
        self.requester.close()


__all__ = ["AnalyticsClient", "compare_analytics", "ANALYTICS_HOST"]
