"""Operations scoped to a single index."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from hostedsearch.client import key_payload
from hostedsearch.params import encode_component, encode_params, index_path
from hostedsearch.transport import Outcome

if TYPE_CHECKING:
    from hostedsearch.client import SearchClient

T = TypeVar("T")
HitFactory = Callable[[Dict[str, Any]], T]

DELETE_BY_QUERY_PAGE = 1000


def _empty_object_id() -> Outcome:
    return Outcome.failure("empty objectID")


def _has_object_id(object_id: Any) -> bool:
    return object_id is not None and str(object_id) != ""


def apply_hit_factory(outcome: Outcome, hit_factory: Optional[HitFactory]) -> Outcome:
    """Map every hit of a successful search/browse answer through ``hit_factory``."""
    if hit_factory is None or outcome.is_error or not isinstance(outcome.body, dict):
        return outcome
    body = dict(outcome.body)
    body["hits"] = [hit_factory(hit) for hit in body.get("hits", [])]
    return outcome._replace(body=body)


def facet_filters(refinements: Mapping[str, Sequence[Any]], disjunctive: Iterable[str], skip: str | None = None) -> List[Any]:
    """Build ``facetFilters``: disjunctive refinements ORed, the others ANDed."""
    disjunctive = set(disjunctive)
    filters: List[Any] = []
    for facet, values in refinements.items():
        if facet == skip:
            continue
        refined = [f"{facet}:{value}" for value in values]
        if facet in disjunctive:
            filters.append(refined)
        else:
            filters.extend(refined)
    return filters


class Index:
    """Handle pairing a :class:`SearchClient` with an index name."""

    def __init__(self, client: "SearchClient", index_name: str) -> None:
        self.client = client
        self.index_name = index_name

    def __repr__(self) -> str:
        return f"Index({self.index_name!r})"

    def _path(self, *parts: Any) -> str:
        return index_path(self.index_name, *parts)

    # Objects ------------------------------------------------------------
    def add_object(self, content: Mapping[str, Any], object_id: Any = None) -> Outcome:
        """Add ``content``; with ``object_id`` an existing object is replaced."""
        if object_id is None:
            return self.client.request("POST", self._path(), content)
        if not _has_object_id(object_id):
            return _empty_object_id()
        return self.client.request("PUT", self._path(object_id), content)

    def add_objects(self, objects: Iterable[Mapping[str, Any]]) -> Outcome:
        return self._batch(objects, "addObject")

    def get_object(self, object_id: Any, attributes: Sequence[str] | None = None) -> Outcome:
        if not _has_object_id(object_id):
            return _empty_object_id()
        path = self._path(object_id)
        if attributes is not None:
            path += "?attributes=" + ",".join(encode_component(a) for a in attributes)
        return self.client.request("GET", path)

    def get_objects(self, object_ids: Iterable[Any]) -> Outcome:
        requests_ = [{"indexName": self.index_name, "objectID": object_id} for object_id in object_ids]
        return self.client.request("POST", "/1/indexes/*/objects", {"requests": requests_})

    def partial_update_object(self, partial_object: Mapping[str, Any]) -> Outcome:
        """Update only the attributes present in ``partial_object``."""
        object_id = partial_object.get("objectID")
        if not _has_object_id(object_id):
            return _empty_object_id()
        return self.client.request("POST", self._path(object_id, "partial"), partial_object)

    def partial_update_objects(self, objects: Iterable[Mapping[str, Any]]) -> Outcome:
        return self._batch(objects, "partialUpdateObject")

    def save_object(self, obj: Mapping[str, Any]) -> Outcome:
        object_id = obj.get("objectID")
        if not _has_object_id(object_id):
            return _empty_object_id()
        return self.client.request("PUT", self._path(object_id), obj)

    def save_objects(self, objects: Iterable[Mapping[str, Any]]) -> Outcome:
        return self._batch(objects, "updateObject")

    def delete_object(self, object_id: Any) -> Outcome:
        if not _has_object_id(object_id):
            return _empty_object_id()
        return self.client.request("DELETE", self._path(object_id))

    def delete_objects(self, object_ids: Iterable[Any]) -> Outcome:
        return self._batch(({"objectID": object_id} for object_id in object_ids), "deleteObject")

    def batch(self, requests_: Mapping[str, Any]) -> Outcome:
        """Send a raw ``{"requests": [...]}`` batch payload."""
        return self.client.request("POST", self._path("batch"), requests_)

    def _batch(self, objects: Iterable[Mapping[str, Any]], action: str) -> Outcome:
        requests_ = []
        for obj in objects:
            request: Dict[str, Any] = {"action": action, "body": obj}
            if obj.get("objectID") is not None:
                request["objectID"] = obj["objectID"]
            requests_.append(request)
        return self.batch({"requests": requests_})

    def clear_index(self) -> Outcome:
        """Delete all objects; settings and index keys are kept."""
        return self.client.request("POST", self._path("clear"))

    # Queries ------------------------------------------------------------
    def search(
        self,
        query: str,
        params: Mapping[str, Any] | None = None,
        hit_factory: Optional[HitFactory] = None,
    ) -> Outcome:
        """Search the index.

        ``params`` holds query parameters such as ``page``, ``hitsPerPage``,
        ``attributesToRetrieve``, ``facets``, ``facetFilters`` or
        ``numericFilters``; lists are sent JSON encoded. ``hit_factory`` is
        applied to every hit of a successful answer.
        """
        encoded = encode_params(params, prefix="query=" + encode_component(query))
        outcome = self.client.request("POST", self._path("query"), {"params": encoded})
        return apply_hit_factory(outcome, hit_factory)

    def browse(
        self,
        page: int = 0,
        hits_per_page: int | None = None,
        hit_factory: Optional[HitFactory] = None,
    ) -> Outcome:
        """Return one page of the whole index content (``hitsPerPage`` defaults to 1000 server side)."""
        query = encode_params({"page": page, "hitsPerPage": hits_per_page})
        outcome = self.client.request("GET", self._path("browse") + "?" + query)
        return apply_hit_factory(outcome, hit_factory)

    def delete_by_query(self, query: str, params: Mapping[str, Any] | None = None) -> Outcome:
        """Delete every object matching ``query``.

        Works in rounds of up to 1000 objects: search, delete the hits, wait
        for the deletion to be published, search again. Returns the final
        empty search answer, or the first error outcome.
        """
        params = dict(params or {})
        params["attributesToRetrieve"] = ["objectID"]
        params["hitsPerPage"] = DELETE_BY_QUERY_PAGE
        while True:
            results = self.search(query, params)
            if results.is_error or not results.get("nbHits"):
                return results
            object_ids = [hit["objectID"] for hit in results.body.get("hits", [])]
            if not object_ids:
                return results
            deleted = self.delete_objects(object_ids)
            if deleted.is_error:
                return deleted
            waited = self.wait_task(deleted.body["taskID"])
            if waited.is_error:
                return waited

    def search_disjunctive_faceting(
        self,
        query: str,
        disjunctive_facets: Sequence[str],
        params: Mapping[str, Any] | None = None,
        refinements: Mapping[str, Sequence[Any]] | None = None,
    ) -> Outcome:
        """Search with facet counts computed as if each disjunctive facet were unrefined.

        ``refinements`` maps a facet name to its refined values, e.g.
        ``{"brand": ["Apple", "Samsung"], "type": ["phone"]}``. Values of a
        disjunctive facet are ORed, other refinements are ANDed.
        """
        params = dict(params or {})
        refinements = refinements or {}
        disjunctive_refinements = {f: v for f, v in refinements.items() if f in disjunctive_facets}

        queries: List[Dict[str, Any]] = []
        main = dict(params)
        main.update(
            {
                "indexName": self.index_name,
                "query": query,
                "facetFilters": facet_filters(refinements, disjunctive_refinements),
            }
        )
        queries.append(main)
        for facet in disjunctive_facets:
            facet_query = dict(params)
            facet_query.update(
                {
                    "indexName": self.index_name,
                    "query": query,
                    "page": 0,
                    "hitsPerPage": 1,
                    "attributesToRetrieve": [],
                    "attributesToHighlight": [],
                    "attributesToSnippet": [],
                    "facets": facet,
                    "facetFilters": facet_filters(refinements, disjunctive_refinements, skip=facet),
                }
            )
            queries.append(facet_query)

        outcome = self.client.multiple_queries(queries, "indexName")
        if outcome.is_error:
            return outcome

        results = outcome.body["results"]
        answer = dict(results[0])
        answer["disjunctiveFacets"] = {}
        for result in results[1:]:
            answer["processingTimeMS"] = answer.get("processingTimeMS", 0) + result.get("processingTimeMS", 0)
            for facet, counts in (result.get("facets") or {}).items():
                counts = dict(counts)
                for value in disjunctive_refinements.get(facet, []):
                    counts.setdefault(str(value), 0)
                answer["disjunctiveFacets"][facet] = counts
        return outcome._replace(body=answer)

    # Tasks & settings ---------------------------------------------------
    def wait_task(self, task_id: Any, *, timeout: float | None = None) -> Outcome:
        """Block until the write identified by ``task_id`` is published.

        Without ``timeout`` (seconds) the wait is unbounded.
        Every status check reuses the headers in effect when the wait started.
        """
        return self.client.wait_task(self.index_name, task_id, timeout=timeout)

    def get_settings(self) -> Outcome:
        return self.client.request("GET", self._path("settings"))

    def set_settings(self, settings: Mapping[str, Any]) -> Outcome:
        """Replace index settings such as ``attributesToIndex``, ``ranking`` or ``customRanking``."""
        return self.client.request("PUT", self._path("settings"), settings)

    # Index-scoped API keys ----------------------------------------------
    def list_user_keys(self) -> Outcome:
        return self.client.request("GET", self._path("keys"))

    def get_user_key_acl(self, key: str) -> Outcome:
        return self.client.request("GET", self._path("keys", key))

    def delete_user_key(self, key: str) -> Outcome:
        return self.client.request("DELETE", self._path("keys", key))

    def add_user_key(
        self,
        acls: Sequence[str],
        validity: int | None = None,
        max_queries_per_ip_per_hour: int | None = None,
        max_hits_per_query: int | None = None,
    ) -> Outcome:
        body = key_payload(acls, validity, max_queries_per_ip_per_hour, max_hits_per_query)
        return self.client.request("POST", self._path("keys"), body)

    def update_user_key(
        self,
        key: str,
        acls: Sequence[str],
        validity: int | None = None,
        max_queries_per_ip_per_hour: int | None = None,
        max_hits_per_query: int | None = None,
    ) -> Outcome:
        body = key_payload(acls, validity, max_queries_per_ip_per_hour, max_hits_per_query)
        return self.client.request("PUT", self._path("keys", key), body)


__all__ = ["Index", "apply_hit_factory", "facet_filters"]
