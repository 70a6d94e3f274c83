# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.store",
#   "purpose": "Graph store boundary: protocol, SPARQL JSON decoding, and the HTTPX-backed client",
#   "sections": [
#     {"id": "graphstore", "name": "GraphStore", "anchor": "class-graphstore", "kind": "class"},
#     {"id": "parse-select-results", "name": "parse_select_results", "anchor": "function-parse-select-results", "kind": "function"},
#     {"id": "sparqlstore", "name": "SparqlStore", "anchor": "class-sparqlstore", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Graph store boundary used by every entity manager.

The managers only depend on :class:`GraphStore`, a three-method protocol:
``select`` returns bound-variable rows, ``construct`` returns an
:class:`rdflib.Graph`, and ``update`` executes a SPARQL update as a single
operation at the store. :class:`SparqlStore` implements it over HTTP with
``httpx.AsyncClient``; :mod:`SubmissionFlow.memory_store` implements it over
an in-process rdflib dataset.

HTTP and transport failures are translated here, once, into
:class:`~SubmissionFlow.errors.StoreReadError` or
:class:`~SubmissionFlow.errors.StoreWriteError`. Nothing is retried.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Dict, List, Mapping, Optional, Protocol, Type, runtime_checkable

import httpx
from rdflib import Graph
from rdflib.term import Identifier

from .errors import StoreError, StoreReadError, StoreWriteError
from .settings import StoreSettings, get_settings
from .terms import term_from_json

__all__ = [
    "Binding",
    "GraphStore",
    "SparqlStore",
    "parse_select_results",
]

logger = logging.getLogger(__name__)

Binding = Dict[str, Identifier]

SELECT_ACCEPT = "application/sparql-results+json"
CONSTRUCT_ACCEPT = "text/turtle"


@runtime_checkable
class GraphStore(Protocol):
    """Read and write operations the entity managers issue against a store."""

    async def select(self, query: str) -> List[Binding]:
        """Run a SELECT query and return one mapping per solution row."""
        ...

    async def construct(self, query: str) -> Graph:
        """Run a CONSTRUCT query and return the resulting graph."""
        ...

    async def update(self, query: str) -> None:
        """Run a SPARQL update as one indivisible operation."""
        ...


def parse_select_results(payload: Mapping[str, Any]) -> List[Binding]:
    """Convert a ``application/sparql-results+json`` document into bindings.

    Unbound variables are absent from the row mapping, mirroring the JSON.
    """
    rows = payload.get("results", {}).get("bindings", [])
    return [{name: term_from_json(term) for name, term in row.items()} for row in rows]


class SparqlStore:
    """:class:`GraphStore` speaking the SPARQL 1.1 protocol over HTTPX.

    The store either owns its ``httpx.AsyncClient`` (created lazily and closed
    by :meth:`aclose` or the async context manager) or wraps one supplied by
    the caller, which then stays responsible for closing it.

    Examples:
        >>> async def main():
        ...     async with SparqlStore() as store:
        ...         return await store.select("SELECT * WHERE { ?s ?p ?o } LIMIT 1")
    """

    def __init__(
        self,
        settings: Optional[StoreSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            auth = None
            if self.settings.username:
                password = (
                    self.settings.password.get_secret_value() if self.settings.password else ""
                )
                auth = httpx.BasicAuth(self.settings.username, password)
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.timeout_seconds),
                auth=auth,
            )
        return self._client

    async def __aenter__(self) -> "SparqlStore":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _headers(self, accept: Optional[str] = None) -> Dict[str, str]:
        headers = {}
        if accept:
            headers["Accept"] = accept
        if self.settings.sudo:
            headers["mu-auth-sudo"] = "true"
        return headers

    async def _post(
        self,
        url: str,
        form: Dict[str, str],
        accept: Optional[str],
        error_cls: Type[StoreError],
    ) -> httpx.Response:
        query = next(iter(form.values()))
        try:
            response = await self.client.post(url, data=form, headers=self._headers(accept))
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "Triplestore rejected request with HTTP %s",
                exc.response.status_code,
                extra={
                    "stage": "store",
                    "sparql_endpoint": url,
                    "extra_fields": {"status_code": exc.response.status_code},
                },
            )
            raise error_cls(
                f"Triplestore returned HTTP {exc.response.status_code}: {exc.response.text[:200]}",
                status_code=exc.response.status_code,
                query=query,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "Triplestore request failed: %s",
                exc,
                extra={"stage": "store", "sparql_endpoint": url},
            )
            raise error_cls(f"Triplestore request failed: {exc}", query=query) from exc
        return response

    async def select(self, query: str) -> List[Binding]:
        response = await self._post(
            self.settings.sparql_endpoint, {"query": query}, SELECT_ACCEPT, StoreReadError
        )
        try:
            payload = response.json()
        except ValueError as exc:
            raise StoreReadError(
                "Triplestore returned malformed JSON results", query=query
            ) from exc
        return parse_select_results(payload)

    async def construct(self, query: str) -> Graph:
        response = await self._post(
            self.settings.sparql_endpoint, {"query": query}, CONSTRUCT_ACCEPT, StoreReadError
        )
        graph = Graph()
        if response.text.strip():
            try:
                graph.parse(data=response.text, format="turtle")
            except Exception as exc:
                raise StoreReadError(
                    "Triplestore returned unparsable Turtle", query=query
                ) from exc
        return graph

    async def update(self, query: str) -> None:
        await self._post(
            self.settings.effective_update_endpoint, {"update": query}, None, StoreWriteError
        )
