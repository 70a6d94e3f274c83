"""In-process :class:`~SubmissionFlow.store.GraphStore` over an rdflib Dataset.

The dataset evaluates the exact SPARQL the entity managers emit, including
``GRAPH ?g`` patterns and ``DELETE/INSERT ... WHERE`` updates, so it is useful
for tests and offline tooling. The default graph is the union of all named
graphs, as on the production store. Each update runs under a lock, giving the
same one-operation atomicity the managers rely on remotely.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterator, List, Optional, Tuple

from rdflib import Dataset, Graph
from rdflib.term import Identifier, Node

from .errors import StoreReadError, StoreWriteError
from .store import Binding

__all__ = ["MemoryGraphStore"]

logger = logging.getLogger(__name__)


class MemoryGraphStore:
    """Graph store backed by :class:`rdflib.Dataset`."""

    def __init__(self, dataset: Optional[Dataset] = None) -> None:
        self.dataset = dataset if dataset is not None else Dataset(default_union=True)
        self._lock = threading.Lock()

    async def select(self, query: str) -> List[Binding]:
        try:
            result = self.dataset.query(query)
            return [
                {name: term for name, term in row.asdict().items() if term is not None}
                for row in result
            ]
        except Exception as exc:
            raise StoreReadError(f"In-memory query failed: {exc}", query=query) from exc

    async def construct(self, query: str) -> Graph:
        try:
            result = self.dataset.query(query)
            graph = Graph()
            for triple in result:
                graph.add(triple)
            return graph
        except Exception as exc:
            raise StoreReadError(f"In-memory construct failed: {exc}", query=query) from exc

    async def update(self, query: str) -> None:
        with self._lock:
            try:
                self.dataset.update(query)
            except Exception as exc:
                raise StoreWriteError(f"In-memory update failed: {exc}", query=query) from exc
        logger.debug("In-memory update applied", extra={"stage": "store"})

    def quads(
        self,
        subject: Optional[Identifier] = None,
        predicate: Optional[Identifier] = None,
        obj: Optional[Identifier] = None,
    ) -> Iterator[Tuple[Node, Node, Node, Node]]:
        """Yield ``(s, p, o, graph)`` for every stored fact matching the pattern."""
        for s, p, o, g in self.dataset.quads((subject, predicate, obj, None)):
            graph_id = g.identifier if isinstance(g, Graph) else g
            yield s, p, o, graph_id

    def count(
        self,
        subject: Optional[Identifier] = None,
        predicate: Optional[Identifier] = None,
        obj: Optional[Identifier] = None,
    ) -> int:
        return sum(1 for _ in self.quads(subject, predicate, obj))
