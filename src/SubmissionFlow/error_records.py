"""Write-once Error records.

An Error lives in the dedicated error graph and is never updated or removed
by this package. Its UUID is stored as ``mu:uuid`` while the IRI is built
from the error base namespace, and ``dct:subject`` always names the
automatic submission service.
"""

from __future__ import annotations

import logging
from typing import Optional

from rdflib import URIRef

from .constants import BASES, DCT, ERROR_SUBJECT, GRAPHS, MU, OSLC, RDF, SPARQL_PREFIXES
from .store import GraphStore
from .terms import (
    FactListBuilder,
    UriLike,
    as_uri,
    mint_uri,
    now,
    render_triples,
    sparql_term,
    string,
)

__all__ = ["create_error"]

logger = logging.getLogger(__name__)


async def create_error(
    store: GraphStore,
    creator: UriLike,
    message: str,
    detail: Optional[str] = None,
    reference: Optional[UriLike] = None,
) -> URIRef:
    """Store a new Error and return its IRI.

    Args:
        store: Graph store to write to.
        creator: Service reporting the error.
        message: Short title of the error (``oslc:message``).
        detail: Optional long, technical explanation (``oslc:largePreview``).
        reference: Optional IRI of the object the error is about.

    Raises:
        StoreWriteError: If the store rejects the insert.
    """
    error, error_uuid = mint_uri(BASES["error"])
    builder = FactListBuilder()
    builder.add(error, RDF.type, OSLC.Error)
    builder.add(error, MU.uuid, string(error_uuid))
    builder.add(error, DCT.subject, string(ERROR_SUBJECT))
    builder.add(error, OSLC.message, string(message))
    builder.add(error, DCT.created, now())
    builder.add(error, DCT.creator, as_uri(creator))
    if reference:
        builder.add(error, DCT.references, as_uri(reference))
    if detail:
        builder.add(error, OSLC.largePreview, string(detail))

    await store.update(
        f"""
    {SPARQL_PREFIXES}
    INSERT DATA {{
      GRAPH {sparql_term(GRAPHS["error"])} {{
{render_triples(builder.build())}
      }}
    }}"""
    )
    logger.debug("Created error", extra={"stage": "errors", "entity": error})
    return error
