"""Conditional status transition shared by Jobs and Tasks.

A transition is one SPARQL update that, inside whichever graph holds the
entity, retracts the current ``adms:status``/``dct:modified`` pair and inserts
the new pair together with any facts that must appear at the same moment
(an error link, a results container). The ``WHERE`` clause requires an
existing pair, so transitioning an entity that has none changes nothing.
Two racing transitions both apply; the one committed last wins.
"""

from __future__ import annotations

from typing import Iterable

from rdflib import URIRef

from .constants import SPARQL_PREFIXES, Status
from .terms import Triple, UriLike, as_uri, now, render_triples, sparql_term

__all__ = ["is_status", "require_status", "status_update_query"]


def status_update_query(
    entity: UriLike,
    status: UriLike,
    extra_triples: Iterable[Triple] = (),
) -> str:
    """Build the DELETE/INSERT/WHERE update moving ``entity`` to ``status``.

    Args:
        entity: Job or Task IRI.
        status: New status IRI.
        extra_triples: Facts inserted in the same graph and the same operation.

    Returns:
        SPARQL update text.
    """
    subject = sparql_term(as_uri(entity))
    status_term = sparql_term(as_uri(status))
    extra = render_triples(extra_triples)
    return f"""
    {SPARQL_PREFIXES}
    DELETE {{
      GRAPH ?g {{
        {subject}
          adms:status ?oldStatus ;
          dct:modified ?oldModified .
      }}
    }}
    INSERT {{
      GRAPH ?g {{
        {subject}
          adms:status {status_term} ;
          dct:modified {sparql_term(now())} .
{extra}
      }}
    }}
    WHERE {{
      GRAPH ?g {{
        {subject}
          adms:status ?oldStatus ;
          dct:modified ?oldModified .
      }}
    }}"""


def is_status(status: UriLike, expected: UriLike) -> bool:
    return as_uri(status) == as_uri(expected)


def require_status(status: UriLike, allowed: Iterable[Status]) -> URIRef:
    """Return ``status`` as an IRI, or raise if it is not one of ``allowed``.

    Raises:
        ValueError: Before any store access, for a status outside the vocabulary.
    """
    status_uri = as_uri(status)
    allowed_uris = {member.uri for member in allowed}
    if status_uri not in allowed_uris:
        raise ValueError(
            f"Unsupported status {status_uri}; expected one of {sorted(allowed_uris)}"
        )
    return status_uri
