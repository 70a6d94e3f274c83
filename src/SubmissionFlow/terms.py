# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.terms",
#   "purpose": "Identifier generation, literal encoding, and fact-list construction",
#   "sections": [
#     {"id": "identifiers", "name": "Identifiers", "anchor": "IDS", "kind": "api"},
#     {"id": "literals", "name": "Literal Encoding", "anchor": "LIT", "kind": "api"},
#     {"id": "factlistbuilder", "name": "FactListBuilder", "anchor": "class-factlistbuilder", "kind": "class"},
#     {"id": "json-terms", "name": "JSON Term Decoding", "anchor": "JSN", "kind": "api"},
#     {"id": "serialization", "name": "SPARQL Serialization", "anchor": "SER", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Identifier generation and fact construction helpers.

Everything here is pure: it produces rdflib terms and tuples of triples that
the entity managers splice into SPARQL text. Terms are rendered with
:meth:`rdflib.term.Identifier.n3`, which applies the escaping rules of the
store's exchange syntax, so no manager formats values by hand.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import XSD
from rdflib.term import Identifier

__all__ = [
    "Term",
    "Triple",
    "FactListBuilder",
    "as_uri",
    "date_time",
    "integer",
    "mint_uri",
    "new_uuid",
    "now",
    "string",
    "term_from_json",
    "render_triples",
    "sparql_term",
]

Term = Union[URIRef, Literal]
Triple = Tuple[URIRef, URIRef, Identifier]
UriLike = Union[URIRef, str, Enum]


# --- Identifiers -----------------------------------------------------------


def new_uuid() -> str:
    """Return a fresh random (version 4) UUID string."""
    return str(uuid.uuid4())


def mint_uri(base: str, identifier: Optional[str] = None) -> Tuple[URIRef, str]:
    """Build an entity IRI from a base namespace and a new or given UUID.

    Returns:
        Tuple of the IRI and the UUID that was appended to ``base``.
    """
    identifier = identifier or new_uuid()
    return URIRef(f"{base}{identifier}"), identifier


def as_uri(value: UriLike) -> URIRef:
    """Coerce registry enums and plain strings into :class:`URIRef` terms.

    Examples:
        >>> as_uri("http://example.org/a")
        rdflib.term.URIRef('http://example.org/a')
    """
    if isinstance(value, URIRef):
        return value
    if isinstance(value, Enum):
        return URIRef(str(value.value))
    return URIRef(str(value))


# --- Literal Encoding ------------------------------------------------------


def now() -> Literal:
    """Current UTC time as an ``xsd:dateTime`` literal."""
    return date_time(datetime.now(timezone.utc))


def date_time(value: datetime) -> Literal:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return Literal(value.isoformat(), datatype=XSD.dateTime)


def integer(value: int) -> Literal:
    return Literal(int(value), datatype=XSD.integer)


def string(value: str) -> Literal:
    return Literal(str(value))


# --- FactListBuilder -------------------------------------------------------


class FactListBuilder:
    """Collect triples and hand them out as an immutable tuple.

    Examples:
        >>> builder = FactListBuilder()
        >>> _ = builder.add(URIRef("urn:s"), URIRef("urn:p"), string("o"))
        >>> len(builder.build())
        1
    """

    def __init__(self) -> None:
        self._triples: List[Triple] = []

    def add(self, subject: URIRef, predicate: URIRef, obj: Identifier) -> "FactListBuilder":
        self._triples.append((subject, predicate, obj))
        return self

    def add_all(
        self, subject: URIRef, predicate: URIRef, objects: Iterable[Identifier]
    ) -> "FactListBuilder":
        for obj in objects:
            self.add(subject, predicate, obj)
        return self

    def extend(self, triples: Iterable[Triple]) -> "FactListBuilder":
        self._triples.extend(triples)
        return self

    def __len__(self) -> int:
        return len(self._triples)

    def build(self) -> Tuple[Triple, ...]:
        return tuple(self._triples)


# --- JSON Term Decoding ----------------------------------------------------


def term_from_json(value: Mapping[str, Any]) -> Identifier:
    """Decode one SPARQL 1.1 JSON term (also the delta-notifier term shape).

    Examples:
        >>> term_from_json({"type": "uri", "value": "http://example.org/a"})
        rdflib.term.URIRef('http://example.org/a')
    """
    kind = value.get("type")
    raw = value.get("value", "")
    if kind == "uri":
        return URIRef(raw)
    if kind == "bnode":
        return BNode(raw)
    if kind in {"literal", "typed-literal"}:
        datatype = value.get("datatype")
        language = value.get("xml:lang") or value.get("lang")
        if datatype:
            return Literal(raw, datatype=URIRef(datatype))
        return Literal(raw, lang=language)
    raise ValueError(f"Unsupported SPARQL JSON term type: {kind!r}")


# --- SPARQL Serialization --------------------------------------------------


def sparql_term(term: Identifier) -> str:
    """Render one term in SPARQL/Turtle syntax."""
    return term.n3()


def render_triples(triples: Iterable[Triple], indent: str = "        ") -> str:
    """Render triples as a block of SPARQL triple statements.

    Returns an empty string for an empty input so the result can be spliced
    into a template unconditionally.
    """
    return "\n".join(
        f"{indent}{sparql_term(s)} {sparql_term(p)} {sparql_term(o)} ." for s, p, o in triples
    )
