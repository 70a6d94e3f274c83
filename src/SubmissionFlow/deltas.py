# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.deltas",
#   "purpose": "Parse delta-notifier messages and filter inserted triples",
#   "sections": [
#     {"id": "deltatriple", "name": "DeltaTriple", "anchor": "class-deltatriple", "kind": "class"},
#     {"id": "delta", "name": "Delta", "anchor": "class-delta", "kind": "class"},
#     {"id": "parse-delta-message", "name": "parse_delta_message", "anchor": "function-parse-delta-message", "kind": "function"},
#     {"id": "filters", "name": "Filters", "anchor": "FLT", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Filter change notifications from the delta-notifier.

A delta message is a list of change sets, each with ``inserts`` and
``deletes`` lists of ``{subject, predicate, object}`` terms in SPARQL JSON
shape. Only ``inserts`` are considered by the filters, which take either
parsed :class:`Delta` objects or the raw decoded change sets. Results keep
the order and multiplicity of the input: the same subject inserted twice is
returned twice, and callers that need uniqueness deduplicate themselves.

Everything here is synchronous and performs no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Tuple, Union

from rdflib import URIRef
from rdflib.term import Identifier

from .terms import as_uri, term_from_json

__all__ = [
    "Delta",
    "DeltaLike",
    "DeltaTriple",
    "Matcher",
    "filter_by_predicate_object",
    "filter_by_predicates",
    "filter_triples_by_predicates",
    "parse_delta_message",
]

Matcher = Callable[[Identifier], bool]
TermLike = Union[Identifier, str, Enum]


@dataclass(frozen=True)
class DeltaTriple:
    subject: Identifier
    predicate: Identifier
    object: Identifier

    @classmethod
    def from_json(cls, value: Mapping[str, Any]) -> "DeltaTriple":
        return cls(
            subject=term_from_json(value["subject"]),
            predicate=term_from_json(value["predicate"]),
            object=term_from_json(value["object"]),
        )


@dataclass(frozen=True)
class Delta:
    """One change set: triples inserted and deleted by a single store update."""

    inserts: Tuple[DeltaTriple, ...] = ()
    deletes: Tuple[DeltaTriple, ...] = ()

    @classmethod
    def from_json(cls, value: Mapping[str, Any]) -> "Delta":
        return cls(
            inserts=tuple(DeltaTriple.from_json(t) for t in value.get("inserts") or ()),
            deletes=tuple(DeltaTriple.from_json(t) for t in value.get("deletes") or ()),
        )


DeltaLike = Union[Delta, Mapping[str, Any]]


def parse_delta_message(payload: Iterable[Mapping[str, Any]]) -> List[Delta]:
    """Decode a delta-notifier request body (already JSON-decoded).

    Examples:
        >>> body = [{"inserts": [{
        ...     "subject": {"type": "uri", "value": "http://ex/s"},
        ...     "predicate": {"type": "uri", "value": "http://ex/p"},
        ...     "object": {"type": "literal", "value": "o"}}], "deletes": []}]
        >>> parse_delta_message(body)[0].inserts[0].subject
        rdflib.term.URIRef('http://ex/s')
    """
    return [Delta.from_json(change_set) for change_set in payload]


def _term(value: TermLike) -> Identifier:
    if isinstance(value, Identifier):
        return value
    return as_uri(value)


def _inserted(deltas: Iterable[DeltaLike]) -> Iterator[DeltaTriple]:
    for delta in deltas:
        if not isinstance(delta, Delta):
            delta = Delta.from_json(delta)
        yield from delta.inserts


def _match_all(_: Identifier) -> bool:
    return True


def filter_by_predicate_object(
    deltas: Iterable[DeltaLike],
    predicate: TermLike,
    obj: TermLike,
) -> List[URIRef]:
    """Subjects of inserted triples with exactly this predicate and object.

    Terms are compared by RDF term equality, so an IRI object never matches
    a literal with the same text.
    """
    predicate_term = _term(predicate)
    object_term = _term(obj)
    return [
        URIRef(triple.subject)
        for triple in _inserted(deltas)
        if triple.predicate == predicate_term and triple.object == object_term
    ]


def filter_triples_by_predicates(
    deltas: Iterable[DeltaLike],
    subject_matcher: Matcher = _match_all,
    predicate_matcher: Matcher = _match_all,
    object_matcher: Matcher = _match_all,
) -> List[DeltaTriple]:
    """Inserted triples accepted by all three matchers.

    Matchers run subject, then predicate, then object, stopping at the first
    rejection, so they should be free of side effects.
    """
    return [
        triple
        for triple in _inserted(deltas)
        if subject_matcher(triple.subject)
        and predicate_matcher(triple.predicate)
        and object_matcher(triple.object)
    ]


def filter_by_predicates(
    deltas: Iterable[DeltaLike],
    subject_matcher: Matcher = _match_all,
    predicate_matcher: Matcher = _match_all,
    object_matcher: Matcher = _match_all,
) -> List[URIRef]:
    """Subjects of the triples returned by :func:`filter_triples_by_predicates`."""
    return [
        URIRef(triple.subject)
        for triple in filter_triples_by_predicates(
            deltas, subject_matcher, predicate_matcher, object_matcher
        )
    ]
